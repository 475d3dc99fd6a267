"""Qt Multimedia implementation of :class:`AudioResource`.

Wraps a ``QMediaPlayer`` with a ``QAudioOutput`` and translates its
signals into the resource events the binding controller listens to:

==============================  ============
Qt                              event
==============================  ============
``LoadedMedia``/``BufferedMedia`` ``READY``
``EndOfMedia``                  ``ENDED``
``positionChanged``             ``PROGRESS``
``durationChanged``             ``METADATA``
``errorOccurred``               ``ERROR``
==============================  ============

Qt reports times in milliseconds; the resource speaks seconds.  Both
the player and the output belong to the GUI thread.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from .resource import (
    AudioResource,
    ENDED,
    ERROR,
    METADATA,
    PROGRESS,
    PlaybackRejected,
    READY,
)

logger = logging.getLogger(__name__)

_READY_STATUSES = (
    QMediaPlayer.MediaStatus.LoadedMedia,
    QMediaPlayer.MediaStatus.BufferedMedia,
)
_PLAYABLE_STATUSES = _READY_STATUSES + (
    QMediaPlayer.MediaStatus.BufferingMedia,
    QMediaPlayer.MediaStatus.EndOfMedia,
)


def event_for_status(status: QMediaPlayer.MediaStatus) -> Optional[str]:
    """Map a media status to a resource event name, or ``None``."""
    if status in _READY_STATUSES:
        return READY
    if status == QMediaPlayer.MediaStatus.EndOfMedia:
        return ENDED
    return None


class QtAudioResource(AudioResource):
    """Audio resource backed by ``QMediaPlayer``.

    :param parent: Optional QObject owning the player and output.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__()
        self.output = QAudioOutput(parent)
        self.player = QMediaPlayer(parent)
        self.player.setAudioOutput(self.output)
        self.player.mediaStatusChanged.connect(self._on_status)
        self.player.positionChanged.connect(self._on_position)
        self.player.durationChanged.connect(self._on_duration)
        self.player.errorOccurred.connect(self._on_error)
        self._apply_output()

    # ------------------------------------------------------------------
    # AudioResource hooks
    # ------------------------------------------------------------------

    def _load(self, source: str) -> None:
        self.player.stop()
        self.player.setSource(QUrl.fromUserInput(source) if source else QUrl())

    @property
    def ready(self) -> bool:
        return bool(self._source) and self.player.mediaStatus() in _PLAYABLE_STATUSES

    def play(self) -> None:
        if not self._source:
            raise PlaybackRejected("No audio source loaded")
        if self.player.mediaStatus() == QMediaPlayer.MediaStatus.InvalidMedia:
            raise PlaybackRejected(self.player.errorString() or "Audio source is not playable")
        self.player.play()

    def pause(self) -> None:
        if self.player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.player.pause()

    @property
    def position(self) -> float:
        return self.player.position() / 1000.0

    @property
    def duration(self) -> float:
        return max(0, self.player.duration()) / 1000.0

    def set_position(self, seconds: float) -> None:
        self.player.setPosition(int(round(seconds * 1000)))

    def _apply_output(self) -> None:
        self.output.setVolume(self._volume)
        self.output.setMuted(self._muted)

    # ------------------------------------------------------------------
    # Qt signal handlers
    # ------------------------------------------------------------------

    def _on_status(self, status: QMediaPlayer.MediaStatus) -> None:
        event = event_for_status(status)
        if event is not None:
            self.emit(event)

    def _on_position(self, position_ms: int) -> None:
        self.emit(PROGRESS, max(0, position_ms) / 1000.0, self.duration)

    def _on_duration(self, duration_ms: int) -> None:
        self.emit(METADATA, self.position, max(0, duration_ms) / 1000.0)

    def _on_error(self, error: QMediaPlayer.Error, error_string: str = "") -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.debug("QMediaPlayer error %s: %s", error, error_string)
        self.emit(ERROR, error_string or str(error))
