"""The audio output resource the player drives.

:class:`AudioResource` is the single audio output of the application.
Only :class:`~tilawaflow.audio.binding.AudioBindingController` assigns
its source or toggles play/pause; everything else goes through the
controller.

Concrete resources report what happens to the loaded media through a
small event registry instead of framework signals, so the controller
can be exercised without a running Qt event loop.  Events:

``READY``     the source can start playing (may fire more than once)
``PROGRESS``  ``(position, duration)`` in seconds
``METADATA``  ``(position, duration)`` once the duration is known
``ENDED``     playback reached the natural end of the source
``ERROR``     ``(message,)`` the resource failed or refused playback
"""

from __future__ import annotations

import abc
import itertools
import logging
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

READY = "ready"
PROGRESS = "progress"
METADATA = "metadata"
ENDED = "ended"
ERROR = "error"

EVENTS = (READY, PROGRESS, METADATA, ENDED, ERROR)


class PlaybackRejected(Exception):
    """Raised when the environment refuses to start playback."""


class AudioResource(abc.ABC):
    """Abstract audio output with a source, volume state and events."""

    def __init__(self) -> None:
        self._source = ""
        self._volume = 1.0
        self._muted = False
        self._tokens = itertools.count(1)
        self._listeners: Dict[str, List[Tuple[int, Callable[..., None]]]] = {
            name: [] for name in EVENTS
        }

    # ------------------------------------------------------------------
    # Event registry
    # ------------------------------------------------------------------

    def subscribe(self, event: str, callback: Callable[..., None]) -> int:
        """Register *callback* for *event* and return a removal token."""
        if event not in self._listeners:
            raise ValueError(f"Unknown audio event {event!r}")
        token = next(self._tokens)
        self._listeners[event].append((token, callback))
        return token

    def unsubscribe(self, token: int) -> None:
        for entries in self._listeners.values():
            entries[:] = [entry for entry in entries if entry[0] != token]

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    def emit(self, event: str, *args) -> None:
        """Dispatch *event* to the callbacks registered right now.

        Callbacks removed while the event is being dispatched (a
        natural end that advances to a new source, for instance) are
        skipped.
        """
        entries = self._listeners[event]
        for token, callback in list(entries):
            if any(token == live for live, _ in entries):
                callback(*args)

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        return self._source

    def set_source(self, source: str) -> None:
        """Assign *source* and start loading it; ``""`` unloads."""
        self._source = source or ""
        self._load(self._source)

    @abc.abstractmethod
    def _load(self, source: str) -> None:
        """Begin (re)loading *source*; an empty string clears the media."""

    @property
    @abc.abstractmethod
    def ready(self) -> bool:
        """Whether the current source can start playing right away."""

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def play(self) -> None:
        """Start playback.

        :raises PlaybackRejected: If the environment refuses playback.
        """

    @abc.abstractmethod
    def pause(self) -> None:
        """Pause playback; a no-op when already paused."""

    @property
    @abc.abstractmethod
    def position(self) -> float:
        """Current playback position in seconds."""

    @property
    @abc.abstractmethod
    def duration(self) -> float:
        """Duration of the loaded source in seconds, 0 when unknown."""

    @abc.abstractmethod
    def set_position(self, seconds: float) -> None:
        """Jump to *seconds* within the loaded source."""

    # ------------------------------------------------------------------
    # Volume
    # ------------------------------------------------------------------

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def muted(self) -> bool:
        return self._muted

    @property
    def effective_volume(self) -> float:
        """The level actually heard: 0 while muted, the stored level otherwise."""
        return 0.0 if self._muted else self._volume

    def set_volume(self, level: float) -> None:
        self._volume = max(0.0, min(1.0, float(level)))
        self._apply_output()

    def set_muted(self, muted: bool) -> None:
        self._muted = bool(muted)
        self._apply_output()

    @abc.abstractmethod
    def _apply_output(self) -> None:
        """Push the stored volume and mute flag to the output device."""
