"""Audio binding controller.

This module keeps the single audio resource in lockstep with the
playback cursor.  :meth:`AudioBindingController.reconcile` is called
whenever the content bundle, the ayah index or the play intent
changes, and converges the resource towards that state:

1. No bundle, or no ayah at the index: nothing to do.
2. If the ayah's audio locator differs from the loaded source, assign
   it (which starts a reload and invalidates position and duration).
3. With play intent on: a freshly assigned (or not yet ready) source
   arms the pending-autoplay flag, to be consumed by the next ``READY``
   event; a ready source starts playing immediately.  A rejection
   clears the intent through ``on_rejected``.
4. With play intent off: disarm the flag and pause.

``ENDED`` events call ``on_ended``; that is the only way playback
moves on to the next ayah unattended.  ``PROGRESS``/``METADATA`` only
update the transport display via ``on_progress``.

Volume, mute and seek act on the resource directly and never reload.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from .listeners import ListenerScope
from .resource import (
    AudioResource,
    ENDED,
    ERROR,
    METADATA,
    PROGRESS,
    PlaybackRejected,
    READY,
)

if TYPE_CHECKING:
    from ..core.models import ContentBundle

logger = logging.getLogger(__name__)


class PendingAutoplay:
    """One-shot flag: start playback when the just-assigned source is ready.

    :meth:`consume` is the only way to act on the flag and it always
    leaves it cleared, so one arming yields at most one start.
    """

    def __init__(self) -> None:
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True

    def disarm(self) -> None:
        self._armed = False

    def consume(self) -> bool:
        armed, self._armed = self._armed, False
        return armed


class AudioBindingController:
    """Own the audio resource and reconcile it with cursor and content.

    :param resource: The audio output to drive.
    :param on_ended: Called when the current source plays to its end.
    :param on_rejected: Called with a message when playback is refused
        or the resource fails; the owner clears its play intent.
    :param on_progress: Called with ``(position, duration)`` in seconds.
    """

    def __init__(
        self,
        resource: AudioResource,
        *,
        on_ended: Optional[Callable[[], None]] = None,
        on_rejected: Optional[Callable[[str], None]] = None,
        on_progress: Optional[Callable[[float, float], None]] = None,
    ) -> None:
        self.resource = resource
        self.on_ended = on_ended
        self.on_rejected = on_rejected
        self.on_progress = on_progress
        self._pending = PendingAutoplay()
        self._scope: Optional[ListenerScope] = None

    @property
    def pending_autoplay(self) -> bool:
        return self._pending.armed

    @property
    def source(self) -> str:
        return self.resource.source

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile(self, bundle: Optional[ContentBundle], index: int, play_intent: bool) -> None:
        ayah = bundle.ayah_at(index) if bundle is not None else None
        if ayah is None:
            return
        changed = self.bind_source(ayah.audio)
        if play_intent:
            if changed or not self.resource.ready:
                logger.debug("Autoplay armed for %s", ayah.audio)
                self._pending.arm()
            else:
                self._start()
        else:
            self._pending.disarm()
            self.resource.pause()

    def bind_source(self, source: str) -> bool:
        """Make *source* current; return ``True`` if it was (re)loaded.

        Assigning the already-loaded source is a no-op.  The listeners
        of the previous source are removed before the new one is
        assigned, even when assignment fails.
        """
        if source == self.resource.source and self._scope is not None:
            return False
        self._close_scope()
        logger.debug("Binding audio source %s", source)
        self.resource.set_source(source)
        self._scope = ListenerScope(self.resource, source).install({
            READY: lambda: self._on_ready(source),
            PROGRESS: lambda position, duration: self._on_progress(source, position, duration),
            METADATA: lambda position, duration: self._on_progress(source, position, duration),
            ENDED: lambda: self._on_ended(source),
            ERROR: lambda message: self._on_error(source, message),
        })
        return True

    def release(self) -> None:
        """Detach from the current source: disarm, pause and unload.

        Used when the content bundle is discarded (new selection or a
        failed fetch).
        """
        self._pending.disarm()
        self._close_scope()
        if self.resource.source:
            self.resource.pause()
            self.resource.set_source("")

    def _close_scope(self) -> None:
        scope, self._scope = self._scope, None
        if scope is not None:
            scope.close()

    def _start(self) -> None:
        try:
            self.resource.play()
        except PlaybackRejected as exc:
            logger.warning("Audio play prevented: %s", exc)
            self._pending.disarm()
            if self.on_rejected is not None:
                self.on_rejected(str(exc))

    # ------------------------------------------------------------------
    # Resource events
    # ------------------------------------------------------------------

    def _is_current(self, source: str) -> bool:
        return self._scope is not None and self._scope.source == source == self.resource.source

    def _on_ready(self, source: str) -> None:
        if not self._is_current(source):
            return
        if self._pending.consume():
            logger.debug("Autoplay consumed for %s", source)
            self._start()

    def _on_progress(self, source: str, position: float, duration: float) -> None:
        if self._is_current(source) and self.on_progress is not None:
            self.on_progress(position, duration)

    def _on_ended(self, source: str) -> None:
        if not self._is_current(source):
            return
        logger.debug("Natural end of %s", source)
        if self.on_ended is not None:
            self.on_ended()

    def _on_error(self, source: str, message: str) -> None:
        if not self._is_current(source):
            return
        logger.warning("Audio resource error for %s: %s", source, message)
        self._pending.disarm()
        if self.on_rejected is not None:
            self.on_rejected(message)

    # ------------------------------------------------------------------
    # Direct resource operations
    # ------------------------------------------------------------------

    def seek(self, seconds: float) -> Optional[float]:
        """Jump to *seconds*, clamped to ``[0, duration]``.

        Returns the position actually applied, or ``None`` when no
        source is loaded.
        """
        if not self.resource.source:
            logger.debug("Seek ignored, no source loaded")
            return None
        target = max(0.0, min(float(seconds), self.resource.duration))
        self.resource.set_position(target)
        return target

    def set_volume(self, level: float) -> None:
        self.resource.set_volume(level)

    def set_muted(self, muted: bool) -> None:
        self.resource.set_muted(muted)
