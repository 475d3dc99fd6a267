"""
Audio playback for TilawaFlow.

This subpackage owns the single audio output of the application:

* :class:`AudioResource` – the abstract output (source, transport,
  volume and an event registry).
* :class:`~.qt_resource.QtAudioResource` – the ``QMediaPlayer`` backed
  implementation used by the GUI.  Import it from ``qt_resource``
  directly; it needs ``PyQt6.QtMultimedia``.
* :class:`AudioBindingController` – keeps the resource in lockstep
  with the playback cursor and the loaded content.
* :func:`configure_audio_logger` – file logging for the subsystem.

Typical wiring::

    resource = QtAudioResource()
    controller = AudioBindingController(resource, on_ended=session.advance)
    controller.reconcile(bundle, index=0, play_intent=True)
"""

from .audio_logger import configure_audio_logger  # noqa: F401
from .binding import AudioBindingController, PendingAutoplay  # noqa: F401
from .listeners import ListenerScope  # noqa: F401
from .resource import AudioResource, PlaybackRejected  # noqa: F401

__all__ = [
    "AudioResource",
    "AudioBindingController",
    "ListenerScope",
    "PendingAutoplay",
    "PlaybackRejected",
    "configure_audio_logger",
]