"""
Top‑level package for TilawaFlow.

TilawaFlow plays Quran recitations ayah by ayah while showing the
Arabic text and a translation of the ayah being heard.  This package
exposes a minimal API so that callers do not have to delve into
internal submodules; the playback logic lives in ``core`` and
``audio``, the widgets in ``gui``.

Example usage::

    from tilawaflow import RecitationSession, get_app_config, get_default_connector
    from tilawaflow.audio.qt_resource import QtAudioResource

    cfg = get_app_config()
    session = RecitationSession.from_config(
        cfg, get_default_connector(cfg.section("connector")), QtAudioResource()
    )
    session.start()
    session.toggle_play()

The Qt widgets are not imported here so that the core can be used
without a display; import ``tilawaflow.gui.main_window`` for them.
"""

from .config import AppConfig, get_app_config, load_config  # noqa: F401
from .connectors import get_default_connector  # noqa: F401
from .core import PlaybackCursor, RecitationSession  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "get_app_config",
    "load_config",
    "get_default_connector",
    "PlaybackCursor",
    "RecitationSession",
]
