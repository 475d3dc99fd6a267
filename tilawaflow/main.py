"""TilawaFlow application entry point.

This script can be invoked directly (``python -m tilawaflow.main``) or
via the ``tilawaflow`` console script.  It configures logging,
initialises the Qt application, wires the audio resource, connector
and session together, shows the main window and starts the event loop.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .audio import configure_audio_logger
from .audio.qt_resource import QtAudioResource
from .config import get_app_config
from .connectors import get_default_connector
from .core.session import RecitationSession
from .gui.async_job import JobDispatcher
from .gui.main_window import MainWindow


def main() -> None:
    config = get_app_config()
    logging.basicConfig(
        level=str(config.get("logging", "level", default="INFO")).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if config.get("logging", "audio_log", default=True):
        configure_audio_logger(config.get("logging", "audio_log_path"))

    app = QApplication(sys.argv)
    app.setApplicationName("TilawaFlow")

    resource = QtAudioResource(app)
    connector = get_default_connector(config.section("connector"))
    session = RecitationSession.from_config(
        config, connector, resource, dispatch=JobDispatcher(parent=app)
    )
    window = MainWindow(session, config)
    window.show()
    session.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
