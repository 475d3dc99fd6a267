"""File logging for the playback subsystem.

Everything below the ``tilawaflow.audio`` logger (binding controller,
listener scopes, the Qt resource) ends up in one debug file, by default
``audio_debug.log`` at the repository root, or the path given in the
``logging.audio_log_path`` config entry.

:func:`configure_audio_logger` may be called any number of times: a
file gets one handler, and the startup banner is written once per
process so the file shows where each run begins.  The logger does not
propagate, so its output is the same whatever the root logging
configuration is.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

AUDIO_LOGGER_NAME = "tilawaflow.audio"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_setup_lock = threading.Lock()
_CONFIGURED = False


def get_repo_root() -> Path:
    """Directory holding the ``tilawaflow`` package."""
    return Path(__file__).resolve().parents[2]


def get_audio_log_path() -> Path:
    return get_repo_root() / "audio_debug.log"


def _file_handler_for(logger: logging.Logger, path: str) -> Optional[logging.FileHandler]:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return handler
    return None


def configure_audio_logger(path: Optional[os.PathLike] = None, force: bool = False) -> logging.Logger:
    """Attach a debug file handler to the audio logger and return the logger.

    :param path: Log file; :func:`get_audio_log_path` when omitted.
    :param force: Add another handler and repeat the startup banner even
        when the file is already being written.
    """
    global _CONFIGURED

    log_path = os.path.abspath(os.fspath(path or get_audio_log_path()))
    with _setup_lock:
        logger = logging.getLogger(AUDIO_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        if force or _file_handler_for(logger, log_path) is None:
            handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)

        if force or not _CONFIGURED:
            logger.info("=== Audio debug logging started (pid=%s) ===", os.getpid())
            for handler in logger.handlers:
                handler.flush()
            _CONFIGURED = True
    return logger
