import logging

from tilawaflow.audio import audio_logger


def _cleanup(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_audio_logger_writes_startup_line(tmp_path, monkeypatch):
    monkeypatch.setattr(audio_logger, "_CONFIGURED", False)
    log_path = tmp_path / "audio_debug.log"

    logger = audio_logger.configure_audio_logger(log_path)
    try:
        assert logger.name == "tilawaflow.audio"
        assert logger.propagate is False
        logging.getLogger("tilawaflow.audio.binding").debug("Binding audio source x.mp3")
        for handler in logger.handlers:
            handler.flush()

        text = log_path.read_text(encoding="utf-8")
        assert "Audio debug logging started" in text
        assert "Binding audio source x.mp3" in text
    finally:
        _cleanup(logger)


def test_configure_audio_logger_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setattr(audio_logger, "_CONFIGURED", False)
    log_path = tmp_path / "audio_debug.log"

    logger = audio_logger.configure_audio_logger(log_path)
    try:
        audio_logger.configure_audio_logger(log_path)

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert log_path.read_text(encoding="utf-8").count("Audio debug logging started") == 1
    finally:
        _cleanup(logger)


def test_default_log_path_is_in_repo_root():
    assert audio_logger.get_audio_log_path().name == "audio_debug.log"
    assert audio_logger.get_audio_log_path().parent == audio_logger.get_repo_root()
