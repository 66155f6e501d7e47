import logging
from logging.handlers import RotatingFileHandler

from minipatch.logger import DEFAULT_LOG_FILE, _resolve_log_path, get_logger, setup_logger


def test_setup_logger_levels(tmp_path):
    logger = setup_logger("minipatch.test.levels", verbose=False, log_file=False)
    assert logger.level == logging.WARNING
    assert logger.propagate is False

    logger = setup_logger("minipatch.test.levels", verbose=True, log_file=False)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logger_file_handler(tmp_path):
    log_path = tmp_path / "logs" / "run.log"
    logger = setup_logger("minipatch.test.file", verbose=True, log_file=log_path)
    try:
        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        logger.debug("hello")
        file_handlers[0].flush()
        assert "hello" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def test_resolve_log_path():
    assert _resolve_log_path(False) is None
    assert _resolve_log_path("") is None
    assert _resolve_log_path(None) == DEFAULT_LOG_FILE
    assert _resolve_log_path(True) == DEFAULT_LOG_FILE
    assert _resolve_log_path("~/x.log").name == "x.log"


def test_get_logger_does_not_configure():
    assert get_logger("minipatch.test.plain").handlers == []
