import logging

from lyricmv.utils.logging import get_logger, setup_logging


def test_setup_logging_replaces_handlers():
    setup_logging()
    logger = setup_logging(level="DEBUG")
    assert logger.name == "lyricmv"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logging_writes_file(temp_dir):
    log_file = temp_dir / "logs" / "run.log"
    logger = setup_logging(log_file=log_file, verbose=True)
    get_logger("lyricmv.core.test").info("hello from a module")
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text()
    assert "hello from a module" in text
    assert "MainThread" in text
    setup_logging()


def test_third_party_loggers_quieted():
    setup_logging(level="DEBUG")
    assert logging.getLogger("moviepy").level == logging.WARNING
    assert logging.getLogger("google_genai").level == logging.WARNING
