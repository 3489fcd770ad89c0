"""Logging configuration for lyricmv."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "lyricmv"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("PIL", "moviepy", "httpx", "httpcore", "google_genai")

TERSE_FORMAT = "%(levelname)s: %(message)s"
# Exports render on worker threads, so verbose output names the thread
VERBOSE_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Configure the package logger and return it.

    Calling it again replaces the previous handlers, so the CLI can be
    invoked repeatedly in one process.
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else TERSE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
