import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[2]
LOG_DIR_ENV = "STOCKROOM_LOG_DIR"
LOG_FILE_NAME = "stockroom.log"
LOG_DIR = Path(os.environ.get(LOG_DIR_ENV, PROJECT_ROOT / ".logs")).expanduser()
LOG_FILE = LOG_DIR / LOG_FILE_NAME

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _file_handler(log_file: Path) -> Optional[RotatingFileHandler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as exc:
        print(
            f"Warning: unable to initialize log file at '{log_file}': {exc}",
            file=sys.stderr,
        )
        return None
    handler.setLevel(logging.INFO)
    handler.setFormatter(_FORMATTER)
    return handler


def configure_log_file(directory: Path) -> Optional[Path]:
    """Send the package log file to ``directory``.

    The current rotating file handler is closed and replaced. When the new
    location cannot be opened the package keeps logging to stderr only and
    ``None`` is returned.
    """

    logger = logging.getLogger(__name__)
    for handler in list(logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()

    log_file = Path(directory).expanduser() / LOG_FILE_NAME
    handler = _file_handler(log_file)
    if handler is None:
        return None
    logger.addHandler(handler)
    logger.debug("Logging to '%s'", log_file)
    return log_file


def _configure_logging() -> logging.Logger:
    """Configure package-wide logging with file and console handlers."""

    logger = logging.getLogger(__name__)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    file_handler = _file_handler(LOG_FILE)
    if file_handler is not None:
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(_FORMATTER)
    logger.addHandler(console_handler)

    return logger


log = _configure_logging()
log.debug("Logger initialized for the 'stockroom' package.")
