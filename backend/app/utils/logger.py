import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from app.config import get_settings

settings = get_settings()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Root logger of the app; modules use children of it via get_logger()
logger = logging.getLogger(settings.APP_NAME)
logger.setLevel(logging.DEBUG if settings.APP_DEBUG else logging.INFO)


def _rotating(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_dir: str | None = None, *, to_files: bool = True) -> logging.Logger:
    """Attach console + rotating file handlers (app.log, errors.log).

    Safe to call more than once: existing handlers are replaced.
    """
    if logger.handlers:
        logger.handlers.clear()

    level = logging.DEBUG if settings.APP_DEBUG else logging.INFO

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if to_files:
        logs_dir = Path(log_dir or settings.LOG_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_rotating(logs_dir / "app.log", logging.INFO))
        logger.addHandler(_rotating(logs_dir / "errors.log", logging.ERROR))

    logger.propagate = False
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance. If name is provided, returns a child logger."""
    if name:
        return logger.getChild(name)
    return logger
