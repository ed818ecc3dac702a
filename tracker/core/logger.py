import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tracker.core.config import settings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# third-party loggers and the level each one runs at
NOISY_LOGGERS = {
    "sqlalchemy.engine": settings.SQL_LOG_LEVEL,
    "uvicorn.access": settings.UVICORN_LOG_LEVEL,
    "yfinance": settings.MARKET_DATA_LOG_LEVEL,
    "peewee": settings.MARKET_DATA_LOG_LEVEL,
}


def _file_handler() -> RotatingFileHandler:
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_dir / settings.LOG_FILE,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def build_logger(name: str = "tracker") -> logging.Logger:
    """Stdout plus rotating file, attached once even if imported repeatedly."""
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL)
    log.propagate = False

    if not log.handlers:
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
        for handler in (logging.StreamHandler(sys.stdout), _file_handler()):
            handler.setFormatter(formatter)
            log.addHandler(handler)

    for noisy, level in NOISY_LOGGERS.items():
        logging.getLogger(noisy).setLevel(level)
    return log


logger = build_logger()
