import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'


class MillisecondFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created).strftime(datefmt or "%Y-%m-%d %H:%M:%S")
        return f"{stamp}.{int(record.msecs):03d}"


def setup_logger(
    name: str,
    log_path: Optional[str | Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Console logger, plus a rotating file when *log_path* is given.

    Calling it again for the same name adds only the handlers still
    missing: one console handler, and one file handler per path.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = MillisecondFormatter(LOG_FORMAT)

    # RotatingFileHandler is itself a StreamHandler
    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if not has_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if log_path is not None:
        log_path = Path(log_path).resolve()
        has_file = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path
            for h in logger.handlers
        )
        if not has_file:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            rotating = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8")
            rotating.setFormatter(formatter)
            logger.addHandler(rotating)

    return logger
