# console_core/utils/app_logging.py
import logging
import os

FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

def setup_logger(name: str = "console", level: str | None = None):
    """
    Logger with one stderr handler. Children ("console.db", ...) get their own
    handler too, so propagation is turned off to avoid printing twice.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FMT))
        logger.addHandler(handler)
        logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
        logger.propagate = False
    return logger
