"""
Logging for Intake Sync.

One named logger, shared by every module through ``from config.logging
import logger``. Console output follows LOG_LEVEL (DEBUG when DEBUG is
set); the run log under logs/ always keeps DEBUG so block-level writes can
be traced after the fact.
"""

import logging
import sys

from config.settings import settings

LOG_DIR = settings.project_root / "logs"
LOG_DIR.mkdir(exist_ok=True)

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Retry and token-refresh chatter from the HTTP stack
NOISY_LOGGERS = ("urllib3", "google.auth")


def setup_logging(name: str = "intake_sync") -> logging.Logger:
    """
    Configure and return the importer logger.

    Safe to call more than once; handlers are only attached the first time.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    file_handler = logging.FileHandler(LOG_DIR / f"{name}.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


# Default logger
logger = setup_logging()
