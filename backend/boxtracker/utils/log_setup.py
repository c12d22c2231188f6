import logging
import sys

from boxtracker.config import settings

ROOT_LOGGER = "boxtracker"


def configure_logging(level: str = None) -> logging.Logger:
    """
    Attach a stdout handler to the package logger once. Safe to call
    repeatedly (app startup, scripts, tests).
    """
    log = logging.getLogger(ROOT_LOGGER)
    log.setLevel((level or settings.LOG_LEVEL).upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter("[%(name)s] %(levelname)s %(message)s")
        )
        log.addHandler(h)
    log.propagate = False
    return log


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
