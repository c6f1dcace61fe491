"""
Logging setup.

Every module gets its own logger via logging.getLogger(__name__).
configure_logging() is called once at application start and
attaches a single handler to the package logger.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    logger = logging.getLogger("erp_ledger")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
