from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", name: str = "transactions_api") -> logging.Logger:
    """Attach a console handler to the package logger.

    Safe to call more than once: existing handlers are replaced, not stacked.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))

    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
