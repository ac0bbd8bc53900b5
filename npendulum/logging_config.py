# npendulum/logging_config.py

"""Console logging for the ``npendulum`` logger namespace."""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the ``npendulum`` logger and return it."""
    logger = logging.getLogger("npendulum")
    logger.setLevel(level)

    # Avoid duplicate output when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
