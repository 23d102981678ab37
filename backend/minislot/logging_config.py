"""
Logging Configuration
Sets up the package logger for the game server.
"""
import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configures the logger for the 'minislot' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG or "INFO")
    """
    logger = logging.getLogger("minislot")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs during reload/restart
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)-5s] [%(name)-20s] --- %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.info("Logging initialized.")
