"""
Logging setup for scripts and demos.

Library modules only create child loggers of "dsfem"; handlers live here.
"""
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Send dsfem log records to stdout at the given level.

    Calling it again replaces the previous handler instead of adding one.
    """
    logger = logging.getLogger("dsfem")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(handler)

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
