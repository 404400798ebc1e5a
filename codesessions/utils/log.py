import logging
from typing import Union

LOG_FORMAT = '%(asctime)s | %(levelname)-4s | %(name)-20s | %(message)s'


def get_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Get a logger for the SDK, configured once per name"""
    logger = logging.getLogger(name)

    # Configure only if no handlers are already set
    if not logger.handlers:
        logger.setLevel(level)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # Records stop here; a root handler would print them a second time
        logger.propagate = False

    return logger
