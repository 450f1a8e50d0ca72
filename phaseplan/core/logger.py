"""
Logger factory.

Every module obtains its logger through setup_logger(__name__) so that handlers
and format are configured in one place.
"""

import logging
import sys

from phaseplan.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """
    Create (or fetch) a configured logger.

    Args:
        name: Logger name, usually the module's __name__

    Returns:
        logging.Logger with a single stream handler attached
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(get_settings().effective_log_level)
    return logger


logger = setup_logger("phaseplan")
