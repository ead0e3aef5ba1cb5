import logging
import sys
from clinicdesk.core.config import settings

def setup_logging():
    """
    Configure the application logger. Module loggers are children of
    "clinicdesk" and inherit its handler.
    """
    logger = logging.getLogger("clinicdesk")
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)

    return logger

logger = setup_logging()

def get_logger(name: str) -> logging.Logger:
    return logger.getChild(name)
