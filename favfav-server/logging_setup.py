"""
Logging setup shared by the server and the CLI
"""
import sys

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(level: str = "INFO"):
    """Replace loguru's default sink with the stdout format used everywhere"""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level.upper())
