import os
import sys

from loguru import logger


def setup_logging(debug_mode: bool = False, log_dir: str | None = None) -> None:
    """
    Configures Loguru logger for command line use.
    """
    logger.remove()

    level = "DEBUG" if debug_mode else "INFO"
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>")

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(os.path.join(log_dir, "media_imports_{time}.log"), rotation="10 MB", retention="1 week", level="DEBUG")

    logger.debug("Logging initialized.")
