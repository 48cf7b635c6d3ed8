"""
Logging utility with loguru.
Console output plus optional rotating file output.
"""

import sys

from loguru import logger

from src.config.settings import settings


def setup_logger():
    """
    Configure loguru logger with console and (optionally) file outputs.
    """
    logger.remove()

    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level,
    )

    if settings.log_to_file:
        log_dir = settings.resolve_path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "assistant.log",
            rotation="10 MB",
            retention="1 week",
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
        )

    logger.debug("Logger initialized")
    return logger
