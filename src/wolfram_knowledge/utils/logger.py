"""
Logging configuration for the Wolfram knowledge service.

Provides a package logger configured once from the LOG_LEVEL environment
variable.
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# Unknown level names fall back to INFO
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    LOG_LEVEL = "INFO"

logger = logging.getLogger("wolfram_knowledge")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Module name (``__name__``) or a short suffix for the package logger

    Returns:
        Logger instance
    """
    if not name:
        return logger
    if name.startswith("wolfram_knowledge"):
        return logging.getLogger(name)
    return logging.getLogger(f"wolfram_knowledge.{name}")
