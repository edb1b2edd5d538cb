"""Utility modules for the Wolfram knowledge service."""

from .logger import get_logger
from .retry import RetryPolicy, is_transient, with_retry

__all__ = [
    "RetryPolicy",
    "get_logger",
    "is_transient",
    "with_retry",
]
