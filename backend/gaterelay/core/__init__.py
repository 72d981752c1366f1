"""Core package."""

from gaterelay.core.config import settings, get_settings
from gaterelay.core.logging import get_logger

__all__ = [
    "settings",
    "get_settings",
    "get_logger",
]
