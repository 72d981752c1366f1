"""Middleware package."""

from gaterelay.middleware.exception import (
    BadRequestException,
    setup_exception_handlers,
)

__all__ = [
    "BadRequestException",
    "setup_exception_handlers",
]
