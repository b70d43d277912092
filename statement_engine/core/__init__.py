"""Core utilities."""

from statement_engine.core.exceptions import AppException, ValidationError

__all__ = [
    "AppException",
    "ValidationError",
]
