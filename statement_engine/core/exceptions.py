"""Custom engine exceptions."""

from typing import Any


class AppException(Exception):
    """Base engine exception."""

    def __init__(self, detail: str = "An unexpected error occurred") -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(AppException):
    """Validation error exception.

    Raised for hard failures that must be rejected before a statement is
    generated (missing property ids, inverted periods, illegal transitions).
    """

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(detail)
