"""Exception types shared by the probing code."""

from __future__ import annotations


class AppError(Exception):
    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message


class InvalidArgumentError(AppError, ValueError):
    """Raised synchronously when an observation is configured with bad values."""
