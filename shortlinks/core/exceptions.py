"""
Custom Exceptions

This module defines the error taxonomy of the link service.

- ValidationError: submitted input fails a format rule (never reaches storage)
- StorageError: any failure talking to the persistence layer
- ConflictError: a generated short code collided with an existing one

Not-found is not an error: lookups return None and deletes report
rows_affected=0.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class ValidationError(URLShortenerException):
    """Raised when a submitted field fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class StorageError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")


class ConflictError(StorageError):
    """Raised when a short code is already taken by another link."""

    def __init__(self, short_code: str, original_error: Optional[Exception] = None):
        self.short_code = short_code
        super().__init__(
            f"short code '{short_code}' is already in use",
            original_error=original_error,
        )
