"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Every exception carries an ErrorKind. The HTTP layer maps kinds to
status codes in a single table (see shortener.api.errors), so a new
kind cannot be added without deciding how it is reported.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced by the link service."""
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    AUTH_REQUIRED = "auth_required"
    AUTH_FAILED = "auth_failed"
    CONFLICT = "conflict"
    STORAGE = "storage"


class ShortenerException(Exception):
    """Base exception for URL shortener service."""

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(ShortenerException):
    """Raised when the creation request has a missing or malformed URL."""

    kind = ErrorKind.INVALID_INPUT


class LinkNotFoundError(ShortenerException):
    """Raised when a short code is not found in the database."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Short code '{code}' not found")


class AuthRequiredError(ShortenerException):
    """Raised when a protected link is opened without a password."""

    kind = ErrorKind.AUTH_REQUIRED

    def __init__(self, code: str):
        self.code = code
        super().__init__("Password required")


class AuthFailedError(ShortenerException):
    """Raised when the supplied password does not match."""

    kind = ErrorKind.AUTH_FAILED

    def __init__(self, code: str):
        self.code = code
        super().__init__("Incorrect password")


class CodeConflictError(ShortenerException):
    """Raised when an insert hits the unique index on code."""

    kind = ErrorKind.CONFLICT

    def __init__(self, code: str, original_error: Optional[Exception] = None):
        self.code = code
        self.original_error = original_error
        super().__init__(f"Short code '{code}' already exists")


class StorageError(ShortenerException):
    """Raised when database operations fail."""

    kind = ErrorKind.STORAGE

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
