"""
Exceptions raised by the data store gateways.

Handlers branch on the specific subclasses; anything else coming out of a
gateway is a StoreError and becomes a 500.
"""

from typing import Any, Optional


class ModelError(Exception):
    """Base exception for data store errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NoRecordError(ModelError):
    """No matching record found."""

    def __init__(self, message: str = "no matching record found", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidCredentialsError(ModelError):
    """Email or password is incorrect."""

    def __init__(self, message: str = "invalid credentials", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


class DuplicateEmailError(ModelError):
    """A user with this email address already exists."""

    def __init__(self, message: str = "duplicate email", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


class StoreError(ModelError):
    """The store failed: connection loss, query or transaction failure."""
