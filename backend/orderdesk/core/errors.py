"""
Domain errors raised by the order engine.

Every error a caller can act on derives from `OrderError`, so endpoints only need
one `except` clause and a mapping to HTTP status codes.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base exception for all order engine failures."""


class NotFoundError(OrderError, LookupError):
    """Raised when an order or a referenced entity does not exist (or is inactive)."""


class InvalidArgumentError(OrderError, ValueError):
    """Raised when submitted data violates a validation rule."""


class NoActiveEmployeeError(NotFoundError, InvalidArgumentError):
    """Raised when a default approver is needed but no active employee exists."""


class DuplicateKeyError(OrderError):
    """Raised when an active order already uses the same natural key."""


class StorageFailureError(OrderError):
    """Raised when the database fails underneath a unit of work."""
