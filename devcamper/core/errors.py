"""
Error types shared by the translator, the store adapters and the HTTP layer.
"""

from typing import Any, Dict, Optional


class DevcamperError(Exception):
    """Base class for all errors raised by this package."""


class QueryExecutionError(DevcamperError):
    """
    Raised when the store rejects a query or fails to execute it.

    Covers filters the store cannot parse (unknown operators, values that
    cannot be cast to the field type), connectivity loss and timeouts.
    Never handled by the translator; the HTTP layer maps it to a 500.
    """

    def __init__(self, message: str, query: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.query = query


class DuplicateDocumentError(QueryExecutionError):
    """A write collided with a unique index."""

    def __init__(self, message: str, fields: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.fields = fields or {}


class ErrorResponse(DevcamperError):
    """An error carrying the HTTP status the client should see."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidIdError(QueryExecutionError, ValueError):
    """A value that should be an object id is not one."""

    def __init__(self, value: Any):
        super().__init__(f"'{value}' is not a valid object id")
        self.value = value
