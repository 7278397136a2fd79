"""
Loveslices exception hierarchy.

Services raise these; routers translate them into HTTP responses.
"""


class LoveslicesError(Exception):
    """Base exception class for all loveslices errors."""


class NotFoundError(LoveslicesError):
    """Raised when a required record (e.g. the requesting user) does not exist."""


class StorageError(LoveslicesError):
    """Raised when the database is unreachable or a query fails."""


class ValidationError(LoveslicesError):
    """Raised when a request is well-formed but not acceptable."""


class PermissionDeniedError(LoveslicesError):
    """Raised when a user asks for a record that belongs to another couple."""
