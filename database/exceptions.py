"""Errors raised by the repositories. The API maps them to HTTP statuses."""


class DatabaseError(Exception):
    """Base for all database errors (HTTP 500 unless a subclass says otherwise)."""


class NotFoundError(DatabaseError):
    """Entity to update or attach to does not exist (404)."""


class DuplicateError(DatabaseError):
    """Unique constraint violation: second join, second score row for a hole (409)."""


class IntegrityError(DatabaseError):
    """Foreign key or check constraint violation (409)."""


class CapacityError(IntegrityError):
    """Tournament already has max_players registered (409)."""
