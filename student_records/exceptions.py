"""
Project-wide custom exception hierarchy.
All modules raise subclasses of StudentRecordsError — never bare Exception.
"""

from typing import Optional

__all__ = [
    "StudentRecordsError",
    "StoreError",
    "DatabaseConnectionError",
    "NotInitializedError",
    "ConstraintError",
    "NotFoundError",
    "ParseError",
    "ValidationError",
]


class StudentRecordsError(Exception):
    """Root exception for all student-records errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(StudentRecordsError):
    """Raised on SQLite / store I/O errors."""


class DatabaseConnectionError(StoreError):
    """Raised when the database cannot be opened (locked, newer schema, bad path)."""


class NotInitializedError(StoreError):
    """Raised when a store operation is attempted before open() completed."""

    def __init__(self, message: str = "Database not initialized") -> None:
        super().__init__(message)


class ConstraintError(StoreError):
    """
    Raised when a write would break a unique index.

    Args:
        field: Record attribute that collided (``email`` / ``enrollment_file``).
        value: The duplicated value, when known.
    """

    def __init__(self, field: str, value: Optional[str] = None,
                 message: Optional[str] = None) -> None:
        if message is None:
            message = f"Duplicate value for {field}"
            if value is not None:
                message += f": {value!r}"
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(StoreError):
    """Raised when an update targets a record id that does not exist."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Student with id={record_id} not found")
        self.record_id = record_id


class ParseError(StoreError):
    """Raised when an import payload is not a valid student JSON document."""


# ── Manager ───────────────────────────────────────────────────────────────────

class ValidationError(StudentRecordsError):
    """
    Raised when form input fails field-level checks.

    Args:
        message: User-facing summary.
        fields:  Attribute names that failed validation.
    """

    def __init__(self, message: str, fields: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.fields: list[str] = fields or []
