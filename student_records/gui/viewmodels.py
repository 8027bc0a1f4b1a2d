"""
GUI ViewModels — pure-Python state containers for the Qt widgets.

No Qt imports here; every class is testable without a display.
Form mode, records and search live in RecordManager.state; these only hold
presentation state (table ordering and selection, the visible notification).

Public API
──────────
TABLE_COLUMNS           — (attribute, header) pairs in display order
StudentTableViewModel   — sortable, selectable view over student records
NotificationViewModel   — the notification currently on screen
"""

import logging
from typing import Optional

from student_records.manager.models import Notification
from student_records.store.models import StudentRecord

__all__ = ["TABLE_COLUMNS", "StudentTableViewModel", "NotificationViewModel"]

logger = logging.getLogger(__name__)

TABLE_COLUMNS: list[tuple[str, str]] = [
    ("id",              "ID"),
    ("enrollment_file", "Enrollment file"),
    ("first_name",      "First name"),
    ("last_name",       "Last name"),
    ("email",           "Email"),
    ("grade",           "Grade"),
]


# ── StudentTableViewModel ──────────────────────────────────────────────────────

class StudentTableViewModel:
    """
    Rows shown in the student table.

    Attributes
    ──────────
    records      — records as handed over by the manager
    sort_column  — attribute name the table is ordered by, or None (store order)
    ascending    — sort direction
    selected_id  — id of the highlighted row, or None
    rows         — derived: records in display order
    """

    def __init__(self) -> None:
        self.records:     list[StudentRecord] = []
        self.sort_column: Optional[str]       = None
        self.ascending:   bool                = True
        self.selected_id: Optional[int]       = None

    def load(self, records: list[StudentRecord]) -> None:
        """Replace the rows; keeps the selection only if that id is still present."""
        self.records = list(records)
        if self.selected_id is not None and all(r.id != self.selected_id for r in self.records):
            self.selected_id = None

    def sort_by(self, column: str) -> None:
        """Order by *column*; choosing the current column again flips the direction."""
        if column not in dict(TABLE_COLUMNS):
            raise ValueError(f"Unknown column: {column!r}")
        if column == self.sort_column:
            self.ascending = not self.ascending
        else:
            self.sort_column = column
            self.ascending = True

    @property
    def rows(self) -> list[StudentRecord]:
        if self.sort_column is None:
            return list(self.records)

        def key(rec: StudentRecord):
            value = getattr(rec, self.sort_column)
            return value.lower() if isinstance(value, str) else (value or 0)

        return sorted(self.records, key=key, reverse=not self.ascending)

    def select(self, record_id: Optional[int]) -> None:
        self.selected_id = record_id


# ── NotificationViewModel ──────────────────────────────────────────────────────

class NotificationViewModel:
    """Holds the notification on screen until it is dismissed or replaced."""

    def __init__(self) -> None:
        self.current: Optional[Notification] = None

    def show(self, note: Notification) -> None:
        self.current = note

    def dismiss(self, note: Optional[Notification] = None) -> bool:
        """
        Hide the current notification.

        If *note* is given, only dismiss when it is still the one on screen
        (an expired timer must not hide a newer message).
        """
        if self.current is None or (note is not None and note is not self.current):
            return False
        self.current = None
        return True

    @property
    def is_visible(self) -> bool:
        return self.current is not None
