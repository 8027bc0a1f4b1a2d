"""
manager — form state, validation and orchestration over the RecordStore.

Public API
──────────
RecordManager  — create/edit form controller with notifications
AppState       — explicit session state (form mode, records, search, …)
FormMode       — CREATING | EDITING
FormState      — form mode plus the id under edit
StudentForm    — raw form input
Notification   — message + severity for the notification area
validate_form  — field checks run before any store call
"""

from student_records.manager.models import (
    AppState,
    FormMode,
    FormState,
    Notification,
    SearchResult,
    Severity,
    StudentForm,
)
from student_records.manager.validation import validate_form
from student_records.manager.record_manager import RecordManager

__all__ = [
    "AppState",
    "FormMode",
    "FormState",
    "Notification",
    "RecordManager",
    "SearchResult",
    "Severity",
    "StudentForm",
    "validate_form",
]
