"""
store — SQLite-backed persistence layer for student records.

Public API
──────────
StudentRecord  — dataclass representing one student
StoreStats     — total / per-grade counts
RecordStore    — CRUD interface (open, add, get, update, delete, search, …)
"""

from student_records.store.models import GRADE_LABELS, StoreStats, StudentRecord
from student_records.store.db import SCHEMA_VERSION, RecordStore, export_filename

__all__ = [
    "GRADE_LABELS",
    "SCHEMA_VERSION",
    "StoreStats",
    "StudentRecord",
    "RecordStore",
    "export_filename",
]
