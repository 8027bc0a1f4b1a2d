"""Data models for the store module."""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from student_records.exceptions import ParseError

__all__ = [
    "GRADE_LABELS",
    "EDITABLE_FIELDS",
    "EMAIL_RE",
    "SEARCH_FIELDS",
    "StudentRecord",
    "StoreStats",
    "compute_stats",
    "format_timestamp",
    "is_valid_email",
    "parse_timestamp",
    "sample_students",
]


# Grade labels offered by the form, lowest first
GRADE_LABELS: tuple[str, ...] = (
    "1ro Primaria",
    "2do Primaria",
    "3ro Primaria",
    "4to Primaria",
    "5to Primaria",
    "6to Primaria",
    "1ro Secundaria",
    "2do Secundaria",
    "3ro Secundaria",
    "4to Secundaria",
    "5to Secundaria",
)

# Attributes a caller may set; id and timestamps belong to the store
EDITABLE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "grade",
    "enrollment_file",
)

SEARCH_FIELDS = EDITABLE_FIELDS

# local@domain.tld, no whitespace, exactly one @ (not full RFC 5322)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Python attribute → JSON document key
_JSON_NAMES: dict[str, str] = {
    "id":              "id",
    "first_name":      "firstName",
    "last_name":       "lastName",
    "email":           "email",
    "grade":           "grade",
    "enrollment_file": "enrollmentFile",
    "created_at":      "createdAt",
    "updated_at":      "updatedAt",
}


# ── Timestamp helpers ─────────────────────────────────────────────────────────

def format_timestamp(value: datetime) -> str:
    """Render *value* as UTC ISO 8601 with millisecond precision, e.g. 2024-03-01T10:00:00.000Z."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


# ── StudentRecord ─────────────────────────────────────────────────────────────

@dataclass
class StudentRecord:
    """
    One student document.

    Fields
    ──────
    id              — SQLite row id (None until saved)
    first_name      — given name
    last_name       — family name(s)
    email           — contact address, unique across the store
    grade           — one of GRADE_LABELS
    enrollment_file — enrollment file code (e.g. "MAT-2024-001"), unique
    created_at      — UTC timestamp stamped by the store on insert
    updated_at      — UTC timestamp refreshed by the store on every write
    """
    first_name:      str
    last_name:       str
    email:           str
    grade:           str
    enrollment_file: str
    id:              Optional[int]      = None
    created_at:      Optional[datetime] = None
    updated_at:      Optional[datetime] = None

    def content(self) -> dict[str, str]:
        """Return only the user-editable fields (what survives an export/import)."""
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    def matches(self, term: str) -> bool:
        """True iff lower-cased *term* occurs in any searchable field."""
        return any(term in (getattr(self, name) or "").lower() for name in SEARCH_FIELDS)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON export shape (camelCase keys, ISO timestamps)."""
        data: dict[str, Any] = {}
        for attr, key in _JSON_NAMES.items():
            value = getattr(self, attr)
            if isinstance(value, datetime):
                value = format_timestamp(value)
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "StudentRecord":
        """
        Build a record from one element of an import document.

        Raises:
            ParseError: *data* is not an object, lacks a required field,
                        or carries a malformed email or an unknown grade.
        """
        if not isinstance(data, dict):
            raise ParseError(f"Expected a student object, got {type(data).__name__}")
        values: dict[str, str] = {}
        missing = []
        for attr in EDITABLE_FIELDS:
            value = data.get(_JSON_NAMES[attr])
            if value is None or value == "":
                missing.append(_JSON_NAMES[attr])
            else:
                values[attr] = str(value)
        if missing:
            raise ParseError(f"Student entry is missing: {', '.join(missing)}")
        if not is_valid_email(values["email"]):
            raise ParseError(f"Invalid email: {values['email']!r}")
        if values["grade"] not in GRADE_LABELS:
            raise ParseError(f"Unknown grade: {values['grade']!r}")
        return cls(
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            **values,
        )

    def __str__(self) -> str:
        return (
            f"StudentRecord(id={self.id}, name={self.first_name} {self.last_name}, "
            f"email={self.email!r}, file={self.enrollment_file!r})"
        )


# ── Stats ─────────────────────────────────────────────────────────────────────

@dataclass
class StoreStats:
    """Aggregate counts over the collection."""
    total:    int            = 0
    by_grade: dict[str, int] = field(default_factory=dict)


def compute_stats(records: Iterable[StudentRecord]) -> StoreStats:
    counts = Counter(r.grade for r in records)
    return StoreStats(total=sum(counts.values()), by_grade=dict(counts))


# ── Sample data ───────────────────────────────────────────────────────────────

_SAMPLE_STUDENTS = [
    ("Juan",   "Pérez García",    "juan.perez@colegio.edu",       "5to Primaria",   "MAT-2024-001"),
    ("María",  "López Martínez",  "maria.lopez@colegio.edu",      "3ro Secundaria", "MAT-2024-002"),
    ("Carlos", "Rodríguez Silva", "carlos.rodriguez@colegio.edu", "1ro Primaria",   "MAT-2024-003"),
]


def sample_students() -> list[StudentRecord]:
    """Fresh, unsaved copies of the built-in example students."""
    return [
        StudentRecord(first_name=f, last_name=l, email=e, grade=g, enrollment_file=ef)
        for f, l, e, g, ef in _SAMPLE_STUDENTS
    ]
