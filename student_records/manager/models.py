"""State containers for the record manager (no Qt, no SQLite)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from student_records.store.models import StoreStats, StudentRecord

__all__ = [
    "FormMode",
    "FormState",
    "StudentForm",
    "Severity",
    "Notification",
    "SearchResult",
    "AppState",
]


# ── Form ──────────────────────────────────────────────────────────────────────

class FormMode(str, Enum):
    CREATING = "creating"
    EDITING  = "editing"


@dataclass(frozen=True)
class FormState:
    """
    Which record, if any, the form is bound to.

    Build with FormState.creating() or FormState.editing(record_id);
    record_id is set exactly when mode is EDITING.
    """
    mode:      FormMode      = FormMode.CREATING
    record_id: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.mode is FormMode.EDITING) != (self.record_id is not None):
            raise ValueError(f"Inconsistent form state: {self.mode.value} / {self.record_id}")

    @classmethod
    def creating(cls) -> "FormState":
        return cls()

    @classmethod
    def editing(cls, record_id: int) -> "FormState":
        return cls(mode=FormMode.EDITING, record_id=record_id)

    @property
    def is_editing(self) -> bool:
        return self.mode is FormMode.EDITING


@dataclass
class StudentForm:
    """Raw form input, exactly as typed by the user."""
    first_name:      str = ""
    last_name:       str = ""
    email:           str = ""
    grade:           str = ""
    enrollment_file: str = ""

    @classmethod
    def from_record(cls, record: StudentRecord) -> "StudentForm":
        return cls(**record.content())


# ── Notifications ─────────────────────────────────────────────────────────────

class Severity(str, Enum):
    INFO    = "info"
    SUCCESS = "success"
    ERROR   = "error"


@dataclass
class Notification:
    """A transient message for the notification area."""
    message:    str
    severity:   Severity = Severity.INFO
    timeout_ms: int      = 4000

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.message}"


# ── Search ────────────────────────────────────────────────────────────────────

@dataclass
class SearchResult:
    """
    Outcome of a search.

    total — size of the loaded snapshot
    found — number of matching records
    """
    term:    str
    records: list[StudentRecord] = field(default_factory=list)
    total:   int                 = 0

    @property
    def found(self) -> int:
        return len(self.records)


# ── Application state ─────────────────────────────────────────────────────────

@dataclass
class AppState:
    """
    Session state owned by RecordManager.

    Attributes
    ──────────
    form          — create vs. edit mode
    records       — last snapshot loaded from the store
    stats         — counts computed from records
    search        — last search result, or None when no filter is active
    is_loading    — True while a submission is in flight
    notifications — every notification posted this session (newest last)
    """
    form:          FormState              = field(default_factory=FormState.creating)
    records:       list[StudentRecord]    = field(default_factory=list)
    stats:         StoreStats             = field(default_factory=StoreStats)
    search:        Optional[SearchResult] = None
    is_loading:    bool                   = False
    notifications: list[Notification]     = field(default_factory=list)

    @property
    def visible_records(self) -> list[StudentRecord]:
        """Records the table should show: the search hits, or the full snapshot."""
        if self.search is not None:
            return list(self.search.records)
        return list(self.records)

    @property
    def last_notification(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None
