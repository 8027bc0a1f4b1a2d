"""
RecordManager — mediates between user input and the RecordStore.

Owns the session state (AppState): form mode, the loaded record snapshot,
stats, the active search and the notification history.  No Qt imports here;
the GUI and the CLI drive the same manager and receive results through two
injected callbacks:

    confirm(message) -> bool      asked before destructive operations
    notify(Notification)          called for every user-facing message

Every public operation reports failures as an error notification and
returns a falsy value; no StudentRecordsError escapes to the caller.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from student_records.config import AppConfig
from student_records.exceptions import StudentRecordsError, ValidationError
from student_records.manager.models import (
    AppState,
    FormState,
    Notification,
    SearchResult,
    Severity,
    StudentForm,
)
from student_records.manager.validation import validate_form
from student_records.store.db import RecordStore, export_filename
from student_records.store.models import (
    StoreStats,
    StudentRecord,
    compute_stats,
    sample_students,
)

__all__ = ["RecordManager"]

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]
NotifyCallback  = Callable[[Notification], None]

_LOG_LEVELS = {
    Severity.INFO:    logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.ERROR:   logging.WARNING,
}


def _decline(message: str) -> bool:
    logger.debug("No confirm callback; declining %r", message)
    return False


class RecordManager:
    """
    Two-mode form controller over a RecordStore.

    Create mode: submit() validates, pre-checks uniqueness and adds.
    Edit mode (after start_edit): submit() validates, pre-checks uniqueness
    against the other students and updates, then returns to create mode.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[AppConfig] = None,
        confirm: Optional[ConfirmCallback] = None,
        notify: Optional[NotifyCallback] = None,
        state: Optional[AppState] = None,
    ) -> None:
        self._store   = store
        self._config  = config or AppConfig()
        self._confirm = confirm or _decline
        self._notify_cb = notify
        self.state    = state or AppState()

    # ── Internal helpers ──────────────────────────────────────────────────

    def _notify(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        note = Notification(
            message=message,
            severity=severity,
            timeout_ms=self._config.notification_timeout_ms,
        )
        self.state.notifications.append(note)
        logger.log(_LOG_LEVELS[severity], "%s", note)
        if self._notify_cb is not None:
            self._notify_cb(note)
        return note

    def _check_unique(self, record: StudentRecord, exclude_id: Optional[int] = None) -> None:
        """Friendly pre-check; the store's unique indexes remain authoritative."""
        suffix = " to another student" if exclude_id is not None else ""
        if self._store.email_exists(record.email, exclude_id):
            raise ValidationError(
                f"This email is already registered{suffix}", fields=["email"]
            )
        if self._store.enrollment_file_exists(record.enrollment_file, exclude_id):
            raise ValidationError(
                f"This enrollment file is already registered{suffix}",
                fields=["enrollment_file"],
            )

    def _create(self, form: StudentForm) -> bool:
        try:
            record = validate_form(form)
            self._check_unique(record)
            record_id = self._store.add(record)
        except ValidationError as exc:
            self._notify(str(exc), Severity.ERROR)
            return False
        except StudentRecordsError as exc:
            logger.error("Adding student failed: %s", exc)
            self._notify(f"Could not add the student: {exc}", Severity.ERROR)
            return False

        logger.debug("Created student id=%d", record_id)
        self.load_all()
        self.state.form = FormState.creating()
        self._notify("Student added successfully", Severity.SUCCESS)
        return True

    def _update(self, record_id: int, form: StudentForm) -> bool:
        try:
            record = validate_form(form)
            self._check_unique(record, exclude_id=record_id)
            self._store.update(record_id, record.content())
        except ValidationError as exc:
            self._notify(str(exc), Severity.ERROR)
            return False
        except StudentRecordsError as exc:
            logger.error("Updating student id=%d failed: %s", record_id, exc)
            self._notify(f"Could not update the student: {exc}", Severity.ERROR)
            return False

        self.load_all()
        self.state.form = FormState.creating()
        self._notify("Student updated successfully", Severity.SUCCESS)
        return True

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def initialize(self) -> bool:
        """
        Open the store, seed an empty one with sample students, load records.

        Returns:
            False if the database could not be opened; data operations are
            unusable in that case but nothing is raised.
        """
        try:
            self._store.open()
        except StudentRecordsError as exc:
            logger.error("Could not open student database: %s", exc)
            self._notify("Critical error: could not open the student database", Severity.ERROR)
            return False

        if self._config.seed_on_first_run:
            try:
                if self._store.is_empty():
                    logger.info("Empty database, adding sample students")
                    self._store.add_many(sample_students())
            except StudentRecordsError as exc:
                logger.error("Could not add sample students: %s", exc)

        self._notify("Database connected", Severity.SUCCESS)
        self.load_all()
        return True

    @property
    def is_ready(self) -> bool:
        return self._store.is_ready()

    @property
    def stats(self) -> StoreStats:
        return self.state.stats

    # ── Public API ────────────────────────────────────────────────────────

    def load_all(self) -> bool:
        """Refresh the record snapshot and stats; drops any active search."""
        try:
            records = self._store.get_all()
        except StudentRecordsError as exc:
            logger.error("Loading students failed: %s", exc)
            self._notify("Could not load the students", Severity.ERROR)
            return False
        self.state.records = records
        self.state.stats = compute_stats(records)
        self.state.search = None
        return True

    def submit(self, form: StudentForm) -> bool:
        """
        Add or update depending on the current form mode.

        Ignored (returns False) while another submission is in flight.
        """
        if self.state.is_loading:
            logger.debug("Submission ignored: another one is in progress")
            return False
        self.state.is_loading = True
        try:
            if self.state.form.is_editing:
                return self._update(self.state.form.record_id, form)
            return self._create(form)
        finally:
            self.state.is_loading = False

    def start_edit(self, record_id: int) -> Optional[StudentForm]:
        """
        Switch to edit mode for *record_id*.

        Returns:
            The form populated with the stored values, or None if the
            student could not be loaded.
        """
        try:
            record = self._store.get(record_id)
        except StudentRecordsError as exc:
            logger.error("Loading student id=%d failed: %s", record_id, exc)
            self._notify("Could not load the student", Severity.ERROR)
            return None
        if record is None:
            self._notify(f"Student with id={record_id} not found", Severity.ERROR)
            return None

        self.state.form = FormState.editing(record_id)
        self._notify("Edit mode enabled", Severity.INFO)
        return StudentForm.from_record(record)

    def cancel_edit(self) -> None:
        """Return to create mode without saving."""
        self.state.form = FormState.creating()
        self._notify("Edit cancelled", Severity.INFO)

    def remove(self, record_id: int) -> bool:
        """Delete *record_id* after the user confirms."""
        if not self._confirm("Are you sure you want to delete this student?"):
            return False
        try:
            self._store.delete(record_id)
        except StudentRecordsError as exc:
            logger.error("Deleting student id=%d failed: %s", record_id, exc)
            self._notify("Could not delete the student", Severity.ERROR)
            return False

        if self.state.form.record_id == record_id:
            self.state.form = FormState.creating()
        self.load_all()
        self._notify("Student deleted successfully", Severity.SUCCESS)
        return True

    def run_search(self, term: str) -> Optional[SearchResult]:
        """
        Filter students by *term* without touching the loaded snapshot.

        Returns:
            SearchResult with total (snapshot size) and found counts, or
            None on failure.
        """
        try:
            records = self._store.search(term)
        except StudentRecordsError as exc:
            logger.error("Search for %r failed: %s", term, exc)
            self._notify("Could not search the students", Severity.ERROR)
            return None
        result = SearchResult(term=term, records=records, total=len(self.state.records))
        self.state.search = result
        return result

    def clear_search(self) -> None:
        self.state.search = None

    def seed_sample_data(self) -> bool:
        """Insert the built-in example students after the user confirms."""
        samples = sample_students()
        if not self._confirm(f"Add sample data? This will add {len(samples)} sample students."):
            return False
        try:
            self._store.add_many(samples)
        except StudentRecordsError as exc:
            logger.error("Adding sample data failed: %s", exc)
            self._notify(f"Could not add the sample data: {exc}", Severity.ERROR)
            return False
        self.load_all()
        self._notify("Sample data added successfully", Severity.SUCCESS)
        return True

    def export_all(self, directory: Union[str, Path]) -> Optional[Path]:
        """
        Write every student to <directory>/estudiantes_<date>.json.

        Returns:
            Path of the written file, or None on failure.
        """
        try:
            blob = self._store.export_all()
            out_dir = Path(directory).expanduser()
            out_dir.mkdir(parents=True, exist_ok=True)
            out_path = out_dir / export_filename()
            out_path.write_bytes(blob)
        except (StudentRecordsError, OSError) as exc:
            logger.error("Export failed: %s", exc)
            self._notify("Could not export the data", Severity.ERROR)
            return None
        self._notify(f"Data exported to {out_path.name}", Severity.SUCCESS)
        return out_path

    def import_all(self, json_text: Union[str, bytes]) -> bool:
        """Replace every student with the contents of *json_text* after the user confirms."""
        if not self._confirm("Import data? This will replace all current students."):
            return False
        try:
            imported = self._store.import_all(json_text)
        except StudentRecordsError as exc:
            logger.error("Import failed: %s", exc)
            self._notify(f"Could not import the data: {exc}", Severity.ERROR)
            return False

        # ids were reassigned, so a pending edit no longer points anywhere
        self.state.form = FormState.creating()
        self.load_all()
        self._notify(f"{imported} students imported successfully", Severity.SUCCESS)
        return True

    def import_file(self, path: Union[str, Path]) -> bool:
        try:
            text = Path(path).expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Reading %s failed: %s", path, exc)
            self._notify(f"Could not read {path}", Severity.ERROR)
            return False
        return self.import_all(text)
