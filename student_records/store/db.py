"""
RecordStore — SQLite-backed persistence layer for student records.

Usage::

    store = RecordStore(db_path="~/.student-records/students.db")
    store.open()                          # create / upgrade schema

    # Create
    student_id = store.add(StudentRecord(
        first_name="Ana", last_name="Torres", email="ana@colegio.edu",
        grade="2do Primaria", enrollment_file="MAT-2024-010",
    ))

    # Read / update / delete
    rec = store.get(student_id)
    store.update(student_id, {"grade": "3ro Primaria"})
    store.delete(student_id)

    # Backup
    blob = store.export_all()
    store.import_all(blob.decode("utf-8"))   # destructive replace
"""

import json
import logging
import re
import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

from student_records.exceptions import (
    ConstraintError,
    DatabaseConnectionError,
    NotFoundError,
    NotInitializedError,
    ParseError,
    StoreError,
)
from student_records.store.models import (
    EDITABLE_FIELDS,
    StoreStats,
    StudentRecord,
    format_timestamp,
    parse_timestamp,
)

__all__ = ["RecordStore", "SCHEMA_VERSION", "export_filename"]

logger = logging.getLogger(__name__)

# Bump whenever the index set in schema.sql changes; upgrading drops the table
SCHEMA_VERSION = 2

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"

_COLUMN_RE = re.compile(r"students\.(\w+)")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def export_filename(day: Optional[date] = None) -> str:
    """Download name for an export taken on *day* (default: today, UTC)."""
    day = day or _utcnow().date()
    return f"estudiantes_{day.isoformat()}.json"


def _constraint_error(exc: sqlite3.IntegrityError) -> ConstraintError:
    """Map SQLite's 'UNIQUE constraint failed: students.email' to a ConstraintError."""
    message = str(exc)
    m = _COLUMN_RE.search(message)
    column = m.group(1) if m else "unknown"
    if message.startswith("NOT NULL"):
        return ConstraintError(column, message=f"Missing value for {column}")
    return ConstraintError(column)


class RecordStore:
    """
    CRUD interface for the local SQLite student database.

    open() must succeed before any other call; until then every operation
    raises NotInitializedError.  Each public method runs in its own
    short-lived connection and transaction, so a failed call never leaves a
    partial write behind.
    """

    def __init__(self, db_path: str, busy_timeout: float = 5.0) -> None:
        self._db_path = Path(db_path).expanduser()
        self._busy_timeout = busy_timeout
        self._ready = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def open(self) -> None:
        """
        Connect to the database file and bring its schema to SCHEMA_VERSION.

        Calling open() again after success is a no-op.

        Raises:
            DatabaseConnectionError: the file is locked, unreadable, or was
                written by a newer schema version.
        """
        if self._ready:
            return
        logger.info("Opening student database at %s", self._db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
        except (OSError, sqlite3.Error) as exc:
            raise DatabaseConnectionError(
                f"Cannot open database {self._db_path}: {exc}"
            ) from exc

        try:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            if version > SCHEMA_VERSION:
                raise DatabaseConnectionError(
                    f"Database {self._db_path} has schema v{version}; "
                    f"this build supports up to v{SCHEMA_VERSION}"
                )
            if version < SCHEMA_VERSION:
                self._migrate(conn, version)
        except sqlite3.Error as exc:
            raise DatabaseConnectionError(
                f"Cannot open database {self._db_path}: {exc}"
            ) from exc
        finally:
            conn.close()

        self._ready = True
        logger.info("Student database ready (schema v%d)", SCHEMA_VERSION)

    def is_ready(self) -> bool:
        """True once open() has completed successfully."""
        return self._ready

    # ── Internal helpers ──────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._busy_timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _migrate(self, conn: sqlite3.Connection, from_version: int) -> None:
        """Drop and recreate the students table; existing rows are discarded."""
        logger.warning(
            "Upgrading student database from v%d to v%d (existing records are dropped)",
            from_version, SCHEMA_VERSION,
        )
        schema = _SCHEMA_PATH.read_text(encoding="utf-8")
        conn.executescript(
            "BEGIN IMMEDIATE;\n"
            "DROP TABLE IF EXISTS students;\n"
            f"{schema}\n"
            f"PRAGMA user_version = {SCHEMA_VERSION};\n"
            "COMMIT;\n"
        )

    def _require_ready(self) -> None:
        if not self._ready:
            raise NotInitializedError()

    @contextmanager
    def _transaction(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection inside one transaction; commit on success.

        sqlite3 errors are rolled back and re-raised as store exceptions.
        """
        self._require_ready()
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot connect to {self._db_path}: {exc}") from exc
        try:
            if immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise _constraint_error(exc) from exc
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> StudentRecord:
        return StudentRecord(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            grade=row["grade"],
            enrollment_file=row["enrollment_file"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @staticmethod
    def _insert(conn: sqlite3.Connection, record: StudentRecord, now: datetime) -> int:
        stamp = format_timestamp(now)
        cur = conn.execute(
            """
            INSERT INTO students
                (first_name, last_name, email, grade, enrollment_file,
                 created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.first_name,
                record.last_name,
                record.email,
                record.grade,
                record.enrollment_file,
                stamp,
                stamp,
            ),
        )
        return cur.lastrowid  # type: ignore[return-value]

    def _exists(self, column: str, value: str, exclude_id: Optional[int]) -> bool:
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT 1 FROM students WHERE {column}=? AND (? IS NULL OR id != ?) LIMIT 1",
                (value, exclude_id, exclude_id),
            ).fetchone()
        return row is not None

    # ── Public API ────────────────────────────────────────────────────────

    def add(self, record: StudentRecord) -> int:
        """
        Insert *record* as a new student, stamping created_at / updated_at.

        Any id or timestamps already on *record* are ignored.

        Returns:
            The newly assigned id.

        Raises:
            ConstraintError: email or enrollment_file is already taken.
        """
        with self._transaction() as conn:
            row_id = self._insert(conn, record, _utcnow())
        logger.info("Student added with id=%d", row_id)
        return row_id

    def add_many(self, records: list[StudentRecord]) -> list[int]:
        """Insert *records* in one transaction; either all are added or none."""
        now = _utcnow()
        with self._transaction() as conn:
            ids = [self._insert(conn, rec, now) for rec in records]
        logger.info("%d students added", len(ids))
        return ids

    def get(self, record_id: int) -> Optional[StudentRecord]:
        """
        Retrieve a student by id.

        Returns:
            StudentRecord if found, None otherwise.
        """
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM students WHERE id=?", (record_id,)
            ).fetchone()
        return self._row_to_record(row) if row else None

    def get_all(self) -> list[StudentRecord]:
        """Return every student in insertion order."""
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM students ORDER BY id").fetchall()
        logger.debug("%d students loaded", len(rows))
        return [self._row_to_record(r) for r in rows]

    def update(self, record_id: int, changes: Mapping[str, str]) -> StudentRecord:
        """
        Merge *changes* over the stored student and refresh updated_at.

        Fields absent from *changes* keep their stored values; id and
        created_at are never modified.

        Returns:
            The record as stored after the update.

        Raises:
            ValueError:      *changes* names a field that is not editable.
            NotFoundError:   no student has *record_id*.
            ConstraintError: the new email / enrollment_file belongs to
                             another student.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        with self._transaction(immediate=True) as conn:
            row = conn.execute(
                "SELECT * FROM students WHERE id=?", (record_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError(record_id)
            existing = self._row_to_record(row)

            now = _utcnow()
            if existing.created_at and existing.created_at > now:
                now = existing.created_at
            merged = replace(existing, updated_at=now, **dict(changes))
            conn.execute(
                """
                UPDATE students
                   SET first_name=?, last_name=?, email=?, grade=?,
                       enrollment_file=?, updated_at=?
                 WHERE id=?
                """,
                (
                    merged.first_name,
                    merged.last_name,
                    merged.email,
                    merged.grade,
                    merged.enrollment_file,
                    format_timestamp(now),
                    record_id,
                ),
            )
        logger.info("Student id=%d updated (%s)", record_id, ", ".join(sorted(changes)))
        return merged

    def delete(self, record_id: int) -> bool:
        """
        Delete a single student by id.

        Returns:
            True if a row was deleted, False if id not found.
        """
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM students WHERE id=?", (record_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info("Student id=%d deleted", record_id)
        return deleted

    def search(self, term: str = "") -> list[StudentRecord]:
        """
        Case-insensitive substring search over name, email, grade and
        enrollment file.

        Args:
            term: Text to look for.  Empty / blank returns all records.

        Returns:
            A new list of matching StudentRecord objects.
        """
        records = self.get_all()
        query = (term or "").strip().lower()
        if not query:
            return records
        return [r for r in records if r.matches(query)]

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """True iff another student (not *exclude_id*) already uses *email*."""
        return self._exists("email", email, exclude_id)

    def enrollment_file_exists(self, enrollment_file: str,
                               exclude_id: Optional[int] = None) -> bool:
        """True iff another student (not *exclude_id*) already uses *enrollment_file*."""
        return self._exists("enrollment_file", enrollment_file, exclude_id)

    def stats(self) -> StoreStats:
        """Total count and per-grade counts."""
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT grade, COUNT(*) AS n FROM students GROUP BY grade ORDER BY grade"
            ).fetchall()
        by_grade = {r["grade"]: r["n"] for r in rows}
        return StoreStats(total=sum(by_grade.values()), by_grade=by_grade)

    def count(self) -> int:
        with self._transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM students").fetchone()[0]

    def is_empty(self) -> bool:
        return self.count() == 0

    def export_all(self) -> bytes:
        """Serialise every student as a pretty-printed UTF-8 JSON array."""
        records = self.get_all()
        text = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
        logger.info("Exported %d students", len(records))
        return text.encode("utf-8")

    def import_all(self, json_text: Union[str, bytes]) -> int:
        """
        Replace the whole collection with the students in *json_text*.

        The document is parsed before anything is touched.  Ids in the
        document are ignored and new ones assigned; timestamps are
        re-stamped.  Clearing and inserting share one transaction, so a
        duplicate inside the document leaves the previous contents intact.

        Returns:
            Number of students imported.

        Raises:
            ParseError:      malformed JSON, or an entry missing a field or
                             carrying a bad email / unknown grade.
            ConstraintError: the document repeats an email / enrollment file.
        """
        self._require_ready()
        try:
            payload = json.loads(json_text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(f"Malformed JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise ParseError("Expected a JSON array of students")
        records: list[StudentRecord] = []
        for index, item in enumerate(payload):
            try:
                records.append(StudentRecord.from_dict(item))
            except ParseError as exc:
                raise ParseError(f"Entry {index}: {exc}") from exc

        now = _utcnow()
        with self._transaction(immediate=True) as conn:
            conn.execute("DELETE FROM students")
            for rec in records:
                self._insert(conn, rec, now)
        logger.info("Imported %d students (previous contents replaced)", len(records))
        return len(records)

    def clear(self) -> None:
        """Delete every student; the schema and id sequence are kept."""
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM students")
        logger.info("Cleared %d students", cur.rowcount)
