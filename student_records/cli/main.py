"""
CLI entry point for student-records.

Usage
─────
  # Open the desktop window
  student-records gui

  # List / search students
  student-records list
  student-records list --search "primaria"

  # Per-grade counts
  student-records stats

  # Backup and restore
  student-records export --output ./backups/
  student-records import ./backups/estudiantes_2024-03-01.json --yes

  # Sample data / wipe
  student-records seed --yes
  student-records clear --yes

Subcommands are implemented as standalone functions (cmd_list, cmd_stats,
cmd_export, …) so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from student_records.config import DEFAULT_DB_PATH, AppConfig
from student_records.exceptions import StudentRecordsError
from student_records.manager.models import Notification, Severity
from student_records.manager.record_manager import RecordManager
from student_records.store.db import RecordStore

__all__ = [
    "build_parser",
    "cmd_list",
    "cmd_stats",
    "cmd_export",
    "cmd_import",
    "cmd_seed",
    "cmd_clear",
    "main",
]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: gui | list | stats | export | import | seed | clear
    """
    parser = argparse.ArgumentParser(
        prog="student-records",
        description="Local student record manager",
    )
    parser.add_argument(
        "--db",
        default=DEFAULT_DB_PATH,
        metavar="PATH",
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    sub.add_parser("gui", help="Open the desktop window")

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List students")
    lst.add_argument(
        "--search",
        default=None,
        metavar="TERM",
        help="Only show students whose name, email, grade or file contains TERM",
    )

    sub.add_parser("stats", help="Show total and per-grade counts")

    # ── export ────────────────────────────────────────────────────────────
    exp = sub.add_parser("export", help="Write all students to estudiantes_<date>.json")
    exp.add_argument(
        "--output",
        default=None,
        metavar="DIR",
        help="Output directory (default: current directory)",
    )

    # ── import ────────────────────────────────────────────────────────────
    imp = sub.add_parser("import", help="Replace all students with a JSON export")
    imp.add_argument("file", metavar="FILE", help="JSON file produced by export")
    imp.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    # ── seed / clear ──────────────────────────────────────────────────────
    seed = sub.add_parser("seed", help="Add the sample students")
    seed.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    clr = sub.add_parser("clear", help="Delete every student")
    clr.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _make_confirm(assume_yes: bool):
    """Confirmation callback: auto-accept with --yes, otherwise prompt on stdin."""
    def confirm(message: str) -> bool:
        if assume_yes:
            return True
        try:
            answer = input(f"{message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")
    return confirm


def _print_notification(note: Notification) -> None:
    stream = sys.stderr if note.severity is Severity.ERROR else sys.stdout
    print(note.message, file=stream)


def _manager(store: RecordStore, assume_yes: bool = False) -> RecordManager:
    config = AppConfig(db_path=str(store.db_path), seed_on_first_run=False)
    return RecordManager(
        store,
        config=config,
        confirm=_make_confirm(assume_yes),
        notify=_print_notification,
    )


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(store: RecordStore, search: Optional[str]) -> None:
    """Print students (optionally filtered) to stdout."""
    records = store.search(search or "")
    if not records:
        print("0 students found.")
        return
    for rec in records:
        tag = f"[{rec.id:>4}]"
        name = f"{rec.last_name}, {rec.first_name}"
        print(f"{tag}  {rec.enrollment_file:<15} {name:<32} {rec.email:<32} {rec.grade}")


def cmd_stats(store: RecordStore) -> None:
    """Print the total and a per-grade breakdown."""
    stats = store.stats()
    print(f"Total: {stats.total}")
    for grade, count in sorted(stats.by_grade.items()):
        print(f"  {grade:<20} {count}")


def cmd_export(store: RecordStore, output_dir: Optional[str]) -> Path:
    """
    Export all students to <output_dir>/estudiantes_<date>.json.

    Raises:
        RuntimeError: the export could not be written.
    """
    out_path = _manager(store).export_all(output_dir or Path.cwd())
    if out_path is None:
        raise RuntimeError("Export failed")
    logger.info("Exported students to %s", out_path)
    return out_path


def cmd_import(store: RecordStore, path: str, assume_yes: bool = False) -> bool:
    """Replace the collection with the contents of *path*; False if declined or failed."""
    return _manager(store, assume_yes).import_file(path)


def cmd_seed(store: RecordStore, assume_yes: bool = False) -> bool:
    return _manager(store, assume_yes).seed_sample_data()


def cmd_clear(store: RecordStore, assume_yes: bool = False) -> bool:
    """Delete every student after confirmation."""
    if not _make_confirm(assume_yes)("Delete ALL students? This cannot be undone."):
        return False
    store.clear()
    print("All students deleted.")
    return True


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    config = AppConfig(db_path=ns.db, debug=ns.debug)
    logging.basicConfig(level=config.log_level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    if ns.subcommand == "gui":
        from student_records.gui.main_window import run
        return run(config)

    store = RecordStore(db_path=config.db_path, busy_timeout=config.busy_timeout)
    try:
        store.open()

        if ns.subcommand == "list":
            cmd_list(store=store, search=ns.search)
            return 0

        if ns.subcommand == "stats":
            cmd_stats(store=store)
            return 0

        if ns.subcommand == "export":
            cmd_export(store=store, output_dir=ns.output)
            return 0

        if ns.subcommand == "import":
            return 0 if cmd_import(store=store, path=ns.file, assume_yes=ns.yes) else 1

        if ns.subcommand == "seed":
            return 0 if cmd_seed(store=store, assume_yes=ns.yes) else 1

        if ns.subcommand == "clear":
            return 0 if cmd_clear(store=store, assume_yes=ns.yes) else 1
    except (StudentRecordsError, RuntimeError) as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
