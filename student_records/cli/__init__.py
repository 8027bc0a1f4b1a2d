"""
cli — command-line interface for student-records.

Entry points
────────────
  python -m student_records   (via student_records/__main__.py)
  student-records             (via pyproject.toml [project.scripts])

Subcommands: gui | list | stats | export | import | seed | clear
"""

from student_records.cli.main import build_parser, cmd_export, cmd_list, cmd_stats, main

__all__ = ["build_parser", "cmd_export", "cmd_list", "cmd_stats", "main"]
