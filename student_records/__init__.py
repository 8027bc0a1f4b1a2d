"""
student_records — local student record manager.

Packages
────────
store    — SQLite persistence (RecordStore, StudentRecord)
manager  — form state, validation and orchestration (RecordManager)
gui      — PyQt6 desktop window
cli      — argparse entry point
"""

__version__ = "1.0.0"
