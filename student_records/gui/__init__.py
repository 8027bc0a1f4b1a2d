"""
gui — PyQt6 front-end for student-records.

Public API
──────────
MainWindow            — top-level application window
run                   — create the QApplication and show MainWindow
viewmodels            — pure-Python state containers for the widgets
pages                 — form and list widgets
"""

from student_records.gui.main_window import MainWindow, run
from student_records.gui import viewmodels

__all__ = ["MainWindow", "run", "viewmodels"]
