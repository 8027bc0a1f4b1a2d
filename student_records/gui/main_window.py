"""
MainWindow — top-level application window for student-records.

Hosts, top to bottom:
  notification label   — last message, hidden again after its timeout
  StudentFormWidget    — create / edit form
  StudentListWidget    — search + table + Edit / Delete
  action row           — Sample data / Export / Import

All data work goes through a RecordManager; the window only turns widget
events into manager calls and re-renders from manager.state afterwards.
"""

import logging
import sys
from typing import Optional

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from student_records.config import AppConfig
from student_records.gui.pages.student_form import StudentFormWidget
from student_records.gui.pages.student_list import StudentListWidget
from student_records.gui.viewmodels import NotificationViewModel
from student_records.manager.models import Notification, Severity
from student_records.manager.record_manager import RecordManager
from student_records.store.db import RecordStore

__all__ = ["MainWindow", "run"]

logger = logging.getLogger(__name__)

_SEVERITY_STYLES = {
    Severity.INFO:    "background:#e3f2fd; color:#0d47a1; padding:6px;",
    Severity.SUCCESS: "background:#e8f5e9; color:#1b5e20; padding:6px;",
    Severity.ERROR:   "background:#ffebee; color:#b71c1c; padding:6px;",
}


class MainWindow(QMainWindow):
    """Root window: owns the store and the manager and wires the widgets."""

    def __init__(self, config: Optional[AppConfig] = None, parent: QWidget = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Student Records")
        self.resize(900, 640)

        self._config = config or AppConfig()
        self._notification_vm = NotificationViewModel()
        self._timed_note: Optional[Notification] = None
        self._store = RecordStore(self._config.db_path, busy_timeout=self._config.busy_timeout)
        self._manager = RecordManager(
            self._store,
            config=self._config,
            confirm=self._confirm,
            notify=self._show_notification,
        )

        self._build_ui()
        self._connect_signals()

        if not self._manager.initialize():
            self._set_data_actions_enabled(False)
        self._render()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)

        self._notification_label = QLabel()
        self._notification_label.setWordWrap(True)
        self._notification_label.hide()
        layout.addWidget(self._notification_label)

        self._notification_timer = QTimer(self)
        self._notification_timer.setSingleShot(True)
        self._notification_timer.timeout.connect(self._dismiss_notification)

        self._form_widget = StudentFormWidget()
        self._list_widget = StudentListWidget()
        layout.addWidget(self._form_widget)
        layout.addWidget(self._list_widget, stretch=1)

        action_row = QHBoxLayout()
        action_row.addStretch()
        self._seed_btn   = QPushButton("Sample data")
        self._export_btn = QPushButton("Export")
        self._import_btn = QPushButton("Import")
        action_row.addWidget(self._seed_btn)
        action_row.addWidget(self._export_btn)
        action_row.addWidget(self._import_btn)
        layout.addLayout(action_row)

        self.setCentralWidget(central)

    def _connect_signals(self) -> None:
        form, lst = self._form_widget, self._list_widget
        form._add_btn.clicked.connect(self._on_submit)
        form._update_btn.clicked.connect(self._on_submit)
        form._cancel_btn.clicked.connect(self._on_cancel)

        lst._search_btn.clicked.connect(self._on_search)
        lst._search_edit.returnPressed.connect(self._on_search)
        lst._clear_search_btn.clicked.connect(self._on_clear_search)
        lst._edit_btn.clicked.connect(self._on_edit)
        lst._delete_btn.clicked.connect(self._on_delete)

        self._seed_btn.clicked.connect(self._on_seed)
        self._export_btn.clicked.connect(self._on_export)
        self._import_btn.clicked.connect(self._on_import)

    def _set_data_actions_enabled(self, enabled: bool) -> None:
        for widget in (self._form_widget, self._list_widget,
                       self._seed_btn, self._export_btn, self._import_btn):
            widget.setEnabled(enabled)

    # ── Rendering ──────────────────────────────────────────────────────────

    def _render(self) -> None:
        state = self._manager.state
        self._form_widget.set_mode(state.form)
        self._list_widget.show_records(state.visible_records)
        found = state.search.found if state.search is not None else len(state.records)
        self._list_widget.set_counts(total=len(state.records), found=found)

    # ── Manager callbacks ──────────────────────────────────────────────────

    def _confirm(self, message: str) -> bool:
        answer = QMessageBox.question(self, "Confirm", message)
        return answer == QMessageBox.StandardButton.Yes

    def _show_notification(self, note: Notification) -> None:
        self._notification_vm.show(note)
        self._notification_label.setText(note.message)
        self._notification_label.setStyleSheet(_SEVERITY_STYLES[note.severity])
        self._notification_label.show()
        self._timed_note = note
        self._notification_timer.start(note.timeout_ms)

    def _dismiss_notification(self) -> None:
        if self._notification_vm.dismiss(self._timed_note):
            self._notification_label.hide()

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_submit(self) -> None:
        self._form_widget.set_busy(True)
        try:
            if self._manager.submit(self._form_widget.form()):
                self._form_widget.clear()
        finally:
            self._form_widget.set_busy(False)
        self._render()

    def _on_cancel(self) -> None:
        self._manager.cancel_edit()
        self._form_widget.clear()
        self._render()

    def _on_edit(self) -> None:
        record_id = self._list_widget.selected_id()
        if record_id is None:
            return
        form = self._manager.start_edit(record_id)
        if form is not None:
            self._form_widget.set_form(form)
        self._render()

    def _on_delete(self) -> None:
        record_id = self._list_widget.selected_id()
        if record_id is None:
            return
        editing = self._manager.state.form.record_id == record_id
        if self._manager.remove(record_id) and editing:
            self._form_widget.clear()
        self._render()

    def _on_search(self) -> None:
        self._manager.run_search(self._list_widget.search_text())
        self._render()

    def _on_clear_search(self) -> None:
        self._list_widget.clear_search_text()
        self._manager.clear_search()
        self._render()

    def _on_seed(self) -> None:
        self._manager.seed_sample_data()
        self._render()

    def _on_export(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Export students to…")
        if directory:
            self._manager.export_all(directory)

    def _on_import(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Import students", "", "JSON files (*.json)"
        )
        if path:
            if self._manager.import_file(path):
                self._form_widget.clear()
            self._render()


def run(config: Optional[AppConfig] = None) -> int:
    """Start the Qt event loop with a MainWindow; returns the exit code."""
    config = config or AppConfig()
    logging.getLogger("student_records").setLevel(config.log_level)
    app = QApplication.instance() or QApplication(sys.argv)
    win = MainWindow(config)
    win.show()
    return app.exec()
