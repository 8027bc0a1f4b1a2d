"""
Unit tests for student_records/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

Coverage plan
─────────────
StudentFormWidget → form read/write, mode buttons
StudentListWidget → table population, sorting, counters
MainWindow        → initialization, add / edit / delete / search wiring,
                    import wiring, notification auto-dismiss
"""

import os

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PyQt6 = pytest.importorskip("PyQt6", reason="PyQt6 not installed")


# ─────────────────────────────────────────────────────────────────────────────
# 1. StudentFormWidget
# ─────────────────────────────────────────────────────────────────────────────

class TestStudentFormWidget:

    def test_empty_form_has_blank_grade(self, qtbot):
        from student_records.gui.pages.student_form import StudentFormWidget
        widget = StudentFormWidget()
        qtbot.addWidget(widget)
        form = widget.form()
        assert form.grade == ""
        assert form.first_name == ""

    def test_set_form_round_trips(self, qtbot):
        from student_records.gui.pages.student_form import StudentFormWidget
        from student_records.manager.models import StudentForm
        widget = StudentFormWidget()
        qtbot.addWidget(widget)
        form = StudentForm("Ana", "Torres", "ana@x.com", "2do Primaria", "MAT-1")
        widget.set_form(form)
        assert widget.form() == form
        widget.clear()
        assert widget.form() == StudentForm()

    def test_mode_toggles_buttons(self, qtbot):
        from student_records.gui.pages.student_form import StudentFormWidget
        from student_records.manager.models import FormState
        widget = StudentFormWidget()
        qtbot.addWidget(widget)
        assert not widget._add_btn.isHidden()
        assert widget._update_btn.isHidden()
        widget.set_mode(FormState.editing(3))
        assert widget._add_btn.isHidden()
        assert not widget._update_btn.isHidden()
        assert not widget._cancel_btn.isHidden()


# ─────────────────────────────────────────────────────────────────────────────
# 2. StudentListWidget
# ─────────────────────────────────────────────────────────────────────────────

class TestStudentListWidget:

    def _records(self):
        from student_records.store.models import StudentRecord
        return [
            StudentRecord("Juan", "Pérez", "juan@x.com", "5to Primaria", "MAT-2", id=1),
            StudentRecord("Ana", "López", "ana@x.com", "3ro Secundaria", "MAT-1", id=2),
        ]

    def test_show_records_fills_table(self, qtbot):
        from student_records.gui.pages.student_list import StudentListWidget
        widget = StudentListWidget()
        qtbot.addWidget(widget)
        widget.show_records(self._records())
        assert widget._table.rowCount() == 2
        assert widget._table.item(0, 2).text() == "Juan"

    def test_header_click_sorts(self, qtbot):
        from student_records.gui.pages.student_list import StudentListWidget
        widget = StudentListWidget()
        qtbot.addWidget(widget)
        widget.show_records(self._records())
        widget._on_header_clicked(2)  # first_name
        assert widget._table.item(0, 2).text() == "Ana"

    def test_row_selection_sets_selected_id(self, qtbot):
        from student_records.gui.pages.student_list import StudentListWidget
        widget = StudentListWidget()
        qtbot.addWidget(widget)
        widget.show_records(self._records())
        widget._table.selectRow(1)
        assert widget.selected_id() == 2

    def test_set_counts(self, qtbot):
        from student_records.gui.pages.student_list import StudentListWidget
        widget = StudentListWidget()
        qtbot.addWidget(widget)
        widget.set_counts(total=5, found=2)
        assert widget._total_label.text() == "Total: 5"
        assert widget._found_label.text() == "Found: 2"


# ─────────────────────────────────────────────────────────────────────────────
# 3. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def _make_window(self, tmp_path, qtbot, **overrides):
        from student_records.config import AppConfig
        from student_records.gui.main_window import MainWindow
        config = AppConfig(db_path=str(tmp_path / "gui.db"), **overrides)
        win = MainWindow(config)
        qtbot.addWidget(win)
        win._manager._confirm = lambda message: True
        return win

    def test_first_run_shows_sample_students(self, tmp_path, qtbot):
        win = self._make_window(tmp_path, qtbot)
        assert win._list_widget._table.rowCount() == 3
        assert win._list_widget._total_label.text() == "Total: 3"

    def test_add_student_through_form(self, tmp_path, qtbot):
        from student_records.manager.models import StudentForm
        win = self._make_window(tmp_path, qtbot, seed_on_first_run=False)
        win._form_widget.set_form(
            StudentForm("Ana", "Torres", "ana@x.com", "2do Primaria", "MAT-1")
        )
        win._form_widget._add_btn.click()
        assert win._list_widget._table.rowCount() == 1
        assert win._form_widget.form().first_name == ""

    def test_invalid_form_shows_error_notification(self, tmp_path, qtbot):
        from student_records.manager.models import Severity
        win = self._make_window(tmp_path, qtbot, seed_on_first_run=False)
        win._form_widget._add_btn.click()
        assert win._notification_vm.current.severity is Severity.ERROR
        assert not win._notification_label.isHidden()

    def test_edit_selected_student(self, tmp_path, qtbot):
        win = self._make_window(tmp_path, qtbot)
        win._list_widget._table.selectRow(0)
        win._list_widget._edit_btn.click()
        assert win._manager.state.form.is_editing
        assert win._form_widget.form().first_name == "Juan"

        win._form_widget._first_name_edit.setText("Juanito")
        win._form_widget._update_btn.click()
        assert win._manager.state.form.is_editing is False
        assert win._list_widget._table.item(0, 2).text() == "Juanito"

    def test_delete_selected_student(self, tmp_path, qtbot):
        win = self._make_window(tmp_path, qtbot)
        win._list_widget._table.selectRow(0)
        win._list_widget._delete_btn.click()
        assert win._list_widget._table.rowCount() == 2

    def test_search_updates_found_counter(self, tmp_path, qtbot):
        win = self._make_window(tmp_path, qtbot)
        win._list_widget._search_edit.setText("maría")
        win._list_widget._search_btn.click()
        assert win._list_widget._table.rowCount() == 1
        assert win._list_widget._found_label.text() == "Found: 1"
        assert win._list_widget._total_label.text() == "Total: 3"

        win._list_widget._clear_search_btn.click()
        assert win._list_widget._table.rowCount() == 3

    def test_notification_auto_dismisses(self, tmp_path, qtbot):
        win = self._make_window(tmp_path, qtbot, notification_timeout_ms=50)
        win._form_widget._add_btn.click()
        qtbot.waitUntil(lambda: win._notification_label.isHidden(), timeout=2000)

    def test_unopenable_database_disables_data_actions(self, tmp_path, qtbot):
        from student_records.config import AppConfig
        from student_records.gui.main_window import MainWindow
        bad = tmp_path / "bad.db"
        bad.write_bytes(b"garbage" * 200)
        win = MainWindow(AppConfig(db_path=str(bad)))
        qtbot.addWidget(win)
        assert win._seed_btn.isEnabled() is False
        assert win._form_widget.isEnabled() is False

    def test_declined_import_keeps_form_in_edit_mode(self, tmp_path, qtbot, monkeypatch):
        from PyQt6.QtWidgets import QFileDialog
        win = self._make_window(tmp_path, qtbot)
        backup = tmp_path / "backup.json"
        backup.write_bytes(win._store.export_all())

        win._list_widget._table.selectRow(0)
        win._list_widget._edit_btn.click()
        win._manager._confirm = lambda message: False
        monkeypatch.setattr(QFileDialog, "getOpenFileName",
                            lambda *args, **kwargs: (str(backup), ""))
        win._import_btn.click()

        assert win._manager.state.form.is_editing
        assert win._form_widget.form().first_name == "Juan"
        assert not win._form_widget._update_btn.isHidden()

    def test_expired_timer_keeps_newer_notification(self, tmp_path, qtbot):
        from student_records.manager.models import Notification
        win = self._make_window(tmp_path, qtbot, seed_on_first_run=False)
        old, new = Notification("old"), Notification("new")
        win._show_notification(old)
        win._notification_vm.show(new)
        win._dismiss_notification()
        assert win._notification_vm.current is new
        assert not win._notification_label.isHidden()
