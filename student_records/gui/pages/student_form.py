"""
StudentFormWidget — create / edit form for one student.

Layout
──────
  ┌─────────────────────────────────────────┐
  │ First name:      [____________________] │
  │ Last name:       [____________________] │
  │ Email:           [____________________] │
  │ Enrollment file: [____________________] │
  │ Grade:           [Select a grade…   ▼]  │
  │                 [Add] [Update] [Cancel] │
  └─────────────────────────────────────────┘

Add is visible in create mode; Update and Cancel in edit mode.
"""

import logging

from PyQt6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from student_records.manager.models import FormState, StudentForm
from student_records.store.models import GRADE_LABELS

__all__ = ["StudentFormWidget"]

logger = logging.getLogger(__name__)

_GRADE_PLACEHOLDER = "Select a grade…"


class StudentFormWidget(QWidget):
    """Input fields plus the Add / Update / Cancel buttons."""

    def __init__(self, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._build_ui()
        self.set_mode(FormState.creating())

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self._title = QLabel()
        layout.addWidget(self._title)

        fields = QFormLayout()
        self._first_name_edit = QLineEdit()
        self._last_name_edit  = QLineEdit()
        self._email_edit      = QLineEdit()
        self._email_edit.setPlaceholderText("name@school.edu")
        self._enrollment_edit = QLineEdit()
        self._enrollment_edit.setPlaceholderText("MAT-2024-001")
        self._grade_combo     = QComboBox()
        self._grade_combo.addItem(_GRADE_PLACEHOLDER)
        self._grade_combo.addItems(list(GRADE_LABELS))

        fields.addRow("First name:",      self._first_name_edit)
        fields.addRow("Last name:",       self._last_name_edit)
        fields.addRow("Email:",           self._email_edit)
        fields.addRow("Enrollment file:", self._enrollment_edit)
        fields.addRow("Grade:",           self._grade_combo)
        layout.addLayout(fields)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._add_btn    = QPushButton("Add")
        self._update_btn = QPushButton("Update")
        self._cancel_btn = QPushButton("Cancel")
        btn_row.addWidget(self._add_btn)
        btn_row.addWidget(self._update_btn)
        btn_row.addWidget(self._cancel_btn)
        layout.addLayout(btn_row)

    # ── Public API ─────────────────────────────────────────────────────────

    def form(self) -> StudentForm:
        """Current input, untrimmed; validation happens in the manager."""
        grade = self._grade_combo.currentText()
        return StudentForm(
            first_name=self._first_name_edit.text(),
            last_name=self._last_name_edit.text(),
            email=self._email_edit.text(),
            grade="" if grade == _GRADE_PLACEHOLDER else grade,
            enrollment_file=self._enrollment_edit.text(),
        )

    def set_form(self, form: StudentForm) -> None:
        self._first_name_edit.setText(form.first_name)
        self._last_name_edit.setText(form.last_name)
        self._email_edit.setText(form.email)
        self._enrollment_edit.setText(form.enrollment_file)
        index = self._grade_combo.findText(form.grade)
        self._grade_combo.setCurrentIndex(max(index, 0))

    def clear(self) -> None:
        self.set_form(StudentForm())

    def set_mode(self, state: FormState) -> None:
        editing = state.is_editing
        self._title.setText(
            f"<b>Edit student #{state.record_id}</b>" if editing else "<b>New student</b>"
        )
        self._add_btn.setVisible(not editing)
        self._update_btn.setVisible(editing)
        self._cancel_btn.setVisible(editing)

    def set_busy(self, busy: bool) -> None:
        for btn in (self._add_btn, self._update_btn):
            btn.setEnabled(not busy)
