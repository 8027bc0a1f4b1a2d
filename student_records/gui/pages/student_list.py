"""
StudentListWidget — searchable, sortable table of students.

Layout
──────
  ┌─────────────────────────────────────────────────────────┐
  │ Search: [______________________] [Search] [Clear]       │
  │ ┌─────────────────────────────────────────────────────┐ │
  │ │ ID │ Enrollment file │ First │ Last │ Email │ Grade │ │
  │ │  1 │ MAT-2024-001    │ Juan  │ …    │ …     │ …     │ │
  │ └─────────────────────────────────────────────────────┘ │
  │ Total: 3   Found: 3                    [Edit] [Delete]  │
  └─────────────────────────────────────────────────────────┘

Clicking a header sorts by that column; clicking it again reverses.
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from student_records.gui.viewmodels import TABLE_COLUMNS, StudentTableViewModel
from student_records.store.models import StudentRecord

__all__ = ["StudentListWidget"]

logger = logging.getLogger(__name__)


class StudentListWidget(QWidget):
    """Search bar, student table, counters and the row actions."""

    def __init__(self, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = StudentTableViewModel()
        self._build_ui()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        layout.addWidget(QLabel("<b>Students</b>"))

        # Search bar
        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("Search:"))
        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Name, email, grade or enrollment file…")
        self._search_btn       = QPushButton("Search")
        self._clear_search_btn = QPushButton("Clear")
        search_row.addWidget(self._search_edit)
        search_row.addWidget(self._search_btn)
        search_row.addWidget(self._clear_search_btn)
        layout.addLayout(search_row)

        # Student table
        self._table = QTableWidget(0, len(TABLE_COLUMNS))
        self._table.setHorizontalHeaderLabels([header for _, header in TABLE_COLUMNS])
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self._table)

        # Counters + row actions
        bottom_row = QHBoxLayout()
        self._total_label = QLabel("Total: 0")
        self._found_label = QLabel("Found: 0")
        bottom_row.addWidget(self._total_label)
        bottom_row.addWidget(self._found_label)
        bottom_row.addStretch()
        self._edit_btn   = QPushButton("Edit")
        self._delete_btn = QPushButton("Delete")
        bottom_row.addWidget(self._edit_btn)
        bottom_row.addWidget(self._delete_btn)
        layout.addLayout(bottom_row)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_header_clicked(self, section: int) -> None:
        self._vm.sort_by(TABLE_COLUMNS[section][0])
        self._refresh_table()

    def _on_selection_changed(self) -> None:
        rows = self._table.selectionModel().selectedRows()
        if not rows:
            self._vm.select(None)
            return
        item = self._table.item(rows[0].row(), 0)
        self._vm.select(int(item.text()) if item and item.text() else None)

    def _refresh_table(self) -> None:
        records = self._vm.rows
        self._table.blockSignals(True)
        self._table.clearSelection()
        self._table.setRowCount(len(records))
        for row, rec in enumerate(records):
            for col, (attr, _) in enumerate(TABLE_COLUMNS):
                value = getattr(rec, attr)
                self._table.setItem(row, col, QTableWidgetItem("" if value is None else str(value)))
            if rec.id is not None and rec.id == self._vm.selected_id:
                self._table.selectRow(row)
        self._table.blockSignals(False)

    # ── Public API ─────────────────────────────────────────────────────────

    def show_records(self, records: list[StudentRecord]) -> None:
        """Populate the table with *records* in the current sort order."""
        self._vm.load(records)
        self._refresh_table()

    def set_counts(self, total: int, found: int) -> None:
        self._total_label.setText(f"Total: {total}")
        self._found_label.setText(f"Found: {found}")

    def search_text(self) -> str:
        return self._search_edit.text()

    def clear_search_text(self) -> None:
        self._search_edit.clear()

    def selected_id(self) -> Optional[int]:
        return self._vm.selected_id
