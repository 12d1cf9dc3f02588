"""PySide6 window for recording, editing and filtering expenses.

The window owns a single :class:`AppState` snapshot and replaces it with the
one returned by every :class:`LifecycleManager` call; widgets are redrawn from
that snapshot only. Filter widgets hold *pending* values that become the
applied filter when "Apply" is pressed.
"""

from __future__ import annotations

import logging

from expense_tracker.engine.config import Settings
from expense_tracker.engine.errors import ExpenseTrackerError, ValidationFailure
from expense_tracker.engine.filters import FilterSpec
from expense_tracker.engine.formatting import format_currency, format_date
from expense_tracker.engine.lifecycle import AppState, LifecycleManager
from expense_tracker.engine.records import CATEGORY_LABELS, MAX_AMOUNT, category_label

try:  # pragma: no cover - optional dependency
    from PySide6 import QtCore, QtWidgets
except ImportError:  # pragma: no cover - optional dependency
    QtCore = QtWidgets = None  # type: ignore[assignment]

LOG = logging.getLogger(__name__)

_ALL_CATEGORIES = "All categories"


class ExpenseMainWindow(QtWidgets.QMainWindow):  # type: ignore[misc]
    """Form-driven expense tracker window."""

    def __init__(self, *, settings: Settings, manager: LifecycleManager | None = None) -> None:
        if QtWidgets is None:  # pragma: no cover
            raise RuntimeError("PySide6 is required to launch the expense tracker GUI")
        super().__init__()
        self._settings = settings
        self._manager = manager or LifecycleManager(settings.build_store())
        self._state = AppState()

        self.setWindowTitle("Expense Tracker")
        self.resize(1040, 720)

        self._build_ui()
        self.refresh()

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        container = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QtWidgets.QLabel("Expense Tracker")
        header.setObjectName("Header")
        layout.addWidget(header)

        body = QtWidgets.QWidget()
        body_layout = QtWidgets.QVBoxLayout(body)
        body_layout.setContentsMargins(24, 24, 24, 24)
        body_layout.setSpacing(16)

        stats_row = QtWidgets.QHBoxLayout()
        self.total_label = QtWidgets.QLabel()
        self.total_label.setObjectName("TotalLabel")
        self.month_label = QtWidgets.QLabel()
        self.categories_label = QtWidgets.QLabel()
        stats_row.addWidget(self.total_label)
        stats_row.addWidget(self.month_label)
        stats_row.addStretch(1)
        stats_row.addWidget(self.categories_label)
        body_layout.addLayout(stats_row)

        body_layout.addWidget(self._build_filter_bar())

        self.table = QtWidgets.QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Date", "Title", "Category", "Amount"])
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setSelectionBehavior(QtWidgets.QTableWidget.SelectRows)
        self.table.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        self.table.itemDoubleClicked.connect(lambda _item: self.edit_selected())
        body_layout.addWidget(self.table)

        body_layout.addWidget(self._build_form())
        layout.addWidget(body)
        self.setCentralWidget(container)

    def _category_combo(self, *, with_all: bool) -> "QtWidgets.QComboBox":
        combo = QtWidgets.QComboBox()
        if with_all:
            combo.addItem(_ALL_CATEGORIES, "")
        for category, label in CATEGORY_LABELS.items():
            combo.addItem(label, category.value)
        return combo

    def _build_filter_bar(self) -> "QtWidgets.QGroupBox":
        box = QtWidgets.QGroupBox("Filter")
        row = QtWidgets.QHBoxLayout(box)
        self.filter_category = self._category_combo(with_all=True)
        self.filter_start = QtWidgets.QLineEdit()
        self.filter_start.setPlaceholderText("From (YYYY-MM-DD)")
        self.filter_end = QtWidgets.QLineEdit()
        self.filter_end.setPlaceholderText("To (YYYY-MM-DD)")
        apply_button = QtWidgets.QPushButton("Apply")
        apply_button.clicked.connect(self.apply_filters)
        clear_button = QtWidgets.QPushButton("Clear")
        clear_button.setObjectName("SecondaryButton")
        clear_button.clicked.connect(self.clear_filters)
        self.filter_summary = QtWidgets.QLabel()
        for widget in (self.filter_category, self.filter_start, self.filter_end, apply_button, clear_button):
            row.addWidget(widget)
        row.addStretch(1)
        row.addWidget(self.filter_summary)
        return box

    def _build_form(self) -> "QtWidgets.QGroupBox":
        self.form_card = QtWidgets.QGroupBox("Add new expense")
        grid = QtWidgets.QGridLayout(self.form_card)
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(12)

        self.title_edit = QtWidgets.QLineEdit()
        self.title_edit.setPlaceholderText("Title")
        self.category_combo = self._category_combo(with_all=False)
        self.amount_spin = QtWidgets.QDoubleSpinBox()
        self.amount_spin.setRange(0, MAX_AMOUNT)
        self.amount_spin.setPrefix(self._settings.currency_symbol)
        self.amount_spin.setDecimals(2)
        self.amount_spin.setSingleStep(1.0)
        self.date_edit = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("d MMM yyyy")

        self.submit_button = QtWidgets.QPushButton("Add expense")
        self.submit_button.clicked.connect(self.submit)
        self.cancel_button = QtWidgets.QPushButton("Cancel edit")
        self.cancel_button.setObjectName("SecondaryButton")
        self.cancel_button.clicked.connect(self.cancel_edit)
        self.cancel_button.setVisible(False)
        edit_button = QtWidgets.QPushButton("Edit selected")
        edit_button.clicked.connect(self.edit_selected)
        delete_button = QtWidgets.QPushButton("Delete selected")
        delete_button.setObjectName("DangerButton")
        delete_button.clicked.connect(self.delete_selected)

        grid.addWidget(QtWidgets.QLabel("Title"), 0, 0)
        grid.addWidget(self.title_edit, 0, 1)
        grid.addWidget(QtWidgets.QLabel("Category"), 1, 0)
        grid.addWidget(self.category_combo, 1, 1)
        grid.addWidget(QtWidgets.QLabel("Amount"), 2, 0)
        grid.addWidget(self.amount_spin, 2, 1)
        grid.addWidget(QtWidgets.QLabel("Date"), 3, 0)
        grid.addWidget(self.date_edit, 3, 1)
        buttons = QtWidgets.QHBoxLayout()
        for button in (self.submit_button, self.cancel_button, edit_button, delete_button):
            buttons.addWidget(button)
        grid.addLayout(buttons, 4, 0, 1, 2)
        return self.form_card

    # ------------------------------------------------------------------
    def _set_state(self, state: AppState) -> None:
        self._state = state
        self._render()

    def _render(self) -> None:
        symbol = self._settings.currency_symbol
        visible = self._manager.visible(self._state)
        self.table.setRowCount(0)
        for record in visible:
            row = self.table.rowCount()
            self.table.insertRow(row)
            date_item = QtWidgets.QTableWidgetItem(format_date(record.date))
            date_item.setData(QtCore.Qt.UserRole, record.id)
            self.table.setItem(row, 0, date_item)
            self.table.setItem(row, 1, QtWidgets.QTableWidgetItem(record.title))
            self.table.setItem(row, 2, QtWidgets.QTableWidgetItem(category_label(record.category)))
            amount_item = QtWidgets.QTableWidgetItem(format_currency(record.amount, symbol))
            amount_item.setTextAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
            self.table.setItem(row, 3, amount_item)
            self.table.setRowHeight(row, 36)

        stats = self._manager.statistics(self._state)
        self.total_label.setText(f"Total: {format_currency(stats.total, symbol)}")
        self.month_label.setText(f"This month: {format_currency(stats.current_month_total, symbol)}")
        top = [f"{item.label} {format_currency(item.total, symbol)}" for item in stats.per_category_totals if item.total > 0]
        self.categories_label.setText(" · ".join(top[:3]))
        self.filter_summary.setText(f"{len(visible)} of {stats.count} shown")

        editing = self._state.editing_id is not None
        self.form_card.setTitle("Edit expense" if editing else "Add new expense")
        self.submit_button.setText("Save changes" if editing else "Add expense")
        self.cancel_button.setVisible(editing)

    def _report(self, title: str, exc: ExpenseTrackerError) -> None:
        LOG.warning("%s: %s", title, exc)
        if exc.state is not None:
            self._set_state(exc.state)
        if isinstance(exc, ValidationFailure):
            QtWidgets.QMessageBox.warning(self, "Validation", "\n".join(exc.errors))
        else:
            QtWidgets.QMessageBox.critical(self, title, str(exc))

    def _selected_id(self) -> int | None:
        rows = self.table.selectionModel().selectedRows()
        if not rows:
            return None
        return self.table.item(rows[0].row(), 0).data(QtCore.Qt.UserRole)

    def _reset_form(self) -> None:
        self.title_edit.clear()
        self.amount_spin.setValue(0.0)
        self.category_combo.setCurrentIndex(0)
        self.date_edit.setDate(QtCore.QDate.currentDate())

    # ------------------------------------------------------------------
    def refresh(self) -> None:
        try:
            self._set_state(self._manager.reconcile(self._state))
        except ExpenseTrackerError as exc:
            self._report("Connection error", exc)

    def submit(self) -> None:
        values = {
            "title": self.title_edit.text(),
            "amount": self.amount_spin.value(),
            "category": self.category_combo.currentData(),
            "date": self.date_edit.date().toString("yyyy-MM-dd"),
        }
        try:
            state = self._manager.submit(self._state, values, editing_id=self._state.editing_id)
        except ExpenseTrackerError as exc:
            self._report("Could not save expense", exc)
            return
        self._reset_form()
        self._set_state(state)

    def edit_selected(self) -> None:
        record_id = self._selected_id()
        if record_id is None:
            QtWidgets.QMessageBox.information(self, "Edit", "Select a row to edit")
            return
        try:
            state = self._manager.begin_edit(self._state, record_id)
        except ExpenseTrackerError as exc:
            self._report("Edit", exc)
            return
        record = state.find(record_id)
        if record.amount > self.amount_spin.maximum():
            # The spin box would clamp the value and the save would overwrite it.
            QtWidgets.QMessageBox.warning(self, "Edit", "This amount is too large to edit in the form")
            return
        self.title_edit.setText(record.title)
        self.amount_spin.setValue(record.amount)
        self.category_combo.setCurrentIndex(self.category_combo.findData(record.category.value))
        self.date_edit.setDate(QtCore.QDate(record.date.year, record.date.month, record.date.day))
        self._set_state(state)

    def cancel_edit(self) -> None:
        self._reset_form()
        self._set_state(self._manager.cancel_edit(self._state))

    def delete_selected(self) -> None:
        record_id = self._selected_id()
        if record_id is None:
            QtWidgets.QMessageBox.information(self, "Delete", "Select a row to delete")
            return
        confirm = QtWidgets.QMessageBox.question(
            self,
            "Confirm delete",
            "Delete the selected expense?",
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
        )
        if confirm != QtWidgets.QMessageBox.Yes:
            return
        try:
            state = self._manager.remove(self._state, record_id)
        except ExpenseTrackerError as exc:
            self._report("Could not delete expense", exc)
            return
        if state.editing_id is None and self._state.editing_id == record_id:
            self._reset_form()
        self._set_state(state)

    def apply_filters(self) -> None:
        try:
            spec = FilterSpec.from_values(
                {
                    "category": self.filter_category.currentData(),
                    "start_date": self.filter_start.text(),
                    "end_date": self.filter_end.text(),
                }
            )
        except ValidationFailure as exc:
            self._report("Filter", exc)
            return
        self._set_state(self._manager.set_filter(self._state, spec))

    def clear_filters(self) -> None:
        self.filter_category.setCurrentIndex(0)
        self.filter_start.clear()
        self.filter_end.clear()
        self._set_state(self._manager.set_filter(self._state, FilterSpec()))


__all__ = ["ExpenseMainWindow"]
