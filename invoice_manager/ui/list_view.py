"""Invoice list page."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor, QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from invoice_manager.controller import InvoiceController
from invoice_manager.models import format_currency, format_date
from invoice_manager.reporting import InvoiceStatus, invoice_status, paid_percent

_STATUS_COLORS = {
    InvoiceStatus.PAID: "#2e7d32",
    InvoiceStatus.OVERDUE: "#c62828",
    InvoiceStatus.DUE_SOON: "#ef6c00",
    InvoiceStatus.ACTIVE: "#455a64",
}

_COLUMNS = ["Invoice", "Status", "Business", "Date", "Due", "Total", "Due Amount", "Paid"]


class InvoiceListView(QWidget):
    """Table of saved invoices with collection totals underneath."""

    def __init__(self, controller: InvoiceController, on_change: Callable[[], None]) -> None:
        super().__init__()
        self.controller = controller
        self.on_change = on_change
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()

        header = QHBoxLayout()
        title = QLabel("Invoice Management")
        title_font = QFont()
        title_font.setPointSize(18)
        title_font.setBold(True)
        title.setFont(title_font)
        header.addWidget(title)
        header.addStretch()
        self.new_button = QPushButton("New Invoice")
        self.new_button.clicked.connect(self._on_new)
        header.addWidget(self.new_button)
        layout.addLayout(header)

        self.empty_label = QLabel("No invoices yet. Create your first invoice to get started.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.table = QTableWidget(0, len(_COLUMNS))
        self.table.setHorizontalHeaderLabels(_COLUMNS)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.cellDoubleClicked.connect(lambda row, _col: self._on_edit())
        layout.addWidget(self.table, 1)

        actions = QHBoxLayout()
        actions.addStretch()
        self.preview_button = QPushButton("Preview")
        self.preview_button.clicked.connect(self._on_preview)
        self.edit_button = QPushButton("Edit")
        self.edit_button.clicked.connect(self._on_edit)
        self.delete_button = QPushButton("Delete")
        self.delete_button.clicked.connect(self._on_delete)
        for button in (self.preview_button, self.edit_button, self.delete_button):
            actions.addWidget(button)
        layout.addLayout(actions)

        summary_group = QGroupBox("Summary")
        summary_layout = QGridLayout()
        self.count_value = QLabel("0")
        self.value_value = QLabel("0.00")
        self.paid_value = QLabel("0.00")
        self.due_value = QLabel("0.00")
        for col, (label, value) in enumerate(
            [
                ("Total Invoices", self.count_value),
                ("Total Value", self.value_value),
                ("Total Paid", self.paid_value),
                ("Total Due", self.due_value),
            ]
        ):
            summary_layout.addWidget(QLabel(label), 0, col)
            summary_layout.addWidget(value, 1, col)
        summary_group.setLayout(summary_layout)
        layout.addWidget(summary_group)

        self.setLayout(layout)

    def refresh(self) -> None:
        invoices = self.controller.invoices
        self.table.setRowCount(len(invoices))
        for row, invoice in enumerate(invoices):
            status = invoice_status(invoice)
            values = [
                invoice.invoice_number,
                status.value,
                invoice.bill_to.name,
                format_date(invoice.issue_date),
                format_date(invoice.due_date),
                format_currency(invoice.total),
                format_currency(invoice.due_amount),
                f"{paid_percent(invoice):.0f}%",
            ]
            for col, value in enumerate(values):
                cell = QTableWidgetItem(value)
                if col == 0:
                    cell.setData(Qt.UserRole, invoice.id)
                if col == 1:
                    cell.setForeground(QColor(_STATUS_COLORS[status]))
                self.table.setItem(row, col, cell)
        self.table.resizeColumnsToContents()

        has_invoices = bool(invoices)
        self.empty_label.setVisible(not has_invoices)
        self.table.setVisible(has_invoices)
        for button in (self.preview_button, self.edit_button, self.delete_button):
            button.setEnabled(has_invoices)

        summary = self.controller.summary()
        self.count_value.setText(str(summary.count))
        self.value_value.setText(format_currency(summary.total_value))
        self.paid_value.setText(format_currency(summary.total_paid))
        self.due_value.setText(format_currency(summary.total_due))

    def _selected_id(self) -> Optional[str]:
        row = self.table.currentRow()
        if row < 0:
            return None
        cell = self.table.item(row, 0)
        return cell.data(Qt.UserRole) if cell else None

    def _on_new(self) -> None:
        if self.controller.new_invoice():
            self.on_change()

    def _on_edit(self) -> None:
        invoice_id = self._selected_id()
        if invoice_id and self.controller.edit_invoice(invoice_id):
            self.on_change()

    def _on_preview(self) -> None:
        invoice_id = self._selected_id()
        if invoice_id and self.controller.preview_invoice(invoice_id):
            self.on_change()

    def _on_delete(self) -> None:
        invoice_id = self._selected_id()
        if invoice_id and self.controller.delete_invoice(invoice_id):
            self.on_change()
