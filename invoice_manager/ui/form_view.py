"""Invoice editing page."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from PyQt5.QtCore import QDate, Qt, QTimer
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QDateEdit,
    QDoubleSpinBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from invoice_manager.controller import Editing, InvoiceController
from invoice_manager.models import Invoice, format_currency, invoice_to_dict
from invoice_manager.reporting import paid_percent, payment_progress
from invoice_manager.totals import DESCRIPTION_FIELD, PRICE_FIELD, QUANTITY_FIELD

# Line item table columns; None marks the read-only subtotal.
_ITEM_COLUMNS = [
    ("Description", DESCRIPTION_FIELD),
    ("Price", PRICE_FIELD),
    ("Quantity", QUANTITY_FIELD),
    ("Subtotal", None),
]


def _lookup(document: Dict[str, Any], path: str) -> Any:
    for part in path.split("."):
        document = document[part]
    return document


class InvoiceFormView(QWidget):
    """Form for the draft held by the controller.

    Every edit is sent to the controller straight away; the form only
    re-reads the whole draft when the page is shown.
    """

    def __init__(self, controller: InvoiceController, on_change: Callable[[], None]) -> None:
        super().__init__()
        self.controller = controller
        self.on_change = on_change
        self._populating = False
        self._line_edits: Dict[str, QLineEdit] = {}
        self._text_edits: Dict[str, QPlainTextEdit] = {}
        self._date_edits: Dict[str, QDateEdit] = {}
        self._spins: Dict[str, QDoubleSpinBox] = {}
        self._build_ui()

    # Widgets bound to a draft field

    def _line_edit(self, path: str) -> QLineEdit:
        widget = QLineEdit()
        widget.textEdited.connect(lambda text, path=path: self._set_field(path, text))
        self._line_edits[path] = widget
        return widget

    def _text_edit(self, path: str) -> QPlainTextEdit:
        widget = QPlainTextEdit()
        widget.setMaximumHeight(70)
        widget.textChanged.connect(lambda path=path, widget=widget: self._set_field(path, widget.toPlainText()))
        self._text_edits[path] = widget
        return widget

    def _date_edit(self, path: str) -> QDateEdit:
        widget = QDateEdit()
        widget.setCalendarPopup(True)
        widget.setDisplayFormat("dd MMM yyyy")
        widget.dateChanged.connect(lambda value, path=path: self._set_field(path, value.toPyDate()))
        self._date_edits[path] = widget
        return widget

    def _spin(self, path: str, maximum: float) -> QDoubleSpinBox:
        widget = QDoubleSpinBox()
        widget.setRange(0, maximum)
        widget.setDecimals(2)
        widget.valueChanged.connect(lambda value, path=path: self._set_field(path, value))
        self._spins[path] = widget
        return widget

    def _build_ui(self) -> None:
        layout = QVBoxLayout()

        top = QHBoxLayout()
        back_button = QPushButton("Back to Invoices")
        back_button.clicked.connect(self._on_back)
        title = QLabel("Invoice Generator")
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        title.setFont(title_font)
        preview_button = QPushButton("Preview")
        preview_button.clicked.connect(self._on_preview)
        save_button = QPushButton("Save Invoice")
        save_button.clicked.connect(self._on_save)
        top.addWidget(back_button)
        top.addWidget(title)
        top.addStretch()
        top.addWidget(preview_button)
        top.addWidget(save_button)
        layout.addLayout(top)

        grid = QGridLayout()
        grid.addWidget(self._build_details_group(), 0, 0)
        grid.addWidget(self._build_bill_to_group(), 0, 1)
        grid.addWidget(self._build_remit_to_group(), 0, 2)
        grid.addWidget(self._build_tax_group(), 1, 0)
        grid.addWidget(self._build_payment_group(), 1, 1)
        grid.addWidget(self._build_terms_group(), 1, 2)
        layout.addLayout(grid)
        layout.addWidget(self._build_items_group(), 1)

        self.setLayout(layout)

    def _build_details_group(self) -> QGroupBox:
        group = QGroupBox("Invoice Details")
        form = QFormLayout()
        form.addRow("Invoice Number", self._line_edit("invoiceNumber"))
        form.addRow("Date", self._date_edit("issueDate"))
        form.addRow("Due Date", self._date_edit("dueDate"))
        group.setLayout(form)
        return group

    def _build_bill_to_group(self) -> QGroupBox:
        group = QGroupBox("Bill To")
        form = QFormLayout()
        form.addRow("Business Name", self._line_edit("billTo.name"))
        form.addRow("Email", self._line_edit("billTo.email"))
        form.addRow("Address", self._text_edit("billTo.address"))
        group.setLayout(form)
        return group

    def _build_remit_to_group(self) -> QGroupBox:
        group = QGroupBox("Payment Information")
        form = QFormLayout()
        form.addRow("Your Name", self._line_edit("remitTo.name"))
        form.addRow("Your Email", self._line_edit("remitTo.email"))
        form.addRow("Address", self._text_edit("remitTo.address"))
        form.addRow("Bank Details", self._text_edit("remitTo.bankDetails"))
        form.addRow("Contact", self._line_edit("remitTo.contact"))
        group.setLayout(form)
        return group

    def _build_tax_group(self) -> QGroupBox:
        group = QGroupBox("Tax & Discount")
        form = QFormLayout()
        form.addRow("Discount (%)", self._spin("discountPercent", 100))
        form.addRow("SGST (%)", self._spin("sgstPercent", 100))
        form.addRow("CGST (%)", self._spin("cgstPercent", 100))
        group.setLayout(form)
        return group

    def _build_payment_group(self) -> QGroupBox:
        group = QGroupBox("Payment Status")
        form = QFormLayout()
        form.addRow("Paid Amount", self._spin("paidAmount", 1_000_000_000))
        self.subtotal_value = QLabel("0.00")
        self.discount_value = QLabel("0.00")
        self.sgst_value = QLabel("0.00")
        self.cgst_value = QLabel("0.00")
        self.total_value = QLabel("0.00")
        self.due_value = QLabel("0.00")
        due_font = QFont()
        due_font.setBold(True)
        self.due_value.setFont(due_font)
        form.addRow("Subtotal", self.subtotal_value)
        form.addRow("Discount", self.discount_value)
        form.addRow("SGST", self.sgst_value)
        form.addRow("CGST", self.cgst_value)
        form.addRow("Total Amount", self.total_value)
        form.addRow("Due Amount", self.due_value)
        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(False)
        self.progress_label = QLabel("0.0% paid")
        form.addRow("Payment Progress", self.progress)
        form.addRow("", self.progress_label)
        group.setLayout(form)
        return group

    def _build_terms_group(self) -> QGroupBox:
        group = QGroupBox("Payment & Terms")
        form = QFormLayout()
        form.addRow("Instructions", self._text_edit("paymentInstructions"))
        form.addRow("Payment Label", self._line_edit("paymentLabel"))
        form.addRow("Terms Title", self._line_edit("termsTitle"))
        form.addRow("Notes", self._text_edit("notes"))
        group.setLayout(form)
        return group

    def _build_items_group(self) -> QGroupBox:
        group = QGroupBox("Invoice Items")
        layout = QVBoxLayout()

        self.items_table = QTableWidget(0, len(_ITEM_COLUMNS))
        self.items_table.setHorizontalHeaderLabels([label for label, _ in _ITEM_COLUMNS])
        self.items_table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.items_table.horizontalHeader().setStretchLastSection(True)
        self.items_table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.items_table, 1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        add_button = QPushButton("Add Item")
        add_button.clicked.connect(self._on_add_item)
        self.remove_button = QPushButton("Remove Item")
        self.remove_button.clicked.connect(self._on_remove_item)
        buttons.addWidget(add_button)
        buttons.addWidget(self.remove_button)
        layout.addLayout(buttons)

        group.setLayout(layout)
        return group

    # Rendering

    @property
    def draft(self) -> Optional[Invoice]:
        state = self.controller.state
        return state.draft if isinstance(state, Editing) else None

    def refresh(self) -> None:
        draft = self.draft
        if draft is None:
            return
        self._populating = True
        try:
            document = invoice_to_dict(draft)
            for path, widget in self._line_edits.items():
                widget.setText(str(_lookup(document, path)))
            for path, widget in self._text_edits.items():
                widget.setPlainText(str(_lookup(document, path)))
            for path, value in (("issueDate", draft.issue_date), ("dueDate", draft.due_date)):
                self._date_edits[path].setDate(QDate(value.year, value.month, value.day))
            for path, widget in self._spins.items():
                widget.setValue(float(_lookup(document, path)))
            self._refresh_items()
        finally:
            self._populating = False
        self._update_totals()

    def _refresh_items(self) -> None:
        was_populating = self._populating
        self._populating = True
        try:
            items = self.draft.line_items
            self.items_table.setRowCount(len(items))
            for row, item in enumerate(items):
                values = [item.description, format_currency(item.unit_price), str(item.quantity)]
                for col, value in enumerate(values):
                    cell = QTableWidgetItem(value)
                    cell.setData(Qt.UserRole, item.id)
                    self.items_table.setItem(row, col, cell)
                subtotal = QTableWidgetItem(format_currency(item.subtotal))
                subtotal.setFlags(subtotal.flags() & ~Qt.ItemIsEditable)
                self.items_table.setItem(row, len(_ITEM_COLUMNS) - 1, subtotal)
            self.items_table.resizeColumnsToContents()
            self.remove_button.setEnabled(len(items) > 1)
        finally:
            self._populating = was_populating

    def _update_totals(self) -> None:
        draft = self.draft
        totals = self.controller.totals
        if draft is None or totals is None:
            return
        self.subtotal_value.setText(format_currency(totals.subtotal))
        self.discount_value.setText(f"-{format_currency(totals.discount_amount)}")
        self.sgst_value.setText(format_currency(totals.sgst_amount))
        self.cgst_value.setText(format_currency(totals.cgst_amount))
        self.total_value.setText(format_currency(draft.total))
        self.due_value.setText(format_currency(draft.due_amount))
        self.progress.setValue(int(payment_progress(draft)))
        self.progress_label.setText(f"{paid_percent(draft):.1f}% paid")

    # Edits

    def _set_field(self, path: str, value: Any) -> None:
        if self._populating:
            return
        self.controller.set_field(path, value)
        self._update_totals()

    def _on_item_changed(self, cell: QTableWidgetItem) -> None:
        if self._populating:
            return
        field = _ITEM_COLUMNS[cell.column()][1]
        if field is None:
            return
        self.controller.update_line_item(cell.data(Qt.UserRole), field, cell.text())
        # Redraw once the signal returns so rejected input reverts and the
        # subtotal follows.
        QTimer.singleShot(0, self._redraw_items)

    def _redraw_items(self) -> None:
        if self.draft is None:
            return
        self._refresh_items()
        self._update_totals()

    def _on_add_item(self) -> None:
        if self.controller.add_line_item():
            self._refresh_items()
            self._update_totals()

    def _on_remove_item(self) -> None:
        row = self.items_table.currentRow()
        if row < 0:
            return
        cell = self.items_table.item(row, 0)
        if cell and self.controller.remove_line_item(cell.data(Qt.UserRole)):
            self._refresh_items()
            self._update_totals()

    # Navigation

    def _on_back(self) -> None:
        if self.controller.back_to_list():
            self.on_change()

    def _on_preview(self) -> None:
        if self.controller.preview():
            self.on_change()

    def _on_save(self) -> None:
        if self.controller.save_invoice():
            self.on_change()
