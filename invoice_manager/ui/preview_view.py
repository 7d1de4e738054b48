"""Read-only, print-styled invoice page."""

from __future__ import annotations

from typing import Callable

from PyQt5.QtWidgets import QHBoxLayout, QMessageBox, QPushButton, QTextBrowser, QVBoxLayout, QWidget

from invoice_manager.controller import Editing, InvoiceController, Previewing
from invoice_manager.printing.invoice_html import build_invoice_html
from invoice_manager.printing.invoice_printer import InvoicePrinter


class InvoicePreviewView(QWidget):
    def __init__(self, controller: InvoiceController, on_change: Callable[[], None]) -> None:
        super().__init__()
        self.controller = controller
        self.on_change = on_change
        self.printer = InvoicePrinter(parent=self)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.browser = QTextBrowser()
        layout.addWidget(self.browser, 1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.back_button = QPushButton("Back")
        self.back_button.clicked.connect(self._on_back)
        self.print_button = QPushButton("Print Invoice")
        self.print_button.clicked.connect(self._on_print)
        buttons.addWidget(self.back_button)
        buttons.addWidget(self.print_button)
        layout.addLayout(buttons)
        self.setLayout(layout)

    def refresh(self) -> None:
        state = self.controller.state
        if not isinstance(state, Previewing):
            return
        self.browser.setHtml(build_invoice_html(state.invoice))
        if isinstance(state.returns_to, Editing):
            self.back_button.setText("Back to Edit")
        else:
            self.back_button.setText("Back to Invoices")

    def _on_back(self) -> None:
        if self.controller.back():
            self.on_change()

    def _on_print(self) -> None:
        invoice = self.controller.active_invoice
        if invoice is None:
            return
        try:
            printed = self.printer.print_invoice(invoice)
        except Exception as exc:  # noqa: BLE001 - surface printer issues to user
            QMessageBox.critical(self, "Print Failed", f"Could not print the invoice:\n{exc}")
            return
        # A cancelled print dialog is not a failure.
        if not printed and self.printer.printer_name:
            QMessageBox.critical(self, "Print Failed", "Printer is not available or failed to print.")
