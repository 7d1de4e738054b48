"""Invoice printing via QTextDocument."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtGui import QTextDocument
from PyQt5.QtPrintSupport import QPrintDialog, QPrinter
from PyQt5.QtWidgets import QDialog, QWidget

from invoice_manager import config
from invoice_manager.models import Invoice
from invoice_manager.printing.invoice_html import build_invoice_html

logger = logging.getLogger(__name__)


class InvoicePrinter:
    """Render an invoice as HTML and send it to a printer."""

    def __init__(self, printer_name: str | None = None, parent: Optional[QWidget] = None) -> None:
        self.printer_name = printer_name if printer_name is not None else config.PRINTER_NAME
        self.parent = parent

    def print_invoice(self, invoice: Invoice) -> bool:
        """Send the invoice to the printer; returns True on success.

        Without a configured printer name the user picks one in a print
        dialog; cancelling the dialog returns False.
        """
        printer = QPrinter(QPrinter.HighResolution)
        if self.printer_name:
            printer.setPrinterName(self.printer_name)
        else:
            dialog = QPrintDialog(printer, self.parent)
            if dialog.exec_() != QDialog.Accepted:
                logger.info("Printing of invoice %s cancelled.", invoice.invoice_number)
                return False

        if not printer.isValid():
            logger.warning("Printer '%s' is not available.", printer.printerName())
            return False

        doc = QTextDocument()
        doc.setHtml(build_invoice_html(invoice))
        doc.print_(printer)
        logger.info("Sent invoice %s to printer '%s'.", invoice.invoice_number, printer.printerName())
        return printer.isValid()
