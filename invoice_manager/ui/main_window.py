"""Main PyQt window for the Invoice Manager."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtWidgets import QMainWindow, QMessageBox, QStackedWidget

from invoice_manager import config
from invoice_manager.controller import Editing, InvoiceController, Listing
from invoice_manager.data.store import InvoiceStore, create_store
from invoice_manager.ui.form_view import InvoiceFormView
from invoice_manager.ui.list_view import InvoiceListView
from invoice_manager.ui.preview_view import InvoicePreviewView


class MainWindow(QMainWindow):
    """Shows the page matching the controller's current view."""

    def __init__(self, store: Optional[InvoiceStore] = None) -> None:
        super().__init__()
        self.setWindowTitle(config.WINDOW_TITLE)
        self.resize(1200, 800)

        self.controller = InvoiceController(store or create_store(), notifier=self._notify)
        self._build_ui()
        self._render()

    def _build_ui(self) -> None:
        self.stack = QStackedWidget()
        self.list_view = InvoiceListView(self.controller, self._render)
        self.form_view = InvoiceFormView(self.controller, self._render)
        self.preview_view = InvoicePreviewView(self.controller, self._render)
        for view in (self.list_view, self.form_view, self.preview_view):
            self.stack.addWidget(view)
        self.setCentralWidget(self.stack)
        self.statusBar()

    def _render(self) -> None:
        state = self.controller.state
        if isinstance(state, Listing):
            view = self.list_view
        elif isinstance(state, Editing):
            view = self.form_view
        else:
            view = self.preview_view
        view.refresh()
        self.stack.setCurrentWidget(view)

    def _notify(self, message: str, success: bool) -> None:
        if success:
            self.statusBar().showMessage(message, 4000)
        else:
            QMessageBox.critical(self, "Error", message)
