"""Invoice collection owner and list/edit/preview navigation.

The controller is the only code that changes the invoice collection and the
only caller of the store. Every change to the collection is followed by a
full save. The UI reads ``state``, ``invoices`` and ``active_invoice`` and
calls the intent methods; each intent returns True when it was applied and
False when it did not fit the current state or was rejected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional, Tuple, Union

from invoice_manager import config, editor
from invoice_manager.data.store import InvoiceStore
from invoice_manager.editor import InvalidMutation
from invoice_manager.models import Invoice, new_invoice
from invoice_manager.reporting import CollectionSummary, summarize
from invoice_manager.totals import Totals, compute_totals, recalculate

logger = logging.getLogger(__name__)

# Receives a user-facing message and whether it reports success.
Notifier = Callable[[str, bool], None]


@dataclass(frozen=True)
class Listing:
    """The invoice list; nothing selected."""


@dataclass(frozen=True)
class Editing:
    draft: Invoice


@dataclass(frozen=True)
class Previewing:
    invoice: Invoice
    returns_to: Union[Listing, Editing]


ViewState = Union[Listing, Editing, Previewing]


def _log_notification(message: str, success: bool) -> None:
    logger.log(logging.INFO if success else logging.ERROR, message)


class InvoiceController:
    """Owns the invoice collection and the current view."""

    def __init__(
        self,
        store: InvoiceStore,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self._notify = notifier or _log_notification
        self._clock = clock
        self._invoices: List[Invoice] = []
        self._state: ViewState = Listing()
        self._load()

    def _load(self) -> None:
        for invoice in self.store.load():
            self._upsert(recalculate(invoice))
        logger.info("Controller started with %d invoice(s).", len(self._invoices))

    # Outputs

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def invoices(self) -> Tuple[Invoice, ...]:
        return tuple(self._invoices)

    @property
    def active_invoice(self) -> Optional[Invoice]:
        if isinstance(self._state, Editing):
            return self._state.draft
        if isinstance(self._state, Previewing):
            return self._state.invoice
        return None

    @property
    def totals(self) -> Optional[Totals]:
        invoice = self.active_invoice
        return compute_totals(invoice) if invoice is not None else None

    def summary(self) -> CollectionSummary:
        return summarize(self._invoices)

    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        for invoice in self._invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    def next_invoice_number(self) -> str:
        """Follow the highest trailing number in use, keeping its prefix and padding."""
        best: Optional[Tuple[int, str, str]] = None
        for invoice in self._invoices:
            match = re.match(r"^(.*?)(\d+)\s*$", invoice.invoice_number)
            if match is None:
                continue
            value = int(match.group(2))
            if best is None or value > best[0]:
                best = (value, match.group(1), match.group(2))
        if best is None:
            return config.DEFAULT_INVOICE_NUMBER
        value, prefix, digits = best
        return prefix + str(value + 1).zfill(len(digits))

    # Navigation

    def _go(self, state: ViewState) -> None:
        logger.debug("View %s -> %s", type(self._state).__name__, type(state).__name__)
        self._state = state

    def _expect(self, *states: type) -> bool:
        if isinstance(self._state, states):
            return True
        logger.debug("Ignored intent while in %s.", type(self._state).__name__)
        return False

    def new_invoice(self) -> bool:
        if not self._expect(Listing):
            return False
        self._go(Editing(new_invoice(self.next_invoice_number(), today=self._clock())))
        return True

    def edit_invoice(self, invoice_id: str) -> bool:
        if not self._expect(Listing):
            return False
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            logger.info("Cannot edit unknown invoice %s.", invoice_id)
            return False
        self._go(Editing(invoice))
        return True

    def preview_invoice(self, invoice_id: str) -> bool:
        if not self._expect(Listing):
            return False
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            logger.info("Cannot preview unknown invoice %s.", invoice_id)
            return False
        self._go(Previewing(invoice, returns_to=Listing()))
        return True

    def preview(self) -> bool:
        """Show the draft being edited without saving it."""
        if not self._expect(Editing):
            return False
        self._go(Previewing(self._state.draft, returns_to=self._state))
        return True

    def back_to_form(self) -> bool:
        if not self._expect(Previewing) or not isinstance(self._state.returns_to, Editing):
            return False
        self._go(self._state.returns_to)
        return True

    def back_to_list(self) -> bool:
        """Return to the list, dropping any unsaved draft."""
        if isinstance(self._state, Listing):
            return False
        self._go(Listing())
        return True

    def back(self) -> bool:
        if isinstance(self._state, Previewing):
            self._go(self._state.returns_to)
            return True
        return self.back_to_list()

    # Collection changes

    def _upsert(self, invoice: Invoice) -> bool:
        """Replace the member with the same id, or append. Returns True when appended."""
        for index, existing in enumerate(self._invoices):
            if existing.id == invoice.id:
                self._invoices[index] = invoice
                return False
        self._invoices.append(invoice)
        return True

    def _persist(self) -> bool:
        return self.store.save(list(self._invoices))

    def save_invoice(self, draft: Optional[Invoice] = None) -> bool:
        """Upsert ``draft`` (the draft being edited by default) and go back to the list."""
        if draft is None:
            if not self._expect(Editing):
                return False
            draft = self._state.draft
        if not draft.line_items:
            logger.info("Refused to save invoice %s without line items.", draft.id)
            return False

        created = self._upsert(recalculate(draft))
        logger.info("%s invoice %s (%s).", "Created" if created else "Updated", draft.id, draft.invoice_number)
        self._go(Listing())
        if self._persist():
            self._notify("Invoice created successfully!" if created else "Invoice updated successfully!", True)
        else:
            self._notify("Invoice could not be saved to disk.", False)
        return True

    def delete_invoice(self, invoice_id: str) -> bool:
        """Remove an invoice. No confirmation and no undo."""
        if not self._expect(Listing):
            return False
        remaining = [invoice for invoice in self._invoices if invoice.id != invoice_id]
        if len(remaining) == len(self._invoices):
            logger.info("Nothing to delete for invoice %s.", invoice_id)
            return False

        self._invoices = remaining
        logger.info("Deleted invoice %s.", invoice_id)
        if self._persist():
            self._notify("Invoice deleted successfully!", True)
        else:
            self._notify("Invoice deletion could not be saved to disk.", False)
        return True

    # Draft edits

    def _edit(self, change: Callable[[Invoice], Invoice], what: str) -> bool:
        if not self._expect(Editing):
            return False
        try:
            draft = change(self._state.draft)
        except InvalidMutation as exc:
            logger.info("Rejected %s: %s", what, exc)
            return False
        self._state = Editing(draft)
        return True

    def set_field(self, path: str, value: Any) -> bool:
        return self._edit(lambda draft: editor.set_field(draft, path, value), f"change of {path}")

    def add_line_item(self) -> bool:
        return self._edit(editor.add_line_item, "new line item")

    def remove_line_item(self, item_id: str) -> bool:
        return self._edit(lambda draft: editor.remove_line_item(draft, item_id), f"removal of item {item_id}")

    def update_line_item(self, item_id: str, field: str, value: Any) -> bool:
        return self._edit(
            lambda draft: editor.edit_line_item(draft, item_id, field, value),
            f"change of {field} on item {item_id}",
        )
