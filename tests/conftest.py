from __future__ import annotations

from datetime import date
from typing import List, Sequence, Tuple

import pytest

from invoice_manager.controller import InvoiceController
from invoice_manager.models import Invoice, LineItem, Party, RemitTo
from invoice_manager.totals import recalculate

TODAY = date(2026, 10, 18)


class MemoryInvoiceStore:
    """In-memory stand-in for the file stores."""

    def __init__(self, invoices: Sequence[Invoice] = (), fail_saves: bool = False) -> None:
        self.saved: List[Invoice] = list(invoices)
        self.fail_saves = fail_saves
        self.load_calls = 0
        self.save_calls = 0

    def load(self) -> List[Invoice]:
        self.load_calls += 1
        return list(self.saved)

    def save(self, invoices: Sequence[Invoice]) -> bool:
        self.save_calls += 1
        if self.fail_saves:
            return False
        self.saved = list(invoices)
        return True


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: List[Tuple[str, bool]] = []

    def __call__(self, message: str, success: bool) -> None:
        self.messages.append((message, success))


def make_invoice(
    invoice_id: str = "inv-1",
    number: str = "#405",
    items: Sequence[Tuple[float, int]] = ((500.0, 1), (5.0, 15)),
    discount: float = 0.0,
    sgst: float = 0.0,
    cgst: float = 0.0,
    paid: float = 0.0,
    due_date: date = date(2026, 10, 25),
) -> Invoice:
    line_items = tuple(
        LineItem(id=f"{invoice_id}-item-{idx}", description=f"Item {idx}", unit_price=price, quantity=qty, subtotal=0.0)
        for idx, (price, qty) in enumerate(items, start=1)
    )
    invoice = Invoice(
        id=invoice_id,
        invoice_number=number,
        issue_date=TODAY,
        due_date=due_date,
        bill_to=Party(name="Acme Ltd", email="billing@acme.test", address="1 Main St"),
        remit_to=RemitTo(
            name="Studio Nine",
            email="pay@studio9.test",
            address="9 Side Rd",
            bank_details="IBAN XX00 1234",
            contact="+1 555 0100",
        ),
        line_items=line_items,
        discount_percent=discount,
        sgst_percent=sgst,
        cgst_percent=cgst,
        paid_amount=paid,
        notes="Thanks for your business",
        payment_instructions="Pay by bank transfer",
        payment_label="Pay Online",
        terms_title="TERMS AND CONDITIONS",
    )
    return recalculate(invoice)


@pytest.fixture
def invoice() -> Invoice:
    return make_invoice()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store() -> MemoryInvoiceStore:
    return MemoryInvoiceStore([make_invoice("inv-1", "#405"), make_invoice("inv-2", "#406", paid=100.0)])


@pytest.fixture
def controller(store: MemoryInvoiceStore, notifier: RecordingNotifier) -> InvoiceController:
    return InvoiceController(store, notifier=notifier, clock=lambda: TODAY)
