"""Status, payment progress and totals shown on the invoice list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from invoice_manager import config
from invoice_manager.models import Invoice


class InvoiceStatus(str, Enum):
    PAID = "Paid"
    OVERDUE = "Overdue"
    DUE_SOON = "Due Soon"
    ACTIVE = "Active"


@dataclass(frozen=True)
class CollectionSummary:
    count: int
    total_value: float
    total_paid: float
    total_due: float


def invoice_status(invoice: Invoice, today: Optional[date] = None) -> InvoiceStatus:
    """Payment wins over dates: a settled invoice is Paid even when past due."""
    if invoice.due_amount <= 0:
        return InvoiceStatus.PAID
    days_left = (invoice.due_date - (today or date.today())).days
    if days_left < 0:
        return InvoiceStatus.OVERDUE
    if days_left <= config.DUE_SOON_DAYS:
        return InvoiceStatus.DUE_SOON
    return InvoiceStatus.ACTIVE


def paid_percent(invoice: Invoice) -> float:
    """Share of the total already paid, in percent. Not clamped."""
    if invoice.total == 0:
        return 100.0 if invoice.paid_amount > 0 else 0.0
    return invoice.paid_amount / invoice.total * 100


def payment_progress(invoice: Invoice) -> float:
    """``paid_percent`` clamped to 0..100, for progress bars."""
    return min(max(paid_percent(invoice), 0.0), 100.0)


def summarize(invoices: Iterable[Invoice]) -> CollectionSummary:
    invoices = list(invoices)
    return CollectionSummary(
        count=len(invoices),
        total_value=sum(invoice.total for invoice in invoices),
        total_paid=sum(invoice.paid_amount for invoice in invoices),
        total_due=sum(invoice.due_amount for invoice in invoices),
    )
