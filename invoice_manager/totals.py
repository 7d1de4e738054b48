"""Derived amounts for an invoice.

Every function here is pure: it reads an invoice (or its line items) and
returns new values, never touching storage or the invoice collection.
``recalculate`` is the one place where the cached ``total`` and
``due_amount`` of an invoice are refreshed; callers that change any input
(line items, discount, SGST, CGST, paid amount) must pass the result
through it.

``due_amount`` is not clamped, so an overpaid invoice carries a negative
due amount (a credit balance).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Iterable, List

if TYPE_CHECKING:
    from invoice_manager.models import Invoice, LineItem

PRICE_FIELD = "unitPrice"
QUANTITY_FIELD = "quantity"
DESCRIPTION_FIELD = "description"

_ITEM_ATTRIBUTES = {
    PRICE_FIELD: "unit_price",
    QUANTITY_FIELD: "quantity",
    DESCRIPTION_FIELD: "description",
}


@dataclass(frozen=True)
class Totals:
    subtotal: float
    discount_amount: float
    taxable_amount: float
    sgst_amount: float
    cgst_amount: float
    total: float
    due_amount: float


def line_subtotal(item: "LineItem") -> float:
    return item.unit_price * item.quantity


def items_subtotal(items: Iterable["LineItem"]) -> float:
    return sum(line_subtotal(item) for item in items)


def compute_totals(invoice: "Invoice") -> Totals:
    """Run the full derivation, in order, for one invoice."""
    subtotal = items_subtotal(invoice.line_items)
    discount_amount = subtotal * invoice.discount_percent / 100
    taxable_amount = subtotal - discount_amount
    sgst_amount = taxable_amount * invoice.sgst_percent / 100
    cgst_amount = taxable_amount * invoice.cgst_percent / 100
    total = taxable_amount + sgst_amount + cgst_amount
    return Totals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        sgst_amount=sgst_amount,
        cgst_amount=cgst_amount,
        total=total,
        due_amount=total - invoice.paid_amount,
    )


def recalculate(invoice: "Invoice") -> "Invoice":
    """Return a copy of ``invoice`` with line subtotals, total and due amount refreshed."""
    items = tuple(replace(item, subtotal=line_subtotal(item)) for item in invoice.line_items)
    invoice = replace(invoice, line_items=items)
    totals = compute_totals(invoice)
    return replace(invoice, total=totals.total, due_amount=totals.due_amount)


def update_line_item(
    items: Iterable["LineItem"], item_id: str, field: str, value: Any
) -> List["LineItem"]:
    """Return ``items`` with one field of the matching item replaced.

    ``field`` is ``"unitPrice"``, ``"quantity"`` or ``"description"``. The
    item subtotal is recomputed when price or quantity changed. An unknown
    ``item_id`` leaves every item as it was.
    """
    attribute = _ITEM_ATTRIBUTES[field]
    updated: List["LineItem"] = []
    for item in items:
        if item.id == item_id:
            item = replace(item, **{attribute: value})
            if field in (PRICE_FIELD, QUANTITY_FIELD):
                item = replace(item, subtotal=line_subtotal(item))
        updated.append(item)
    return updated
