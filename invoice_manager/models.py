"""Invoice data models."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from invoice_manager import config
from invoice_manager.totals import recalculate

DISPLAY_DATE_FORMAT = "%d %b %Y"


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LineItem:
    id: str
    description: str
    unit_price: float
    quantity: int
    subtotal: float


@dataclass(frozen=True)
class Party:
    """Who the invoice is billed to."""

    name: str = ""
    email: str = ""
    address: str = ""


@dataclass(frozen=True)
class RemitTo:
    """Who gets paid, and how."""

    name: str = ""
    email: str = ""
    address: str = ""
    bank_details: str = ""
    contact: str = ""


@dataclass(frozen=True)
class Invoice:
    """One billing document.

    ``total`` and ``due_amount`` are cached derived values; build new
    instances through :func:`invoice_manager.totals.recalculate` so they
    stay consistent with the line items, percentages and paid amount.
    """

    id: str
    invoice_number: str
    issue_date: date
    due_date: date
    bill_to: Party
    remit_to: RemitTo
    line_items: Tuple[LineItem, ...]
    discount_percent: float = 0.0
    sgst_percent: float = 0.0
    cgst_percent: float = 0.0
    total: float = 0.0
    paid_amount: float = 0.0
    due_amount: float = 0.0
    notes: str = ""
    payment_instructions: str = ""
    payment_label: str = ""
    terms_title: str = ""

    def find_item(self, item_id: str) -> Optional[LineItem]:
        for item in self.line_items:
            if item.id == item_id:
                return item
        return None


def new_line_item(description: str = "", unit_price: float = 0.0, quantity: int = 1) -> LineItem:
    """Return a fresh line item with its own id."""
    return LineItem(
        id=new_id(),
        description=description,
        unit_price=unit_price,
        quantity=quantity,
        subtotal=unit_price * quantity,
    )


def new_invoice(invoice_number: Optional[str] = None, today: Optional[date] = None) -> Invoice:
    """Return a new invoice pre-filled with placeholder content."""
    today = today or date.today()
    invoice = Invoice(
        id=new_id(),
        invoice_number=invoice_number or config.DEFAULT_INVOICE_NUMBER,
        issue_date=today,
        due_date=today + timedelta(days=config.DEFAULT_DUE_DAYS),
        bill_to=Party(
            name="[Business Name]",
            email="[Business Email]",
            address="[Business Address]",
        ),
        remit_to=RemitTo(
            name="YOUR BUSINESS NAME",
            email="[Your Business Email]",
            address="[Your Business Address]",
            bank_details="[Your Business Phone]",
            contact="[Your Business Phone]",
        ),
        line_items=(
            new_line_item("Landing Page", 500.0, 1),
            new_line_item("Revisions", 5.0, 15),
        ),
        notes="This invoice will be expired on (date)",
        payment_instructions="Payment can be done using the provided link below (email)",
        payment_label="Pay Online",
        terms_title="TERMS AND CONDITIONS",
    )
    return recalculate(invoice)


def format_currency(amount: float) -> str:
    """Return amount formatted to two decimals."""
    return f"{amount:.2f}"


def format_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def parse_date(value: Any) -> date:
    """Accept a date, an ISO string or a ``18 Oct 2026`` style string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", DISPLAY_DATE_FORMAT):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {value!r}")


def to_float(value, default: Optional[float]) -> Optional[float]:
    if value in (None, ""):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_int(value, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _text(value) -> str:
    return "" if value is None else str(value)


# Serialization. The document uses camelCase keys; the earlier web version
# wrote invoiceNo/date/paymentMethod/discount/sgst/cgst/price, which are
# still read.


def line_item_to_dict(item: LineItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "description": item.description,
        "unitPrice": item.unit_price,
        "quantity": item.quantity,
        "subtotal": item.subtotal,
    }


def line_item_from_dict(data: Dict[str, Any]) -> LineItem:
    unit_price = to_float(data.get("unitPrice", data.get("price")), default=0.0)
    quantity = to_int(data.get("quantity"), default=1)
    return LineItem(
        id=str(data["id"]),
        description=_text(data.get("description")),
        unit_price=unit_price,
        quantity=quantity,
        subtotal=to_float(data.get("subtotal"), default=unit_price * quantity),
    )


def invoice_to_dict(invoice: Invoice) -> Dict[str, Any]:
    return {
        "id": invoice.id,
        "invoiceNumber": invoice.invoice_number,
        "issueDate": invoice.issue_date.isoformat(),
        "dueDate": invoice.due_date.isoformat(),
        "billTo": {
            "name": invoice.bill_to.name,
            "email": invoice.bill_to.email,
            "address": invoice.bill_to.address,
        },
        "remitTo": {
            "name": invoice.remit_to.name,
            "email": invoice.remit_to.email,
            "address": invoice.remit_to.address,
            "bankDetails": invoice.remit_to.bank_details,
            "contact": invoice.remit_to.contact,
        },
        "lineItems": [line_item_to_dict(item) for item in invoice.line_items],
        "discountPercent": invoice.discount_percent,
        "sgstPercent": invoice.sgst_percent,
        "cgstPercent": invoice.cgst_percent,
        "total": invoice.total,
        "paidAmount": invoice.paid_amount,
        "dueAmount": invoice.due_amount,
        "notes": invoice.notes,
        "paymentInstructions": invoice.payment_instructions,
        "paymentLabel": invoice.payment_label,
        "termsTitle": invoice.terms_title,
    }


def invoice_from_dict(data: Dict[str, Any]) -> Invoice:
    """Build an Invoice from its document form.

    Raises ``KeyError``/``ValueError``/``TypeError`` when the record is not
    usable (no id, no line items, bad dates).
    """
    line_items = tuple(line_item_from_dict(item) for item in data["lineItems"])
    if not line_items:
        raise ValueError(f"Invoice {data.get('id')!r} has no line items.")

    bill_to = data.get("billTo") or {}
    remit_to = data.get("remitTo") or data.get("paymentMethod") or {}
    return Invoice(
        id=str(data["id"]),
        invoice_number=_text(data.get("invoiceNumber", data.get("invoiceNo"))),
        issue_date=parse_date(data.get("issueDate", data.get("date"))),
        due_date=parse_date(data["dueDate"]),
        bill_to=Party(
            name=_text(bill_to.get("name")),
            email=_text(bill_to.get("email")),
            address=_text(bill_to.get("address")),
        ),
        remit_to=RemitTo(
            name=_text(remit_to.get("name")),
            email=_text(remit_to.get("email")),
            address=_text(remit_to.get("address")),
            bank_details=_text(remit_to.get("bankDetails")),
            contact=_text(remit_to.get("contact")),
        ),
        line_items=line_items,
        discount_percent=to_float(data.get("discountPercent", data.get("discount")), default=0.0),
        sgst_percent=to_float(data.get("sgstPercent", data.get("sgst")), default=0.0),
        cgst_percent=to_float(data.get("cgstPercent", data.get("cgst")), default=0.0),
        total=to_float(data.get("total"), default=0.0),
        paid_amount=to_float(data.get("paidAmount"), default=0.0),
        due_amount=to_float(data.get("dueAmount"), default=0.0),
        notes=_text(data.get("notes")),
        payment_instructions=_text(data.get("paymentInstructions")),
        payment_label=_text(data.get("paymentLabel")),
        terms_title=_text(data.get("termsTitle")),
    )
