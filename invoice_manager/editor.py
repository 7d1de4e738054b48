"""Edits applied to an invoice draft.

Each function takes the current draft and returns the next one, already
passed through :func:`invoice_manager.totals.recalculate`. Values coming
from the form are checked here; a change that would break the invoice
raises :class:`InvalidMutation` and the draft is left as it was.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Callable, Dict, Tuple

from invoice_manager import totals
from invoice_manager.models import Invoice, new_line_item, parse_date


class InvalidMutation(ValueError):
    """Raised when an edit is rejected."""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _number(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidMutation(f"Expected a number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidMutation(f"Expected a number, got {value!r}.") from None
    if not math.isfinite(number):
        raise InvalidMutation(f"Expected a finite number, got {value!r}.")
    return number


def _percent(value: Any) -> float:
    number = _number(value)
    if not 0 <= number <= 100:
        raise InvalidMutation(f"Percentage must be between 0 and 100, got {number}.")
    return number


def _non_negative(value: Any) -> float:
    number = _number(value)
    if number < 0:
        raise InvalidMutation(f"Amount cannot be negative, got {number}.")
    return number


def _quantity(value: Any) -> int:
    number = _number(value)
    if number != int(number) or number < 1:
        raise InvalidMutation(f"Quantity must be a whole number of at least 1, got {value!r}.")
    return int(number)


def _date(value: Any):
    try:
        return parse_date(value)
    except ValueError as exc:
        raise InvalidMutation(str(exc)) from None


# Top-level form fields: path -> (attribute, converter).
_INVOICE_FIELDS: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "invoiceNumber": ("invoice_number", _text),
    "issueDate": ("issue_date", _date),
    "dueDate": ("due_date", _date),
    "discountPercent": ("discount_percent", _percent),
    "sgstPercent": ("sgst_percent", _percent),
    "cgstPercent": ("cgst_percent", _percent),
    "paidAmount": ("paid_amount", _non_negative),
    "notes": ("notes", _text),
    "paymentInstructions": ("payment_instructions", _text),
    "paymentLabel": ("payment_label", _text),
    "termsTitle": ("terms_title", _text),
}

# Nested party fields: prefix -> (invoice attribute, {key: party attribute}).
_PARTY_FIELDS: Dict[str, Tuple[str, Dict[str, str]]] = {
    "billTo": ("bill_to", {"name": "name", "email": "email", "address": "address"}),
    "remitTo": (
        "remit_to",
        {
            "name": "name",
            "email": "email",
            "address": "address",
            "bankDetails": "bank_details",
            "contact": "contact",
        },
    ),
}

_ITEM_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    totals.PRICE_FIELD: _non_negative,
    totals.QUANTITY_FIELD: _quantity,
    totals.DESCRIPTION_FIELD: _text,
}


def set_field(invoice: Invoice, path: str, value: Any) -> Invoice:
    """Set a form field addressed by a dotted path such as ``billTo.email``."""
    if path in _INVOICE_FIELDS:
        attribute, convert = _INVOICE_FIELDS[path]
        return totals.recalculate(replace(invoice, **{attribute: convert(value)}))

    prefix, _, key = path.partition(".")
    if prefix in _PARTY_FIELDS and key in _PARTY_FIELDS[prefix][1]:
        attribute, keys = _PARTY_FIELDS[prefix]
        party = replace(getattr(invoice, attribute), **{keys[key]: _text(value)})
        return totals.recalculate(replace(invoice, **{attribute: party}))

    raise InvalidMutation(f"Field '{path}' cannot be edited.")


def add_line_item(invoice: Invoice) -> Invoice:
    items = invoice.line_items + (new_line_item(),)
    return totals.recalculate(replace(invoice, line_items=items))


def remove_line_item(invoice: Invoice, item_id: str) -> Invoice:
    """Remove an item; the last remaining item cannot be removed."""
    if invoice.find_item(item_id) is None:
        raise InvalidMutation(f"Line item '{item_id}' not found.")
    if len(invoice.line_items) <= 1:
        raise InvalidMutation("An invoice needs at least one line item.")
    items = tuple(item for item in invoice.line_items if item.id != item_id)
    return totals.recalculate(replace(invoice, line_items=items))


def edit_line_item(invoice: Invoice, item_id: str, field: str, value: Any) -> Invoice:
    if field not in _ITEM_CONVERTERS:
        raise InvalidMutation(f"Line item field '{field}' cannot be edited.")
    if invoice.find_item(item_id) is None:
        raise InvalidMutation(f"Line item '{item_id}' not found.")
    items = totals.update_line_item(invoice.line_items, item_id, field, _ITEM_CONVERTERS[field](value))
    return totals.recalculate(replace(invoice, line_items=tuple(items)))
