from dataclasses import replace

import pytest

from invoice_manager.totals import compute_totals, items_subtotal, recalculate, update_line_item

from conftest import make_invoice


def test_totals_without_discount_or_tax() -> None:
    invoice = make_invoice(items=[(500.0, 1), (5.0, 15)])

    totals = compute_totals(invoice)

    assert totals.subtotal == 575
    assert totals.total == 575
    assert invoice.total == 575
    assert invoice.due_amount == 575


def test_paid_amount_reduces_due_amount() -> None:
    invoice = make_invoice(items=[(500.0, 1), (5.0, 15)], paid=100.0)

    assert invoice.total == 575
    assert invoice.due_amount == 475


def test_discount_then_both_taxes() -> None:
    invoice = make_invoice(items=[(500.0, 1), (5.0, 15)], discount=10, sgst=9, cgst=9)

    totals = compute_totals(invoice)

    assert totals.discount_amount == pytest.approx(57.5)
    assert totals.taxable_amount == pytest.approx(517.5)
    assert totals.sgst_amount == pytest.approx(46.575)
    assert totals.cgst_amount == pytest.approx(46.575)
    assert invoice.total == pytest.approx(610.65)
    assert f"{invoice.total:.2f}" == "610.65"


@pytest.mark.parametrize(
    "discount, sgst, cgst",
    [(0, 0, 0), (100, 0, 0), (0, 100, 100), (12.5, 2.5, 7), (33, 18, 0)],
)
def test_total_matches_closed_form(discount: float, sgst: float, cgst: float) -> None:
    invoice = make_invoice(items=[(19.99, 3), (0.5, 7), (1200.0, 1)], discount=discount, sgst=sgst, cgst=cgst)
    subtotal = items_subtotal(invoice.line_items)

    expected = subtotal * (1 - discount / 100) * (1 + sgst / 100 + cgst / 100)

    assert invoice.total == pytest.approx(expected)


def test_overpayment_gives_negative_due_amount() -> None:
    invoice = make_invoice(items=[(10.0, 1)], paid=25.0)

    assert invoice.due_amount == -15


def test_zero_subtotal_with_payment() -> None:
    invoice = make_invoice(items=[(0.0, 3)], paid=40.0)

    assert invoice.total == 0
    assert invoice.due_amount == -40


def test_recalculate_is_idempotent() -> None:
    invoice = make_invoice(discount=5, sgst=9, cgst=9, paid=30)

    once = recalculate(invoice)
    twice = recalculate(once)

    assert twice.total == once.total
    assert twice.due_amount == once.due_amount
    assert twice == once


def test_recalculate_repairs_stale_cached_values() -> None:
    stale = replace(make_invoice(), total=1.0, due_amount=2.0)
    stale = replace(stale, line_items=tuple(replace(item, subtotal=0.0) for item in stale.line_items))

    fixed = recalculate(stale)

    assert fixed.total == 575
    assert fixed.due_amount == 575
    assert [item.subtotal for item in fixed.line_items] == [500, 75]


def test_update_line_item_price_recomputes_subtotal() -> None:
    items = make_invoice().line_items
    target = items[1]

    updated = update_line_item(items, target.id, "unitPrice", 8.0)

    assert updated[1].unit_price == 8.0
    assert updated[1].subtotal == 120
    assert updated[0] == items[0]


def test_update_line_item_quantity_recomputes_subtotal() -> None:
    items = make_invoice().line_items

    updated = update_line_item(items, items[0].id, "quantity", 3)

    assert updated[0].subtotal == 1500
    assert sum(item.subtotal for item in updated) == sum(item.unit_price * item.quantity for item in updated)


def test_update_line_item_description_keeps_amounts() -> None:
    items = make_invoice().line_items

    updated = update_line_item(items, items[0].id, "description", "Landing Page v2")

    assert updated[0].description == "Landing Page v2"
    assert updated[0].subtotal == items[0].subtotal
    assert updated[0].id == items[0].id


def test_update_line_item_unknown_id_changes_nothing() -> None:
    items = make_invoice().line_items

    assert update_line_item(items, "missing", "quantity", 9) == list(items)
