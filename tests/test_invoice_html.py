from dataclasses import replace

from invoice_manager.models import Party
from invoice_manager.printing.invoice_html import build_invoice_html

from conftest import make_invoice


def test_html_contains_sections_and_amounts() -> None:
    html = build_invoice_html(make_invoice(discount=10, sgst=9, cgst=9, paid=10.65))

    for text in ("INVOICE", "STUDIO NINE", "COMPANY INFO", "CLIENT INFO", "SERVICES / PRODUCTS", "PAYMENT"):
        assert text in html
    assert "18 Oct 2026" in html
    assert "15 units" in html
    assert "610.65 USD" in html
    assert "600.00 USD" in html
    assert "TERMS AND CONDITIONS" in html
    assert "IBAN XX00 1234" in html


def test_html_escapes_user_text() -> None:
    invoice = replace(make_invoice(), bill_to=Party(name="<script>alert(1)</script>", email="", address="A & B"))

    html = build_invoice_html(invoice)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "A &amp; B" in html


def test_bank_details_block_is_optional() -> None:
    invoice = make_invoice()
    invoice = replace(invoice, remit_to=replace(invoice.remit_to, bank_details=""))

    assert "Bank Details" not in build_invoice_html(invoice)


def test_negative_due_amount_is_shown() -> None:
    html = build_invoice_html(make_invoice(items=[(10.0, 1)], paid=25))

    assert "-15.00 USD" in html
