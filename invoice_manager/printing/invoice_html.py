"""Print layout of a single invoice as HTML."""

from __future__ import annotations

from html import escape
from typing import List

from invoice_manager import config
from invoice_manager.models import Invoice, format_currency, format_date
from invoice_manager.totals import compute_totals


def _money(amount: float) -> str:
    return f"{format_currency(amount)} {escape(config.CURRENCY)}"


def _lines(*values: str) -> str:
    return "".join(f"<p>{escape(value)}</p>" for value in values if value)


def build_invoice_html(invoice: Invoice) -> str:
    """Render ``invoice`` for the preview pane and the printer."""
    totals = compute_totals(invoice)
    remit = invoice.remit_to
    client = invoice.bill_to

    rows: List[str] = []
    for item in invoice.line_items:
        rows.append(
            f"<tr><td>{escape(item.description)}</td>"
            f"<td align='center'>{item.quantity} units</td>"
            f"<td align='right'>{_money(item.unit_price)}</td>"
            f"<td align='right'>{_money(item.subtotal)}</td></tr>"
        )

    bank = ""
    if remit.bank_details:
        bank = f"<p><b>Bank Details:</b></p>{_lines(remit.bank_details)}"

    return f"""
    <html>
    <head>
        <style>
            body {{ font-family: Arial; font-size: 10pt; }}
            h1 {{ font-size: 26pt; margin: 0; }}
            h3 {{ font-size: 10pt; letter-spacing: 1px; margin: 12px 0 6px 0; }}
            p {{ margin: 2px 0; }}
            table {{ width: 100%; border-collapse: collapse; }}
            th, td {{ padding: 3px 0; }}
            .muted {{ color: #555555; }}
            .due {{ font-size: 20pt; font-weight: bold; }}
        </style>
    </head>
    <body>
        <table>
            <tr>
                <td><h1>INVOICE</h1><p class='muted'>{escape(remit.name.upper())}</p>
                    <p class='muted'>{escape(invoice.invoice_number)}</p></td>
                <td align='right'><p class='muted'>Issue Date</p><p>{format_date(invoice.issue_date)}</p>
                    <p class='muted'>Due Date</p><p>{format_date(invoice.due_date)}</p></td>
            </tr>
        </table>
        <hr />
        <table>
            <tr>
                <td valign='top'><h3>COMPANY INFO</h3>
                    {_lines(remit.name, remit.address, remit.email, remit.contact)}</td>
                <td valign='top'><h3>CLIENT INFO</h3>
                    {_lines(client.name, client.address, client.email)}</td>
            </tr>
        </table>
        <hr />
        <h3>SERVICES / PRODUCTS</h3>
        <table>
            <tr><th align='left'>Name</th><th align='center'>Quantity</th>
                <th align='right'>Unit Price</th><th align='right'>Total</th></tr>
            {''.join(rows)}
        </table>
        <hr />
        <table class='totals'>
            <tr><td>Subtotal</td><td align='right'>{_money(totals.subtotal)}</td></tr>
            <tr><td>Discount ({invoice.discount_percent:g}%)</td><td align='right'>-{_money(totals.discount_amount)}</td></tr>
            <tr><td>SGST ({invoice.sgst_percent:g}%)</td><td align='right'>{_money(totals.sgst_amount)}</td></tr>
            <tr><td>CGST ({invoice.cgst_percent:g}%)</td><td align='right'>{_money(totals.cgst_amount)}</td></tr>
            <tr><td><b>Total</b></td><td align='right'><b>{_money(invoice.total)}</b></td></tr>
            <tr><td>Paid</td><td align='right'>{_money(invoice.paid_amount)}</td></tr>
        </table>
        <div align='right'>
            <h3>Amount Due</h3>
            <p class='due'>{_money(invoice.due_amount)}</p>
        </div>
        <hr />
        <h3>PAYMENT</h3>
        {_lines(invoice.payment_instructions)}
        <p><b>{escape(invoice.payment_label)}</b></p>
        {_lines(remit.email)}
        {bank}
        <hr />
        <h3>{escape(invoice.terms_title)}</h3>
        {_lines(invoice.notes)}
    </body>
    </html>
    """
