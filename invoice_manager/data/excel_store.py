"""Excel workbook backend for the invoice collection."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from invoice_manager import config
from invoice_manager.models import Invoice, invoice_from_dict, invoice_to_dict

logger = logging.getLogger(__name__)

# Excel's per-cell text limit; longer values are refused on save.
MAX_CELL_TEXT = 32767

# Header -> dotted key in the invoice document.
INVOICE_COLUMNS: List[Tuple[str, str]] = [
    ("Invoice_ID", "id"),
    ("Invoice_Number", "invoiceNumber"),
    ("Issue_Date", "issueDate"),
    ("Due_Date", "dueDate"),
    ("Bill_To_Name", "billTo.name"),
    ("Bill_To_Email", "billTo.email"),
    ("Bill_To_Address", "billTo.address"),
    ("Remit_To_Name", "remitTo.name"),
    ("Remit_To_Email", "remitTo.email"),
    ("Remit_To_Address", "remitTo.address"),
    ("Remit_To_Bank_Details", "remitTo.bankDetails"),
    ("Remit_To_Contact", "remitTo.contact"),
    ("Discount_Percent", "discountPercent"),
    ("SGST_Percent", "sgstPercent"),
    ("CGST_Percent", "cgstPercent"),
    ("Total", "total"),
    ("Paid_Amount", "paidAmount"),
    ("Due_Amount", "dueAmount"),
    ("Notes", "notes"),
    ("Payment_Instructions", "paymentInstructions"),
    ("Payment_Label", "paymentLabel"),
    ("Terms_Title", "termsTitle"),
]

LINE_ITEM_COLUMNS: List[Tuple[str, str]] = [
    ("Invoice_ID", "invoiceId"),
    ("Item_ID", "id"),
    ("Description", "description"),
    ("Unit_Price", "unitPrice"),
    ("Quantity", "quantity"),
    ("Subtotal", "subtotal"),
]


def _get(document: Dict[str, Any], key: str) -> Any:
    for part in key.split("."):
        document = document[part]
    return document


def _put(document: Dict[str, Any], key: str, value: Any) -> None:
    *parents, leaf = key.split(".")
    for part in parents:
        document = document.setdefault(part, {})
    document[leaf] = value


def _cell(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_CELL_TEXT:
        raise ValueError(f"Text of {len(value)} characters exceeds the {MAX_CELL_TEXT} character cell limit.")
    return value


class ExcelInvoiceStore:
    """Keeps invoices in a workbook: one sheet of invoices, one of line items.

    Line items are linked to their invoice through ``Invoice_ID`` and kept
    in display order.
    """

    def __init__(self, path: Path | str = None) -> None:
        self.path: Path = Path(path) if path else config.EXCEL_STORE_PATH

    def load(self) -> List[Invoice]:
        if not self.path.exists():
            logger.info("No invoice workbook at %s; starting with an empty list.", self.path)
            return []
        try:
            workbook = load_workbook(self.path)
            invoice_rows = self._read_rows(self._sheet(workbook, config.INVOICES_SHEET_NAME), INVOICE_COLUMNS)
            item_rows = self._read_rows(self._sheet(workbook, config.LINE_ITEMS_SHEET_NAME), LINE_ITEM_COLUMNS)

            items_by_invoice: Dict[str, List[Dict[str, Any]]] = {}
            for row in item_rows:
                items_by_invoice.setdefault(str(row.pop("invoiceId")), []).append(row)

            invoices = []
            for row in invoice_rows:
                row["lineItems"] = items_by_invoice.get(str(row["id"]), [])
                invoices.append(invoice_from_dict(row))
        except (InvalidFileException, BadZipFile, OSError, KeyError, ValueError, TypeError) as exc:
            logger.warning("Could not read invoices from %s (%s); starting with an empty list.", self.path, exc)
            return []
        logger.info("Loaded %d invoice(s) from %s.", len(invoices), self.path)
        return invoices

    @staticmethod
    def _sheet(workbook: Workbook, name: str) -> Worksheet:
        if name not in workbook.sheetnames:
            raise ValueError(f"Sheet '{name}' not found in workbook.")
        return workbook[name]

    @staticmethod
    def _detect_columns(sheet: Worksheet, columns: List[Tuple[str, str]]) -> Dict[str, int]:
        """Map each document key to its column index; raises if a header is missing."""
        headers: Dict[str, int] = {}
        for idx, cell in enumerate(sheet[1], start=1):
            if cell.value is not None:
                headers[str(cell.value).strip()] = idx

        missing = [header for header, _ in columns if header not in headers]
        if missing:
            raise ValueError(f"Missing required columns in sheet '{sheet.title}': {', '.join(missing)}")
        return {key: headers[header] for header, key in columns}

    def _read_rows(self, sheet: Worksheet, columns: List[Tuple[str, str]]) -> List[Dict[str, Any]]:
        col_map = self._detect_columns(sheet, columns)
        rows: List[Dict[str, Any]] = []
        for values in sheet.iter_rows(min_row=2, values_only=True):
            if values[col_map["id"] - 1] in (None, ""):
                continue
            record: Dict[str, Any] = {}
            for key, idx in col_map.items():
                _put(record, key, values[idx - 1] if idx <= len(values) else None)
            rows.append(record)
        return rows

    def save(self, invoices: Sequence[Invoice]) -> bool:
        try:
            workbook = self._build_workbook(invoices)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(self.path)
        except (IllegalCharacterError, ValueError, OSError):
            logger.exception("Failed to save invoices to %s.", self.path)
            return False
        logger.info("Saved %d invoice(s) to %s.", len(invoices), self.path)
        return True

    @staticmethod
    def _build_workbook(invoices: Sequence[Invoice]) -> Workbook:
        workbook = Workbook()
        invoices_sheet = workbook.active
        invoices_sheet.title = config.INVOICES_SHEET_NAME
        items_sheet = workbook.create_sheet(config.LINE_ITEMS_SHEET_NAME)

        invoices_sheet.append([header for header, _ in INVOICE_COLUMNS])
        items_sheet.append([header for header, _ in LINE_ITEM_COLUMNS])
        for invoice in invoices:
            document = invoice_to_dict(invoice)
            invoices_sheet.append([_cell(_get(document, key)) for _, key in INVOICE_COLUMNS])
            for item in document["lineItems"]:
                item = dict(item, invoiceId=invoice.id)
                items_sheet.append([_cell(item[key]) for _, key in LINE_ITEM_COLUMNS])
        return workbook
