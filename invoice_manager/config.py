"""Configuration constants for the Invoice Manager."""

from pathlib import Path

# Which persistence backend to use: "json" or "excel".
STORAGE_BACKEND: str = "json"

# Path to the JSON document holding every saved invoice.
STORE_PATH: Path = Path("data/invoices.json")

# Path to the Excel workbook used by the "excel" backend.
EXCEL_STORE_PATH: Path = Path("data/invoices.xlsx")

# Sheet names inside the Excel workbook.
INVOICES_SHEET_NAME: str = "Invoices"
LINE_ITEMS_SHEET_NAME: str = "LineItems"

# Version written into the JSON payload.
STORE_FORMAT_VERSION: int = 1

# Days between issue date and due date on a new invoice.
DEFAULT_DUE_DAYS: int = 7

# Invoices due within this many days are flagged as "Due Soon".
DUE_SOON_DAYS: int = 7

# Number given to the first invoice when the collection is empty.
DEFAULT_INVOICE_NUMBER: str = "#405"

# Currency label printed next to amounts.
CURRENCY: str = "USD"

# Name of the printer to target; empty means ask with a print dialog.
PRINTER_NAME: str = ""

# Main window title.
WINDOW_TITLE: str = "Invoice Manager"

# Logging.
LOG_DIR: Path = Path("work/logs")
LOG_FILE: Path = LOG_DIR / "invoice_manager.log"
LOG_LEVEL: str = "INFO"
