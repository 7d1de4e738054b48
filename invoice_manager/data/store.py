"""Persistence for the invoice collection."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from invoice_manager import config
from invoice_manager.data.excel_store import ExcelInvoiceStore
from invoice_manager.models import Invoice, invoice_from_dict, invoice_to_dict

logger = logging.getLogger(__name__)


class InvoiceStore(Protocol):
    """Loads and saves the whole invoice collection in one piece."""

    def load(self) -> List[Invoice]:
        """Return the saved invoices, or an empty list if there are none or they cannot be read."""

    def save(self, invoices: Sequence[Invoice]) -> bool:
        """Replace the saved collection; returns True on success."""


class JsonInvoiceStore:
    """Keeps every invoice in a single JSON document.

    The document is ``{"version": 1, "invoices": [...]}``. A bare list of
    invoices, as written by the earlier unversioned format, is read too.
    """

    def __init__(self, path: Path | str = None) -> None:
        self.path: Path = Path(path) if path else config.STORE_PATH

    def load(self) -> List[Invoice]:
        if not self.path.exists():
            logger.info("No invoice file at %s; starting with an empty list.", self.path)
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            invoices = [invoice_from_dict(record) for record in self._records(payload)]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Could not read invoices from %s (%s); starting with an empty list.", self.path, exc)
            return []
        logger.info("Loaded %d invoice(s) from %s.", len(invoices), self.path)
        return invoices

    @staticmethod
    def _records(payload) -> list:
        if isinstance(payload, list):
            return payload
        if not isinstance(payload, dict):
            raise ValueError("Invoice file is neither a list nor an object.")
        version = payload.get("version")
        if version != config.STORE_FORMAT_VERSION:
            raise ValueError(f"Unsupported invoice file version: {version!r}")
        records = payload["invoices"]
        if not isinstance(records, list):
            raise ValueError("'invoices' is not a list.")
        return records

    def save(self, invoices: Sequence[Invoice]) -> bool:
        payload = {
            "version": config.STORE_FORMAT_VERSION,
            "invoices": [invoice_to_dict(invoice) for invoice in invoices],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            logger.exception("Failed to save invoices to %s.", self.path)
            return False
        logger.info("Saved %d invoice(s) to %s.", len(invoices), self.path)
        return True


def create_store(backend: Optional[str] = None, path: Path | str = None) -> InvoiceStore:
    """Build the store selected by ``backend`` (defaults to ``config.STORAGE_BACKEND``)."""
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "json":
        return JsonInvoiceStore(path)
    if backend == "excel":
        return ExcelInvoiceStore(path)
    raise ValueError(f"Unknown storage backend: {backend!r}")
