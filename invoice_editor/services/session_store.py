# invoice_editor/services/session_store.py

import logging
import uuid
from datetime import date
from typing import Any, Dict, Optional

from invoice_editor.core import invoice as invoice_ops
from invoice_editor.core.errors import SessionNotFoundError
from invoice_editor.core.labels import normalize_locale
from invoice_editor.core.renderer import render
from invoice_editor.core.totals import compute_totals
from invoice_editor.models import Document, ExportOptions, ExportResult, Invoice, InvoiceTotals
from invoice_editor.services.html_export import export_html
from invoice_editor.services.pdf_service import InvoiceSurface, export_pdf

logger = logging.getLogger(__name__)


class InvoiceSession:
    """
    Owns the single invoice being edited in one session.

    All changes go through the invoice operations in core.invoice; this class only
    swaps in the returned copy. Totals are derived on every read and never stored.
    """

    def __init__(self, session_id: str, invoice: Optional[Invoice] = None, locale: Optional[str] = None):
        self.session_id = session_id
        self.invoice = invoice or invoice_ops.create_initial_invoice()
        self.locale = normalize_locale(locale)
        self._surface: Optional[InvoiceSurface] = None

    @property
    def totals(self) -> InvoiceTotals:
        return compute_totals(self.invoice.line_items, self.invoice.tax_rate)

    def render(self, locale: Optional[str] = None) -> Document:
        return render(self.invoice, self.totals, locale or self.locale)

    def surface(self, locale: Optional[str] = None) -> InvoiceSurface:
        """Returns this session's surface, refreshed with the current document."""
        document = self.render(locale)
        if self._surface is None:
            self._surface = InvoiceSurface(document)
        else:
            self._surface.update(document)
        return self._surface

    # --- Mutations ---

    def set_field(self, path: str, value: Any) -> Invoice:
        self.invoice = invoice_ops.set_field(self.invoice, path, value)
        return self.invoice

    def add_line_item(self) -> Invoice:
        self.invoice = invoice_ops.add_line_item(self.invoice)
        return self.invoice

    def update_line_item(self, item_id: str, updates: Dict[str, Any]) -> Invoice:
        self.invoice = invoice_ops.update_line_item(self.invoice, item_id, updates)
        return self.invoice

    def remove_line_item(self, item_id: str) -> Invoice:
        self.invoice = invoice_ops.remove_line_item(self.invoice, item_id)
        return self.invoice

    def reset(self, today: Optional[date] = None) -> Invoice:
        self.invoice = invoice_ops.reset(today)
        logger.info("Session %s reset to defaults (invoice %s)", self.session_id, self.invoice.invoice_number)
        return self.invoice

    def regenerate_invoice_number(self) -> Invoice:
        self.invoice = invoice_ops.regenerate_invoice_number(self.invoice)
        return self.invoice

    # --- Exports ---

    def export_html(self, locale: Optional[str] = None, options: Optional[ExportOptions] = None) -> ExportResult:
        return export_html(self.invoice, self.totals, locale or self.locale, options)

    async def export_pdf(self, locale: Optional[str] = None, options: Optional[ExportOptions] = None) -> ExportResult:
        return await export_pdf(self.surface(locale), self.invoice, options)


class SessionStore:
    """
    In-memory registry of editing sessions.
    Nothing is persisted; sessions are lost when the process ends.
    """

    def __init__(self):
        self._sessions: Dict[str, InvoiceSession] = {}

    def create(self, locale: Optional[str] = None) -> InvoiceSession:
        session_id = uuid.uuid4().hex
        session = InvoiceSession(session_id, locale=locale)
        self._sessions[session_id] = session
        logger.info("Created session %s with invoice %s", session_id, session.invoice.invoice_number)
        return session

    def get(self, session_id: str) -> InvoiceSession:
        """
        Raises:
            SessionNotFoundError: If no session has this id.
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Deleted session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
