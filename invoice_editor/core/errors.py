# invoice_editor/core/errors.py

"""Error types raised by the invoice editor."""

from typing import Optional


class InvoiceEditorError(Exception):
    """Base class for invoice editor errors."""


class ExportError(InvoiceEditorError):
    """
    Uniform failure of an export adapter.

    The lower-level exception is chained as __cause__ and kept on .cause so the
    caller can show one generic notice and still log what went wrong.
    """

    def __init__(self, export_format: str, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.export_format = export_format
        self.cause = cause
        super().__init__(message or f"Failed to export {export_format.upper()}")


class SessionNotFoundError(InvoiceEditorError, KeyError):
    """Requested session does not exist in the session store."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Session '{self.session_id}' not found"


class LabelSetIncompleteError(InvoiceEditorError):
    """A locale's label record is missing keys present in the reference locale."""


def unknown_field_path(path: str) -> str:
    """Return message for a setter path outside the setter table."""
    return f"Unknown invoice field '{path}'"
