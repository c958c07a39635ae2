# invoice_editor/services/filenames.py

import re
from typing import Optional

# Characters that cannot appear in a downloaded file name or a Content-Disposition value.
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def export_filename(invoice_number: str, extension: str, override: Optional[str] = None) -> str:
    """
    Builds the download name for an export.

    'Invoice-{invoice_number}.{extension}' unless an override is given. The override is a
    base name; the extension is appended unless it is already there.

    >>> export_filename("INV-2627-473", "pdf")
    'Invoice-INV-2627-473.pdf'
    >>> export_filename("INV-2627-473", "html", "march")
    'march.html'
    """
    base = override.strip() if override and override.strip() else f"Invoice-{invoice_number}"
    suffix = f".{extension}"
    if base.lower().endswith(suffix):
        base = base[: -len(suffix)]
    base = _UNSAFE_CHARS.sub("-", base).strip(" .") or "Invoice"
    return f"{base}{suffix}"
