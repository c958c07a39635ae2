# invoice_editor/core/labels.py

"""
Locale label sets.

LABELS maps a locale tag to a complete label record. Completeness is checked when
this module is imported, so a missing translation fails at startup instead of
surfacing halfway through a render.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from invoice_editor import config
from invoice_editor.core.errors import LabelSetIncompleteError


class LabelSet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Document captions
    invoice: str
    vat_no: str
    bill_to: str
    invoice_details: str
    invoice_number: str
    invoice_date: str
    reference_po: str
    currency: str
    material_no: str
    description: str
    qty: str
    unit: str
    price: str
    total: str
    subtotal: str
    tax: str
    grand_total: str
    payment_terms: str
    bank_details: str
    bank_name: str
    account: str
    swift: str

    # Date convention: placeholders {day}, {month}, {year}
    date_format: str
    month_abbreviations: List[str]

    # Shell notices
    html_exported: str
    pdf_exported: str
    invoice_reset: str
    export_error: str

    # Catalogue display labels
    units: Dict[str, str]
    currencies: Dict[str, str]
    templates: Dict[str, str]


LABELS = {
    "en": {
        "invoice": "INVOICE",
        "vat_no": "VAT No",
        "bill_to": "Bill To:",
        "invoice_details": "Invoice Details:",
        "invoice_number": "Invoice #",
        "invoice_date": "Invoice Date",
        "reference_po": "Ref. PO",
        "currency": "Currency",
        "material_no": "Material No.",
        "description": "Description",
        "qty": "Qty",
        "unit": "Unit",
        "price": "Price",
        "total": "Total",
        "subtotal": "Subtotal",
        "tax": "Tax ({rate}%)",
        "grand_total": "TOTAL",
        "payment_terms": "Payment Terms",
        "bank_details": "Bank Details:",
        "bank_name": "Bank Name",
        "account": "Account",
        "swift": "SWIFT",
        "date_format": "{day} {month} {year}",
        "month_abbreviations": [
            "Jan", "Feb", "Mar", "Apr", "May", "Jun",
            "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
        ],
        "html_exported": "HTML exported successfully!",
        "pdf_exported": "PDF exported successfully!",
        "invoice_reset": "Invoice reset to defaults",
        "export_error": "Failed to export",
        "units": {
            "PC": "PC (Piece)",
            "ST": "ST (Stück)",
            "EA": "EA (Each)",
            "KG": "KG (Kilogram)",
            "M": "M (Meter)",
            "L": "L (Liter)",
            "HR": "HR (Hour)",
            "BOX": "BOX (Box)",
        },
        "currencies": {
            "EUR": "EUR (Euro)",
            "USD": "USD (US Dollar)",
            "GBP": "GBP (British Pound)",
            "CHF": "CHF (Swiss Franc)",
        },
        "templates": {
            "classic": "Classic",
            "modern": "Modern",
            "minimal": "Minimal",
        },
    },
    "de": {
        "invoice": "RECHNUNG",
        "vat_no": "USt-IdNr.",
        "bill_to": "Rechnung an:",
        "invoice_details": "Rechnungsdetails:",
        "invoice_number": "Rechnungsnr.",
        "invoice_date": "Rechnungsdatum",
        "reference_po": "Bestellreferenz",
        "currency": "Währung",
        "material_no": "Materialnr.",
        "description": "Beschreibung",
        "qty": "Menge",
        "unit": "Einheit",
        "price": "Preis",
        "total": "Gesamt",
        "subtotal": "Zwischensumme",
        "tax": "Steuer ({rate}%)",
        "grand_total": "GESAMT",
        "payment_terms": "Zahlungsbedingungen",
        "bank_details": "Bankdaten:",
        "bank_name": "Bankname",
        "account": "Konto",
        "swift": "SWIFT",
        "date_format": "{day}. {month} {year}",
        "month_abbreviations": [
            "Jan.", "Feb.", "März", "Apr.", "Mai", "Juni",
            "Juli", "Aug.", "Sept.", "Okt.", "Nov.", "Dez.",
        ],
        "html_exported": "HTML erfolgreich exportiert!",
        "pdf_exported": "PDF erfolgreich exportiert!",
        "invoice_reset": "Rechnung auf Standardwerte zurückgesetzt",
        "export_error": "Export fehlgeschlagen",
        "units": {
            "PC": "PC (Stück)",
            "ST": "ST (Stück)",
            "EA": "EA (Stück)",
            "KG": "KG (Kilogramm)",
            "M": "M (Meter)",
            "L": "L (Liter)",
            "HR": "HR (Stunde)",
            "BOX": "BOX (Karton)",
        },
        "currencies": {
            "EUR": "EUR (Euro)",
            "USD": "USD (US-Dollar)",
            "GBP": "GBP (Britisches Pfund)",
            "CHF": "CHF (Schweizer Franken)",
        },
        "templates": {
            "classic": "Klassisch",
            "modern": "Modern",
            "minimal": "Minimal",
        },
    },
}

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF"}
FALLBACK_LOCALE = "en"


def _missing_keys(reference: dict, candidate: dict, prefix: str = "") -> List[str]:
    missing = []
    for key, value in reference.items():
        if key not in candidate:
            missing.append(prefix + key)
        elif isinstance(value, dict) and isinstance(candidate[key], dict):
            missing.extend(_missing_keys(value, candidate[key], prefix=f"{prefix}{key}."))
    return missing


def build_label_sets(raw: Dict[str, dict], reference_locale: str = FALLBACK_LOCALE) -> Dict[str, LabelSet]:
    """
    Validates that every locale carries every key of the reference locale and
    returns the parsed label records.

    Raises:
        LabelSetIncompleteError: If any locale misses a key, or a month list is not 12 long.
    """
    reference = raw[reference_locale]
    label_sets = {}
    for locale, labels in raw.items():
        missing = _missing_keys(reference, labels)
        if missing:
            raise LabelSetIncompleteError(f"Locale '{locale}' is missing labels: {', '.join(missing)}")
        if len(labels["month_abbreviations"]) != 12:
            raise LabelSetIncompleteError(f"Locale '{locale}' must define 12 month abbreviations")
        label_sets[locale] = LabelSet(**labels)
    return label_sets


LABEL_SETS = build_label_sets(LABELS)


def normalize_locale(locale: Optional[str]) -> str:
    """
    Maps a locale tag onto a supported locale: 'de-DE', 'DE' and 'de_AT' all give 'de'.
    Anything unrecognised gives the configured default, or 'en' if that is unsupported too.
    """
    default = config.DEFAULT_LOCALE if config.DEFAULT_LOCALE in LABEL_SETS else FALLBACK_LOCALE
    if not locale:
        return default
    language = locale.strip().replace("_", "-").split("-")[0].lower()
    return language if language in LABEL_SETS else default


def get_labels(locale: Optional[str]) -> LabelSet:
    """Returns the label record for a locale tag; never raises."""
    return LABEL_SETS[normalize_locale(locale)]
