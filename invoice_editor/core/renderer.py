# invoice_editor/core/renderer.py

"""Turns an invoice and its totals into a locale-aware Document."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from invoice_editor.core.labels import LabelSet, get_labels, normalize_locale
from invoice_editor.core.utils import format_amount, format_rate, to_decimal
from invoice_editor.models import (
    BankDetailsBlock,
    BillToBlock,
    Document,
    Invoice,
    InvoiceTemplate,
    InvoiceTotals,
    LabeledValue,
    LineItemTable,
    MetadataBlock,
    PaymentTermsBlock,
    TotalsBlock,
    VendorBlock,
)

logger = logging.getLogger(__name__)

# Order in which every export adapter must emit the sections.
SECTION_ORDER = (
    "vendor",
    "heading",
    "bill_to",
    "metadata",
    "line_items",
    "totals",
    "payment_terms",
    "bank_details",
)

ADDRESS_SEPARATOR = ", "

# Templates with a layout of their own. Everything else is drawn with the classic layout.
IMPLEMENTED_LAYOUTS = (InvoiceTemplate.CLASSIC,)


def resolve_layout(template: Any) -> InvoiceTemplate:
    """
    Returns the layout used for a template value.
    MODERN and MINIMAL have no layout yet and alias CLASSIC, as do values outside the enum.
    """
    try:
        requested = InvoiceTemplate(getattr(template, "value", template))
    except ValueError:
        logger.warning("Unknown invoice template %r, using classic layout", template)
        return InvoiceTemplate.CLASSIC
    if requested in IMPLEMENTED_LAYOUTS:
        return requested
    return InvoiceTemplate.CLASSIC


def format_date(iso_date: str, labels: LabelSet) -> str:
    """
    Formats a YYYY-MM-DD string as day, abbreviated month, full year in the label set's
    convention ('19 Oct 2026' / '19. Okt. 2026'). Unparsable input is returned unchanged.
    """
    try:
        parsed = date.fromisoformat(iso_date)
    except (TypeError, ValueError):
        return "" if iso_date is None else str(iso_date)
    return labels.date_format.format(
        day=f"{parsed.day:02d}",
        month=labels.month_abbreviations[parsed.month - 1],
        year=parsed.year,
    )


def split_address(address: str) -> List[str]:
    """Splits 'Street 1, City, Country' into display lines; an empty address has none."""
    if not address:
        return []
    return address.split(ADDRESS_SEPARATOR)


def _enum_text(value: Any) -> str:
    return str(getattr(value, "value", value))


def _money(value: Decimal, currency: str) -> str:
    return f"{format_amount(value)} {currency}"


def render(invoice: Invoice, totals: InvoiceTotals, locale: Optional[str] = None) -> Document:
    """
    Renders an invoice into a Document.

    Args:
        invoice (Invoice): The invoice to render.
        totals (InvoiceTotals): Totals computed for the invoice; displayed as given.
        locale (str, optional): Locale tag selecting labels and date convention.
                                Unknown tags fall back to the default label set.

    Returns:
        Document: Sections in SECTION_ORDER.
    """
    locale = normalize_locale(locale)
    labels = get_labels(locale)
    currency = _enum_text(invoice.currency)

    rows = []
    for item in invoice.line_items:
        price = to_decimal(item.price)
        rows.append([
            item.material_no,
            item.description,
            str(item.quantity),
            _enum_text(item.unit),
            format_amount(price),
            format_amount(Decimal(item.quantity) * price),
        ])

    return Document(
        template=resolve_layout(invoice.template),
        locale=locale,
        title=f"{labels.invoice} {invoice.invoice_number}",
        vendor=VendorBlock(
            name=invoice.vendor.name,
            vat_label=labels.vat_no,
            vat_number=invoice.vendor.vat_number,
        ),
        heading=labels.invoice,
        bill_to=BillToBlock(
            heading=labels.bill_to,
            company_name=invoice.customer.company_name,
            address_lines=split_address(invoice.customer.address),
        ),
        metadata=MetadataBlock(
            heading=labels.invoice_details,
            fields=[
                LabeledValue(label=labels.invoice_number, value=invoice.invoice_number),
                LabeledValue(label=labels.invoice_date, value=format_date(invoice.invoice_date, labels)),
                LabeledValue(label=labels.reference_po, value=invoice.reference_po),
                LabeledValue(label=labels.currency, value=currency),
            ],
        ),
        line_items=LineItemTable(
            columns=[labels.material_no, labels.description, labels.qty, labels.unit, labels.price, labels.total],
            rows=rows,
        ),
        totals=TotalsBlock(
            subtotal=LabeledValue(label=labels.subtotal, value=_money(totals.subtotal, currency)),
            tax=LabeledValue(
                label=labels.tax.format(rate=format_rate(invoice.tax_rate)),
                value=_money(totals.tax_amount, currency),
            ),
            grand_total=LabeledValue(label=labels.grand_total, value=_money(totals.total, currency)),
        ),
        payment_terms=PaymentTermsBlock(
            heading=labels.payment_terms,
            description=invoice.payment_terms.description,
        ),
        bank_details=BankDetailsBlock(
            heading=labels.bank_details,
            fields=[
                LabeledValue(label=labels.bank_name, value=invoice.bank_details.bank_name),
                LabeledValue(label=labels.account, value=invoice.bank_details.account_number),
                LabeledValue(label=labels.swift, value=invoice.bank_details.swift_code),
            ],
        ),
    )
