# invoice_editor/services/html_export.py

import logging
from html import escape
from typing import Optional

from invoice_editor.core.errors import ExportError
from invoice_editor.core.renderer import render
from invoice_editor.models import Document, ExportOptions, ExportResult, Invoice, InvoiceTotals
from invoice_editor.services.filenames import export_filename

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html; charset=utf-8"

# Embedded stylesheet; the exported file references no external assets.
INVOICE_CSS = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
      background: #f3f4f6;
      padding: 40px 20px;
      line-height: 1.6;
    }
    .invoice-container { max-width: 800px; margin: 0 auto; background: white; padding: 48px;
      box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1); }
    .invoice-header { display: flex; justify-content: space-between; align-items: flex-start;
      margin-bottom: 40px; padding-bottom: 24px; border-bottom: 2px solid #1f2937; }
    .company-info h1 { font-size: 24px; font-weight: 700; color: #1f2937; margin-bottom: 8px; }
    .company-info p { color: #6b7280; font-size: 14px; }
    .invoice-title { text-align: right; }
    .invoice-title h2 { font-size: 32px; font-weight: 300; color: #1f2937; letter-spacing: 2px; }
    .invoice-meta { display: grid; grid-template-columns: 1fr 1fr; gap: 32px; margin-bottom: 32px; }
    .bill-to h3, .invoice-details h3, .payment-terms h3, .bank-details h3 {
      font-size: 12px; font-weight: 600; color: #6b7280; text-transform: uppercase;
      letter-spacing: 0.5px; margin-bottom: 8px; }
    .bill-to p { color: #1f2937; font-size: 14px; line-height: 1.6; }
    .details-grid { display: grid; grid-template-columns: auto 1fr; gap: 8px 16px; font-size: 14px; }
    .details-grid .label { color: #6b7280; font-weight: 500; }
    .details-grid .value { color: #1f2937; font-weight: 600; }
    .items-table { width: 100%; border-collapse: collapse; margin-bottom: 32px; }
    .items-table th { background: #f9fafb; padding: 12px 10px; text-align: left; font-size: 12px;
      font-weight: 600; color: #6b7280; text-transform: uppercase; letter-spacing: 0.5px;
      border-bottom: 2px solid #e5e7eb; }
    .items-table td { padding: 10px; border-bottom: 1px solid #e5e7eb; }
    .items-table th:nth-child(3), .items-table td:nth-child(3),
    .items-table th:nth-child(4), .items-table td:nth-child(4) { text-align: center; }
    .items-table th:nth-child(5), .items-table td:nth-child(5),
    .items-table th:last-child, .items-table td:last-child { text-align: right; }
    .totals-section { margin-left: auto; width: 300px; border-top: 2px solid #e5e7eb; padding-top: 16px; }
    .total-row { display: flex; justify-content: space-between; padding: 8px 0; font-size: 14px; }
    .total-row .label { color: #6b7280; }
    .total-row .value { color: #1f2937; font-weight: 600; }
    .total-row.grand-total { border-top: 2px solid #1f2937; margin-top: 8px; padding-top: 16px;
      font-size: 18px; font-weight: 700; }
    .total-row.grand-total .label, .total-row.grand-total .value { color: #1f2937; }
    .payment-terms { margin-top: 24px; padding: 16px; background: #f9fafb; border-radius: 6px; }
    .payment-terms p { color: #1f2937; font-size: 14px; font-weight: 500; }
    .bank-details { margin-top: 40px; padding-top: 24px; border-top: 1px solid #e5e7eb; }
    .bank-grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 16px; font-size: 14px; }
    .bank-item .label { color: #6b7280; font-size: 12px; margin-bottom: 4px; }
    .bank-item .value { color: #1f2937; font-weight: 600; }
    @media print {
      body { background: white; padding: 0; }
      .invoice-container { box-shadow: none; padding: 24px; }
    }
"""


def _e(text: str) -> str:
    return escape(text, quote=True)


def _vendor_html(document: Document) -> str:
    vendor = document.vendor
    return (
        '<div class="invoice-header">\n'
        '  <div class="company-info">\n'
        f"    <h1>{_e(vendor.name)}</h1>\n"
        f"    <p>{_e(vendor.vat_label)}: {_e(vendor.vat_number)}</p>\n"
        "  </div>\n"
        f'  <div class="invoice-title"><h2>{_e(document.heading)}</h2></div>\n'
        "</div>\n"
    )


def _meta_html(document: Document) -> str:
    bill_to = document.bill_to
    # Address lines are separated by <br>, with none after the last line.
    address = "<br>".join(_e(line) for line in bill_to.address_lines)
    name = f"<strong>{_e(bill_to.company_name)}</strong>"
    bill_to_text = f"{name}<br>{address}" if address else name
    details = "".join(
        f'<span class="label">{_e(field.label)}</span><span class="value">{_e(field.value)}</span>'
        for field in document.metadata.fields
    )
    return (
        '<div class="invoice-meta">\n'
        '  <div class="bill-to">\n'
        f"    <h3>{_e(bill_to.heading)}</h3>\n"
        f"    <p>{bill_to_text}</p>\n"
        "  </div>\n"
        '  <div class="invoice-details">\n'
        f"    <h3>{_e(document.metadata.heading)}</h3>\n"
        f'    <div class="details-grid">{details}</div>\n'
        "  </div>\n"
        "</div>\n"
    )


def _items_html(document: Document) -> str:
    table = document.line_items
    header = "".join(f"<th>{_e(column)}</th>" for column in table.columns)
    body = "\n".join(
        "<tr>" + "".join(f"<td>{_e(cell)}</td>" for cell in row) + "</tr>"
        for row in table.rows
    )
    return (
        '<table class="items-table">\n'
        f"<thead><tr>{header}</tr></thead>\n"
        f"<tbody>\n{body}\n</tbody>\n"
        "</table>\n"
    )


def _totals_html(document: Document) -> str:
    totals = document.totals
    rows = [
        ("total-row", totals.subtotal),
        ("total-row", totals.tax),
        ("total-row grand-total", totals.grand_total),
    ]
    inner = "".join(
        f'<div class="{css}"><span class="label">{_e(row.label)}</span>'
        f'<span class="value">{_e(row.value)}</span></div>\n'
        for css, row in rows
    )
    return f'<div class="totals-section">\n{inner}</div>\n'


def _footer_html(document: Document) -> str:
    terms = document.payment_terms
    bank = document.bank_details
    bank_items = "".join(
        f'<div class="bank-item"><div class="label">{_e(field.label)}</div>'
        f'<div class="value">{_e(field.value)}</div></div>'
        for field in bank.fields
    )
    return (
        '<div class="payment-terms">\n'
        f"  <h3>{_e(terms.heading)}</h3>\n"
        f"  <p>{_e(terms.description)}</p>\n"
        "</div>\n"
        '<div class="bank-details">\n'
        f"  <h3>{_e(bank.heading)}</h3>\n"
        f'  <div class="bank-grid">{bank_items}</div>\n'
        "</div>\n"
    )


def document_to_html(document: Document) -> str:
    """
    Serializes a Document into a standalone HTML page.
    All document text is escaped, so markup in invoice fields shows up as literal text.
    """
    body = (
        _vendor_html(document)
        + _meta_html(document)
        + _items_html(document)
        + _totals_html(document)
        + _footer_html(document)
    )
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{_e(document.locale)}">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{_e(document.title)}</title>\n"
        f"  <style>{INVOICE_CSS}  </style>\n"
        "</head>\n"
        "<body>\n"
        f'<div class="invoice-container">\n{body}</div>\n'
        "</body>\n"
        "</html>\n"
    )


def export_html(invoice: Invoice, totals: InvoiceTotals, locale: Optional[str] = None,
                options: Optional[ExportOptions] = None) -> ExportResult:
    """
    Exports the invoice as a self-contained HTML file.

    Args:
        invoice (Invoice): The invoice to export.
        totals (InvoiceTotals): Its computed totals.
        locale (str, optional): Locale tag for labels and dates.
        options (ExportOptions, optional): Filename override.

    Returns:
        ExportResult: 'Invoice-{invoice_number}.html' (or the override) and its UTF-8 content.

    Raises:
        ExportError: If rendering or serialization fails; the cause is chained.
    """
    options = options or ExportOptions()
    try:
        document = render(invoice, totals, locale)
        content = document_to_html(document).encode("utf-8")
        filename = export_filename(invoice.invoice_number, "html", options.filename)
    except Exception as e:
        logger.exception("HTML export failed for invoice %s", invoice.invoice_number)
        raise ExportError("html", cause=e) from e

    logger.info("Exported HTML invoice %s (%d bytes)", filename, len(content))
    return ExportResult(filename=filename, media_type=HTML_MEDIA_TYPE, content=content)
