"""Tests for the document renderer."""

from decimal import Decimal

import pytest

from invoice_editor.core import invoice as invoice_ops
from invoice_editor.core.labels import get_labels
from invoice_editor.core.renderer import SECTION_ORDER, format_date, render, resolve_layout, split_address
from invoice_editor.core.totals import compute_totals
from invoice_editor.models import Document, InvoiceTemplate


def _render(invoice, locale="en"):
    return render(invoice, compute_totals(invoice.line_items, invoice.tax_rate), locale)


def test_sections_follow_fixed_order():
    document_fields = [name for name in Document.model_fields if name in SECTION_ORDER]
    assert tuple(document_fields) == SECTION_ORDER


def test_render_english(invoice):
    document = _render(invoice)

    assert document.heading == "INVOICE"
    assert document.vendor.name == "Component Suppliers S.A."
    assert document.vendor.vat_label == "VAT No"
    assert document.bill_to.address_lines == ["Industriestraße 12", "München", "Germany", "80331"]
    assert [(f.label, f.value) for f in document.metadata.fields] == [
        ("Invoice #", invoice.invoice_number),
        ("Invoice Date", "19 Oct 2026"),
        ("Ref. PO", "4500000297"),
        ("Currency", "EUR"),
    ]
    assert document.line_items.columns == ["Material No.", "Description", "Qty", "Unit", "Price", "Total"]
    assert document.line_items.rows == [
        ["473", "Electronic Component X", "10", "PC", "50.00", "500.00"],
        ["475", "Copper Oxide", "10", "PC", "10.00", "100.00"],
    ]
    assert document.totals.subtotal.value == "600.00 EUR"
    assert document.totals.tax.label == "Tax (19%)"
    assert document.totals.tax.value == "114.00 EUR"
    assert document.totals.grand_total.label == "TOTAL"
    assert document.totals.grand_total.value == "714.00 EUR"
    assert document.payment_terms.description == "Net 30 Days from Invoice Date"
    assert [f.value for f in document.bank_details.fields] == ["Sample Bank", "9988776655", "SAMPLE01"]


def test_render_german(invoice):
    document = _render(invoice, "de-DE")

    assert document.locale == "de"
    assert document.heading == "RECHNUNG"
    assert document.metadata.fields[1].value == "19. Okt. 2026"
    assert document.totals.tax.label == "Steuer (19%)"
    # Numbers are not re-localized
    assert document.totals.grand_total.value == "714.00 EUR"


def test_unknown_locale_uses_default_labels(invoice):
    assert _render(invoice, "tlh").heading == "INVOICE"


def test_tax_rate_shown_inline_without_trailing_zeros(invoice):
    document = _render(invoice_ops.set_tax_rate(invoice, Decimal("7.50")))
    assert document.totals.tax.label == "Tax (7.5%)"


def test_split_address():
    assert split_address("Street 1, City, Country, 12345") == ["Street 1", "City", "Country", "12345"]
    assert split_address("SingleLine") == ["SingleLine"]
    assert split_address("") == []
    # Only ", " separates lines
    assert split_address("Unit 4,Block B, Town") == ["Unit 4,Block B", "Town"]


@pytest.mark.parametrize(
    "iso,locale,expected",
    [
        ("2026-01-05", "en", "05 Jan 2026"),
        ("2026-03-15", "de", "15. März 2026"),
        ("2026-09-30", "de", "30. Sept. 2026"),
        ("not-a-date", "en", "not-a-date"),
        ("", "en", ""),
    ],
)
def test_format_date(iso, locale, expected):
    assert format_date(iso, get_labels(locale)) == expected


def test_line_total_recomputed_per_row(invoice):
    item = invoice.line_items[0]
    invoice = invoice_ops.update_line_item(invoice, item.id, {"quantity": 3, "price": Decimal("0.335")})

    row = _render(invoice).line_items.rows[0]

    assert row[4] == "0.34"
    assert row[5] == "1.01"


@pytest.mark.parametrize("template", ["modern", "minimal", InvoiceTemplate.MODERN, "retro", None])
def test_templates_without_layout_fall_back_to_classic(invoice, template):
    assert resolve_layout(template) == InvoiceTemplate.CLASSIC
    document = _render(invoice_ops.set_template(invoice, template))
    assert document.template == InvoiceTemplate.CLASSIC


def test_render_is_deterministic(invoice):
    assert _render(invoice) == _render(invoice)
