"""Tests for the HTML export."""

from html.parser import HTMLParser

import pytest

from invoice_editor.core import invoice as invoice_ops
from invoice_editor.core.errors import ExportError
from invoice_editor.core.totals import compute_totals
from invoice_editor.models import ExportOptions
from invoice_editor.services import html_export
from invoice_editor.services.filenames import export_filename


class _TagCollector(HTMLParser):
    """Collects start tags, end tags and text so tests can check structure."""

    VOID = {"meta", "br"}

    def __init__(self):
        super().__init__()
        self.stack = []
        self.balanced = True
        self.tags = []
        self.text = []

    def handle_starttag(self, tag, attrs):
        self.tags.append(tag)
        if tag not in self.VOID:
            self.stack.append(tag)

    def handle_endtag(self, tag):
        if not self.stack or self.stack.pop() != tag:
            self.balanced = False

    def handle_data(self, data):
        self.text.append(data)


def _parse(content: bytes) -> _TagCollector:
    parser = _TagCollector()
    parser.feed(content.decode("utf-8"))
    parser.close()
    return parser


def _export(invoice, locale="en", options=None):
    return html_export.export_html(invoice, compute_totals(invoice.line_items, invoice.tax_rate), locale, options)


def test_default_filename_and_type(invoice):
    result = _export(invoice)

    assert result.filename == f"Invoice-{invoice.invoice_number}.html"
    assert result.media_type.startswith("text/html")
    assert result.content.startswith(b"<!DOCTYPE html>")


def test_filename_override(invoice):
    assert _export(invoice, options=ExportOptions(filename="march")).filename == "march.html"
    assert _export(invoice, options=ExportOptions(filename="march.html")).filename == "march.html"


def test_filename_is_sanitized():
    assert export_filename("INV/26:27", "pdf") == "Invoice-INV-26-27.pdf"
    assert export_filename("X", "pdf", "   ") == "Invoice-X.pdf"


def test_document_is_self_contained(invoice):
    content = _export(invoice).content.decode("utf-8")

    assert "<style>" in content
    assert "<link" not in content
    assert "<script" not in content
    assert "src=" not in content


def test_sections_in_order(invoice):
    content = _export(invoice).content.decode("utf-8")
    markers = ["invoice-header", "INVOICE", "bill-to", "invoice-details", "items-table",
               "totals-section", "payment-terms", "bank-details"]
    positions = [content.index(f'class="{m}"') if m != "INVOICE" else content.index("<h2>INVOICE</h2>")
                 for m in markers]
    assert positions == sorted(positions)


def test_markup_in_fields_is_escaped(invoice):
    invoice = invoice_ops.set_customer_company_name(invoice, "<b>Evil</b> & Co <script>alert(1)</script>")
    invoice = invoice_ops.set_customer_address(invoice, 'Main "St", <City>')

    result = _export(invoice)
    parser = _parse(result.content)

    assert parser.balanced
    assert "script" not in parser.tags
    assert parser.tags.count("html") == 1
    text = "".join(parser.text)
    assert "<b>Evil</b> & Co <script>alert(1)</script>" in text
    assert "<City>" in text


def test_address_lines_joined_with_breaks(invoice):
    content = _export(invoice_ops.set_customer_address(invoice, "Street 1, City, Country, 12345")).content.decode()
    assert "Street 1<br>City<br>Country<br>12345</p>" in content


def test_single_line_address_has_no_trailing_break(invoice):
    content = _export(invoice_ops.set_customer_address(invoice, "SingleLine")).content.decode()
    assert "SingleLine</p>" in content
    assert "SingleLine<br>" not in content


def test_german_export(invoice):
    content = _export(invoice, "de").content.decode("utf-8")
    assert '<html lang="de">' in content
    assert "RECHNUNG" in content
    assert "19. Okt. 2026" in content


def test_unknown_template_exports_classic(invoice):
    result = _export(invoice_ops.set_template(invoice, "fancy"))
    assert _parse(result.content).balanced


def test_failure_is_wrapped(invoice, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("renderer exploded")

    monkeypatch.setattr(html_export, "render", broken)

    with pytest.raises(ExportError) as excinfo:
        _export(invoice)

    assert excinfo.value.export_format == "html"
    assert isinstance(excinfo.value.cause, RuntimeError)
    assert excinfo.value.__cause__ is excinfo.value.cause
