# invoice_editor/services/pdf_service.py

import asyncio
import logging
from io import BytesIO
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4, portrait
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from invoice_editor.config import PDF_MARGIN_MM
from invoice_editor.core.errors import ExportError
from invoice_editor.core.renderer import render
from invoice_editor.models import Document, ExportOptions, ExportResult, Invoice, InvoiceTotals
from invoice_editor.services.filenames import export_filename

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
PAGE_SIZE = portrait(A4)

INK = colors.HexColor("#1f2937")
MUTED = colors.HexColor("#6b7280")
RULE = colors.HexColor("#e5e7eb")
SHADE = colors.HexColor("#f9fafb")


def _styles() -> dict:
    base = getSampleStyleSheet()
    return {
        "vendor": ParagraphStyle("Vendor", parent=base["Heading1"], fontSize=16, leading=20, textColor=INK, spaceAfter=2),
        "title": ParagraphStyle("Title", parent=base["Heading1"], fontSize=22, leading=26, textColor=INK,
                                fontName="Helvetica", alignment=TA_RIGHT),
        "caption": ParagraphStyle("Caption", parent=base["Normal"], fontSize=8, leading=10, textColor=MUTED,
                                  fontName="Helvetica-Bold", spaceAfter=4),
        "body": ParagraphStyle("Body", parent=base["Normal"], fontSize=9, leading=12, textColor=INK),
        "muted": ParagraphStyle("Muted", parent=base["Normal"], fontSize=9, leading=12, textColor=MUTED),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=8, leading=10, textColor=INK),
        "cell_right": ParagraphStyle("CellRight", parent=base["Normal"], fontSize=8, leading=10, textColor=INK,
                                     alignment=TA_RIGHT),
        "cell_center": ParagraphStyle("CellCenter", parent=base["Normal"], fontSize=8, leading=10, textColor=INK,
                                      alignment=TA_CENTER),
    }


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    # Paragraph parses a small XML dialect, so user text has to be escaped.
    return Paragraph(escape(text), style)


class InvoiceSurface:
    """
    Laid-out, paginated view of a Document on A4 portrait pages.

    One surface belongs to one preview. Its lock serializes exports so two builds never
    share reportlab's layout state; the document can be swapped at any time and the next
    export picks up whatever is current when it acquires the lock.
    """

    def __init__(self, document: Document, margin_mm: float = PDF_MARGIN_MM):
        self.document = document
        self.margin = margin_mm * mm
        self.lock = asyncio.Lock()
        self.page_count = 0

    @property
    def frame_width(self) -> float:
        return PAGE_SIZE[0] - 2 * self.margin

    def update(self, document: Document) -> None:
        self.document = document

    def layout(self, document: Optional[Document] = None) -> List[Flowable]:
        """Builds a fresh story of flowables in section order. Flowables are single use."""
        document = document or self.document
        styles = _styles()
        width = self.frame_width
        elements: List[Flowable] = []

        # --- Vendor and document heading ---
        vendor = [
            _p(document.vendor.name, styles["vendor"]),
            _p(f"{document.vendor.vat_label}: {document.vendor.vat_number}", styles["muted"]),
        ]
        # splitInRow lets a row taller than the frame continue on the next page.
        header = Table([[vendor, _p(document.heading, styles["title"])]], colWidths=[width * 0.6, width * 0.4],
                       splitInRow=1)
        header.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, 0), 1.5, INK),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        elements.append(header)
        elements.append(Spacer(1, 8 * mm))

        # --- Bill to and invoice details ---
        # Address lines are top-level flowables so a long address can break between pages.
        elements.append(_p(document.bill_to.heading, styles["caption"]))
        elements.append(Paragraph(f"<b>{escape(document.bill_to.company_name)}</b>", styles["body"]))
        elements.extend(_p(line, styles["body"]) for line in document.bill_to.address_lines)
        elements.append(Spacer(1, 6 * mm))

        elements.append(_p(document.metadata.heading, styles["caption"]))
        details = Table(
            [[_p(field.label, styles["muted"]), _p(field.value, styles["body"])] for field in document.metadata.fields],
            colWidths=[width * 0.25, width * 0.75],
            splitInRow=1,
        )
        details.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 1),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
        ]))
        elements.append(details)
        elements.append(Spacer(1, 8 * mm))

        # --- Line items ---
        # repeatRows keeps the column header on every page the table spills onto.
        table = document.line_items
        data = [[_p(column, styles["caption"]) for column in table.columns]]
        for row in table.rows:
            material_no, description, quantity, unit, price, line_total = row
            data.append([
                _p(material_no, styles["cell"]),
                _p(description, styles["cell"]),
                _p(quantity, styles["cell_center"]),
                _p(unit, styles["cell_center"]),
                _p(price, styles["cell_right"]),
                _p(line_total, styles["cell_right"]),
            ])
        items_table = Table(
            data,
            colWidths=[width * 0.15, width * 0.37, width * 0.1, width * 0.1, width * 0.13, width * 0.15],
            repeatRows=1,
            splitInRow=1,
        )
        items_table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), SHADE),
            ("LINEBELOW", (0, 0), (-1, 0), 1.5, RULE),
            ("LINEBELOW", (0, 1), (-1, -1), 0.5, RULE),
            ("FONTSIZE", (0, 1), (-1, -1), 8),
            ("ALIGN", (2, 0), (3, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        elements.append(items_table)
        elements.append(Spacer(1, 6 * mm))

        # --- Totals ---
        totals = document.totals
        totals_table = Table(
            [[totals.subtotal.label, totals.subtotal.value],
             [totals.tax.label, totals.tax.value],
             [totals.grand_total.label, totals.grand_total.value]],
            colWidths=[width * 0.75, width * 0.25],
        )
        totals_table.setStyle(TableStyle([
            ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
            ("FONTSIZE", (0, 0), (-1, 1), 9),
            ("TEXTCOLOR", (0, 0), (0, 1), MUTED),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, -1), (-1, -1), 12),
            ("LINEABOVE", (0, -1), (-1, -1), 1.5, INK),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        elements.append(totals_table)
        elements.append(Spacer(1, 8 * mm))

        # --- Payment terms ---
        elements.append(_p(document.payment_terms.heading, styles["caption"]))
        elements.append(_p(document.payment_terms.description, styles["body"]))
        elements.append(Spacer(1, 8 * mm))

        # --- Bank details ---
        elements.append(_p(document.bank_details.heading, styles["caption"]))
        bank_table = Table(
            [[_p(field.label, styles["muted"]) for field in document.bank_details.fields],
             [_p(field.value, styles["body"]) for field in document.bank_details.fields]],
            colWidths=[width / 3] * 3,
            splitInRow=1,
        )
        bank_table.setStyle(TableStyle([
            ("LINEABOVE", (0, 0), (-1, 0), 0.5, RULE),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ]))
        elements.append(bank_table)
        return elements

    def build_pdf(self) -> bytes:
        """
        Lays the current document out on A4 portrait pages and returns the PDF bytes.
        Content taller than one page continues on the next page. Blocking; call via export_pdf.
        """
        document = self.document
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=PAGE_SIZE,
            leftMargin=self.margin, rightMargin=self.margin,
            topMargin=self.margin, bottomMargin=self.margin,
            title=document.title,
        )
        doc.build(self.layout(document))
        self.page_count = doc.page
        return buffer.getvalue()


def render_surface(invoice: Invoice, totals: InvoiceTotals, locale: Optional[str] = None) -> InvoiceSurface:
    """Renders an invoice and lays it out on a new surface."""
    return InvoiceSurface(render(invoice, totals, locale))


async def export_pdf(surface: InvoiceSurface, invoice: Invoice,
                     options: Optional[ExportOptions] = None) -> ExportResult:
    """
    Exports a laid-out surface as a paginated PDF.

    Exports on the same surface run one at a time: a second call waits until the first
    has finished. The build itself runs in a worker thread.

    Args:
        surface (InvoiceSurface): The surface to export.
        invoice (Invoice): The invoice shown on the surface; used for the file name.
        options (ExportOptions, optional): Filename override.

    Returns:
        ExportResult: 'Invoice-{invoice_number}.pdf' (or the override) and the PDF bytes.

    Raises:
        ExportError: If layout or serialization fails; the cause is chained.
    """
    options = options or ExportOptions()
    filename = export_filename(invoice.invoice_number, "pdf", options.filename)

    async with surface.lock:
        try:
            content = await asyncio.to_thread(surface.build_pdf)
        except Exception as e:
            logger.exception("PDF export failed for invoice %s", invoice.invoice_number)
            raise ExportError("pdf", cause=e) from e
        # page_count belongs to this build only while the lock is held.
        logger.info("Exported PDF invoice %s (%d pages, %d bytes)", filename, surface.page_count, len(content))

    return ExportResult(filename=filename, media_type=PDF_MEDIA_TYPE, content=content)
