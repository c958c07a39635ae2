# invoice_editor/core/totals.py

from decimal import Decimal
from typing import Any, Iterable

from invoice_editor.core.utils import round_money, to_decimal
from invoice_editor.models import InvoiceTotals, LineItem


def compute_totals(line_items: Iterable[LineItem], tax_rate: Any) -> InvoiceTotals:
    """
    Computes subtotal, tax amount and grand total.

    Only the line items and the tax rate are read. Arithmetic is exact in Decimal;
    subtotal and tax amount are each rounded half away from zero at the cent, and the
    grand total is their sum, so total == subtotal + tax_amount always holds.

    Args:
        line_items (Iterable[LineItem]): Items to total; order does not matter.
        tax_rate: Tax rate in percent (19 means 19%).

    Returns:
        InvoiceTotals: The derived totals.
    """
    raw_subtotal = sum(
        (Decimal(item.quantity) * to_decimal(item.price) for item in line_items),
        Decimal("0"),
    )
    subtotal = round_money(raw_subtotal)
    tax_amount = round_money(subtotal * to_decimal(tax_rate) / Decimal(100))
    total = round_money(subtotal + tax_amount)
    return InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, total=total)
