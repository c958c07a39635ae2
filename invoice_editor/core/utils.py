# invoice_editor/core/utils.py

import itertools
import random
import re
import uuid
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

CENT = Decimal("0.01")
INVOICE_NUMBER_PATTERN = re.compile(r"^INV-\d{4}-[1-9]\d{2}$")

# Process-wide sequence; together with the random suffix it keeps line item ids unique
# across any interleaving of add/remove, so a removed id is never handed out again.
_line_item_sequence = itertools.count(1)


def generate_line_item_id() -> str:
    """Returns a fresh line item identifier, e.g. 'item_42_9f1c2a7b3d4e'."""
    return f"item_{next(_line_item_sequence)}_{uuid.uuid4().hex[:12]}"


def generate_invoice_number(today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """
    Generates a display invoice number of the form INV-{YY}{YY+1}-{NNN}.

    Args:
        today (date, optional): Reference date, defaults to the current date.
        rng (random.Random, optional): Random source for NNN, defaults to the module generator.

    Returns:
        str: e.g. 'INV-2627-473' for a date in 2026.
    """
    today = today or date.today()
    year = str(today.year)[-2:]
    next_year = str(today.year + 1)[-2:]
    suffix = (rng or random).randint(100, 999)
    return f"INV-{year}{next_year}-{suffix}"


def get_today_date(today: Optional[date] = None) -> str:
    """Returns today's date in YYYY-MM-DD format."""
    return (today or date.today()).isoformat()


def to_decimal(value: Any) -> Decimal:
    """Converts ints, floats, strings and Decimals to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Any) -> Decimal:
    """Rounds to the cent, half away from zero (2.675 -> 2.68, -2.675 -> -2.68)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Any) -> str:
    """Formats a number with exactly two decimals using a decimal point."""
    return f"{round_money(value):.2f}"


def format_rate(value: Any) -> str:
    """Formats a percentage without superfluous zeros: 19 -> '19', 7.50 -> '7.5'."""
    try:
        rate = to_decimal(value)
    except (InvalidOperation, ValueError):
        return str(value)
    if rate == rate.to_integral_value():
        return str(rate.quantize(Decimal(1)))
    return format(rate.normalize(), "f")
