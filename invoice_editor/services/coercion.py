# invoice_editor/services/coercion.py

"""
Input coercion for raw form values.

The invoice operations accept whatever they are given, so the shell turns raw text into
usable values first. Bad input never becomes an error; it falls back to a default.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict


def coerce_quantity(value: Any) -> int:
    """Integer quantity; non-numeric input or anything below 1 becomes 1."""
    try:
        quantity = int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, TypeError, OverflowError):
        return 1
    return quantity if quantity >= 1 else 1


def coerce_number(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Decimal from text or number; non-numeric, NaN or infinite input becomes the default."""
    if isinstance(value, bool):
        return default
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return default
    return number if number.is_finite() else default


def coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def coerce_line_item_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Applies text, quantity and price coercion to a partial line item update."""
    coerced = dict(updates)
    for key in ("material_no", "description", "unit"):
        if key in coerced:
            coerced[key] = coerce_text(coerced[key])
    if "quantity" in coerced:
        coerced["quantity"] = coerce_quantity(coerced["quantity"])
    if "price" in coerced:
        coerced["price"] = coerce_number(coerced["price"])
    return coerced


def coerce_field_value(path: str, value: Any) -> Any:
    """
    Coerces a raw value for a dotted field path. Text fields take the string form of
    whatever arrives, with null becoming an empty string.

    Raises:
        ValueError: If payment_terms is not an object.
    """
    if path == "tax_rate":
        return coerce_number(value)
    if path == "payment_terms":
        if not isinstance(value, dict):
            raise ValueError("payment_terms must be an object with description and days")
        return value
    return coerce_text(value)
