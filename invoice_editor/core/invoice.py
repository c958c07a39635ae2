# invoice_editor/core/invoice.py

"""
Invoice model operations.

Every function takes an Invoice and returns a new Invoice; the argument is never
modified. No validation happens here: whatever the caller passes is stored, and
coercion of raw user input is the presentation shell's job.
"""

import random
from datetime import date
from typing import Any, Callable, Dict, Optional

from invoice_editor import config
from invoice_editor.core.errors import unknown_field_path
from invoice_editor.core.utils import (
    generate_invoice_number,
    generate_line_item_id,
    get_today_date,
    to_decimal,
)
from invoice_editor.models import (
    BankDetails,
    CompanyInfo,
    CurrencyCode,
    CustomerInfo,
    Invoice,
    InvoiceTemplate,
    LineItem,
    PaymentTerms,
    UnitType,
)

LINE_ITEM_FIELDS = ("material_no", "description", "quantity", "unit", "price")


def create_line_item(**fields: Any) -> LineItem:
    """Creates a line item with a fresh id and default values (quantity 1, unit PC, price 0)."""
    values = {
        "id": generate_line_item_id(),
        "material_no": "",
        "description": "",
        "quantity": 1,
        "unit": UnitType(config.DEFAULT_UNIT),
        "price": to_decimal("0"),
    }
    values.update(fields)
    values["price"] = to_decimal(values["price"])
    return LineItem(**values)


def create_initial_invoice(today: Optional[date] = None, rng: Optional[random.Random] = None) -> Invoice:
    """
    Builds the seeded invoice a new session starts with.
    Invoice number, date and line item ids are generated; all other values come from config.
    """
    return Invoice(
        template=InvoiceTemplate(config.DEFAULT_TEMPLATE),
        vendor=CompanyInfo(**config.seed_vendor),
        invoice_number=generate_invoice_number(today, rng),
        invoice_date=get_today_date(today),
        reference_po=config.seed_reference_po,
        currency=CurrencyCode(config.DEFAULT_CURRENCY),
        tax_rate=to_decimal(config.DEFAULT_TAX_RATE),
        customer=CustomerInfo(**config.seed_customer),
        line_items=[create_line_item(**item) for item in config.seed_line_items],
        bank_details=BankDetails(**config.seed_bank_details),
        payment_terms=PaymentTerms(**config.seed_payment_terms),
    )


def reset(today: Optional[date] = None, rng: Optional[random.Random] = None) -> Invoice:
    """Returns a fresh seeded invoice; nothing from the previous invoice is carried over."""
    return create_initial_invoice(today, rng)


def regenerate_invoice_number(invoice: Invoice, today: Optional[date] = None,
                              rng: Optional[random.Random] = None) -> Invoice:
    return invoice.model_copy(update={"invoice_number": generate_invoice_number(today, rng)})


# --- Field setters ---

def _set_top(invoice: Invoice, field: str, value: Any) -> Invoice:
    return invoice.model_copy(update={field: value})


def _set_nested(invoice: Invoice, group: str, field: str, value: Any) -> Invoice:
    current = getattr(invoice, group)
    return invoice.model_copy(update={group: current.model_copy(update={field: value})})


def set_template(invoice: Invoice, template: Any) -> Invoice:
    return _set_top(invoice, "template", template)


def set_vendor_name(invoice: Invoice, name: str) -> Invoice:
    return _set_nested(invoice, "vendor", "name", name)


def set_vendor_vat_number(invoice: Invoice, vat_number: str) -> Invoice:
    return _set_nested(invoice, "vendor", "vat_number", vat_number)


def set_invoice_number(invoice: Invoice, invoice_number: str) -> Invoice:
    return _set_top(invoice, "invoice_number", invoice_number)


def set_invoice_date(invoice: Invoice, invoice_date: str) -> Invoice:
    return _set_top(invoice, "invoice_date", invoice_date)


def set_reference_po(invoice: Invoice, reference_po: str) -> Invoice:
    return _set_top(invoice, "reference_po", reference_po)


def set_currency(invoice: Invoice, currency: Any) -> Invoice:
    return _set_top(invoice, "currency", currency)


def set_tax_rate(invoice: Invoice, tax_rate: Any) -> Invoice:
    return _set_top(invoice, "tax_rate", to_decimal(tax_rate))


def set_customer_company_name(invoice: Invoice, company_name: str) -> Invoice:
    return _set_nested(invoice, "customer", "company_name", company_name)


def set_customer_address(invoice: Invoice, address: str) -> Invoice:
    return _set_nested(invoice, "customer", "address", address)


def set_bank_name(invoice: Invoice, bank_name: str) -> Invoice:
    return _set_nested(invoice, "bank_details", "bank_name", bank_name)


def set_account_number(invoice: Invoice, account_number: str) -> Invoice:
    return _set_nested(invoice, "bank_details", "account_number", account_number)


def set_swift_code(invoice: Invoice, swift_code: str) -> Invoice:
    return _set_nested(invoice, "bank_details", "swift_code", swift_code)


def set_payment_terms(invoice: Invoice, payment_terms: Any) -> Invoice:
    """Replaces the whole payment terms group; accepts a PaymentTerms or a dict of its fields."""
    if isinstance(payment_terms, dict):
        payment_terms = PaymentTerms(**payment_terms)
    return _set_top(invoice, "payment_terms", payment_terms)


# Closed table of dotted field paths accepted by set_field.
FIELD_SETTERS: Dict[str, Callable[[Invoice, Any], Invoice]] = {
    "template": set_template,
    "vendor.name": set_vendor_name,
    "vendor.vat_number": set_vendor_vat_number,
    "invoice_number": set_invoice_number,
    "invoice_date": set_invoice_date,
    "reference_po": set_reference_po,
    "currency": set_currency,
    "tax_rate": set_tax_rate,
    "customer.company_name": set_customer_company_name,
    "customer.address": set_customer_address,
    "bank_details.bank_name": set_bank_name,
    "bank_details.account_number": set_account_number,
    "bank_details.swift_code": set_swift_code,
    "payment_terms": set_payment_terms,
}


def set_field(invoice: Invoice, path: str, value: Any) -> Invoice:
    """
    Dispatches to the setter registered for a dotted field path.

    Raises:
        KeyError: If the path is not in FIELD_SETTERS.
    """
    setter = FIELD_SETTERS.get(path)
    if setter is None:
        raise KeyError(unknown_field_path(path))
    return setter(invoice, value)


# --- Line items ---

def add_line_item(invoice: Invoice) -> Invoice:
    return invoice.model_copy(update={"line_items": [*invoice.line_items, create_line_item()]})


def update_line_item(invoice: Invoice, item_id: str, updates: Dict[str, Any]) -> Invoice:
    """
    Replaces the listed fields of the item with the given id, keeping its position and id.
    Unknown ids leave the invoice unchanged; keys outside LINE_ITEM_FIELDS are ignored.
    """
    changes = {key: value for key, value in updates.items() if key in LINE_ITEM_FIELDS}
    if "price" in changes:
        changes["price"] = to_decimal(changes["price"])

    found = False
    line_items = []
    for item in invoice.line_items:
        if item.id == item_id:
            found = True
            item = item.model_copy(update=changes)
        line_items.append(item)

    if not found:
        return invoice
    return invoice.model_copy(update={"line_items": line_items})


def remove_line_item(invoice: Invoice, item_id: str) -> Invoice:
    """
    Removes the item with the given id, preserving the order of the rest.
    No minimum is enforced here; the last item can be removed.
    """
    line_items = [item for item in invoice.line_items if item.id != item_id]
    if len(line_items) == len(invoice.line_items):
        return invoice
    return invoice.model_copy(update={"line_items": line_items})
