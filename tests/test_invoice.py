"""Tests for invoice model operations."""

import random
from datetime import date
from decimal import Decimal

import pytest

from invoice_editor.core import invoice as invoice_ops
from invoice_editor.core.utils import INVOICE_NUMBER_PATTERN, generate_invoice_number
from invoice_editor.models import InvoiceTemplate, PaymentTerms, UnitType


def test_initial_invoice_uses_seed_values(invoice):
    assert invoice.template == InvoiceTemplate.CLASSIC
    assert invoice.vendor.name == "Component Suppliers S.A."
    assert invoice.vendor.vat_number == "DE1234567890"
    assert invoice.invoice_date == "2026-10-19"
    assert invoice.reference_po == "4500000297"
    assert invoice.currency.value == "EUR"
    assert invoice.tax_rate == Decimal("19")
    assert invoice.customer.company_name == "Munich Production GmbH"
    assert invoice.customer.address == "Industriestraße 12, München, Germany, 80331"
    assert [(i.material_no, i.quantity, i.price) for i in invoice.line_items] == [
        ("473", 10, Decimal("50.00")),
        ("475", 10, Decimal("10.00")),
    ]
    assert invoice.bank_details.swift_code == "SAMPLE01"
    assert invoice.payment_terms == PaymentTerms(description="Net 30 Days from Invoice Date", days=30)


def test_invoice_number_format(today):
    number = generate_invoice_number(today, random.Random(7))
    assert number.startswith("INV-2627-")
    assert INVOICE_NUMBER_PATTERN.match(number)
    assert 100 <= int(number[-3:]) <= 999


def test_invoice_number_year_rollover():
    assert generate_invoice_number(date(2099, 1, 1), random.Random(1)).startswith("INV-9900-")


def test_setters_replace_one_field_only(invoice):
    updated = invoice_ops.set_vendor_name(invoice, "ACME")

    assert updated.vendor.name == "ACME"
    assert updated.vendor.vat_number == invoice.vendor.vat_number
    assert updated.customer == invoice.customer
    # The original is untouched
    assert invoice.vendor.name == "Component Suppliers S.A."


@pytest.mark.parametrize(
    "path,value,getter",
    [
        ("vendor.vat_number", "GB999", lambda inv: inv.vendor.vat_number),
        ("invoice_number", "INV-1", lambda inv: inv.invoice_number),
        ("invoice_date", "2026-01-31", lambda inv: inv.invoice_date),
        ("reference_po", "PO-7", lambda inv: inv.reference_po),
        ("customer.company_name", "Beta AG", lambda inv: inv.customer.company_name),
        ("customer.address", "A, B", lambda inv: inv.customer.address),
        ("bank_details.bank_name", "Other Bank", lambda inv: inv.bank_details.bank_name),
        ("bank_details.account_number", "123", lambda inv: inv.bank_details.account_number),
        ("bank_details.swift_code", "XYZ", lambda inv: inv.bank_details.swift_code),
    ],
)
def test_set_field_dispatches_by_path(invoice, path, value, getter):
    assert getter(invoice_ops.set_field(invoice, path, value)) == value


def test_set_field_unknown_path(invoice):
    with pytest.raises(KeyError):
        invoice_ops.set_field(invoice, "vendor.iban", "x")


def test_negative_tax_rate_is_accepted(invoice):
    assert invoice_ops.set_tax_rate(invoice, -5).tax_rate == Decimal("-5")


def test_set_payment_terms_from_dict(invoice):
    updated = invoice_ops.set_payment_terms(invoice, {"description": "Net 14", "days": 14})
    assert updated.payment_terms == PaymentTerms(description="Net 14", days=14)


def test_add_line_item_appends_defaults(invoice):
    updated = invoice_ops.add_line_item(invoice)

    assert len(updated.line_items) == 3
    new_item = updated.line_items[-1]
    assert new_item.quantity == 1
    assert new_item.unit == UnitType.PC
    assert new_item.price == Decimal("0")
    assert new_item.id not in {item.id for item in invoice.line_items}


def test_update_line_item_keeps_position_and_id(invoice):
    target = invoice.line_items[0]
    updated = invoice_ops.update_line_item(invoice, target.id, {"quantity": 3, "price": "2.50"})

    item = updated.line_items[0]
    assert item.id == target.id
    assert item.quantity == 3
    assert item.price == Decimal("2.50")
    assert item.description == target.description
    assert updated.line_items[1] == invoice.line_items[1]


def test_update_unknown_line_item_is_noop(invoice):
    assert invoice_ops.update_line_item(invoice, "missing", {"quantity": 5}) is invoice


def test_update_line_item_ignores_id_changes(invoice):
    target = invoice.line_items[0]
    updated = invoice_ops.update_line_item(invoice, target.id, {"id": "hijack", "description": "X"})
    assert updated.line_items[0].id == target.id
    assert updated.line_items[0].description == "X"


def test_remove_line_item_preserves_order(invoice):
    invoice = invoice_ops.add_line_item(invoice)
    first, second, third = invoice.line_items

    updated = invoice_ops.remove_line_item(invoice, second.id)

    assert [item.id for item in updated.line_items] == [first.id, third.id]


def test_remove_unknown_line_item_is_noop(invoice):
    assert invoice_ops.remove_line_item(invoice, "missing") is invoice


def test_remove_last_line_item_is_allowed_in_core(invoice):
    for item in invoice.line_items:
        invoice = invoice_ops.remove_line_item(invoice, item.id)
    assert invoice.line_items == []


def test_ids_never_reused_across_add_and_remove(invoice):
    seen = {item.id for item in invoice.line_items}
    for _ in range(50):
        invoice = invoice_ops.add_line_item(invoice)
        new_id = invoice.line_items[-1].id
        assert new_id not in seen
        seen.add(new_id)
        invoice = invoice_ops.remove_line_item(invoice, new_id)


def test_reset_restores_seed(invoice, today):
    edited = invoice_ops.set_vendor_name(invoice, "Changed")
    edited = invoice_ops.add_line_item(edited)
    edited = invoice_ops.set_tax_rate(edited, 7)

    fresh = invoice_ops.reset(today)

    assert fresh.vendor == invoice.vendor
    assert fresh.tax_rate == invoice.tax_rate
    assert fresh.customer == invoice.customer
    assert fresh.bank_details == invoice.bank_details
    assert fresh.payment_terms == invoice.payment_terms
    assert INVOICE_NUMBER_PATTERN.match(fresh.invoice_number)
    assert fresh.invoice_date == today.isoformat()
    assert [item.model_dump(exclude={"id"}) for item in fresh.line_items] == [
        item.model_dump(exclude={"id"}) for item in invoice.line_items
    ]
    assert not {item.id for item in fresh.line_items} & {item.id for item in edited.line_items}


def test_regenerate_invoice_number_changes_only_number(invoice, today):
    updated = invoice_ops.regenerate_invoice_number(invoice, today, random.Random(99))

    assert INVOICE_NUMBER_PATTERN.match(updated.invoice_number)
    assert updated.model_dump(exclude={"invoice_number"}) == invoice.model_dump(exclude={"invoice_number"})
