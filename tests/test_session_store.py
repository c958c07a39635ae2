"""Tests for the in-memory session store."""

from decimal import Decimal

import pytest

from invoice_editor.core.errors import SessionNotFoundError
from invoice_editor.core.utils import INVOICE_NUMBER_PATTERN


def test_sessions_are_isolated(store):
    first = store.create()
    second = store.create()

    first.set_field("vendor.name", "Only First")

    assert second.invoice.vendor.name == "Component Suppliers S.A."
    assert len(store) == 2


def test_get_unknown_session(store):
    with pytest.raises(SessionNotFoundError):
        store.get("nope")


def test_delete_session(store):
    session = store.create()
    store.delete(session.session_id)

    assert session.session_id not in store
    with pytest.raises(SessionNotFoundError):
        store.delete(session.session_id)


def test_totals_follow_mutations(store):
    session = store.create()
    assert session.totals.total == Decimal("714.00")

    session.set_field("tax_rate", 0)
    assert session.totals.total == Decimal("600.00")

    session.add_line_item()
    item_id = session.invoice.line_items[-1].id
    session.update_line_item(item_id, {"quantity": 2, "price": "25"})
    assert session.totals.subtotal == Decimal("650.00")

    session.remove_line_item(item_id)
    assert session.totals.subtotal == Decimal("600.00")


def test_reset_and_regenerate(store):
    session = store.create(locale="de")
    session.set_field("customer.company_name", "Changed GmbH")

    session.reset()
    assert session.invoice.customer.company_name == "Munich Production GmbH"

    session.regenerate_invoice_number()
    assert INVOICE_NUMBER_PATTERN.match(session.invoice.invoice_number)
    assert session.locale == "de"


def test_surface_is_reused_and_refreshed(store):
    session = store.create()
    surface = session.surface()

    session.set_field("vendor.name", "Renamed")

    assert session.surface() is surface
    assert surface.document.vendor.name == "Renamed"


@pytest.mark.asyncio
async def test_session_exports(store):
    session = store.create(locale="de")

    html_result = session.export_html()
    pdf_result = await session.export_pdf()

    assert b"RECHNUNG" in html_result.content
    assert pdf_result.filename == f"Invoice-{session.invoice.invoice_number}.pdf"
