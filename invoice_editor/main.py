# invoice_editor/main.py

import logging
from typing import Any, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, Field

from invoice_editor.core.errors import ExportError, SessionNotFoundError
from invoice_editor.core.labels import CURRENCY_SYMBOLS, get_labels, normalize_locale
from invoice_editor.models import CurrencyCode, ExportOptions, ExportResult, InvoiceTemplate, UnitType
from invoice_editor.services.coercion import coerce_field_value, coerce_line_item_updates
from invoice_editor.services.html_export import document_to_html
from invoice_editor.services.session_store import InvoiceSession, SessionStore

logger = logging.getLogger(__name__)


class CreateSessionRequest(BaseModel):
    locale: Optional[str] = Field(None, description="Locale tag for labels and dates, e.g. 'en' or 'de'.")


class FieldUpdate(BaseModel):
    path: str = Field(..., description="Dotted field path, e.g. 'vendor.name' or 'tax_rate'.")
    value: Any = Field(None, description="New value. Raw form text is coerced where needed.")


class LineItemUpdate(BaseModel):
    material_no: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[Any] = None
    unit: Optional[str] = None
    price: Optional[Any] = None


class ExportRequest(BaseModel):
    locale: Optional[str] = None
    filename: Optional[str] = Field(None, description="Overrides the name derived from the invoice number.")


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def _get_session(store: SessionStore, session_id: str) -> InvoiceSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _session_payload(session: InvoiceSession) -> dict:
    return {
        "session_id": session.session_id,
        "locale": session.locale,
        "invoice": session.invoice.model_dump(mode="json"),
        "totals": session.totals.model_dump(mode="json"),
    }


def _download(result: ExportResult, notice: str) -> Response:
    # Plain filename for old clients, RFC 5987 form for names outside ASCII.
    ascii_name = result.filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    disposition = f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(result.filename)}"
    return Response(content=result.content, media_type=result.media_type,
                    headers={"Content-Disposition": disposition, "X-Notice": notice})


def create_app(store: Optional[SessionStore] = None) -> FastAPI:
    """Builds the application around an explicitly owned session store."""
    app = FastAPI(
        title="Invoice Editor Backend",
        description="API for editing invoices, computing totals, previewing and exporting them as HTML or PDF.",
        version="0.1.0",
    )
    app.state.store = store if store is not None else SessionStore()

    @app.get("/")
    async def root():
        """Root endpoint providing a welcome message."""
        return {"message": "Welcome to the Invoice Editor Backend. Visit /docs for API documentation."}

    @app.get("/options", summary="Selectable Units, Currencies and Templates")
    async def get_options(locale: Optional[str] = None):
        """Returns the enumerations with their display labels in the requested locale."""
        labels = get_labels(locale)
        return {
            "locale": normalize_locale(locale),
            "units": [{"value": unit.value, "label": labels.units[unit.value]} for unit in UnitType],
            "currencies": [
                {"value": code.value, "label": labels.currencies[code.value], "symbol": CURRENCY_SYMBOLS[code.value]}
                for code in CurrencyCode
            ],
            "templates": [
                {"value": template.value, "label": labels.templates[template.value]} for template in InvoiceTemplate
            ],
        }

    @app.post("/sessions/", status_code=status.HTTP_201_CREATED, summary="Start a New Invoice Session")
    async def create_session(body: Optional[CreateSessionRequest] = None, store: SessionStore = Depends(get_store)):
        session = store.create(locale=body.locale if body else None)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=_session_payload(session))

    @app.get("/sessions/{session_id}", summary="Current Invoice and Totals")
    async def get_session(session_id: str, store: SessionStore = Depends(get_store)):
        return _session_payload(_get_session(store, session_id))

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
        try:
            store.delete(session_id)
        except SessionNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.patch("/sessions/{session_id}/fields", summary="Set One Invoice Field")
    async def set_field(session_id: str, update: FieldUpdate, store: SessionStore = Depends(get_store)):
        """
        Sets a single field, e.g. {"path": "customer.address", "value": "Street 1, City"}.
        Tax rate text that is not a number becomes 0.
        """
        session = _get_session(store, session_id)
        try:
            session.set_field(update.path, coerce_field_value(update.path, update.value))
        except KeyError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.args[0])
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return _session_payload(session)

    @app.post("/sessions/{session_id}/line_items/", summary="Append an Empty Line Item")
    async def add_line_item(session_id: str, store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        session.add_line_item()
        return _session_payload(session)

    @app.patch("/sessions/{session_id}/line_items/{item_id}", summary="Update Line Item Fields")
    async def update_line_item(session_id: str, item_id: str, update: LineItemUpdate,
                               store: SessionStore = Depends(get_store)):
        """Unknown item ids are ignored and the invoice is returned unchanged. Null fields are skipped."""
        session = _get_session(store, session_id)
        updates = update.model_dump(exclude_unset=True, exclude_none=True)
        session.update_line_item(item_id, coerce_line_item_updates(updates))
        return _session_payload(session)

    @app.delete("/sessions/{session_id}/line_items/{item_id}", summary="Remove a Line Item")
    async def remove_line_item(session_id: str, item_id: str, store: SessionStore = Depends(get_store)):
        """The last remaining line item cannot be removed here (409)."""
        session = _get_session(store, session_id)
        items = session.invoice.line_items
        if len(items) == 1 and items[0].id == item_id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail="An invoice needs at least one line item.")
        session.remove_line_item(item_id)
        return _session_payload(session)

    @app.post("/sessions/{session_id}/reset", summary="Reset the Invoice to Defaults")
    async def reset_session(session_id: str, store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        session.reset()
        payload = _session_payload(session)
        payload["message"] = get_labels(session.locale).invoice_reset
        return payload

    @app.post("/sessions/{session_id}/invoice_number/regenerate", summary="Generate a New Invoice Number")
    async def regenerate_invoice_number(session_id: str, store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        session.regenerate_invoice_number()
        return _session_payload(session)

    @app.get("/sessions/{session_id}/document", summary="Rendered Document Structure")
    async def get_document(session_id: str, locale: Optional[str] = None, store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        return session.render(locale).model_dump(mode="json")

    @app.get("/sessions/{session_id}/preview", response_class=HTMLResponse, summary="Live Preview Markup")
    async def get_preview(session_id: str, locale: Optional[str] = None, store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        return HTMLResponse(content=document_to_html(session.render(locale)))

    @app.post("/sessions/{session_id}/export/html", summary="Download the Invoice as HTML")
    async def export_html(session_id: str, body: Optional[ExportRequest] = None,
                          store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        body = body or ExportRequest()
        try:
            result = session.export_html(body.locale, ExportOptions(filename=body.filename))
        except ExportError:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail=get_labels(body.locale or session.locale).export_error)
        return _download(result, get_labels(body.locale or session.locale).html_exported)

    @app.post("/sessions/{session_id}/export/pdf", summary="Download the Invoice as PDF")
    async def export_pdf(session_id: str, body: Optional[ExportRequest] = None,
                         store: SessionStore = Depends(get_store)):
        session = _get_session(store, session_id)
        body = body or ExportRequest()
        try:
            result = await session.export_pdf(body.locale, ExportOptions(filename=body.filename))
        except ExportError:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail=get_labels(body.locale or session.locale).export_error)
        return _download(result, get_labels(body.locale or session.locale).pdf_exported)

    return app


app = create_app()
