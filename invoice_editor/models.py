# invoice_editor/models.py

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceTemplate(str, Enum):
    """Layout variants. Only CLASSIC has a concrete layout; the others render as classic."""
    CLASSIC = "classic"
    MODERN = "modern"
    MINIMAL = "minimal"


class CurrencyCode(str, Enum):
    """Display-only currency label. No conversion is ever performed."""
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    CHF = "CHF"


class UnitType(str, Enum):
    PC = "PC"
    ST = "ST"
    EA = "EA"
    KG = "KG"
    M = "M"
    L = "L"
    HR = "HR"
    BOX = "BOX"


class LineItem(BaseModel):
    """
    Represents a single billable row on an invoice.
    The id only addresses the item inside its invoice and carries no business meaning.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque identifier, unique within the session.")
    material_no: str = Field("", description="Material number of the item.")
    description: str = Field("", description="Description of the item or service.")
    quantity: int = Field(1, description="Quantity of the item; the shell floors invalid input to 1.")
    unit: UnitType = Field(UnitType.PC, description="Unit of measurement.")
    price: Decimal = Field(Decimal("0"), description="Unit price (not totalled).")


class CompanyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    vat_number: str = ""


class CustomerInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    company_name: str = ""
    address: str = Field("", description="Comma separated address, split into display lines on ', '.")


class BankDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    bank_name: str = ""
    account_number: str = ""
    swift_code: str = ""


class PaymentTerms(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    days: int = 0


class Invoice(BaseModel):
    """
    Represents the complete editable state of one invoice.
    Instances are never mutated; every operation in core.invoice returns a new copy.
    """
    model_config = ConfigDict(frozen=True)

    template: InvoiceTemplate = Field(InvoiceTemplate.CLASSIC, description="Layout variant.")
    vendor: CompanyInfo = Field(default_factory=CompanyInfo)
    invoice_number: str = Field(..., description="Display number, e.g. INV-2627-473. Not guaranteed unique.")
    invoice_date: str = Field(..., description="Date the invoice was issued (YYYY-MM-DD format).")
    reference_po: str = ""
    currency: CurrencyCode = CurrencyCode.EUR
    tax_rate: Decimal = Field(Decimal("0"), description="Tax rate in percent, e.g. 19 for 19%.")
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    line_items: List[LineItem] = Field(default_factory=list, description="Line items in display order.")
    bank_details: BankDetails = Field(default_factory=BankDetails)
    payment_terms: PaymentTerms = Field(default_factory=PaymentTerms)


class InvoiceTotals(BaseModel):
    """Derived totals. Never stored on the invoice, always recomputed."""
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


# --- Rendered document ---

class LabeledValue(BaseModel):
    label: str
    value: str


class VendorBlock(BaseModel):
    name: str
    vat_label: str
    vat_number: str


class BillToBlock(BaseModel):
    heading: str
    company_name: str
    address_lines: List[str] = Field(default_factory=list)


class MetadataBlock(BaseModel):
    heading: str
    fields: List[LabeledValue] = Field(default_factory=list)


class LineItemTable(BaseModel):
    columns: List[str]
    rows: List[List[str]] = Field(default_factory=list)


class TotalsBlock(BaseModel):
    subtotal: LabeledValue
    tax: LabeledValue
    grand_total: LabeledValue


class PaymentTermsBlock(BaseModel):
    heading: str
    description: str


class BankDetailsBlock(BaseModel):
    heading: str
    fields: List[LabeledValue] = Field(default_factory=list)


class Document(BaseModel):
    """
    Locale-aware presentational view of an invoice.
    Field order is the section order both export adapters reproduce.
    """
    template: InvoiceTemplate
    locale: str
    title: str
    vendor: VendorBlock
    heading: str
    bill_to: BillToBlock
    metadata: MetadataBlock
    line_items: LineItemTable
    totals: TotalsBlock
    payment_terms: PaymentTermsBlock
    bank_details: BankDetailsBlock


# --- Export ---

class ExportOptions(BaseModel):
    filename: Optional[str] = Field(None, description="Overrides the name derived from the invoice number.")


class ExportResult(BaseModel):
    filename: str
    media_type: str
    content: bytes
