# invoice_editor/config.py

import logging
import os

# --- General Application Configuration ---
# Setting the environment to development by default if not specified
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Rendering Configuration ---
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en")  # Label set used when none (or an unknown one) is requested
PDF_MARGIN_MM = float(os.getenv("PDF_MARGIN_MM", "15"))  # Page margin of the fixed-layout export

# --- Seed Values for a Fresh Invoice ---
# Every new session (and every reset) starts from these values.
# Invoice number, invoice date and line item ids are generated fresh each time.
DEFAULT_TEMPLATE = "classic"
DEFAULT_CURRENCY = "EUR"
DEFAULT_TAX_RATE = "19"
DEFAULT_UNIT = "PC"

seed_vendor = {"name": "Component Suppliers S.A.", "vat_number": "DE1234567890"}
seed_reference_po = "4500000297"
seed_customer = {
    "company_name": "Munich Production GmbH",
    "address": "Industriestraße 12, München, Germany, 80331",
}
seed_line_items = [
    {"material_no": "473", "description": "Electronic Component X", "quantity": 10, "unit": "PC", "price": "50.00"},
    {"material_no": "475", "description": "Copper Oxide", "quantity": 10, "unit": "PC", "price": "10.00"},
]
seed_bank_details = {"bank_name": "Sample Bank", "account_number": "9988776655", "swift_code": "SAMPLE01"}
seed_payment_terms = {"description": "Net 30 Days from Invoice Date", "days": 30}

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logging.getLogger(__name__).debug(
    "Configuration Loaded: Environment=%s, Default Locale=%s", ENVIRONMENT, DEFAULT_LOCALE
)
