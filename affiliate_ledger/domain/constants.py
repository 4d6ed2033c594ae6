"""Domain constants for period bookkeeping."""

from decimal import Decimal

CURRENCY_USD = "USD"
CURRENCY_VND = "VND"
SUPPORTED_CURRENCIES = (CURRENCY_USD, CURRENCY_VND)

# Partner id used when a workspace snapshot carries no ``is_self`` partner.
DEFAULT_OWNER_PARTNER_ID = "default-me"
DEFAULT_OWNER_NAME = "Me"

DEFAULT_FALLBACK_USD_RATE = Decimal("25000")

FULL_SHARE = Decimal("100")

AUTO_ENTRY_PREFIX = "auto-"

TAX_METHOD_REVENUE = "revenue"
TAX_METHOD_PROFIT_VAT = "profit_vat"
TAX_METHODS = (TAX_METHOD_REVENUE, TAX_METHOD_PROFIT_VAT)

TAX_BASE_PERSONAL = "personal"
TAX_BASE_TOTAL = "total"
TAX_BASES = (TAX_BASE_PERSONAL, TAX_BASE_TOTAL)

VAT_INPUT_AUTO_SUM = "auto_sum"
VAT_INPUT_MANUAL = "manual"
VAT_INPUT_METHODS = (VAT_INPUT_AUTO_SUM, VAT_INPUT_MANUAL)

ENTRY_INFLOW = "inflow"
ENTRY_OUTFLOW = "outflow"

UNKNOWN_PROJECT_NAME = "Unknown project"


__all__ = [
    "CURRENCY_USD",
    "CURRENCY_VND",
    "SUPPORTED_CURRENCIES",
    "DEFAULT_OWNER_PARTNER_ID",
    "DEFAULT_OWNER_NAME",
    "DEFAULT_FALLBACK_USD_RATE",
    "FULL_SHARE",
    "AUTO_ENTRY_PREFIX",
    "TAX_METHOD_REVENUE",
    "TAX_METHOD_PROFIT_VAT",
    "TAX_METHODS",
    "TAX_BASE_PERSONAL",
    "TAX_BASE_TOTAL",
    "TAX_BASES",
    "VAT_INPUT_AUTO_SUM",
    "VAT_INPUT_MANUAL",
    "VAT_INPUT_METHODS",
    "ENTRY_INFLOW",
    "ENTRY_OUTFLOW",
    "UNKNOWN_PROJECT_NAME",
]
