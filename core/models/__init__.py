"""Core domain models."""

from core.models.customer import Customer, CustomerCreate
from core.models.invoice_item import (
    InvoiceItem, InvoiceItemCreate, InvoiceItemResponse, ItemCalculation,
)
from core.models.invoice import (
    Invoice, InvoiceCreate, InvoiceUpdate, InvoiceStatus, InvoiceAddresses,
    InvoiceResponse, InvoiceSummary, InvoiceSearch, InvoiceTotals,
    CalculateTotalsRequest, TestEmailRequest, PagedResult,
)

__all__ = [
    # Customer
    "Customer", "CustomerCreate",
    # InvoiceItem
    "InvoiceItem", "InvoiceItemCreate", "InvoiceItemResponse", "ItemCalculation",
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceUpdate", "InvoiceStatus", "InvoiceAddresses",
    "InvoiceResponse", "InvoiceSummary", "InvoiceSearch", "InvoiceTotals",
    # Requests / paging
    "CalculateTotalsRequest", "TestEmailRequest", "PagedResult",
]
