"""Invoice domain models.

Amounts are Decimal (decimal(18,2) columns). Tax rate is a percentage in
[0, 100] stored as decimal(5,2).
"""

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar

from pydantic import AliasChoices, BaseModel, Field

from core.models.customer import Customer
from core.models.invoice_item import (
    InvoiceItem,
    InvoiceItemCreate,
    InvoiceItemResponse,
    ItemCalculation,
)
from utils.timezone import now_utc

T = TypeVar("T")


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    ACTIVE = "Active"
    VOID = "Void"
    PAID = "Paid"


class InvoiceAddresses(BaseModel):
    """Billing/shipping snapshot fields that a request may override."""

    billing_address: str | None = Field(None, max_length=255)
    billing_city: str | None = Field(None, max_length=100)
    billing_state: str | None = Field(None, max_length=100)
    billing_zip_code: str | None = Field(None, max_length=20)
    billing_country: str | None = Field(None, max_length=100)
    shipping_address: str | None = Field(None, max_length=255)
    shipping_city: str | None = Field(None, max_length=100)
    shipping_state: str | None = Field(None, max_length=100)
    shipping_zip_code: str | None = Field(None, max_length=20)
    shipping_country: str | None = Field(None, max_length=100)

    def supplied_addresses(self) -> dict[str, str]:
        """Address fields the caller actually set."""
        return self.model_dump(
            include=set(InvoiceAddresses.model_fields),
            exclude_none=True,
        )


class InvoiceCreate(InvoiceAddresses):
    """Data required to create an invoice. Items may be sent as 'items'."""

    customer_id: int = 0
    invoice_date: datetime | None = Field(default_factory=now_utc)
    due_date: datetime | None = None
    tax_rate: Decimal = Decimal("0.00")
    notes: str | None = Field(None, max_length=500)
    invoice_items: list[InvoiceItemCreate] = Field(
        default_factory=list,
        validation_alias=AliasChoices("invoice_items", "items"),
    )


class InvoiceUpdate(InvoiceCreate):
    """Data for a full invoice edit. Same shape as creation."""


class Invoice(BaseModel):
    """Full invoice entity as stored, with its customer and items loaded."""

    id: int
    invoice_number: str
    customer_id: int
    invoice_date: datetime
    due_date: datetime | None = None
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    tax_rate: Decimal
    status: InvoiceStatus
    notes: str | None = None
    billing_address: str | None = None
    billing_city: str | None = None
    billing_state: str | None = None
    billing_zip_code: str | None = None
    billing_country: str | None = None
    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip_code: str | None = None
    shipping_country: str | None = None
    email_sent: bool = False
    email_sent_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    customer: Customer
    items: list[InvoiceItem] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def is_void(self) -> bool:
        return self.status == InvoiceStatus.VOID


class InvoiceResponse(BaseModel):
    """Invoice as returned by the API."""

    id: int
    invoice_number: str
    customer_id: int
    customer_name: str
    customer_email: str
    invoice_date: datetime
    due_date: datetime | None
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    tax_rate: Decimal
    status: InvoiceStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime | None
    email_sent: bool
    email_sent_at: datetime | None
    billing_address: str | None
    billing_city: str | None
    billing_state: str | None
    billing_zip_code: str | None
    billing_country: str | None
    shipping_address: str | None
    shipping_city: str | None
    shipping_state: str | None
    shipping_zip_code: str | None
    shipping_country: str | None
    items: list[InvoiceItemResponse]

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceResponse":
        data = invoice.model_dump(exclude={"customer", "items"})
        return cls(
            **data,
            customer_name=invoice.customer.full_name,
            customer_email=invoice.customer.email,
            items=[InvoiceItemResponse.from_item(item) for item in invoice.items],
        )


class InvoiceSummary(BaseModel):
    """One row of sp_SearchInvoice output."""

    invoice_id: int
    invoice_number: str
    customer_id: int
    customer_name: str
    invoice_date: datetime
    due_date: datetime | None = None
    total_amount: Decimal
    status: str


class InvoiceSearch(BaseModel):
    """Query filters and paging for invoice search."""

    customer_id: int | None = None
    status: InvoiceStatus | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    page_number: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


class InvoiceTotals(BaseModel):
    """Totals computed for a set of items."""

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


class CalculateTotalsRequest(BaseModel):
    items: list[ItemCalculation] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0.00")


class TestEmailRequest(BaseModel):
    # Keeps pytest from trying to collect this model as a test class.
    __test__ = False

    email: str = ""
    subject: str | None = None
    body: str | None = None


class PagedResult(BaseModel, Generic[T]):
    """One page of results plus paging metadata."""

    data: list[T] = Field(default_factory=list)
    total_records: int
    page_number: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(
        cls,
        data: list[T],
        total_records: int,
        page_number: int,
        page_size: int,
    ) -> "PagedResult[T]":
        """
        Assemble a page and derive the paging flags.

        total_pages = ceil(total_records / page_size); the flags are relative
        to page_number, so a page past the end still reports a previous page.
        """
        total_pages = math.ceil(total_records / page_size) if page_size > 0 else 0
        return cls(
            data=data,
            total_records=total_records,
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page_number < total_pages,
            has_previous_page=page_number > 1,
        )
