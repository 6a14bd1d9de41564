"""Invoice line item domain models.

Money is Decimal end to end. Columns are decimal(18,2); quantity is
decimal(10,2) and percentages decimal(5,2).
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class InvoiceItemCreate(BaseModel):
    """
    One line item in a create/update request.

    Numeric ranges are checked by core.calculation.validate_invoice_item,
    which reports every problem as a message in the error list.
    """

    product_name: str = Field("", max_length=255)
    description: str | None = Field(None, max_length=500)
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")
    unit: str | None = Field(None, max_length=50)


class ItemCalculation(BaseModel):
    """Item shape accepted by the totals preview."""

    product_name: str = Field("", max_length=255)
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")


class InvoiceItem(BaseModel):
    """Full invoice item entity as stored."""

    id: int
    invoice_id: int
    product_name: str
    description: str | None = None
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")
    line_total: Decimal
    unit: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @property
    def line_total_before_discount(self) -> Decimal:
        return self.quantity * self.unit_price


class InvoiceItemResponse(BaseModel):
    """Line item as returned by the API."""

    id: int
    product_name: str
    description: str | None
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    line_total: Decimal
    unit: str | None

    @classmethod
    def from_item(cls, item: InvoiceItem) -> "InvoiceItemResponse":
        return cls(
            id=item.id,
            product_name=item.product_name,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount_percentage=item.discount_percentage,
            discount_amount=item.discount_amount,
            line_total=item.line_total,
            unit=item.unit,
        )
