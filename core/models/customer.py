"""Customer domain models."""

from datetime import datetime

from pydantic import BaseModel, Field, EmailStr


class CustomerCreate(BaseModel):
    """Data required to create a customer. Also the full-replace update payload."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    phone: str | None = Field(None, max_length=20)

    # Billing address
    billing_address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)

    # Shipping address
    shipping_address: str | None = Field(None, max_length=255)
    shipping_city: str | None = Field(None, max_length=100)
    shipping_state: str | None = Field(None, max_length=100)
    shipping_zip_code: str | None = Field(None, max_length=20)
    shipping_country: str | None = Field(None, max_length=100)


class Customer(BaseModel):
    """Full customer entity as stored."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    billing_address: str | None = None
    city: str | None = None
    state: str
    zip_code: str | None = None
    country: str | None = None
    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip_code: str | None = None
    shipping_country: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @property
    def full_name(self) -> str:
        """Human-readable name for display."""
        return f"{self.first_name} {self.last_name}"
