"""Shared test fixtures for the invoicing test suite."""

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env")

import clients.vault_client as vault_module

from core.models import Customer, Invoice, InvoiceItem, InvoiceStatus


# =============================================================================
# TEST CONSTANTS
# =============================================================================

CREATED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# VAULT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_vault_state():
    """Reset vault client singleton and secret cache around each test."""
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()
    yield
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================


@pytest.fixture
def customer() -> Customer:
    return Customer(
        id=1,
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        phone="555-0100",
        billing_address="1 Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
        country="USA",
        created_at=CREATED_AT,
    )


@pytest.fixture
def invoice_item() -> InvoiceItem:
    return InvoiceItem(
        id=11,
        invoice_id=7,
        product_name="Widget",
        description="Blue widget",
        quantity=Decimal("2"),
        unit_price=Decimal("10.00"),
        discount_percentage=Decimal("10"),
        discount_amount=Decimal("2.00"),
        line_total=Decimal("16.00"),
        unit="pcs",
        created_at=CREATED_AT,
    )


@pytest.fixture
def invoice(customer, invoice_item) -> Invoice:
    return Invoice(
        id=7,
        invoice_number="INV-000007",
        customer_id=customer.id,
        invoice_date=CREATED_AT,
        due_date=datetime(2024, 3, 31, tzinfo=timezone.utc),
        subtotal=Decimal("16.00"),
        tax_amount=Decimal("1.60"),
        total_amount=Decimal("17.60"),
        tax_rate=Decimal("10.00"),
        status=InvoiceStatus.ACTIVE,
        notes="Net 30",
        billing_address="1 Main St",
        billing_city="Springfield",
        billing_state="IL",
        billing_zip_code="62701",
        billing_country="USA",
        created_at=CREATED_AT,
        customer=customer,
        items=[invoice_item],
    )
