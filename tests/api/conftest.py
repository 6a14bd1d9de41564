"""API test fixtures: app wired to mocked services."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from auth.config import ApiKeyConfig
from core.config import AppConfig, EmailConfig
from core.services.customer_service import CustomerService
from core.services.email_service import EmailService
from core.services.invoice_service import InvoiceService
from core.services.stored_procedure_service import StoredProcedureService
from main import create_app

TEST_API_KEY = "test-api-key"


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def customer_service():
    return Mock(spec=CustomerService)


@pytest.fixture
def invoice_service():
    return Mock(spec=InvoiceService)


@pytest.fixture
def procedures():
    return Mock(spec=StoredProcedureService)


@pytest.fixture
def email_service():
    mock = Mock(spec=EmailService)
    mock.send_invoice_email.return_value = True
    mock.send_test_email.return_value = True
    return mock


@pytest.fixture
def services(customer_service, invoice_service, procedures, email_service):
    return {
        "customer": customer_service,
        "invoice": invoice_service,
        "procedures": procedures,
        "email": email_service,
    }


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def config():
    return AppConfig(
        email=EmailConfig(simulated_delay_seconds=0, test_simulated_delay_seconds=0),
        api=ApiKeyConfig(api_keys=[TEST_API_KEY]),
    )


@pytest.fixture
def app(config, services):
    """Full application with middleware, error handlers and routers."""
    return create_app(config, services)


@pytest.fixture
def client(app):
    """Test client sending a valid API key."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["X-API-Key"] = TEST_API_KEY
    return c


@pytest.fixture
def unauthed_client(app):
    """Test client with no API key header."""
    return TestClient(app, raise_server_exceptions=False)
