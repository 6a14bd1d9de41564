"""Tests for InvoiceService."""

from unittest.mock import Mock

import pytest

from clients.postgres_client import PostgresClient
from core.models import InvoiceAddresses
from core.services.invoice_service import InvoiceService


@pytest.fixture
def postgres():
    return Mock(spec=PostgresClient)


@pytest.fixture
def invoice_service(postgres):
    return InvoiceService(postgres)


@pytest.fixture
def rows(invoice):
    """(invoice rows, customer rows, item rows) as the database returns them."""
    invoice_row = invoice.model_dump(exclude={"customer", "items"})
    second = {**invoice_row, "id": 8, "invoice_number": "INV-000008"}
    return (
        [invoice_row, second],
        [invoice.customer.model_dump()],
        [item.model_dump() for item in invoice.items],
    )


class TestGetById:

    def test_loads_customer_and_items(self, invoice_service, postgres, rows):
        invoice_rows, customer_rows, item_rows = rows
        postgres.execute.side_effect = [invoice_rows[:1], customer_rows, item_rows]

        invoice = invoice_service.get_by_id(7)

        assert invoice.invoice_number == "INV-000007"
        assert invoice.customer.full_name == "Jane Doe"
        assert [item.id for item in invoice.items] == [11]

    def test_missing_returns_none(self, invoice_service, postgres):
        postgres.execute.return_value = []

        assert invoice_service.get_by_id(99) is None
        assert postgres.execute.call_count == 1


class TestGetMany:

    def test_keeps_requested_order(self, invoice_service, postgres, rows):
        invoice_rows, customer_rows, item_rows = rows
        postgres.execute.side_effect = [invoice_rows, customer_rows, item_rows]

        invoices = invoice_service.get_many([8, 99, 7])

        assert [i.id for i in invoices] == [8, 7]
        assert invoices[0].items == []

    def test_empty_ids_skip_database(self, invoice_service, postgres):
        assert invoice_service.get_many([]) == []
        postgres.execute.assert_not_called()


class TestMarkEmailSent:

    def test_sets_flag_and_timestamp(self, invoice_service, postgres):
        sent_at = invoice_service.mark_email_sent(7)

        query, params = postgres.execute_returning.call_args.args
        assert "email_sent = TRUE" in query
        assert params == (sent_at, sent_at, 7)
        assert sent_at.tzinfo is not None


class TestApplyAddresses:

    def test_updates_only_supplied_fields(self, invoice_service, postgres):
        invoice_service.apply_addresses(7, InvoiceAddresses(shipping_city="Dover"))

        query, params = postgres.execute_returning.call_args.args
        assert "shipping_city = %s" in query
        assert "billing_city" not in query
        assert params[0] == "Dover"
        assert params[-1] == 7

    def test_nothing_supplied_is_noop(self, invoice_service, postgres):
        invoice_service.apply_addresses(7, InvoiceAddresses())

        postgres.execute_returning.assert_not_called()
