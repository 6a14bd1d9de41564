"""
Invoice service: the read side plus email bookkeeping.

Invoices are created, edited and voided by stored procedures (see
StoredProcedureService); this service re-reads them afterwards with their
customer and line items attached.
"""

import logging
from datetime import datetime

from clients.postgres_client import PostgresClient
from core.models import Customer, Invoice, InvoiceAddresses, InvoiceItem
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_ADDRESS_COLUMNS = set(InvoiceAddresses.model_fields)


class InvoiceService:
    """Service for invoice reads."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def _load(self, invoice_ids: list[int]) -> dict[int, Invoice]:
        """Load invoices with customer and items, keyed by ID."""
        if not invoice_ids:
            return {}

        invoice_rows = self.postgres.execute(
            "SELECT * FROM invoices WHERE id = ANY(%s)",
            (list(invoice_ids),)
        )
        if not invoice_rows:
            return {}

        customer_ids = list({row["customer_id"] for row in invoice_rows})
        customers = {
            row["id"]: Customer.model_validate(row)
            for row in self.postgres.execute(
                "SELECT * FROM customers WHERE id = ANY(%s)",
                (customer_ids,)
            )
        }

        items: dict[int, list[InvoiceItem]] = {}
        for row in self.postgres.execute(
            """
            SELECT * FROM invoice_items
            WHERE invoice_id = ANY(%s)
            ORDER BY invoice_id, id
            """,
            ([row["id"] for row in invoice_rows],)
        ):
            items.setdefault(row["invoice_id"], []).append(InvoiceItem.model_validate(row))

        return {
            row["id"]: Invoice.model_validate({
                **row,
                "customer": customers[row["customer_id"]],
                "items": items.get(row["id"], []),
            })
            for row in invoice_rows
        }

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        """
        Get invoice by ID with customer and items.

        Returns:
            Invoice if found, None otherwise.
        """
        return self._load([invoice_id]).get(invoice_id)

    def get_many(self, invoice_ids: list[int]) -> list[Invoice]:
        """
        Get several invoices, keeping the order of invoice_ids.

        IDs that no longer exist are skipped.
        """
        loaded = self._load(invoice_ids)
        return [loaded[i] for i in invoice_ids if i in loaded]

    def mark_email_sent(self, invoice_id: int) -> datetime:
        """Record that the invoice email went out. Returns the timestamp written."""
        now = now_utc()
        self.postgres.execute_returning(
            """
            UPDATE invoices
            SET email_sent = TRUE, email_sent_at = %s, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, now, invoice_id)
        )
        return now

    def apply_addresses(self, invoice_id: int, data: InvoiceAddresses) -> None:
        """
        Overwrite the billing/shipping snapshot with fields the request supplied.

        Fields left out of the request keep whatever the procedure stored.
        """
        updates = data.supplied_addresses()
        if not updates:
            return

        set_parts = []
        params = []
        for field, value in updates.items():
            if field not in _ADDRESS_COLUMNS:
                continue
            set_parts.append(f"{field} = %s")
            params.append(value)

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(invoice_id)

        self.postgres.execute_returning(
            f"""
            UPDATE invoices
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING id
            """,
            tuple(params)
        )
        logger.info(f"Invoice {invoice_id} address snapshot updated: {', '.join(updates)}")
