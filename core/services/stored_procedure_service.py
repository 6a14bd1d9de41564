"""
Gateway to the invoice stored procedures.

Creating, editing, voiding, searching and totalling invoices all happen inside
the database. This service only marshals arguments in and OUT values / rows
back into models. Business-rule failures come back as False or as missing
rows; connection failures after retries propagate as DatabaseUnavailableError.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal

from clients.postgres_client import PostgresClient
from core.models import (
    InvoiceCreate,
    InvoiceItemCreate,
    InvoiceSummary,
    InvoiceTotals,
    InvoiceUpdate,
    ItemCalculation,
)

logger = logging.getLogger(__name__)

SP_ADD_INVOICE = "sp_AddInvoice"
SP_EDIT_INVOICE = "sp_EditInvoice"
SP_VOID_INVOICE = "sp_VoidInvoice"
SP_SEARCH_INVOICE = "sp_SearchInvoice"
SP_CALCULATE_TOTALS = "sp_CalculateTotals"


def _json_number(value):
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Cannot serialize {type(value).__name__} to JSON")


def _items_json(items: list[InvoiceItemCreate] | list[ItemCalculation]) -> str:
    """Serialize items to the JSON blob the procedures expect. Amounts are JSON numbers."""
    return json.dumps([item.model_dump() for item in items], default=_json_number)


class StoredProcedureService:
    """Service wrapping the five invoice procedures."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def _invoice_params(self, data: InvoiceCreate) -> dict:
        return {
            "customer_id": data.customer_id,
            "invoice_date": data.invoice_date,
            "due_date": data.due_date,
            "tax_rate": data.tax_rate,
            "notes": data.notes,
            "items_json": _items_json(data.invoice_items),
        }

    def add_invoice(self, data: InvoiceCreate) -> int:
        """
        Create an invoice through sp_AddInvoice.

        Args:
            data: Validated invoice request

        Returns:
            New invoice ID (OUT invoice_id)

        Raises:
            RuntimeError: If the procedure returned no invoice ID
        """
        logger.info(
            f"Adding invoice for customer {data.customer_id} "
            f"with {len(data.invoice_items)} items"
        )
        try:
            out = self.postgres.call_procedure(
                SP_ADD_INVOICE,
                self._invoice_params(data),
                out=["invoice_id"],
            )
        except Exception:
            logger.exception(f"Error adding invoice for customer {data.customer_id}")
            raise

        invoice_id = out["invoice_id"]
        if invoice_id is None:
            raise RuntimeError(f"{SP_ADD_INVOICE} returned no invoice_id")

        logger.info(f"Successfully created invoice with ID: {invoice_id}")
        return int(invoice_id)

    def edit_invoice(self, invoice_id: int, data: InvoiceUpdate) -> bool:
        """
        Edit an invoice through sp_EditInvoice.

        Returns:
            False if the procedure refused (missing or voided invoice)
        """
        logger.info(f"Editing invoice {invoice_id} for customer {data.customer_id}")
        params = {"invoice_id": invoice_id, **self._invoice_params(data)}
        try:
            out = self.postgres.call_procedure(SP_EDIT_INVOICE, params, out=["success"])
        except Exception:
            logger.exception(f"Error editing invoice {invoice_id}")
            raise

        success = bool(out["success"])
        logger.info(f"Invoice {invoice_id} edit result: {success}")
        return success

    def void_invoice(self, invoice_id: int) -> bool:
        """
        Void an invoice through sp_VoidInvoice.

        Returns:
            False if the invoice does not exist or is already void
        """
        logger.info(f"Voiding invoice {invoice_id}")
        try:
            out = self.postgres.call_procedure(
                SP_VOID_INVOICE, {"invoice_id": invoice_id}, out=["success"]
            )
        except Exception:
            logger.exception(f"Error voiding invoice {invoice_id}")
            raise

        success = bool(out["success"])
        logger.info(f"Invoice {invoice_id} void result: {success}")
        return success

    def search_invoices(
        self,
        customer_id: int | None = None,
        status: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> tuple[list[InvoiceSummary], int]:
        """
        Search invoices through sp_SearchInvoice.

        Every row carries the unpaged total in a total_count column.

        Returns:
            (rows for the requested page, total matching count)
        """
        logger.info(
            f"Searching invoices - Customer: {customer_id}, Status: {status}, Page: {page_number}"
        )
        try:
            rows = self.postgres.query_function(
                SP_SEARCH_INVOICE,
                {
                    "customer_id": customer_id,
                    "status": status,
                    "from_date": from_date,
                    "to_date": to_date,
                    "page_number": page_number,
                    "page_size": page_size,
                },
            )
        except Exception:
            logger.exception("Error searching invoices")
            raise

        invoices = [InvoiceSummary.model_validate(row) for row in rows]
        total_count = rows[0].get("total_count") if rows else None
        total_count = int(total_count) if total_count is not None else 0

        logger.info(f"Found {len(invoices)} invoices, total count: {total_count}")
        return invoices, total_count

    def calculate_totals(self, items: list[ItemCalculation], tax_rate: Decimal) -> InvoiceTotals:
        """Compute subtotal, tax and total through sp_CalculateTotals."""
        logger.info(f"Calculating totals for {len(items)} items with tax rate {tax_rate}%")
        try:
            out = self.postgres.call_procedure(
                SP_CALCULATE_TOTALS,
                {"items_json": _items_json(items), "tax_rate": tax_rate},
                out=["subtotal", "tax_amount", "total"],
            )
        except Exception:
            logger.exception("Error calculating totals")
            raise

        totals = InvoiceTotals(
            subtotal=out["subtotal"],
            tax_amount=out["tax_amount"],
            total=out["total"],
        )
        logger.info(
            f"Calculated totals - Subtotal: {totals.subtotal}, "
            f"Tax: {totals.tax_amount}, Total: {totals.total}"
        )
        return totals
