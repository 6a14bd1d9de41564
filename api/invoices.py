"""Invoice endpoints: /api/invoices.

Handlers are plain functions so FastAPI runs them in its threadpool; the
services block on the database, SMTP and the simulated send delay.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from api.base import success_response, error_response
from core.calculation import validate_invoice, validate_invoice_item
from core.exceptions import InvoiceValidationError, NotFoundError
from core.models import (
    CalculateTotalsRequest,
    InvoiceCreate,
    InvoiceResponse,
    InvoiceSearch,
    InvoiceUpdate,
    PagedResult,
    TestEmailRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_TEST_SUBJECT = "Test Email from Invoicing System"
DEFAULT_TEST_BODY = "This is a test email to verify the email functionality is working correctly."


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_response(message).model_dump(mode="json"),
    )


def create_invoices_router(services: dict) -> APIRouter:
    router = APIRouter(prefix="/invoices", tags=["invoices"])

    customer_svc = services["customer"]
    invoice_svc = services["invoice"]
    procedures = services["procedures"]
    email_svc = services["email"]

    def _reload(invoice_id: int):
        invoice = invoice_svc.get_by_id(invoice_id)
        if invoice is None:
            raise RuntimeError(f"Invoice {invoice_id} missing after stored procedure call")
        return invoice

    def _respond(invoice, message: str) -> dict:
        return success_response(
            InvoiceResponse.from_invoice(invoice).model_dump(mode="json"),
            message,
        ).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Fixed paths (must be registered before /{invoice_id})
    # -------------------------------------------------------------------------

    @router.get("/search")
    def search_invoices(request: Request, search: Annotated[InvoiceSearch, Query()]):
        summaries, total_count = procedures.search_invoices(
            customer_id=search.customer_id,
            status=search.status.value if search.status else None,
            from_date=search.from_date,
            to_date=search.to_date,
            page_number=search.page_number,
            page_size=search.page_size,
        )

        invoices = invoice_svc.get_many([s.invoice_id for s in summaries])
        page = PagedResult[InvoiceResponse].build(
            data=[InvoiceResponse.from_invoice(i) for i in invoices],
            total_records=total_count,
            page_number=search.page_number,
            page_size=search.page_size,
        )
        return success_response(
            page.model_dump(mode="json"),
            "Invoices retrieved successfully",
        ).model_dump(mode="json")

    @router.post("/calculate-totals")
    def calculate_totals(request: Request, body: CalculateTotalsRequest):
        if not body.items:
            return _bad_request("At least one item is required")

        errors = []
        for item in body.items:
            errors.extend(validate_invoice_item(item))
        if body.tax_rate < 0 or body.tax_rate > 100:
            errors.append("Tax rate must be between 0 and 100")
        if errors:
            raise InvoiceValidationError(errors, "Invalid item data")

        totals = procedures.calculate_totals(body.items, body.tax_rate)
        return success_response(
            totals.model_dump(mode="json"),
            "Totals calculated successfully",
        ).model_dump(mode="json")

    @router.post("/test-email")
    def test_email(request: Request, body: TestEmailRequest):
        if not body.email or not body.email.strip():
            return _bad_request("Email address is required")

        subject = body.subject or DEFAULT_TEST_SUBJECT
        message_body = body.body or DEFAULT_TEST_BODY

        sent = email_svc.send_test_email(body.email, subject, message_body)

        response = success_response(
            {
                "email": body.email,
                "subject": subject,
                "email_mode": "Email sent" if sent else "Email failed",
            },
            "Test email sent successfully" if sent else "Failed to send test email",
        )
        response.success = sent
        return response.model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Invoice lifecycle
    # -------------------------------------------------------------------------

    @router.post("")
    def create_invoice(request: Request, body: InvoiceCreate):
        errors = validate_invoice(body)
        if errors:
            raise InvoiceValidationError(errors)

        if not customer_svc.exists(body.customer_id):
            return _bad_request("Customer not found")

        invoice_id = procedures.add_invoice(body)
        invoice_svc.apply_addresses(invoice_id, body)
        invoice = _reload(invoice_id)

        if email_svc.send_invoice_email(invoice):
            invoice.email_sent_at = invoice_svc.mark_email_sent(invoice_id)
            invoice.email_sent = True

        logger.info(
            f"Invoice {invoice.invoice_number} created successfully "
            f"for customer {body.customer_id}"
        )
        return _respond(invoice, "Invoice created successfully")

    @router.put("/{invoice_id}")
    def update_invoice(request: Request, invoice_id: int, body: InvoiceUpdate):
        errors = validate_invoice(body)
        if errors:
            raise InvoiceValidationError(errors)

        if not procedures.edit_invoice(invoice_id, body):
            return _bad_request("Invoice not found or cannot be updated (possibly voided)")

        invoice_svc.apply_addresses(invoice_id, body)
        invoice = _reload(invoice_id)

        logger.info(f"Invoice {invoice.invoice_number} updated successfully")
        return _respond(invoice, "Invoice updated successfully")

    @router.put("/{invoice_id}/void")
    def void_invoice(request: Request, invoice_id: int):
        if not procedures.void_invoice(invoice_id):
            return _bad_request("Invoice not found or already voided")

        invoice = _reload(invoice_id)

        logger.info(f"Invoice {invoice.invoice_number} voided successfully")
        return _respond(invoice, "Invoice voided successfully")

    @router.get("/{invoice_id}")
    def get_invoice(request: Request, invoice_id: int):
        invoice = invoice_svc.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")

        return _respond(invoice, "Invoice retrieved successfully")

    @router.post("/{invoice_id}/resend-email")
    def resend_invoice_email(request: Request, invoice_id: int):
        invoice = invoice_svc.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")

        if not email_svc.send_invoice_email(invoice):
            return JSONResponse(
                status_code=500,
                content=error_response("Failed to send invoice email").model_dump(mode="json"),
            )

        invoice_svc.mark_email_sent(invoice_id)
        logger.info(f"Invoice {invoice.invoice_number} email resent")
        return success_response(message="Invoice email sent successfully").model_dump(mode="json")

    return router
