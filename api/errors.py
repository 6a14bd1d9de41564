"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response
from core.exceptions import InvoiceValidationError, InvoicingError, NotFoundError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def format_validation_errors(errors: list[dict]) -> list[str]:
    """Flatten pydantic error dicts into "field: message" strings."""
    messages = []
    for error in errors:
        # First loc element is the request part ("body", "query", "path")
        loc = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(loc)
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return messages


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_response(str(exc)).model_dump(mode="json"),
        )

    @app.exception_handler(InvoicingError)
    async def business_error_handler(request: Request, exc: InvoicingError):
        errors = exc.errors if isinstance(exc, InvoiceValidationError) else None
        return JSONResponse(
            status_code=400,
            content=error_response(str(exc), errors).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_response(
                "Invalid input data",
                format_validation_errors(exc.errors()),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_response(INTERNAL_ERROR_MESSAGE).model_dump(mode="json"),
        )
