"""
Application entry point.

Run with:
    uvicorn main:create_app --factory
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from api.customers import create_customers_router
from api.errors import register_error_handlers
from api.invoices import create_invoices_router
from api.middleware import RequestIDMiddleware
from auth.api_key_middleware import ApiKeyMiddleware
from clients.postgres_client import PostgresClient
from core.config import AppConfig, load_config
from core.services.customer_service import CustomerService
from core.services.email_service import EmailService
from core.services.invoice_service import InvoiceService
from core.services.stored_procedure_service import StoredProcedureService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_services(config: AppConfig) -> dict:
    """Wire clients into services. Keys match what the routers look up."""
    db = config.database
    postgres = PostgresClient(
        db.url,
        connect_retries=db.connect_retries,
        retry_delay_seconds=db.retry_delay_seconds,
        min_connections=db.min_connections,
        max_connections=db.max_connections,
        command_timeout_seconds=db.command_timeout_seconds,
    )
    return {
        "customer": CustomerService(postgres),
        "invoice": InvoiceService(postgres),
        "procedures": StoredProcedureService(postgres),
        "email": EmailService(config.email),
    }


def create_app(config: AppConfig | None = None, services: dict | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Settings; loaded from environment and Vault when omitted
        services: Service dict; built from config when omitted
    """
    if config is None:
        load_dotenv()
        config = load_config()
        configure_logging(config.log_level)

    if services is None:
        services = build_services(config)

    app = FastAPI(
        title=config.app_name,
        version="1.0.0",
        description="Customer management, invoicing and email notifications",
        docs_url="/swagger",
        redoc_url=None,
        openapi_url="/swagger/v1/swagger.json",
    )
    app.add_middleware(ApiKeyMiddleware, config=config.api)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/")
    async def root():
        return {"name": config.app_name, "docs": "/swagger"}

    app.include_router(create_customers_router(services), prefix="/api")
    app.include_router(create_invoices_router(services), prefix="/api")

    logger.info(f"{config.app_name} ready")
    return app
