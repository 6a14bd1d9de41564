"""Customer endpoints: /api/customers."""

import logging

from fastapi import APIRouter, Request

from api.base import success_response
from core.exceptions import NotFoundError
from core.models import CustomerCreate

logger = logging.getLogger(__name__)


def create_customers_router(services: dict) -> APIRouter:
    router = APIRouter(prefix="/customers", tags=["customers"])

    customer_svc = services["customer"]

    @router.post("")
    def create_customer(request: Request, body: CustomerCreate):
        customer = customer_svc.create(body)
        return success_response(
            customer.model_dump(mode="json"),
            "Customer created successfully",
        ).model_dump(mode="json")

    @router.get("")
    def list_customers(request: Request):
        customers = customer_svc.list_all()
        return success_response(
            [c.model_dump(mode="json") for c in customers],
            "Customers retrieved successfully",
        ).model_dump(mode="json")

    @router.get("/{customer_id}")
    def get_customer(request: Request, customer_id: int):
        customer = customer_svc.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        return success_response(
            customer.model_dump(mode="json"),
            "Customer retrieved successfully",
        ).model_dump(mode="json")

    @router.put("/{customer_id}")
    def update_customer(request: Request, customer_id: int, body: CustomerCreate):
        customer = customer_svc.update(customer_id, body)
        return success_response(
            customer.model_dump(mode="json"),
            "Customer updated successfully",
        ).model_dump(mode="json")

    return router
