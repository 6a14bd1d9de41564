"""
Customer service for CRUD operations.

Email addresses are unique across customers. The check runs before writing,
and a unique-index violation from a concurrent writer maps to the same error.
"""

import logging

from psycopg2 import errors as pg_errors

from clients.postgres_client import PostgresClient
from core.exceptions import DuplicateEmailError, NotFoundError
from core.models import Customer, CustomerCreate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

# Column order shared by INSERT and UPDATE
_WRITABLE_COLUMNS = (
    "first_name", "last_name", "email", "phone",
    "billing_address", "city", "state", "zip_code", "country",
    "shipping_address", "shipping_city", "shipping_state",
    "shipping_zip_code", "shipping_country",
)


class CustomerService:
    """Service for customer operations."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def _email_taken(self, email: str) -> bool:
        row = self.postgres.execute_single(
            "SELECT id FROM customers WHERE email = %s",
            (email,)
        )
        return row is not None

    def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            data: Customer creation data

        Returns:
            Created customer

        Raises:
            DuplicateEmailError: If the email is already in use
        """
        if self._email_taken(data.email):
            raise DuplicateEmailError(data.email)

        values = data.model_dump()
        columns = ", ".join(_WRITABLE_COLUMNS)
        placeholders = ", ".join(["%s"] * len(_WRITABLE_COLUMNS))

        try:
            row = self.postgres.execute_returning(
                f"""
                INSERT INTO customers ({columns}, created_at)
                VALUES ({placeholders}, %s)
                RETURNING *
                """,
                tuple(values[c] for c in _WRITABLE_COLUMNS) + (now_utc(),)
            )[0]
        except pg_errors.UniqueViolation:
            raise DuplicateEmailError(data.email)

        customer = Customer.model_validate(row)
        logger.info(f"Customer {customer.id} created successfully")
        return customer

    def get_by_id(self, customer_id: int) -> Customer | None:
        """
        Get customer by ID.

        Returns:
            Customer if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM customers WHERE id = %s",
            (customer_id,)
        )

        if row is None:
            return None

        return Customer.model_validate(row)

    def exists(self, customer_id: int) -> bool:
        row = self.postgres.execute_single(
            "SELECT 1 AS found FROM customers WHERE id = %s",
            (customer_id,)
        )
        return row is not None

    def update(self, customer_id: int, data: CustomerCreate) -> Customer:
        """
        Replace every writable field of a customer.

        Args:
            customer_id: Customer ID
            data: New field values

        Returns:
            Updated customer

        Raises:
            NotFoundError: If customer not found
            DuplicateEmailError: If the new email belongs to another customer
        """
        current = self.get_by_id(customer_id)
        if current is None:
            raise NotFoundError("Customer not found")

        if current.email != data.email and self._email_taken(data.email):
            raise DuplicateEmailError(data.email)

        values = data.model_dump()
        set_parts = [f"{column} = %s" for column in _WRITABLE_COLUMNS]
        params = [values[c] for c in _WRITABLE_COLUMNS]

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(customer_id)

        try:
            row = self.postgres.execute_returning(
                f"""
                UPDATE customers
                SET {', '.join(set_parts)}
                WHERE id = %s
                RETURNING *
                """,
                tuple(params)
            )[0]
        except pg_errors.UniqueViolation:
            raise DuplicateEmailError(data.email)

        logger.info(f"Customer {customer_id} updated successfully")
        return Customer.model_validate(row)

    def list_all(self) -> list[Customer]:
        """
        List all customers.

        Returns:
            Customers ordered by last name, then first name
        """
        rows = self.postgres.execute(
            """
            SELECT * FROM customers
            ORDER BY last_name, first_name
            """
        )

        return [Customer.model_validate(row) for row in rows]
