"""Typed exceptions for business-rule failures.

Only these reach the client with their message; the global handlers map
NotFoundError to 404 and the rest of InvoicingError to 400. Anything else,
ValueError included, is an internal error.
"""


class InvoicingError(Exception):
    """Base for failures whose message is safe to show to the caller."""


class NotFoundError(InvoicingError):
    """The requested customer or invoice does not exist."""


class DuplicateEmailError(InvoicingError):
    """Another customer already uses this email address."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("A customer with this email already exists")


class InvoiceValidationError(InvoicingError):
    """Request data failed invoice validation. Carries every message found."""

    def __init__(self, errors: list[str], message: str = "Invalid input data"):
        self.errors = errors
        super().__init__(message)
