"""
Invoice arithmetic and field validation.

Pure functions, no I/O. Money is rounded half-up to cents, matching the
decimal(18,2) columns the stored procedures write to.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from core.models import InvoiceCreate, InvoiceItemCreate, InvoiceTotals, ItemCalculation
from utils.timezone import as_utc

_CENTS = Decimal("0.01")
_HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _total_discount(
    quantity: Decimal,
    unit_price: Decimal,
    discount_percentage: Decimal,
    discount_amount: Decimal,
) -> tuple[Decimal, Decimal]:
    """Return (line subtotal, combined discount) before any checks."""
    line_subtotal = quantity * unit_price
    percentage_discount = line_subtotal * (discount_percentage / _HUNDRED)
    return line_subtotal, percentage_discount + discount_amount


def calculate_line_total(
    quantity: Decimal,
    unit_price: Decimal,
    discount_percentage: Decimal = Decimal("0"),
    discount_amount: Decimal = Decimal("0"),
) -> Decimal:
    """
    Net amount for one line after discounts.

    The percentage discount is taken off the line subtotal and the absolute
    discount is added on top of it. A combined discount larger than the
    subtotal is an error; it is never clamped.

    Raises:
        ValueError: On out-of-range inputs or an excessive discount
    """
    if quantity <= 0:
        raise ValueError("Quantity must be greater than 0")
    if unit_price < 0:
        raise ValueError("Unit price cannot be negative")
    if discount_percentage < 0 or discount_percentage > _HUNDRED:
        raise ValueError("Discount percentage must be between 0 and 100")
    if discount_amount < 0:
        raise ValueError("Discount amount cannot be negative")

    line_subtotal, total_discount = _total_discount(
        quantity, unit_price, discount_percentage, discount_amount
    )
    if total_discount > line_subtotal:
        raise ValueError("Total discount cannot exceed line subtotal")

    return round_money(line_subtotal - total_discount)


def calculate_subtotal(line_totals: Iterable[Decimal]) -> Decimal:
    """Sum of line totals."""
    return round_money(sum(line_totals, Decimal("0")))


def calculate_tax_amount(subtotal: Decimal, tax_rate: Decimal) -> Decimal:
    """Tax on a subtotal. tax_rate is a percentage in [0, 100]."""
    if tax_rate < 0 or tax_rate > _HUNDRED:
        raise ValueError("Tax rate must be between 0 and 100")
    return round_money(subtotal * (tax_rate / _HUNDRED))


def calculate_grand_total(subtotal: Decimal, tax_amount: Decimal) -> Decimal:
    """Subtotal plus tax."""
    return subtotal + tax_amount


def calculate_totals(items: list[ItemCalculation], tax_rate: Decimal) -> InvoiceTotals:
    """Subtotal, tax and total for a list of items."""
    subtotal = calculate_subtotal(
        calculate_line_total(
            item.quantity,
            item.unit_price,
            item.discount_percentage,
            item.discount_amount,
        )
        for item in items
    )
    tax_amount = calculate_tax_amount(subtotal, tax_rate)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=calculate_grand_total(subtotal, tax_amount),
    )


def validate_invoice_item(item: InvoiceItemCreate | ItemCalculation) -> list[str]:
    """Return every problem with one line item. Empty list means valid."""
    errors = []

    if not item.product_name or not item.product_name.strip():
        errors.append("Product name is required")

    if item.quantity <= 0:
        errors.append("Quantity must be greater than 0")

    if item.unit_price < 0:
        errors.append("Unit price cannot be negative")

    if item.discount_percentage < 0 or item.discount_percentage > _HUNDRED:
        errors.append("Discount percentage must be between 0 and 100")

    if item.discount_amount < 0:
        errors.append("Discount amount cannot be negative")

    line_subtotal, total_discount = _total_discount(
        item.quantity, item.unit_price, item.discount_percentage, item.discount_amount
    )
    if total_discount > line_subtotal:
        errors.append("Total discount cannot exceed line subtotal")

    return errors


def validate_invoice(invoice: InvoiceCreate) -> list[str]:
    """
    Return every problem with an invoice request, items included.

    Item messages are prefixed with their 1-based position, e.g.
    "Item 2: Quantity must be greater than 0".
    """
    errors = []

    if invoice.customer_id <= 0:
        errors.append("Valid Customer ID is required")

    if invoice.tax_rate < 0 or invoice.tax_rate > _HUNDRED:
        errors.append("Tax rate must be between 0 and 100")

    if not invoice.invoice_items:
        errors.append("At least one invoice item is required")

    if invoice.invoice_date is None:
        errors.append("Invoice date is required")
    elif invoice.due_date is not None and as_utc(invoice.due_date) < as_utc(invoice.invoice_date):
        errors.append("Due date cannot be earlier than invoice date")

    for position, item in enumerate(invoice.invoice_items, start=1):
        for error in validate_invoice_item(item):
            errors.append(f"Item {position}: {error}")

    return errors
