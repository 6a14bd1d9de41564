"""HTML and plain-text bodies for invoice emails.

Every interpolated value passes through html.escape.
"""

from datetime import datetime
from decimal import Decimal
from html import escape

from core.models import Invoice

_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; color: #333; }
        .header { background-color: #4CAF50; color: white; padding: 20px; text-align: center; }
        .invoice-details { margin: 20px 0; }
        .customer-info { background-color: #f9f9f9; padding: 15px; margin: 10px 0; }
        .items-table { width: 100%; border-collapse: collapse; margin: 20px 0; }
        .items-table th, .items-table td { border: 1px solid #ddd; padding: 12px; text-align: left; }
        .items-table th { background-color: #f2f2f2; font-weight: bold; }
        .totals { text-align: right; margin: 20px 0; }
        .total-row { font-weight: bold; font-size: 18px; }
        .footer { margin-top: 30px; text-align: center; color: #666; font-size: 12px; }"""


def _e(value) -> str:
    return escape("" if value is None else str(value))


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _date(value: datetime) -> str:
    return value.strftime("%B %d, %Y")


def _address_block(street, city, state, zip_code, country) -> str:
    lines = [
        f"        <p>{_e(street)}</p>",
        f"        <p>{_e(city)}, {_e(state)} {_e(zip_code)}</p>",
    ]
    if country:
        lines.append(f"        <p>{_e(country)}</p>")
    return "\n".join(lines)


def _item_rows(invoice: Invoice) -> str:
    rows = []
    for item in invoice.items:
        if item.discount_percentage > 0:
            discount = f"{_e(item.discount_percentage)}% ({_money(item.discount_amount)})"
        elif item.discount_amount > 0:
            discount = _money(item.discount_amount)
        else:
            discount = "-"
        rows.append(f"""
            <tr>
                <td>{_e(item.product_name)}</td>
                <td>{_e(item.description)}</td>
                <td>{_e(item.quantity)} {_e(item.unit)}</td>
                <td>{_money(item.unit_price)}</td>
                <td>{discount}</td>
                <td>{_money(item.line_total)}</td>
            </tr>""")
    return "".join(rows)


def email_subject(invoice: Invoice) -> str:
    return f"Invoice #{invoice.invoice_number} - {invoice.customer.full_name}"


def render_invoice_text(invoice: Invoice) -> str:
    """Plain-text alternative for clients that do not render HTML."""
    return (
        f"Please find your invoice #{invoice.invoice_number} below. "
        f"Total Amount: {_money(invoice.total_amount)}"
    )


def render_invoice_html(invoice: Invoice) -> str:
    """
    Render the full invoice email.

    The Ship To block only appears when a shipping address is set and
    differs from the billing address; the tax line only when tax_rate > 0.
    """
    customer = invoice.customer

    due_date = (
        f"\n        <p><strong>Due Date:</strong> {_date(invoice.due_date)}</p>"
        if invoice.due_date else ""
    )
    phone = f"\n        <p>{_e(customer.phone)}</p>" if customer.phone else ""
    billing = (
        "\n" + _address_block(
            invoice.billing_address, invoice.billing_city, invoice.billing_state,
            invoice.billing_zip_code, invoice.billing_country,
        )
        if invoice.billing_address else ""
    )

    shipping = ""
    if invoice.shipping_address and invoice.shipping_address != invoice.billing_address:
        shipping = f"""
    <div class='customer-info'>
        <h3>Ship To:</h3>
{_address_block(invoice.shipping_address, invoice.shipping_city, invoice.shipping_state,
                invoice.shipping_zip_code, invoice.shipping_country)}
    </div>"""

    tax = (
        f"\n        <p>Tax ({_e(invoice.tax_rate)}%): {_money(invoice.tax_amount)}</p>"
        if invoice.tax_rate > 0 else ""
    )

    notes = ""
    if invoice.notes:
        notes = f"""
    <div class='customer-info'>
        <h3>Notes:</h3>
        <p>{_e(invoice.notes)}</p>
    </div>"""

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset='utf-8'>
    <title>Invoice #{_e(invoice.invoice_number)}</title>
    <style>{_STYLE}
    </style>
</head>
<body>
    <div class='header'>
        <h1>INVOICE</h1>
        <h2>#{_e(invoice.invoice_number)}</h2>
    </div>

    <div class='invoice-details'>
        <p><strong>Invoice Date:</strong> {_date(invoice.invoice_date)}</p>{due_date}
        <p><strong>Status:</strong> {_e(invoice.status.value)}</p>
    </div>

    <div class='customer-info'>
        <h3>Bill To:</h3>
        <p><strong>{_e(customer.full_name)}</strong></p>
        <p>{_e(customer.email)}</p>{phone}{billing}
    </div>{shipping}

    <table class='items-table'>
        <thead>
            <tr>
                <th>Item</th>
                <th>Description</th>
                <th>Qty</th>
                <th>Unit Price</th>
                <th>Discount</th>
                <th>Total</th>
            </tr>
        </thead>
        <tbody>{_item_rows(invoice)}
        </tbody>
    </table>

    <div class='totals'>
        <p><strong>Subtotal: {_money(invoice.subtotal)}</strong></p>{tax}
        <p class='total-row'>Total Amount: {_money(invoice.total_amount)}</p>
    </div>{notes}

    <div class='footer'>
        <p>Thank you for your business!</p>
        <p>This is an automated email from the Invoicing System.</p>
    </div>
</body>
</html>"""


def render_test_html(body: str) -> str:
    return (
        f"<html><body><p>{_e(body)}</p>"
        "<p>This is a test email from the Invoicing System.</p></body></html>"
    )
