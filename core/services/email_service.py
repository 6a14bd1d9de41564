"""
Email service for invoice notifications.

Two modes, chosen by EmailConfig.enable_real_emails:
- simulate: log what would be sent, pause briefly, report success
- real: send through SMTP

Callers only ever get a bool back; failures are logged, never raised.
"""

import logging
import time

from clients.smtp_client import SmtpClient
from core.config import EmailConfig
from core.email_templates import (
    email_subject,
    render_invoice_html,
    render_invoice_text,
    render_test_html,
)
from core.models import Invoice

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending invoice and test emails."""

    def __init__(self, config: EmailConfig, smtp: SmtpClient | None = None):
        """
        Args:
            config: Email settings
            smtp: SMTP client; built from config when omitted and real
                sending is enabled
        """
        self.config = config
        if smtp is None and config.enable_real_emails:
            smtp = SmtpClient(
                host=config.smtp_server,
                port=config.smtp_port,
                use_starttls=config.enable_ssl,
                username=config.username,
                password=config.password,
                timeout_seconds=config.timeout_seconds,
            )
        self.smtp = smtp

    def send_invoice_email(self, invoice: Invoice) -> bool:
        """
        Email an invoice to its customer.

        Returns:
            True if sent (or simulated), False on any failure
        """
        recipient = invoice.customer.email
        try:
            subject = email_subject(invoice)
            html_body = render_invoice_html(invoice)

            if not self.config.enable_real_emails:
                logger.info(
                    f"SIMULATION: Email would be sent to {recipient} "
                    f"for Invoice {invoice.invoice_number}"
                )
                time.sleep(self.config.simulated_delay_seconds)
                logger.info(
                    f"SIMULATION: Email successfully sent to {recipient} "
                    f"for Invoice {invoice.invoice_number}"
                )
                return True

            logger.info(f"Sending real email to {recipient} for Invoice {invoice.invoice_number}")
            message = self.smtp.build_message(
                from_name=self.config.from_name,
                from_email=self.config.from_email,
                to_name=invoice.customer.full_name,
                to_email=recipient,
                subject=subject,
                text_body=render_invoice_text(invoice),
                html_body=html_body,
            )
            self.smtp.send(message)
            logger.info(
                f"Real email successfully sent to {recipient} for Invoice {invoice.invoice_number}"
            )
            return True

        except Exception:
            logger.exception(
                f"Failed to send invoice email for Invoice {invoice.invoice_number} to {recipient}"
            )
            return False

    def send_test_email(self, to_email: str, subject: str, body: str) -> bool:
        """
        Send a free-form test message.

        Returns:
            True if sent (or simulated), False on any failure
        """
        try:
            if not self.config.enable_real_emails:
                logger.info(f"SIMULATION: Test email would be sent to {to_email}")
                time.sleep(self.config.test_simulated_delay_seconds)
                logger.info(f"SIMULATION: Test email successfully sent to {to_email}")
                return True

            logger.info(f"Sending real test email to {to_email}")
            message = self.smtp.build_message(
                from_name=self.config.from_name,
                from_email=self.config.from_email,
                to_name="",
                to_email=to_email,
                subject=subject,
                text_body=body,
                html_body=render_test_html(body),
            )
            self.smtp.send(message)
            logger.info(f"Real test email successfully sent to {to_email}")
            return True

        except Exception:
            logger.exception(f"Failed to send test email to {to_email}")
            return False
