"""Tests for EmailService - simulated and real sending."""

import logging
from unittest.mock import Mock, patch

import pytest

from clients.smtp_client import SmtpClient, SmtpClientError
from core.config import EmailConfig
from core.services.email_service import EmailService


@pytest.fixture
def sim_config():
    return EmailConfig(simulated_delay_seconds=0, test_simulated_delay_seconds=0)


@pytest.fixture
def real_config():
    return EmailConfig(
        enable_real_emails=True,
        from_name="Invoicing System",
        from_email="noreply@example.com",
        smtp_server="smtp.example.com",
    )


@pytest.fixture
def smtp():
    mock = Mock(spec=SmtpClient)
    mock.build_message.return_value = Mock(name="message")
    return mock


class TestSimulatedMode:

    def test_invoice_email_simulated(self, sim_config, invoice, caplog):
        service = EmailService(sim_config)

        with caplog.at_level(logging.INFO, logger="core.services.email_service"):
            assert service.send_invoice_email(invoice) is True

        assert "SIMULATION: Email would be sent to jane@example.com" in caplog.text
        assert service.smtp is None

    def test_pauses_for_configured_delay(self, invoice):
        service = EmailService(EmailConfig(simulated_delay_seconds=0.5))

        with patch("core.services.email_service.time.sleep") as sleep:
            service.send_invoice_email(invoice)

        sleep.assert_called_once_with(0.5)

    def test_test_email_simulated(self, sim_config):
        with patch("core.services.email_service.time.sleep") as sleep:
            assert EmailService(sim_config).send_test_email("ops@example.com", "Hi", "Hello") is True

        sleep.assert_called_once_with(0)


class TestRealMode:

    def test_builds_smtp_client_from_config(self, real_config):
        service = EmailService(real_config)

        assert isinstance(service.smtp, SmtpClient)
        assert service.smtp.host == "smtp.example.com"
        assert service.smtp.use_starttls is True

    def test_invoice_email_sent(self, real_config, smtp, invoice):
        service = EmailService(real_config, smtp)

        assert service.send_invoice_email(invoice) is True

        kwargs = smtp.build_message.call_args.kwargs
        assert kwargs["to_email"] == "jane@example.com"
        assert kwargs["to_name"] == "Jane Doe"
        assert kwargs["subject"] == "Invoice #INV-000007 - Jane Doe"
        assert "INV-000007" in kwargs["html_body"]
        smtp.send.assert_called_once_with(smtp.build_message.return_value)

    def test_send_failure_returns_false(self, real_config, smtp, invoice):
        smtp.send.side_effect = SmtpClientError("SMTP send failed: refused")

        assert EmailService(real_config, smtp).send_invoice_email(invoice) is False

    def test_test_email_sent(self, real_config, smtp):
        service = EmailService(real_config, smtp)

        assert service.send_test_email("ops@example.com", "Hi", "Hello <there>") is True

        kwargs = smtp.build_message.call_args.kwargs
        assert kwargs["to_email"] == "ops@example.com"
        assert kwargs["text_body"] == "Hello <there>"
        assert "Hello &lt;there&gt;" in kwargs["html_body"]

    def test_test_email_failure_returns_false(self, real_config, smtp):
        smtp.send.side_effect = SmtpClientError("boom")

        assert EmailService(real_config, smtp).send_test_email("ops@example.com", "Hi", "x") is False
