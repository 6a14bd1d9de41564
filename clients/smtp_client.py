"""
SMTP client for outbound mail.

One connection per message: connect, optional STARTTLS, optional login,
send, quit. Any failure along the way surfaces as SmtpClientError.
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

logger = logging.getLogger(__name__)


class SmtpClientError(Exception):
    """Raised when an SMTP exchange fails."""


class SmtpClient:
    """Send multipart (text + HTML) mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        use_starttls: bool = True,
        username: str | None = None,
        password: str | None = None,
        timeout_seconds: int = 30,
    ):
        """
        Initialize with relay settings.

        Args:
            host: SMTP server hostname
            port: SMTP server port
            use_starttls: Upgrade the connection with STARTTLS before login
            username: Login name; authentication is skipped unless both
                username and password are set
            password: Login password
            timeout_seconds: Socket timeout for the whole exchange

        Raises:
            ValueError: If host is empty
        """
        if not host:
            raise ValueError("host is required")

        self.host = host
        self.port = port
        self.use_starttls = use_starttls
        self.username = username
        self.password = password
        self.timeout_seconds = timeout_seconds

    def build_message(
        self,
        from_name: str,
        from_email: str,
        to_name: str,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str,
    ) -> EmailMessage:
        """Assemble a multipart/alternative message with text and HTML parts."""
        message = EmailMessage()
        message["From"] = formataddr((from_name, from_email))
        message["To"] = formataddr((to_name, to_email)) if to_name else to_email
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")
        return message

    def send(self, message: EmailMessage) -> None:
        """
        Deliver a message.

        Raises:
            SmtpClientError: On connection, TLS, auth or delivery failure
        """
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                if self.use_starttls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send via {self.host}:{self.port} failed: {e}")
            raise SmtpClientError(f"SMTP send failed: {e}") from e

        logger.info(f"Email sent to {message['To']}: {message['Subject']}")
