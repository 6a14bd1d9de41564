"""Application configuration.

Non-secret settings come from INVOICING_* environment variables; secrets
(database URL, SMTP login, API keys) come from Vault.
"""

import os

from pydantic import BaseModel, Field

from auth.config import ApiKeyConfig
from clients.vault_client import get_api_keys, get_database_url, get_smtp_credentials


class EmailConfig(BaseModel):
    """Outbound email settings."""

    enable_real_emails: bool = Field(
        default=False,
        description="Send through SMTP; when False, sends are simulated and logged",
    )
    from_name: str = Field(default="Invoicing System")
    from_email: str = Field(default="noreply@invoicingsystem.com")
    smtp_server: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587, ge=1, le=65535)
    enable_ssl: bool = Field(
        default=True,
        description="Upgrade the SMTP connection with STARTTLS",
    )
    username: str | None = None
    password: str | None = None
    timeout_seconds: int = Field(default=30, ge=1, le=300)
    simulated_delay_seconds: float = Field(
        default=0.5,
        description="Pause applied to simulated invoice emails",
        ge=0,
        le=10,
    )
    test_simulated_delay_seconds: float = Field(
        default=0.3,
        description="Pause applied to simulated test emails",
        ge=0,
        le=10,
    )


class DatabaseConfig(BaseModel):
    """Connection pool and retry settings."""

    url: str = Field(default="", description="PostgreSQL DSN")
    connect_retries: int = Field(default=3, ge=1, le=10)
    retry_delay_seconds: float = Field(
        default=1.0,
        description="Initial backoff; doubled after every failed attempt",
        ge=0,
    )
    command_timeout_seconds: int = Field(default=60, ge=1)
    min_connections: int = Field(default=1, ge=1)
    max_connections: int = Field(default=20, ge=1)


class AppConfig(BaseModel):
    """Top-level configuration handed to create_app."""

    app_name: str = Field(default="Invoicing System API")
    log_level: str = Field(default="INFO")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    api: ApiKeyConfig = Field(default_factory=ApiKeyConfig)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    """
    Build configuration from the environment and Vault.

    Fails fast: a missing Vault configuration raises before the app starts.
    """
    email = EmailConfig(
        enable_real_emails=_env_flag("INVOICING_ENABLE_REAL_EMAILS", False),
        from_name=os.getenv("INVOICING_FROM_NAME", "Invoicing System"),
        from_email=os.getenv("INVOICING_FROM_EMAIL", "noreply@invoicingsystem.com"),
        smtp_server=os.getenv("INVOICING_SMTP_SERVER", "smtp.gmail.com"),
        smtp_port=int(os.getenv("INVOICING_SMTP_PORT", "587")),
        enable_ssl=_env_flag("INVOICING_SMTP_ENABLE_SSL", True),
    )
    if email.enable_real_emails:
        credentials = get_smtp_credentials()
        email.username = credentials["username"]
        email.password = credentials["password"]

    return AppConfig(
        log_level=os.getenv("INVOICING_LOG_LEVEL", "INFO").upper(),
        database=DatabaseConfig(url=get_database_url()),
        email=email,
        api=ApiKeyConfig(api_keys=get_api_keys()),
    )
