# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_database_url,
    get_api_keys,
    get_smtp_credentials,
)
from clients.postgres_client import PostgresClient, DatabaseUnavailableError
from clients.smtp_client import SmtpClient, SmtpClientError
