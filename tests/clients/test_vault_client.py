"""Tests for VaultClient - HashiCorp Vault secrets management."""

from unittest.mock import Mock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidPath

import clients.vault_client as vault_module
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_api_keys,
    get_database_url,
    get_smtp_credentials,
)


@pytest.fixture
def vault_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
    monkeypatch.setenv("VAULT_ROLE_ID", "role")
    monkeypatch.setenv("VAULT_SECRET_ID", "secret")
    monkeypatch.delenv("VAULT_NAMESPACE", raising=False)


@pytest.fixture
def hvac_client(vault_env):
    with patch("clients.vault_client.hvac.Client") as client_cls:
        client = client_cls.return_value
        client.auth.approle.login.return_value = {"auth": {"client_token": "token-123"}}
        client.is_authenticated.return_value = True
        yield client


@pytest.fixture
def stub_vault():
    """Replace the singleton with a mock VaultClient."""
    stub = Mock(spec=VaultClient)
    vault_module._vault_client_instance = stub
    return stub


class TestVaultClientInit:
    """Initialization and authentication."""

    def test_missing_vault_addr_raises(self, monkeypatch):
        monkeypatch.delenv("VAULT_ADDR", raising=False)

        with pytest.raises(ValueError, match="VAULT_ADDR"):
            VaultClient()

    def test_missing_approle_credentials_raises(self, vault_env, monkeypatch):
        monkeypatch.delenv("VAULT_ROLE_ID")

        with pytest.raises(ValueError, match="VAULT_ROLE_ID"):
            VaultClient()

    def test_invalid_approle_raises_permission_error(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = Forbidden("invalid role")

        with pytest.raises(PermissionError, match="authentication"):
            VaultClient()

    def test_valid_approle_authenticates(self, hvac_client):
        client = VaultClient()

        assert client.client.token == "token-123"
        hvac_client.auth.approle.login.assert_called_once_with(role_id="role", secret_id="secret")


class TestGetSecret:
    """Secret retrieval - paths automatically scoped to invoicing/."""

    def test_returns_field_value(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.return_value = {
            "data": {"data": {"url": "postgresql://db"}}
        }

        url = VaultClient().get_secret("database", "url")

        assert url == "postgresql://db"
        hvac_client.secrets.kv.v2.read_secret_version.assert_called_once_with(
            path="invoicing/database", raise_on_deleted_version=True
        )

    def test_missing_path_raises(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath()

        with pytest.raises(PermissionError, match="not found"):
            VaultClient().get_secret("nonexistent", "field")

    def test_missing_field_raises_keyerror(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.return_value = {"data": {"data": {"url": "x"}}}

        with pytest.raises(KeyError, match="not found"):
            VaultClient().get_secret("database", "nonexistent_field")


class TestConvenienceFunctions:
    """Module-level helpers read through the singleton and cache."""

    def test_database_url_cached(self, stub_vault):
        stub_vault.get_secret.return_value = "postgresql://db"

        assert get_database_url() == "postgresql://db"
        assert get_database_url() == "postgresql://db"
        stub_vault.get_secret.assert_called_once_with("database", "url")

    def test_api_keys_split_on_commas(self, stub_vault):
        stub_vault.get_secret.return_value = "key-one, key-two,,"

        assert get_api_keys() == ["key-one", "key-two"]

    def test_empty_api_keys_raise(self, stub_vault):
        stub_vault.get_secret.return_value = " , "

        with pytest.raises(VaultError):
            get_api_keys()

    def test_smtp_credentials(self, stub_vault):
        stub_vault.read_secret.return_value = {"username": "mailer", "password": "hunter2"}

        assert get_smtp_credentials() == {"username": "mailer", "password": "hunter2"}

    def test_smtp_credentials_missing_fields_are_none(self, stub_vault):
        stub_vault.read_secret.return_value = {"username": "mailer"}

        assert get_smtp_credentials() == {"username": "mailer", "password": None}
