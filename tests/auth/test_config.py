"""Tests for auth/config.py."""

from auth.config import ApiKeyConfig


class TestApiKeyConfig:

    def test_defaults(self):
        config = ApiKeyConfig()
        assert config.api_keys == []
        assert config.header_name == "X-API-Key"

    def test_multiple_keys(self):
        config = ApiKeyConfig(api_keys=["a", "b"])
        assert config.api_keys == ["a", "b"]
