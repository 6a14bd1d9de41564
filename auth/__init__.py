"""Authentication modules."""

from auth.config import ApiKeyConfig
from auth.api_key_middleware import ApiKeyMiddleware
