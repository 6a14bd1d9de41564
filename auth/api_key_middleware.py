"""API key middleware for FastAPI - pre-shared key check on every request."""

import logging
import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from api.base import error_response
from auth.config import ApiKeyConfig

logger = logging.getLogger(__name__)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Middleware that requires a valid API key header.

    For protected routes:
    1. Reads the key from the configured header (X-API-Key by default)
    2. Compares it against every configured key in constant time
    3. Responds 401 with an error envelope when missing or unknown

    Public paths bypass the check entirely. Matching is case-insensitive.
    """

    PUBLIC_PREFIXES = [
        "/swagger",
        "/health",
    ]
    PUBLIC_EXACT = [
        "/",
        "/favicon.ico",
    ]

    def __init__(self, app, config: ApiKeyConfig):
        super().__init__(app)
        self._config = config

    def _is_public_path(self, path: str) -> bool:
        """Check if path is in the allow-list."""
        path = path.lower()
        if path in self.PUBLIC_EXACT:
            return True
        for prefix in self.PUBLIC_PREFIXES:
            if path == prefix or path.startswith(prefix + "/"):
                return True
        return False

    def _is_valid_key(self, candidate: str) -> bool:
        """True if candidate equals any configured key."""
        valid = False
        for key in self._config.api_keys:
            if secrets.compare_digest(candidate.encode("utf-8"), key.encode("utf-8")):
                valid = True
        return valid

    async def dispatch(self, request: Request, call_next):
        """Process request through middleware."""
        path = request.url.path

        if self._is_public_path(path):
            return await call_next(request)

        api_key = request.headers.get(self._config.header_name)

        if api_key is None:
            logger.warning(f"API Key was not provided in request to {path}")
            return JSONResponse(
                status_code=401,
                content=error_response("API Key was not provided").model_dump(mode="json"),
            )

        if not self._is_valid_key(api_key):
            logger.warning(f"Unauthorized API Key attempted access to {path}")
            return JSONResponse(
                status_code=401,
                content=error_response("Unauthorized").model_dump(mode="json"),
            )

        logger.info(f"Successful API Key authentication for {path}")
        return await call_next(request)
