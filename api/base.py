"""Unified API response envelope."""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """
    Uniform response wrapper for every endpoint.

    success: whether the operation succeeded
    message: human-readable summary
    data: payload (None on failure)
    errors: individual validation/business messages
    """

    success: bool
    message: str = ""
    data: Any | None = None
    errors: list[str] = Field(default_factory=list)


def success_response(data: Any = None, message: str = "") -> APIResponse:
    """Create a success response."""
    return APIResponse(success=True, message=message, data=data)


def error_response(message: str, errors: list[str] | None = None) -> APIResponse:
    """Create an error response."""
    return APIResponse(success=False, message=message, data=None, errors=errors or [])
