"""API key authentication configuration."""

from pydantic import BaseModel, Field


class ApiKeyConfig(BaseModel):
    """Pre-shared key settings for the API key middleware."""

    api_keys: list[str] = Field(
        default_factory=list,
        description="Keys accepted in the API key header. Empty rejects every protected request.",
    )
    header_name: str = Field(
        default="X-API-Key",
        description="Request header carrying the key",
    )
