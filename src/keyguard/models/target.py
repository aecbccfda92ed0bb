"""Scan target models."""

from urllib.parse import urlparse

from pydantic import Field, field_validator

from keyguard.models.base import BaseSchema

ALLOWED_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048


class ScanTarget(BaseSchema):
    """Target page to scan for exposed credentials."""

    url: str = Field(description="Absolute http(s) URL of the page to scan")
    owner_id: str | None = Field(default=None, description="Owner tag for filtering")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if len(v) > MAX_URL_LENGTH:
            raise ValueError(f"URL too long (max {MAX_URL_LENGTH} characters)")

        parsed = urlparse(v)
        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise ValueError(f"URL must use http or https: {v}")
        if not parsed.hostname:
            raise ValueError(f"URL has no host: {v}")

        return v

    @field_validator("owner_id")
    @classmethod
    def validate_owner(cls, v: str | None) -> str | None:
        # Blank owner headers are treated as anonymous
        return v or None
