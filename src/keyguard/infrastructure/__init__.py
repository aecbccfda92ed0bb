"""Infrastructure layer."""

from keyguard.infrastructure.http import HTTPClient

__all__ = ["HTTPClient"]
