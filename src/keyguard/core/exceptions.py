"""Custom exceptions for KeyGuard."""


class KeyGuardError(Exception):
    """Base exception for all KeyGuard errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FetchError(KeyGuardError):
    """Raised when a resource cannot be fetched or decoded."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class ParseError(KeyGuardError):
    """Raised when the primary document cannot be parsed."""

    pass


class UrlError(KeyGuardError):
    """Raised when a resource reference cannot be resolved."""

    def __init__(
        self,
        message: str,
        base: str | None = None,
        reference: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.base = base
        self.reference = reference


class RecommendationError(KeyGuardError):
    """Raised when the remediation text service fails."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.provider = provider


class PersistenceError(KeyGuardError):
    """Raised when a storage read or write fails."""

    pass


class ConfigurationError(KeyGuardError):
    """Raised when configuration is invalid."""

    pass
