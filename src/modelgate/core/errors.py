from __future__ import annotations


class GatewayError(RuntimeError):
    """Base error for backend adapters and dispatch."""


class ConfigurationError(GatewayError):
    """Raised when a credential or configuration value is missing or invalid."""


class UpstreamError(GatewayError):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CredentialError(GatewayError):
    """Raised when a provider explicitly rejects the configured credential."""

    def __init__(self, message: str, status_code: int = 401) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResultError(GatewayError):
    """Raised when a provider answers successfully but produces nothing usable."""


class MissingFieldError(GatewayError):
    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.field = field


class DispatchError(GatewayError):
    """Raised when the fallback attempt itself fails."""
