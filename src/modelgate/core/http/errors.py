from __future__ import annotations


class GatewayHTTPError(RuntimeError):
    """Base error for shared HTTP client operations."""


class GatewayHTTPNetworkError(GatewayHTTPError):
    """Raised when a request fails at the transport level or times out."""

    def __init__(self, message: str, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out
