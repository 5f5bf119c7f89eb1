from __future__ import annotations

import logging
import time
from typing import Any, Protocol

import httpx

from modelgate.core.errors import ConfigurationError, GatewayError, UpstreamError
from modelgate.core.http.client import post_json
from modelgate.core.http.errors import GatewayHTTPError, GatewayHTTPNetworkError
from modelgate.core.logging.redact import redact_string, truncate
from modelgate.core.schemas import GenerationResult, Modality

logger = logging.getLogger("modelgate.adapters")


class Adapter(Protocol):
    name: str
    model: str
    modality: Modality

    def invoke(self, request: Any) -> GenerationResult: ...


def require_key(api_key: str, provider: str) -> str:
    if not api_key:
        raise ConfigurationError(f"{provider} API key is missing")
    return api_key


def send(
    backend: str,
    url: str,
    *,
    json: object,
    headers: dict[str, str],
    timeout: httpx.Timeout,
    client: httpx.Client | None = None,
) -> httpx.Response:
    start = time.perf_counter()
    try:
        response = post_json(url, json=json, headers=headers, timeout=timeout, client=client, safe_url=backend)
    except GatewayHTTPError as exc:
        _log_call(backend, start, status=None, ok=False)
        timed_out = isinstance(exc, GatewayHTTPNetworkError) and exc.timed_out
        reason = "timed out" if timed_out else "transport failure"
        raise UpstreamError(f"{backend} request {reason}: {exc}") from exc
    _log_call(backend, start, status=response.status_code, ok=response.is_success)
    return response


def status_error(backend: str, response: httpx.Response) -> UpstreamError:
    body = truncate(redact_string(response.text))
    return UpstreamError(f"{backend} API Error: {response.status_code} - {body}", status_code=response.status_code, body=body)


def read_json(backend: str, response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamError(f"{backend} returned a malformed response body", status_code=response.status_code) from exc
    if not isinstance(data, dict):
        raise UpstreamError(f"{backend} returned an unexpected JSON document", status_code=response.status_code)
    return data


def log_adapter_error(backend: str, exc: GatewayError) -> None:
    logger.warning(
        "backend_error",
        extra={
            "extra_fields": {
                "backend": backend,
                "error_kind": exc.__class__.__name__,
                "status_code": getattr(exc, "status_code", None),
                "error": redact_string(str(exc)),
            }
        },
    )


def _log_call(backend: str, start: float, status: int | None, ok: bool) -> None:
    logger.info(
        "backend_call",
        extra={
            "extra_fields": {
                "backend": backend,
                "status_code": status,
                "ok": ok,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            }
        },
    )
