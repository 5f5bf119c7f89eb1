from __future__ import annotations

import os
import threading

import httpx

from .errors import GatewayHTTPError, GatewayHTTPNetworkError

_DEFAULT_TIMEOUT_S = 9.0
_DEFAULT_CONNECT_TIMEOUT_S = 3.0
_DEFAULT_USER_AGENT = "modelgate/1.0"

_client: httpx.Client | None = None
_client_lock = threading.Lock()


def build_timeout(total_s: float = _DEFAULT_TIMEOUT_S, connect_s: float = _DEFAULT_CONNECT_TIMEOUT_S) -> httpx.Timeout:
    read_total = max(0.1, total_s)
    return httpx.Timeout(read_total, connect=min(max(0.1, connect_s), read_total))


def get_http_client() -> httpx.Client:
    global _client
    if _client is not None:
        return _client

    with _client_lock:
        if _client is None:
            user_agent = os.getenv("MODELGATE_HTTP_USER_AGENT", _DEFAULT_USER_AGENT)
            _client = httpx.Client(timeout=build_timeout(), headers={"User-Agent": user_agent})
    return _client


def close_http_client() -> None:
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


def post_json(
    url: str,
    *,
    json: object,
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
    client: httpx.Client | None = None,
    safe_url: str | None = None,
) -> httpx.Response:
    """POST a JSON body once and return the response whatever its status.

    Status interpretation is left to the caller. Transport failures and
    timeouts are raised as :class:`GatewayHTTPNetworkError`.
    """

    http = client or get_http_client()
    label = safe_url or url
    try:
        return http.post(url, headers=headers, json=json, timeout=timeout or build_timeout())
    except httpx.TimeoutException as exc:
        raise GatewayHTTPNetworkError(f"request_timeout:POST:{label}", timed_out=True) from exc
    except (httpx.ConnectError, httpx.NetworkError, httpx.RemoteProtocolError) as exc:
        raise GatewayHTTPNetworkError(f"request_connection_error:POST:{label}:{exc.__class__.__name__}") from exc
    except httpx.HTTPError as exc:
        raise GatewayHTTPError(f"request_http_error:POST:{label}:{exc.__class__.__name__}") from exc
