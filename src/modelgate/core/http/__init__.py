from .client import build_timeout, close_http_client, get_http_client, post_json
from .errors import GatewayHTTPError, GatewayHTTPNetworkError

__all__ = [
    "build_timeout",
    "close_http_client",
    "get_http_client",
    "post_json",
    "GatewayHTTPError",
    "GatewayHTTPNetworkError",
]
