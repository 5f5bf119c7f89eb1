from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
route_var: ContextVar[str | None] = ContextVar("route", default=None)


@contextmanager
def log_context(request_id: str | None = None, route: str | None = None) -> Iterator[None]:
    request_token = request_id_var.set(request_id)
    route_token = route_var.set(route)
    try:
        yield
    finally:
        route_var.reset(route_token)
        request_id_var.reset(request_token)


def get_log_context() -> dict[str, str]:
    values = {"request_id": request_id_var.get(), "route": route_var.get()}
    return {key: value for key, value in values.items() if value is not None}
