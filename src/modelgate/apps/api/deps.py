from __future__ import annotations

from functools import lru_cache

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.dispatch.dispatcher import Dispatcher


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    return GatewaySettings.from_env()


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    return Dispatcher.from_settings(get_settings())
