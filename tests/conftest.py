from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from modelgate.core.config.settings import GatewaySettings

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clear_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEMINI_API", "DEEPSEEK_API", "FAL_KEY", "EACHLABS_API", "MODELGATE_CATALOG_PATH", "MODELGATE_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(
        gemini_api_key="gemini-test-key",
        deepseek_api_key="deepseek-test-key",
        fal_api_key="fal-test-key",
        eachlabs_api_key="eachlabs-test-key",
    )


@pytest.fixture
def mock_client() -> Callable[[Handler], httpx.Client]:
    def build(handler: Handler) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return build
