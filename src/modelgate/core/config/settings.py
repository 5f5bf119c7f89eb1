"""Process-wide gateway configuration.

Everything the core needs from the environment is read once into an
immutable :class:`GatewaySettings` and handed to the adapters, the router and
the dispatcher. Rotating a credential means building new settings and new
adapters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import yaml
from pydantic import BaseModel, Field, ValidationError

from modelgate.core.errors import ConfigurationError
from modelgate.core.http.client import build_timeout
from modelgate.core.routing.catalog import DEFAULT_CATALOG, KNOWN_BACKENDS, BackendDescriptor

_DEFAULT_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
_DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
_DEFAULT_FAL_URL = "https://fal.run/fal-ai/fast-sdxl"
_DEFAULT_EACHLABS_URL = "https://flows.eachlabs.ai/api/v1/"
_DEFAULT_TIMEOUT_S = 9.0
_DEFAULT_CONNECT_TIMEOUT_S = 3.0


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_secret_env(name: str) -> str:
    return (os.getenv(name) or "").strip()


class _CatalogEntry(BaseModel):
    name: str
    description: str = Field(min_length=1)


class _CatalogFile(BaseModel):
    backends: list[_CatalogEntry]


def load_catalog(path: str | Path) -> tuple[BackendDescriptor, ...]:
    """Load an ordered catalog override from YAML.

    The file may reorder the backends and reword their descriptions but it
    must list each known backend exactly once.
    """

    catalog_path = Path(path).expanduser()
    try:
        with catalog_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        parsed = _CatalogFile.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid backend catalog at {catalog_path}: {exc}") from exc

    names = [entry.name for entry in parsed.backends]
    unknown = sorted(set(names) - KNOWN_BACKENDS)
    if unknown:
        raise ConfigurationError(f"Unknown backends in catalog: {', '.join(unknown)}")
    if len(names) != len(set(names)) or set(names) != KNOWN_BACKENDS:
        raise ConfigurationError("Catalog must list every backend exactly once")
    return tuple(BackendDescriptor(name=entry.name, description=entry.description) for entry in parsed.backends)


@dataclass(frozen=True)
class GatewaySettings:
    gemini_api_key: str = ""
    deepseek_api_key: str = ""
    fal_api_key: str = ""
    eachlabs_api_key: str = ""
    gemini_url: str = _DEFAULT_GEMINI_URL
    openrouter_url: str = _DEFAULT_OPENROUTER_URL
    fal_url: str = _DEFAULT_FAL_URL
    eachlabs_url: str = _DEFAULT_EACHLABS_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    connect_timeout_s: float = _DEFAULT_CONNECT_TIMEOUT_S
    catalog: tuple[BackendDescriptor, ...] = field(default=DEFAULT_CATALOG)

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        catalog_path = os.getenv("MODELGATE_CATALOG_PATH", "").strip()
        return cls(
            gemini_api_key=_get_secret_env("GEMINI_API"),
            deepseek_api_key=_get_secret_env("DEEPSEEK_API"),
            fal_api_key=_get_secret_env("FAL_KEY"),
            eachlabs_api_key=_get_secret_env("EACHLABS_API"),
            gemini_url=os.getenv("MODELGATE_GEMINI_URL", _DEFAULT_GEMINI_URL),
            openrouter_url=os.getenv("MODELGATE_OPENROUTER_URL", _DEFAULT_OPENROUTER_URL),
            fal_url=os.getenv("MODELGATE_FAL_URL", _DEFAULT_FAL_URL),
            eachlabs_url=os.getenv("MODELGATE_EACHLABS_URL", _DEFAULT_EACHLABS_URL),
            timeout_s=max(0.1, _get_float_env("MODELGATE_HTTP_TIMEOUT_S", _DEFAULT_TIMEOUT_S)),
            connect_timeout_s=max(0.1, _get_float_env("MODELGATE_HTTP_CONNECT_TIMEOUT_S", _DEFAULT_CONNECT_TIMEOUT_S)),
            catalog=load_catalog(catalog_path) if catalog_path else DEFAULT_CATALOG,
        )

    def http_timeout(self) -> httpx.Timeout:
        return build_timeout(self.timeout_s, self.connect_timeout_s)

    def credentials_present(self) -> dict[str, bool]:
        return {
            "gemini": bool(self.gemini_api_key),
            "deepseek": bool(self.deepseek_api_key),
            "fal": bool(self.fal_api_key),
            "eachlabs": bool(self.eachlabs_api_key),
        }
