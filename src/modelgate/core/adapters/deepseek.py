from __future__ import annotations

import httpx

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.errors import GatewayError, UpstreamError
from modelgate.core.routing.catalog import DEEPSEEK_BACKEND
from modelgate.core.schemas import GenerationRequest, GenerationResult, Modality

from .base import log_adapter_error, read_json, require_key, send, status_error

_OPENROUTER_MODEL = "deepseek/deepseek-chat:free"
_MAX_TOKENS = 10000


class DeepSeekTextAdapter:
    """Coding-oriented chat backend served through an OpenAI-compatible endpoint."""

    name = DEEPSEEK_BACKEND
    model = "deepseek-chat"
    modality = Modality.TEXT

    def __init__(self, settings: GatewaySettings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.deepseek_api_key
        self._url = settings.openrouter_url
        self._timeout = settings.http_timeout()
        self._client = client

    def chat_completion(self, prompt: str) -> str | None:
        api_key = require_key(self._api_key, "DeepSeek")
        payload: dict[str, object] = {
            "model": _OPENROUTER_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": _MAX_TOKENS,
        }
        response = send(
            self.name,
            self._url,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            timeout=self._timeout,
            client=self._client,
        )
        if not response.is_success:
            raise status_error(self.name, response)

        data = read_json(self.name, response)
        choices = data.get("choices")
        if not isinstance(choices, list):
            raise UpstreamError("DeepSeek response has no choices", status_code=response.status_code)
        if not choices:
            return None
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise UpstreamError("DeepSeek response choice has no message", status_code=response.status_code)

        # Reasoning models may leave content empty and answer in ``reasoning``.
        for key in ("content", "reasoning"):
            value = message.get(key)
            if value is None or value == "":
                continue
            if not isinstance(value, str):
                raise UpstreamError(f"DeepSeek message {key} is not text", status_code=response.status_code)
            return value
        return None

    def invoke(self, request: GenerationRequest) -> GenerationResult:
        try:
            text = self.chat_completion(request.prompt)
        except GatewayError as exc:
            log_adapter_error(self.name, exc)
            raise
        return GenerationResult(payload=text, backend_name=self.model, modality=self.modality)
