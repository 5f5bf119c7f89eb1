from __future__ import annotations

from typing import Any

import httpx

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.errors import GatewayError, UpstreamError
from modelgate.core.routing.catalog import GEMINI_BACKEND
from modelgate.core.schemas import GenerationRequest, GenerationResult, Modality

from .base import log_adapter_error, read_json, require_key, send, status_error


class GeminiTextAdapter:
    """General-purpose chat backend; also the routing classifier and the fallback."""

    name = GEMINI_BACKEND
    model = "Gemini 2.0 Flash"
    modality = Modality.TEXT

    def __init__(self, settings: GatewaySettings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.gemini_api_key
        self._url = settings.gemini_url
        self._timeout = settings.http_timeout()
        self._client = client

    def generate_text(self, prompt: str) -> str:
        api_key = require_key(self._api_key, "Gemini")
        response = send(
            self.name,
            self._url,
            json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
            timeout=self._timeout,
            client=self._client,
        )
        if not response.is_success:
            raise status_error(self.name, response)
        return _extract_text(read_json(self.name, response))

    def invoke(self, request: GenerationRequest) -> GenerationResult:
        try:
            text = self.generate_text(request.prompt)
        except GatewayError as exc:
            log_adapter_error(self.name, exc)
            raise
        return GenerationResult(payload=text, backend_name=self.model, modality=self.modality)


def _extract_text(data: dict[str, Any]) -> str:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise UpstreamError(f"Gemini blocked the prompt: {block_reason}")
        raise UpstreamError("Gemini response has no candidates")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise UpstreamError("Gemini response candidate has no content parts")
    texts = [part.get("text") for part in parts if isinstance(part, dict)]
    if any(text is not None and not isinstance(text, str) for text in texts):
        raise UpstreamError("Gemini response part text is not a string")
    return "".join(text for text in texts if text)
