from __future__ import annotations

import httpx

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.errors import EmptyResultError, GatewayError, MissingFieldError
from modelgate.core.routing.catalog import IMAGE_BACKEND
from modelgate.core.schemas import GenerationResult, ImageRequest, Modality

from .base import log_adapter_error, read_json, require_key, send, status_error

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1024
DEFAULT_NEGATIVE_PROMPT = "low quality, blurry, distorted, deformed"


class FalImageAdapter:
    """Text-to-image backend running Stable Diffusion XL on fal.ai."""

    name = IMAGE_BACKEND
    model = "Stable Diffusion XL"
    modality = Modality.IMAGE

    def __init__(self, settings: GatewaySettings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.fal_api_key
        self._url = settings.fal_url
        self._timeout = settings.http_timeout()
        self._client = client

    def generate(self, request: ImageRequest) -> str:
        api_key = require_key(self._api_key, "Fal")
        payload = {
            "prompt": request.prompt,
            "negative_prompt": request.negative_prompt or DEFAULT_NEGATIVE_PROMPT,
            "width": int(request.width or DEFAULT_WIDTH),
            "height": int(request.height or DEFAULT_HEIGHT),
        }
        response = send(
            self.name,
            self._url,
            json=payload,
            headers={"Authorization": f"Key {api_key}", "Content-Type": "application/json"},
            timeout=self._timeout,
            client=self._client,
        )
        if not response.is_success:
            raise status_error(self.name, response)

        images = read_json(self.name, response).get("images")
        if not isinstance(images, list) or not images:
            raise EmptyResultError("No images were generated")
        url = images[0].get("url") if isinstance(images[0], dict) else None
        if not url:
            raise MissingFieldError("Image response did not contain a URL", field="images[0].url")
        return str(url)

    def invoke(self, request: ImageRequest) -> GenerationResult:
        try:
            url: str | None = self.generate(request)
        except GatewayError as exc:
            log_adapter_error(self.name, exc)
            url = None
        return GenerationResult(payload=url, backend_name=self.model, modality=self.modality)
