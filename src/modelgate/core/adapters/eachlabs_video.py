from __future__ import annotations

import httpx

from modelgate.core.config.settings import GatewaySettings
from modelgate.core.errors import CredentialError, GatewayError, MissingFieldError
from modelgate.core.routing.catalog import VIDEO_BACKEND
from modelgate.core.schemas import GenerationResult, Modality, VideoRequest

from .base import log_adapter_error, read_json, require_key, send, status_error

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1024
DEFAULT_DURATION_S = 5
DEFAULT_NEGATIVE_PROMPT = "low quality, blurry, distorted"


class EachlabsVideoAdapter:
    """Text-to-video backend on the Eachlabs flows API."""

    name = VIDEO_BACKEND
    model = "eachlabs"
    modality = Modality.VIDEO

    def __init__(self, settings: GatewaySettings, client: httpx.Client | None = None) -> None:
        self._api_key = settings.eachlabs_api_key
        self._url = settings.eachlabs_url
        self._timeout = settings.http_timeout()
        self._client = client

    def generate(self, request: VideoRequest) -> str:
        api_key = require_key(self._api_key, "Eachlabs")
        payload = {
            "prompt": request.prompt,
            "negative_prompt": request.negative_prompt or DEFAULT_NEGATIVE_PROMPT,
            "width": int(request.width or DEFAULT_WIDTH),
            "height": int(request.height or DEFAULT_HEIGHT),
            "duration": request.duration or DEFAULT_DURATION_S,
        }
        response = send(
            self.name,
            self._url,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            timeout=self._timeout,
            client=self._client,
        )
        if response.status_code == 401:
            raise CredentialError("Unauthorized: invalid Eachlabs API key")
        if not response.is_success:
            raise status_error(self.name, response)

        video = read_json(self.name, response).get("video")
        url = video.get("url") if isinstance(video, dict) else None
        if not url:
            raise MissingFieldError("API response did not contain a video URL", field="video.url")
        return str(url)

    def invoke(self, request: VideoRequest) -> GenerationResult:
        try:
            url: str | None = self.generate(request)
        except GatewayError as exc:
            log_adapter_error(self.name, exc)
            url = None
        return GenerationResult(payload=url, backend_name=self.model, modality=self.modality)
