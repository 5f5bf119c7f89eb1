from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from modelgate.core.adapters import DeepSeekTextAdapter, EachlabsVideoAdapter, FalImageAdapter, GeminiTextAdapter
from modelgate.core.adapters.base import Adapter
from modelgate.core.config.settings import GatewaySettings
from modelgate.core.errors import DispatchError
from modelgate.core.observability.trace import Trace
from modelgate.core.routing.router import Router, RoutingDecision
from modelgate.core.schemas import GenerationRequest, GenerationResult, ImageRequest, VideoRequest

logger = logging.getLogger("modelgate.dispatcher")

ROUTING = "Routing"
DISPATCHING = "Dispatching"
FALLBACK_DISPATCHING = "FallbackDispatching"
SUCCEEDED = "Succeeded"
FATAL = "Fatal"


class Dispatcher:
    """Routes one prompt to one backend, with a single fallback onto the default text backend.

    Image and video backends receive the bare prompt so their own defaults
    apply. When any selected backend raises, the default text backend answers
    the original prompt instead, even if the prompt asked for an image or a
    video. Only a failure of that fallback call is fatal.
    """

    def __init__(
        self,
        router: Router,
        default_adapter: Adapter,
        coding_adapter: Adapter,
        image_adapter: Adapter,
        video_adapter: Adapter,
    ) -> None:
        self.router = router
        self.default_adapter = default_adapter
        self.coding_adapter = coding_adapter
        self.image_adapter = image_adapter
        self.video_adapter = video_adapter
        self._routes: dict[str, tuple[Adapter, Callable[[GenerationRequest], object]]] = {
            default_adapter.name: (default_adapter, lambda request: request),
            coding_adapter.name: (coding_adapter, lambda request: request),
            image_adapter.name: (image_adapter, lambda request: ImageRequest.from_prompt(request.prompt)),
            video_adapter.name: (video_adapter, lambda request: VideoRequest.from_prompt(request.prompt)),
        }

    @classmethod
    def from_settings(cls, settings: GatewaySettings, client: httpx.Client | None = None) -> "Dispatcher":
        default_adapter = GeminiTextAdapter(settings, client=client)
        return cls(
            router=Router(classifier=default_adapter, catalog=settings.catalog),
            default_adapter=default_adapter,
            coding_adapter=DeepSeekTextAdapter(settings, client=client),
            image_adapter=FalImageAdapter(settings, client=client),
            video_adapter=EachlabsVideoAdapter(settings, client=client),
        )

    def select(self, decision: RoutingDecision) -> tuple[Adapter, Callable[[GenerationRequest], object]]:
        if decision.backend_name is not None and decision.backend_name in self._routes:
            return self._routes[decision.backend_name]
        return self._routes[self.default_adapter.name]

    def handle(self, request: GenerationRequest, trace: Trace | None = None) -> GenerationResult:
        _record(trace, ROUTING)
        decision = self.router.classify(request.prompt)
        adapter, to_backend_request = self.select(decision)

        _record(trace, DISPATCHING, backend=adapter.name, routed=decision.backend_name)
        try:
            result = adapter.invoke(to_backend_request(request))
        except Exception as exc:
            logger.warning(
                "dispatch_fallback",
                extra={
                    "extra_fields": {
                        "backend": adapter.name,
                        "fallback_backend": self.default_adapter.name,
                        "error_kind": exc.__class__.__name__,
                    }
                },
            )
            return self._fallback(request, trace, failed_backend=adapter.name)

        _record(trace, SUCCEEDED, backend=adapter.name, model=result.backend_name, has_payload=result.succeeded)
        return result

    def _fallback(self, request: GenerationRequest, trace: Trace | None, failed_backend: str) -> GenerationResult:
        _record(trace, FALLBACK_DISPATCHING, backend=self.default_adapter.name, failed_backend=failed_backend)
        try:
            result = self.default_adapter.invoke(request)
        except Exception as exc:
            _record(trace, FATAL, backend=self.default_adapter.name, error_kind=exc.__class__.__name__)
            logger.error(
                "dispatch_fatal",
                extra={"extra_fields": {"backend": self.default_adapter.name, "error_kind": exc.__class__.__name__}},
            )
            raise DispatchError(f"Fallback backend {self.default_adapter.name} failed: {exc}") from exc

        _record(trace, SUCCEEDED, backend=self.default_adapter.name, model=result.backend_name, has_payload=result.succeeded)
        return result

    def generate_image(self, request: ImageRequest) -> GenerationResult:
        return self.image_adapter.invoke(request)

    def generate_video(self, request: VideoRequest) -> GenerationResult:
        return self.video_adapter.invoke(request)


def _record(trace: Trace | None, state: str, **payload: object) -> None:
    if trace is not None:
        trace.enter(state, **payload)
