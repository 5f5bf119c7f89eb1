from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import pytest

from modelgate.core.dispatch.dispatcher import Dispatcher
from modelgate.core.errors import ConfigurationError, DispatchError, UpstreamError
from modelgate.core.observability.trace import Trace
from modelgate.core.routing.catalog import DEFAULT_CATALOG
from modelgate.core.routing.router import Router
from modelgate.core.schemas import GenerationRequest, GenerationResult, ImageRequest, Modality, VideoRequest


@dataclass
class FakeAdapter:
    name: str
    model: str
    modality: Modality = Modality.TEXT
    payload: str | None = "ok"
    errors: list[Exception] = field(default_factory=list)
    calls: list[object] = field(default_factory=list)

    def invoke(self, request: object) -> GenerationResult:
        self.calls.append(request)
        if self.errors:
            raise self.errors.pop(0)
        return GenerationResult(payload=self.payload, backend_name=self.model, modality=self.modality)


@dataclass
class FakeDefaultAdapter(FakeAdapter):
    routing_answer: str | None = None
    routing_error: Exception | None = None
    routing_prompts: list[str] = field(default_factory=list)

    def generate_text(self, prompt: str) -> str:
        self.routing_prompts.append(prompt)
        if self.routing_error is not None:
            raise self.routing_error
        return self.routing_answer or ""


def _build(routing_answer: str | None = None, routing_error: Exception | None = None):
    gemini = FakeDefaultAdapter(
        name="gemini-2.0-flash",
        model="Gemini 2.0 Flash",
        payload="Waves fold on the shore",
        routing_answer=routing_answer,
        routing_error=routing_error,
    )
    deepseek = FakeAdapter(name="deepseek-chat", model="deepseek-chat", payload="use a set")
    image = FakeAdapter(name="Fal", model="Stable Diffusion XL", modality=Modality.IMAGE, payload="https://img/cat.png")
    video = FakeAdapter(name="LumaAI", model="eachlabs", modality=Modality.VIDEO, payload="https://vid/v.mp4")
    dispatcher = Dispatcher(
        router=Router(classifier=gemini, catalog=DEFAULT_CATALOG),
        default_adapter=gemini,
        coding_adapter=deepseek,
        image_adapter=image,
        video_adapter=video,
    )
    return dispatcher, gemini, deepseek, image, video


def test_general_prompt_routed_to_default_text_backend() -> None:
    dispatcher, gemini, deepseek, _, _ = _build(routing_answer="gemini-2.0-flash")

    result = dispatcher.handle(GenerationRequest(prompt="Write a haiku about the sea"))

    assert result.to_chat_envelope() == {"response": "Waves fold on the shore", "model": "Gemini 2.0 Flash"}
    assert len(gemini.calls) == 1
    assert deepseek.calls == []


def test_coding_prompt_routed_to_coding_backend() -> None:
    dispatcher, gemini, deepseek, _, _ = _build(routing_answer="deepseek-chat")

    result = dispatcher.handle(GenerationRequest(prompt="Fix this Python bug: ..."))

    assert result.to_chat_envelope() == {"response": "use a set", "model": "deepseek-chat"}
    assert deepseek.calls == [GenerationRequest(prompt="Fix this Python bug: ...")]
    assert gemini.calls == []


def test_image_prompt_is_wrapped_without_optional_fields() -> None:
    dispatcher, _, _, image, _ = _build(routing_answer="Fal")

    result = dispatcher.handle(GenerationRequest(prompt="Draw a cat astronaut"))

    assert image.calls == [ImageRequest(prompt="Draw a cat astronaut")]
    assert result.to_chat_envelope() == {"response": "https://img/cat.png", "model": "Stable Diffusion XL"}


def test_video_prompt_is_wrapped_without_optional_fields() -> None:
    dispatcher, _, _, _, video = _build(routing_answer="LumaAI")

    result = dispatcher.handle(GenerationRequest(prompt="a drone shot over mountains"))

    assert video.calls == [VideoRequest(prompt="a drone shot over mountains")]
    assert result.backend_name == "eachlabs"


def test_unparseable_routing_answer_uses_default_backend() -> None:
    dispatcher, gemini, _, image, _ = _build(routing_answer="I would pick Fal for this one.")

    result = dispatcher.handle(GenerationRequest(prompt="Draw a cat astronaut"))

    assert result.backend_name == "Gemini 2.0 Flash"
    assert image.calls == []
    assert len(gemini.calls) == 1


def test_routing_network_error_falls_back_to_default_backend() -> None:
    dispatcher, gemini, _, _, _ = _build(routing_error=UpstreamError("connection reset"))

    result = dispatcher.handle(GenerationRequest(prompt="Write a haiku about the sea"))

    assert result.backend_name == "Gemini 2.0 Flash"
    assert result.payload == "Waves fold on the shore"
    assert len(gemini.calls) == 1


def test_failing_backend_falls_back_and_reports_the_backend_actually_used() -> None:
    dispatcher, gemini, deepseek, _, _ = _build(routing_answer="deepseek-chat")
    deepseek.errors.append(UpstreamError("API Error: 500", status_code=500))
    trace = Trace(prompt="Fix this Python bug: ...")

    result = dispatcher.handle(GenerationRequest(prompt="Fix this Python bug: ..."), trace=trace)

    assert result.backend_name == "Gemini 2.0 Flash"
    assert gemini.calls == [GenerationRequest(prompt="Fix this Python bug: ...")]
    assert trace.states == ["Routing", "Dispatching", "FallbackDispatching", "Succeeded"]


def test_failed_image_request_becomes_a_text_answer() -> None:
    dispatcher, gemini, _, image, _ = _build(routing_answer="Fal")
    image.errors.append(RuntimeError("unexpected"))

    result = dispatcher.handle(GenerationRequest(prompt="Draw a cat astronaut"))

    assert result.to_chat_envelope() == {"response": "Waves fold on the shore", "model": "Gemini 2.0 Flash"}
    assert gemini.calls == [GenerationRequest(prompt="Draw a cat astronaut")]


def test_null_image_result_is_returned_without_fallback() -> None:
    dispatcher, gemini, _, image, _ = _build(routing_answer="Fal")
    image.payload = None

    result = dispatcher.handle(GenerationRequest(prompt="Draw a cat astronaut"))

    assert result.to_chat_envelope() == {"response": None, "model": "Stable Diffusion XL"}
    assert gemini.calls == []


def test_default_backend_failure_is_retried_once_as_fallback() -> None:
    dispatcher, gemini, _, _, _ = _build(routing_answer="gemini-2.0-flash")
    gemini.errors.append(UpstreamError("API Error: 503", status_code=503))

    result = dispatcher.handle(GenerationRequest(prompt="Write a haiku about the sea"))

    assert result.backend_name == "Gemini 2.0 Flash"
    assert len(gemini.calls) == 2


def test_fallback_failure_is_fatal() -> None:
    dispatcher, gemini, deepseek, _, _ = _build(routing_answer="deepseek-chat")
    deepseek.errors.append(UpstreamError("API Error: 500", status_code=500))
    gemini.errors.append(ConfigurationError("Gemini API key is missing"))
    trace = Trace(prompt="Fix this")

    with pytest.raises(DispatchError) as excinfo:
        dispatcher.handle(GenerationRequest(prompt="Fix this"), trace=trace)

    assert isinstance(excinfo.value.__cause__, ConfigurationError)
    assert trace.states == ["Routing", "Dispatching", "FallbackDispatching", "Fatal"]
    assert len(gemini.calls) == 1


def test_repeated_handling_does_not_mutate_catalog() -> None:
    dispatcher, _, _, _, _ = _build(routing_answer="deepseek-chat")
    before = dispatcher.router.catalog

    first = dispatcher.handle(GenerationRequest(prompt="Fix this"))
    second = dispatcher.handle(GenerationRequest(prompt="Fix this"))

    assert dispatcher.router.catalog is before
    assert dispatcher.router.catalog == DEFAULT_CATALOG
    assert first.backend_name == second.backend_name == "deepseek-chat"


def test_direct_image_and_video_skip_routing() -> None:
    dispatcher, gemini, _, image, video = _build(routing_answer="deepseek-chat")

    image_result = dispatcher.generate_image(ImageRequest(prompt="a fox", width=512))
    video_result = dispatcher.generate_video(VideoRequest(prompt="a fox running", duration=8))

    assert image_result.to_image_envelope() == {"imageUrl": "https://img/cat.png", "model": "Stable Diffusion XL"}
    assert video_result.to_video_envelope() == {"videoUrl": "https://vid/v.mp4", "model": "eachlabs"}
    assert image.calls == [ImageRequest(prompt="a fox", width=512)]
    assert gemini.routing_prompts == []


def test_from_settings_video_unauthorized_yields_null_video(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "generativelanguage.googleapis.com":
            body = {"candidates": [{"content": {"parts": [{"text": "LumaAI"}]}}]}
            return httpx.Response(200, request=request, json=body)
        if request.url.host == "flows.eachlabs.ai":
            return httpx.Response(401, request=request, json={"message": "unauthorized"})
        raise AssertionError(f"unexpected request to {request.url}")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    dispatcher = Dispatcher.from_settings(settings, client=client)

    routed = dispatcher.handle(GenerationRequest(prompt="Make a video of a sunrise"))
    direct = dispatcher.generate_video(VideoRequest(prompt="Make a video of a sunrise"))

    assert routed.backend_name == "eachlabs"
    assert routed.payload is None
    assert direct.to_video_envelope() == {"videoUrl": None, "model": "eachlabs"}


def test_from_settings_image_with_zero_images_yields_null_image(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "fal.run":
            return httpx.Response(200, request=request, json={"images": []})
        raise AssertionError(f"unexpected request to {request.url}")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    dispatcher = Dispatcher.from_settings(settings, client=client)

    result = dispatcher.generate_image(ImageRequest(prompt="Draw a cat astronaut"))

    assert result.to_image_envelope() == {"imageUrl": None, "model": "Stable Diffusion XL"}


def test_handle_without_trace_builds_none(monkeypatch) -> None:
    def fail_if_built(*args, **kwargs):
        raise AssertionError("trace should not be built")

    monkeypatch.setattr("modelgate.core.dispatch.dispatcher.Trace", fail_if_built)
    dispatcher, _, deepseek, _, _ = _build(routing_answer="deepseek-chat")
    deepseek.errors.append(UpstreamError("API Error: 500", status_code=500))

    result = dispatcher.handle(GenerationRequest(prompt="Fix this"))

    assert result.backend_name == "Gemini 2.0 Flash"


def test_trace_records_direct_success() -> None:
    dispatcher, _, _, _, _ = _build(routing_answer="Fal")
    trace = Trace(prompt="Draw a cat astronaut", request_id="r-1")

    dispatcher.handle(GenerationRequest(prompt="Draw a cat astronaut"), trace=trace)

    assert trace.states == ["Routing", "Dispatching", "Succeeded"]
    assert trace.events[1]["payload"] == {"backend": "Fal", "routed": "Fal", "request_id": "r-1"}
