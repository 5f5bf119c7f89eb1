from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from modelgate.core.dispatch.dispatcher import Dispatcher
from modelgate.core.schemas import GenerationRequest, ImageRequest, VideoRequest

from .deps import get_dispatcher

logger = logging.getLogger("modelgate.api")

router = APIRouter()


class ChatBody(BaseModel):
    model_config = ConfigDict(strict=True)

    prompt: str = Field(min_length=1)


class ImageBody(BaseModel):
    model_config = ConfigDict(strict=True)

    prompt: str = Field(min_length=1)
    negative_prompt: str | None = None
    width: float | None = None
    height: float | None = None


class VideoBody(ImageBody):
    duration: float | None = None


def internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@router.post("/chat")
def chat(body: ChatBody, dispatcher: Dispatcher = Depends(get_dispatcher)):
    try:
        result = dispatcher.handle(GenerationRequest(prompt=body.prompt))
    except Exception:
        logger.exception("Error while generating response")
        return internal_error()
    return result.to_chat_envelope()


@router.post("/image")
def image(body: ImageBody, dispatcher: Dispatcher = Depends(get_dispatcher)):
    request = ImageRequest(
        prompt=body.prompt,
        negative_prompt=body.negative_prompt,
        width=body.width,
        height=body.height,
    )
    try:
        result = dispatcher.generate_image(request)
    except Exception:
        logger.exception("Error while generating image")
        return internal_error()
    return result.to_image_envelope()


@router.post("/video")
def video(body: VideoBody, dispatcher: Dispatcher = Depends(get_dispatcher)):
    request = VideoRequest(
        prompt=body.prompt,
        negative_prompt=body.negative_prompt,
        width=body.width,
        height=body.height,
        duration=body.duration,
    )
    try:
        result = dispatcher.generate_video(request)
    except Exception:
        logger.exception("Error while generating video")
        return internal_error()
    return result.to_video_envelope()
