from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Modality(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str


@dataclass(frozen=True)
class ImageRequest:
    prompt: str
    negative_prompt: str | None = None
    width: int | float | None = None
    height: int | float | None = None

    @classmethod
    def from_prompt(cls, prompt: str) -> "ImageRequest":
        return cls(prompt=prompt)


@dataclass(frozen=True)
class VideoRequest:
    prompt: str
    negative_prompt: str | None = None
    width: int | float | None = None
    height: int | float | None = None
    duration: int | float | None = None

    @classmethod
    def from_prompt(cls, prompt: str) -> "VideoRequest":
        return cls(prompt=prompt)


@dataclass(frozen=True)
class GenerationResult:
    """Uniform outcome of one backend call.

    ``payload`` holds the answer text for text backends and the asset URL for
    image and video backends. ``backend_name`` is the reported model of the
    adapter that actually produced the result.
    """

    payload: str | None
    backend_name: str
    modality: Modality = Modality.TEXT

    @property
    def succeeded(self) -> bool:
        return self.payload is not None

    def to_chat_envelope(self) -> dict[str, str | None]:
        return {"response": self.payload, "model": self.backend_name}

    def to_image_envelope(self) -> dict[str, str | None]:
        return {"imageUrl": self.payload, "model": self.backend_name}

    def to_video_envelope(self) -> dict[str, str | None]:
        return {"videoUrl": self.payload, "model": self.backend_name}
