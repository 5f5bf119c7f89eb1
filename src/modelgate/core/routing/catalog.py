from __future__ import annotations

from dataclasses import dataclass

GEMINI_BACKEND = "gemini-2.0-flash"
DEEPSEEK_BACKEND = "deepseek-chat"
IMAGE_BACKEND = "Fal"
VIDEO_BACKEND = "LumaAI"


@dataclass(frozen=True)
class BackendDescriptor:
    name: str
    description: str

    def as_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


# Order only sets match priority; the default backend is fixed by the dispatcher.
DEFAULT_CATALOG: tuple[BackendDescriptor, ...] = (
    BackendDescriptor(
        name=GEMINI_BACKEND,
        description="Performs best for fact checking and general answers. It is not preferred for any coding related task",
    ),
    BackendDescriptor(
        name=DEEPSEEK_BACKEND,
        description=(
            "Works best for tasks related to general coding but may not perform well for tasks requiring "
            "deeper knowledge or complex tasks"
        ),
    ),
    BackendDescriptor(
        name=IMAGE_BACKEND,
        description="Works best for tasks related to image generation and text-to-image tasks",
    ),
    BackendDescriptor(
        name=VIDEO_BACKEND,
        description="Works best for tasks related to video generation and text-to-video tasks",
    ),
)

KNOWN_BACKENDS = frozenset(descriptor.name for descriptor in DEFAULT_CATALOG)


def catalog_names(catalog: tuple[BackendDescriptor, ...]) -> list[str]:
    return [descriptor.name for descriptor in catalog]
