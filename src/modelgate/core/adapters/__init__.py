from .base import Adapter
from .deepseek import DeepSeekTextAdapter
from .eachlabs_video import EachlabsVideoAdapter
from .fal_image import FalImageAdapter
from .gemini import GeminiTextAdapter

__all__ = [
    "Adapter",
    "DeepSeekTextAdapter",
    "EachlabsVideoAdapter",
    "FalImageAdapter",
    "GeminiTextAdapter",
]
