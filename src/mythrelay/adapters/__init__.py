from .base import AdapterError, BaseGenerator
from .gemini import GeminiAdapter

__all__ = ["AdapterError", "BaseGenerator", "GeminiAdapter"]
