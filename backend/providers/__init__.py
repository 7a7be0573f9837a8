from providers.base import BaseProvider
from providers.gemini_provider import GeminiProvider


__all__ = [
    "BaseProvider",
    "GeminiProvider",
]
