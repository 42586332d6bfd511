"""Per-vendor request/response translation."""

from tada_llm.providers.anthropic import AnthropicAdapter
from tada_llm.providers.base import BaseAdapter, ProviderAdapter
from tada_llm.providers.gemini import GeminiAdapter
from tada_llm.providers.ollama import OllamaAdapter
from tada_llm.providers.openai_compat import OpenAICompatibleAdapter

__all__ = [
    "AnthropicAdapter",
    "BaseAdapter",
    "GeminiAdapter",
    "OllamaAdapter",
    "OpenAICompatibleAdapter",
    "ProviderAdapter",
]
