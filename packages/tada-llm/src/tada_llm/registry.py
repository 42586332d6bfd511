"""Lookup from provider id to adapter instance."""

from __future__ import annotations

from typing import Iterable, Iterator

from tada_llm.catalog import PROVIDERS, ProviderFamily, ProviderInfo
from tada_llm.errors import ConfigurationError
from tada_llm.providers import (
    AnthropicAdapter,
    GeminiAdapter,
    OllamaAdapter,
    OpenAICompatibleAdapter,
    ProviderAdapter,
)

_FAMILY_ADAPTERS: dict[ProviderFamily, type] = {
    ProviderFamily.OPENAI: OpenAICompatibleAdapter,
    ProviderFamily.ANTHROPIC: AnthropicAdapter,
    ProviderFamily.GOOGLE: GeminiAdapter,
    ProviderFamily.LOCAL: OllamaAdapter,
}


def adapter_for(info: ProviderInfo) -> ProviderAdapter:
    """Instantiate the adapter class matching a vendor's family."""
    return _FAMILY_ADAPTERS[info.family](info)


class AdapterRegistry:
    """Provider id -> adapter mapping.

    Populate it at startup; after that it is only read, so concurrent
    calls share it without locking. Unknown ids resolve to the fallback
    (OpenAI-compatible) adapter.
    """

    def __init__(
        self,
        adapters: Iterable[ProviderAdapter] = (),
        fallback: str = "openai",
    ):
        self._adapters: dict[str, ProviderAdapter] = {}
        self._fallback = fallback
        for adapter in adapters:
            self.register(adapter)

    @classmethod
    def default(cls) -> AdapterRegistry:
        """Registry holding an adapter for every vendor in the catalog."""
        return cls(adapter_for(info) for info in PROVIDERS)

    def register(self, adapter: ProviderAdapter) -> None:
        """Add an adapter, replacing any existing one with the same id."""
        self._adapters[adapter.id] = adapter

    def register_openai_compatible(
        self,
        provider_id: str,
        base_url: str,
        name: str | None = None,
    ) -> ProviderAdapter:
        """Register a look-alike vendor by cloning the OpenAI adapter."""
        template = self._adapters.get(self._fallback)
        if not isinstance(template, OpenAICompatibleAdapter):
            raise ConfigurationError(
                f"Fallback provider '{self._fallback}' is not OpenAI-compatible"
            )
        adapter = template.clone(provider_id, base_url, name)
        self.register(adapter)
        return adapter

    def get(self, provider_id: str) -> ProviderAdapter:
        adapter = self._adapters.get(provider_id) or self._adapters.get(self._fallback)
        if adapter is None:
            raise ConfigurationError(
                f"Provider '{provider_id}' not configured. "
                f"Available: {list(self._adapters.keys())}"
            )
        return adapter

    def is_known(self, provider_id: str) -> bool:
        return provider_id in self._adapters

    def ids(self) -> list[str]:
        return list(self._adapters)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._adapters

    def __iter__(self) -> Iterator[ProviderAdapter]:
        return iter(list(self._adapters.values()))

    def __len__(self) -> int:
        return len(self._adapters)
