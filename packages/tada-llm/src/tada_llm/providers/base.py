"""Provider adapter base interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from tada_llm.catalog import ProviderFamily, ProviderInfo
from tada_llm.decoder import StreamFraming
from tada_llm.errors import ConfigurationError
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent

DEFAULT_TEMPERATURE = 0.5


@runtime_checkable
class ProviderAdapter(Protocol):
    """Interface that every provider adapter must implement.

    Adapters only translate. They hold no per-call state and never touch
    the network, so one instance is shared by all in-flight calls.
    """

    @property
    def id(self) -> str:
        """Provider id, e.g. 'openai', 'claude', 'gemini', 'ollama'."""
        ...

    @property
    def name(self) -> str:
        ...

    @property
    def info(self) -> ProviderInfo:
        ...

    @property
    def family(self) -> ProviderFamily:
        ...

    @property
    def framing(self) -> StreamFraming:
        ...

    @property
    def supports_json_mode(self) -> bool:
        ...

    @property
    def supports_model_listing(self) -> bool:
        ...

    def build_payload(self, intent: RequestIntent) -> dict[str, Any]:
        """Translate a request intent into the vendor's JSON body."""
        ...

    def extract_content(self, data: Any) -> str:
        """Final text of a complete (non-streaming) response."""
        ...

    def extract_stream_delta(self, event: Any) -> str | None:
        """Text fragment carried by one decoded stream event, if any."""
        ...

    def is_stream_end(self, event: Any) -> bool:
        """True for an in-band terminator; the stream stops before its content."""
        ...

    def parse_models(self, data: Any) -> list[ModelInfo]:
        ...

    def headers(self, api_key: str) -> dict[str, str]:
        ...

    def chat_endpoint(self, settings: ProviderSettings, *, stream: bool = False) -> str:
        ...

    def models_endpoint(self, settings: ProviderSettings) -> str:
        ...


class BaseAdapter:
    """Shared plumbing: vendor metadata and base URL resolution."""

    framing = StreamFraming.SSE
    supports_model_listing = True

    def __init__(self, info: ProviderInfo):
        self._info = info

    @property
    def id(self) -> str:
        return self._info.id

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def info(self) -> ProviderInfo:
        return self._info

    @property
    def family(self) -> ProviderFamily:
        return self._info.family

    @property
    def supports_json_mode(self) -> bool:
        return self._info.supports_json_mode

    def is_stream_end(self, event: Any) -> bool:
        return False

    def base_url(self, settings: ProviderSettings) -> str:
        """Settings override first, then the vendor default, without a trailing slash."""
        url = settings.base_url or self._info.base_url
        if not url:
            raise ConfigurationError(f"Base URL is required for {self.id} provider")
        return url[:-1] if url.endswith("/") else url

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def as_dict(value: Any) -> dict[str, Any]:
    """The value itself when it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def first(items: Any) -> dict[str, Any]:
    """First element of a list when it is a JSON object, else an empty dict."""
    if isinstance(items, list) and items:
        return as_dict(items[0])
    return {}
