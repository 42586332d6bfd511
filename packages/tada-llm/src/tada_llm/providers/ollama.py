"""Ollama provider adapter using the native /api/chat endpoint."""

from __future__ import annotations

from typing import Any

from tada_llm.decoder import StreamFraming
from tada_llm.providers.base import DEFAULT_TEMPERATURE, BaseAdapter, as_dict
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent


class OllamaAdapter(BaseAdapter):
    """Adapter for a locally hosted Ollama server.

    Streams newline-delimited JSON. The event carrying ``done: true``
    ends the stream and contributes no text.
    """

    framing = StreamFraming.NDJSON

    # -- Request building --

    def build_payload(self, intent: RequestIntent) -> dict[str, Any]:
        options: dict[str, Any] = {
            "temperature": (
                intent.temperature if intent.temperature is not None else DEFAULT_TEMPERATURE
            ),
        }
        if intent.max_tokens:
            options["num_predict"] = intent.max_tokens
        return {
            "model": intent.model,
            "messages": [
                {"role": "system", "content": intent.system_prompt},
                {"role": "user", "content": intent.user_prompt},
            ],
            "stream": intent.stream,
            "options": options,
        }

    # -- Response parsing --

    def extract_content(self, data: Any) -> str:
        return as_dict(data.get("message")).get("content") or ""

    def extract_stream_delta(self, event: Any) -> str | None:
        if not isinstance(event, dict) or event.get("done"):
            return None
        return as_dict(event.get("message")).get("content")

    def is_stream_end(self, event: Any) -> bool:
        return isinstance(event, dict) and bool(event.get("done"))

    def parse_models(self, data: Any) -> list[ModelInfo]:
        entries = data.get("models") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            return []
        return [
            ModelInfo(id=m["name"], name=m["name"])
            for m in entries
            if isinstance(m, dict) and m.get("name")
        ]

    # -- Transport details --

    def headers(self, api_key: str) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def chat_endpoint(self, settings: ProviderSettings, *, stream: bool = False) -> str:
        return f"{self.base_url(settings)}/api/chat"

    def models_endpoint(self, settings: ProviderSettings) -> str:
        return f"{self.base_url(settings)}/api/tags"
