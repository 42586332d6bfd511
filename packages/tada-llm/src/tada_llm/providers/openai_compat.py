"""OpenAI-compatible adapter using the Chat Completions API.

Covers OpenAI itself and every service that implements the same
protocol (OpenRouter, DeepSeek, Groq, Mistral, a self-hosted endpoint,
etc.). Look-alikes differ only in id and default endpoint.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from tada_llm.catalog import ProviderInfo
from tada_llm.providers.base import DEFAULT_TEMPERATURE, BaseAdapter, as_dict, first
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent


class OpenAICompatibleAdapter(BaseAdapter):
    """Adapter for OpenAI-compatible Chat Completions endpoints."""

    def clone(
        self,
        provider_id: str,
        base_url: str,
        name: str | None = None,
    ) -> OpenAICompatibleAdapter:
        """A look-alike vendor: same wire format, its own id and endpoint."""
        info = dataclasses.replace(
            self.info,
            id=provider_id,
            name=name or provider_id,
            base_url=base_url,
            description=f"{name or provider_id} (OpenAI-compatible)",
            requires_base_url=False,
            supports_json_mode=False,
            models=(),
        )
        return type(self)(info)

    # -- Request building --

    def build_payload(self, intent: RequestIntent) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": intent.model,
            "messages": [
                {"role": "system", "content": intent.system_prompt},
                {"role": "user", "content": intent.user_prompt},
            ],
            "temperature": (
                intent.temperature if intent.temperature is not None else DEFAULT_TEMPERATURE
            ),
            "stream": intent.stream,
        }
        if intent.wants_json and self.supports_json_mode:
            body["response_format"] = {"type": "json_object"}
        if intent.max_tokens:
            body["max_tokens"] = intent.max_tokens
        return body

    # -- Response parsing --

    def extract_content(self, data: Any) -> str:
        message = as_dict(first(data.get("choices")).get("message"))
        return message.get("content") or ""

    def extract_stream_delta(self, event: Any) -> str | None:
        if not isinstance(event, dict):
            return None
        delta = as_dict(first(event.get("choices")).get("delta"))
        return delta.get("content")

    def parse_models(self, data: Any) -> list[ModelInfo]:
        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            return []
        return [
            ModelInfo(id=m["id"], name=m.get("name") or m["id"])
            for m in entries
            if isinstance(m, dict) and m.get("id")
        ]

    # -- Transport details --

    def headers(self, api_key: str) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def chat_endpoint(self, settings: ProviderSettings, *, stream: bool = False) -> str:
        return f"{self.base_url(settings)}/chat/completions"

    def models_endpoint(self, settings: ProviderSettings) -> str:
        return f"{self.base_url(settings)}/models"
