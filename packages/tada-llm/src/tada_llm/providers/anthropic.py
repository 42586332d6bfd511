"""Anthropic provider adapter using the Messages API."""

from __future__ import annotations

from typing import Any

from tada_llm.errors import UnsupportedOperationError
from tada_llm.providers.base import BaseAdapter, as_dict
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096


class AnthropicAdapter(BaseAdapter):
    """Adapter for the Anthropic Messages API (/v1/messages).

    Anthropic exposes no model catalog here; ``parse_models`` returns the
    fixed table from the vendor catalog.
    """

    supports_model_listing = False

    # -- Request building --

    def build_payload(self, intent: RequestIntent) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": intent.model,
            "system": intent.system_prompt,
            "messages": [{"role": "user", "content": intent.user_prompt}],
            "max_tokens": intent.max_tokens or DEFAULT_MAX_TOKENS,
            "stream": intent.stream,
        }
        if intent.temperature is not None:
            body["temperature"] = intent.temperature
        return body

    # -- Response parsing --

    def extract_content(self, data: Any) -> str:
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or ""
        return ""

    def extract_stream_delta(self, event: Any) -> str | None:
        # message_start, content_block_start/stop, message_delta/stop and
        # ping carry no text.
        if not isinstance(event, dict) or event.get("type") != "content_block_delta":
            return None
        delta = as_dict(event.get("delta"))
        if delta.get("type") != "text_delta":
            return None
        return delta.get("text")

    def parse_models(self, data: Any = None) -> list[ModelInfo]:
        return list(self.info.models)

    # -- Transport details --

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def chat_endpoint(self, settings: ProviderSettings, *, stream: bool = False) -> str:
        return f"{self.base_url(settings)}/messages"

    def models_endpoint(self, settings: ProviderSettings) -> str:
        raise UnsupportedOperationError(
            f"{self.name} does not support dynamic model fetching"
        )
