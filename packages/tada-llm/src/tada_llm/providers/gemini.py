"""Gemini provider adapter using the generateContent API."""

from __future__ import annotations

from typing import Any

import httpx

from tada_llm.providers.base import DEFAULT_TEMPERATURE, BaseAdapter, as_dict, first
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent

MODEL_FAMILY_TOKEN = "gemini"


class GeminiAdapter(BaseAdapter):
    """Adapter for the Gemini generateContent API.

    The API key travels in the query string, not in a header. System and
    user instructions are sent as a single user turn.
    """

    # -- Request building --

    def build_payload(self, intent: RequestIntent) -> dict[str, Any]:
        config: dict[str, Any] = {
            "temperature": (
                intent.temperature if intent.temperature is not None else DEFAULT_TEMPERATURE
            ),
        }
        if intent.max_tokens:
            config["maxOutputTokens"] = intent.max_tokens
        if intent.wants_json and self.supports_json_mode:
            config["responseMimeType"] = "application/json"

        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": f"{intent.system_prompt}\n\n{intent.user_prompt}"}],
                }
            ],
            "generationConfig": config,
        }

    # -- Response parsing --

    def extract_content(self, data: Any) -> str:
        return self._first_text(data) or ""

    def extract_stream_delta(self, event: Any) -> str | None:
        # Stream chunks share the response envelope.
        if not isinstance(event, dict):
            return None
        return self._first_text(event)

    def _first_text(self, data: dict[str, Any]) -> str | None:
        candidate = first(data.get("candidates"))
        part = first(as_dict(candidate.get("content")).get("parts"))
        return part.get("text")

    def parse_models(self, data: Any) -> list[ModelInfo]:
        entries = data.get("models") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            return []
        models = []
        for m in entries:
            name = m.get("name", "") if isinstance(m, dict) else ""
            if MODEL_FAMILY_TOKEN not in name:
                continue
            model_id = name.replace("models/", "")
            models.append(
                ModelInfo(
                    id=model_id,
                    name=m.get("displayName") or model_id,
                    description=m.get("description"),
                )
            )
        return models

    # -- Transport details --

    def headers(self, api_key: str) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def chat_endpoint(self, settings: ProviderSettings, *, stream: bool = False) -> str:
        base = self.base_url(settings)
        model = settings.model or "gemini-pro"
        if stream:
            url = httpx.URL(
                f"{base}/models/{model}:streamGenerateContent",
                params={"alt": "sse", "key": settings.api_key},
            )
        else:
            url = httpx.URL(
                f"{base}/models/{model}:generateContent",
                params={"key": settings.api_key},
            )
        return str(url)

    def models_endpoint(self, settings: ProviderSettings) -> str:
        url = httpx.URL(f"{self.base_url(settings)}/models", params={"key": settings.api_key})
        return str(url)
