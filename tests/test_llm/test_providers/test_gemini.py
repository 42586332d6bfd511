"""Tests for the Gemini generateContent adapter."""

import httpx
import pytest

from tada_llm.catalog import get_provider_info
from tada_llm.providers.gemini import GeminiAdapter
from tada_llm.types import ModelInfo, OutputMode, ProviderSettings, RequestIntent

BASE = "https://generativelanguage.googleapis.com/v1beta"


@pytest.fixture
def adapter() -> GeminiAdapter:
    return GeminiAdapter(get_provider_info("gemini"))


@pytest.fixture
def settings() -> ProviderSettings:
    return ProviderSettings(provider="gemini", model="gemini-1.5-flash-latest", api_key="g-key")


class TestBuildPayload:
    def test_single_user_turn(self, adapter):
        body = adapter.build_payload(
            RequestIntent(model="gemini-1.5-flash-latest", system_prompt="Sys", user_prompt="User")
        )
        assert body["contents"] == [{"role": "user", "parts": [{"text": "Sys\n\nUser"}]}]
        assert body["generationConfig"] == {"temperature": 0.5}

    def test_json_and_limit(self, adapter):
        body = adapter.build_payload(
            RequestIntent(
                model="m", system_prompt="s", user_prompt="u",
                output=OutputMode.JSON, max_tokens=1,
            )
        )
        config = body["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["maxOutputTokens"] == 1


class TestParsing:
    def test_extract_content(self, adapter):
        data = {"candidates": [{"content": {"parts": [{"text": "Hello"}], "role": "model"}}]}
        assert adapter.extract_content(data) == "Hello"

    def test_extract_content_blocked(self, adapter):
        assert adapter.extract_content({"promptFeedback": {"blockReason": "SAFETY"}}) == ""

    def test_stream_delta(self, adapter):
        event = {"candidates": [{"content": {"parts": [{"text": "chunk"}]}}]}
        assert adapter.extract_stream_delta(event) == "chunk"

    @pytest.mark.parametrize(
        "event",
        [
            {"candidates": [None]},
            {"candidates": [{"content": "chunk"}]},
            {"candidates": [{"content": {"parts": ["chunk"]}}]},
        ],
    )
    def test_stream_delta_odd_shapes(self, adapter, event):
        assert adapter.extract_stream_delta(event) is None

    def test_parse_models_filters_and_strips(self, adapter):
        data = {
            "models": [
                {"name": "models/gemini-1.5-pro", "displayName": "Gemini 1.5 Pro"},
                {"name": "models/embedding-001", "displayName": "Embedding"},
                {"name": "models/gemini-exp"},
            ]
        }
        assert adapter.parse_models(data) == [
            ModelInfo(id="gemini-1.5-pro", name="Gemini 1.5 Pro"),
            ModelInfo(id="gemini-exp", name="gemini-exp"),
        ]


class TestTransport:
    def test_key_in_query_not_header(self, adapter):
        assert adapter.headers("g-key") == {"Content-Type": "application/json"}

    def test_chat_endpoint(self, adapter, settings):
        assert adapter.chat_endpoint(settings) == (
            f"{BASE}/models/gemini-1.5-flash-latest:generateContent?key=g-key"
        )

    def test_stream_endpoint_uses_sse(self, adapter, settings):
        assert adapter.chat_endpoint(settings, stream=True) == (
            f"{BASE}/models/gemini-1.5-flash-latest:streamGenerateContent?alt=sse&key=g-key"
        )

    def test_models_endpoint(self, adapter, settings):
        assert adapter.models_endpoint(settings) == f"{BASE}/models?key=g-key"

    def test_key_is_url_encoded(self, adapter):
        settings = ProviderSettings(provider="gemini", model="gemini-pro", api_key="k/1&d=e")
        for url in (
            adapter.chat_endpoint(settings),
            adapter.chat_endpoint(settings, stream=True),
            adapter.models_endpoint(settings),
        ):
            assert "&d=e" not in url
            assert httpx.URL(url).params["key"] == "k/1&d=e"
        assert httpx.URL(adapter.chat_endpoint(settings, stream=True)).params["alt"] == "sse"
