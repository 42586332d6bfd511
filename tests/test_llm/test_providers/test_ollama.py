"""Tests for the Ollama native chat adapter."""

import pytest

from tada_llm.catalog import get_provider_info
from tada_llm.decoder import StreamFraming
from tada_llm.providers.ollama import OllamaAdapter
from tada_llm.types import ModelInfo, ProviderSettings, RequestIntent


@pytest.fixture
def adapter() -> OllamaAdapter:
    return OllamaAdapter(get_provider_info("ollama"))


class TestBuildPayload:
    def test_options(self, adapter):
        body = adapter.build_payload(
            RequestIntent(model="llama2", system_prompt="s", user_prompt="u", max_tokens=1)
        )
        assert body["options"] == {"temperature": 0.5, "num_predict": 1}
        assert "temperature" not in body
        assert body["messages"][0] == {"role": "system", "content": "s"}

    def test_no_num_predict_by_default(self, adapter):
        body = adapter.build_payload(RequestIntent(model="llama2", system_prompt="s", user_prompt="u"))
        assert "num_predict" not in body["options"]


class TestParsing:
    def test_extract_content(self, adapter):
        data = {"message": {"role": "assistant", "content": "Hi there"}, "done": True}
        assert adapter.extract_content(data) == "Hi there"

    def test_stream_delta(self, adapter):
        assert adapter.extract_stream_delta({"message": {"content": "Hi"}, "done": False}) == "Hi"

    def test_done_event_is_sentinel(self, adapter):
        event = {"message": {"content": "trailing"}, "done": True}
        assert adapter.extract_stream_delta(event) is None
        assert adapter.is_stream_end(event)

    def test_content_event_does_not_end_stream(self, adapter):
        assert not adapter.is_stream_end({"message": {"content": "Hi"}, "done": False})
        assert not adapter.is_stream_end(["not", "an", "event"])

    def test_non_object_message_skipped(self, adapter):
        assert adapter.extract_stream_delta({"message": "Hi", "done": False}) is None

    def test_parse_models(self, adapter):
        data = {"models": [{"name": "llama3:8b"}, {"name": "mistral:latest"}]}
        assert adapter.parse_models(data) == [
            ModelInfo(id="llama3:8b", name="llama3:8b"),
            ModelInfo(id="mistral:latest", name="mistral:latest"),
        ]


class TestTransport:
    def test_ndjson_framing(self, adapter):
        assert adapter.framing == StreamFraming.NDJSON

    def test_default_endpoints(self, adapter):
        settings = ProviderSettings(provider="ollama", model="llama2")
        assert adapter.chat_endpoint(settings) == "http://localhost:11434/api/chat"
        assert adapter.models_endpoint(settings) == "http://localhost:11434/api/tags"

    def test_base_url_override(self, adapter):
        settings = ProviderSettings(provider="ollama", model="llama2", base_url="http://gpu:11434/")
        assert adapter.chat_endpoint(settings) == "http://gpu:11434/api/chat"

    def test_no_auth_header(self, adapter):
        assert adapter.headers("") == {"Content-Type": "application/json"}
