"""Tests for tada_llm.catalog."""

from tada_llm.catalog import (
    PROVIDERS,
    ProviderFamily,
    default_models,
    get_provider_info,
    list_providers,
)


class TestGetProviderInfo:
    def test_known_provider(self):
        info = get_provider_info("claude")
        assert info is not None
        assert info.family == ProviderFamily.ANTHROPIC
        assert info.base_url == "https://api.anthropic.com/v1"

    def test_unknown_provider(self):
        assert get_provider_info("nonexistent") is None

    def test_ollama_needs_no_credentials(self):
        info = get_provider_info("ollama")
        assert not info.requires_api_key
        assert not info.requires_base_url
        assert info.base_url == "http://localhost:11434"

    def test_custom_needs_base_url(self):
        info = get_provider_info("custom")
        assert info.requires_api_key
        assert info.requires_base_url
        assert info.base_url == ""


class TestListProviders:
    def test_ids_are_unique(self):
        ids = [p.id for p in PROVIDERS]
        assert len(ids) == len(set(ids))

    def test_core_vendors_present(self):
        ids = {p.id for p in list_providers()}
        assert {"openai", "claude", "gemini", "openrouter", "deepseek",
                "moonshot", "ollama", "custom"} <= ids

    def test_lookalikes_are_openai_family(self):
        for provider_id in ("groq", "mistral", "xai", "siliconflow"):
            info = get_provider_info(provider_id)
            assert info.family == ProviderFamily.OPENAI
            assert info.base_url.startswith("https://")

    def test_filter_by_family(self):
        local = list_providers(ProviderFamily.LOCAL)
        assert [p.id for p in local] == ["ollama"]

    def test_json_mode_vendors(self):
        json_vendors = {p.id for p in PROVIDERS if p.supports_json_mode}
        assert json_vendors == {"openai", "openrouter", "deepseek", "custom", "gemini"}


class TestDefaultModels:
    def test_claude_fixed_table(self):
        ids = [m.id for m in default_models("claude")]
        assert "claude-3-5-sonnet-20241022" in ids
        assert len(ids) == 3

    def test_unknown_is_empty(self):
        assert default_models("nope") == []
