"""Table of known LLM vendors and their default models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tada_llm.types import ModelInfo


class ProviderFamily(Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    LOCAL = "local"


@dataclass(frozen=True)
class ProviderInfo:
    id: str
    name: str
    family: ProviderFamily
    base_url: str = ""
    description: str = ""
    requires_api_key: bool = True
    requires_base_url: bool = False
    supports_json_mode: bool = False
    models: tuple[ModelInfo, ...] = field(default_factory=tuple)


def _models(*pairs: tuple[str, str]) -> tuple[ModelInfo, ...]:
    return tuple(ModelInfo(id=model_id, name=name) for model_id, name in pairs)


PROVIDERS: list[ProviderInfo] = [
    ProviderInfo(
        id="openai",
        name="OpenAI",
        family=ProviderFamily.OPENAI,
        base_url="https://api.openai.com/v1",
        description="GPT-4, GPT-3.5 and other OpenAI models",
        supports_json_mode=True,
        models=_models(
            ("gpt-4o", "GPT-4o"),
            ("gpt-4-turbo", "GPT-4 Turbo"),
            ("gpt-3.5-turbo", "GPT-3.5 Turbo"),
        ),
    ),
    ProviderInfo(
        id="claude",
        name="Anthropic Claude",
        family=ProviderFamily.ANTHROPIC,
        base_url="https://api.anthropic.com/v1",
        description="Claude 3 family models from Anthropic",
        models=_models(
            ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
            ("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
            ("claude-3-opus-20240229", "Claude 3 Opus"),
        ),
    ),
    ProviderInfo(
        id="gemini",
        name="Google Gemini",
        family=ProviderFamily.GOOGLE,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini models from Google",
        supports_json_mode=True,
        models=_models(
            ("gemini-1.5-pro-latest", "Gemini 1.5 Pro"),
            ("gemini-1.5-flash-latest", "Gemini 1.5 Flash"),
        ),
    ),
    ProviderInfo(
        id="openrouter",
        name="OpenRouter",
        family=ProviderFamily.OPENAI,
        base_url="https://openrouter.ai/api/v1",
        description="Access multiple AI models through OpenRouter",
        supports_json_mode=True,
        models=_models(
            ("openrouter/auto", "Auto (recommended)"),
            ("google/gemini-flash-1.5", "Gemini 1.5 Flash"),
            ("anthropic/claude-3-haiku", "Claude 3 Haiku"),
        ),
    ),
    ProviderInfo(
        id="deepseek",
        name="DeepSeek",
        family=ProviderFamily.OPENAI,
        base_url="https://api.deepseek.com",
        description="DeepSeek AI models",
        supports_json_mode=True,
        models=_models(
            ("deepseek-chat", "DeepSeek Chat"),
            ("deepseek-coder", "DeepSeek Coder"),
        ),
    ),
    ProviderInfo(
        id="moonshot",
        name="Moonshot AI",
        family=ProviderFamily.OPENAI,
        base_url="https://api.moonshot.cn/v1",
        description="Kimi models from Moonshot AI",
        models=_models(
            ("moonshot-v1-8k", "moonshot-v1-8k"),
            ("moonshot-v1-32k", "moonshot-v1-32k"),
            ("moonshot-v1-128k", "moonshot-v1-128k"),
        ),
    ),
    ProviderInfo(
        id="ollama",
        name="Ollama",
        family=ProviderFamily.LOCAL,
        base_url="http://localhost:11434",
        description="Local AI models via Ollama",
        requires_api_key=False,
        models=_models(
            ("llama2", "Llama 2"),
            ("codellama", "Code Llama"),
            ("mistral", "Mistral"),
        ),
    ),
    ProviderInfo(
        id="custom",
        name="Custom Provider",
        family=ProviderFamily.OPENAI,
        description="OpenAI-compatible API endpoint",
        requires_base_url=True,
        supports_json_mode=True,
    ),
]

# OpenAI-compatible look-alikes: same wire format, different endpoint.
_LOOKALIKES: list[tuple[str, str, str]] = [
    ("groq", "Groq", "https://api.groq.com/openai/v1"),
    ("together", "Together AI", "https://api.together.xyz/v1"),
    ("perplexity", "Perplexity", "https://api.perplexity.ai"),
    ("mistral", "Mistral AI", "https://api.mistral.ai/v1"),
    ("cohere", "Cohere", "https://api.cohere.ai/compatibility/v1"),
    ("qwen", "Qwen (DashScope)", "https://dashscope.aliyuncs.com/compatible-mode/v1"),
    ("zhipu", "Zhipu AI", "https://open.bigmodel.cn/api/paas/v4"),
    ("minimax", "MiniMax", "https://api.minimax.chat/v1"),
    ("baichuan", "Baichuan", "https://api.baichuan-ai.com/v1"),
    ("doubao", "Doubao", "https://ark.cn-beijing.volces.com/api/v3"),
    ("xai", "xAI", "https://api.x.ai/v1"),
    ("siliconflow", "SiliconFlow", "https://api.siliconflow.cn/v1"),
]

for _id, _name, _url in _LOOKALIKES:
    PROVIDERS.append(
        ProviderInfo(
            id=_id,
            name=_name,
            family=ProviderFamily.OPENAI,
            base_url=_url,
            description=f"{_name} (OpenAI-compatible)",
        )
    )

_BY_ID: dict[str, ProviderInfo] = {p.id: p for p in PROVIDERS}


def get_provider_info(provider_id: str) -> ProviderInfo | None:
    """Look up a vendor by id. Returns None if unknown."""
    return _BY_ID.get(provider_id)


def list_providers(family: ProviderFamily | None = None) -> list[ProviderInfo]:
    """List all known vendors, optionally filtered by family."""
    if family is None:
        return list(PROVIDERS)
    return [p for p in PROVIDERS if p.family == family]


def default_models(provider_id: str) -> list[ModelInfo]:
    info = _BY_ID.get(provider_id)
    return list(info.models) if info else []
