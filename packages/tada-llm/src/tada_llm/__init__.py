"""AI provider gateway: one request shape, many LLM vendors."""

from tada_llm.types import (
    Confidence,
    ConversationTurn,
    ListSuggestion,
    ModelInfo,
    OutputMode,
    ProviderSettings,
    RequestIntent,
    Role,
    Subtask,
    TaskAnalysis,
)
from tada_llm.errors import (
    GatewayError,
    ConfigurationError,
    UnsupportedOperationError,
    TransientNetworkError,
    RequestTimeoutError,
    ProviderError,
    RateLimitError,
    ServerError,
    ClientError,
    AuthenticationError,
    AccessDeniedError,
    NotFoundError,
    InvalidRequestError,
    MalformedResponseError,
)
from tada_llm.catalog import (
    PROVIDERS,
    ProviderFamily,
    ProviderInfo,
    default_models,
    get_provider_info,
    list_providers,
)
from tada_llm.retry import RetryPolicy, is_retryable, retry
from tada_llm.decoder import StreamFraming, decode_events, make_decoder
from tada_llm.sanitize import parse_model_json, sanitize_json_text
from tada_llm.stream import CompletionStream
from tada_llm.registry import AdapterRegistry
from tada_llm.gateway import Gateway
from tada_llm.extract import analyze_task, suggest_list
