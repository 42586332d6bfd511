"""Error hierarchy for the AI provider gateway."""

from __future__ import annotations

import json
from typing import Any


class GatewayError(Exception):
    """Base error for all gateway errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return False


class ConfigurationError(GatewayError):
    """Settings are incomplete: missing credential, model, base URL or provider."""


class UnsupportedOperationError(GatewayError):
    """The vendor does not offer the requested capability."""


class TransientNetworkError(GatewayError):
    @property
    def retryable(self) -> bool:
        return True


class RequestTimeoutError(TransientNetworkError):
    pass


class ProviderError(GatewayError):
    """Non-2xx response returned by an LLM vendor."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: int | None = None,
        error_code: str | None = None,
        retryable: bool = False,
        raw: Any = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.provider = provider
        self.status_code = status_code
        self.error_code = error_code
        self._retryable = retryable
        self.raw = raw

    @property
    def retryable(self) -> bool:
        return self._retryable


# Retryable provider errors

class RateLimitError(ProviderError):
    def __init__(self, message: str, *, provider: str, **kwargs: Any):
        kwargs.setdefault("status_code", 429)
        super().__init__(message, provider=provider, retryable=True, **kwargs)


class ServerError(ProviderError):
    def __init__(self, message: str, *, provider: str, **kwargs: Any):
        super().__init__(message, provider=provider, retryable=True, **kwargs)


# Non-retryable provider errors

class ClientError(ProviderError):
    def __init__(self, message: str, *, provider: str, **kwargs: Any):
        super().__init__(message, provider=provider, retryable=False, **kwargs)


class AuthenticationError(ClientError):
    pass


class AccessDeniedError(ClientError):
    pass


class NotFoundError(ClientError):
    pass


class InvalidRequestError(ClientError):
    pass


class MalformedResponseError(GatewayError):
    """Model or vendor output could not be parsed, even after sanitizing."""

    def __init__(
        self,
        message: str,
        *,
        raw: str = "",
        sanitized: str = "",
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.raw = raw
        self.sanitized = sanitized


_STATUS_MAP: dict[int, type[ProviderError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: AccessDeniedError,
    404: NotFoundError,
    413: InvalidRequestError,
    422: InvalidRequestError,
    429: RateLimitError,
}


def extract_error_message(body_text: str) -> str | None:
    """Pull the human-readable message out of a vendor error envelope.

    Handles ``{"error": {"message": ...}}`` (OpenAI, Anthropic, Google),
    ``{"error": "..."}`` (Ollama) and ``{"message": ...}``.
    """
    try:
        body = json.loads(body_text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if body.get("message"):
        return str(body["message"])
    return None


def _extract_error_code(body_text: str) -> str | None:
    try:
        body = json.loads(body_text)
    except (json.JSONDecodeError, TypeError):
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return None
    code = error.get("code") or error.get("status") or error.get("type")
    return str(code) if code else None


def error_from_response(provider: str, status_code: int, body_text: str) -> ProviderError:
    """Classify a non-2xx vendor response into the error taxonomy."""
    detail = extract_error_message(body_text) or body_text[:100]
    message = f"API Error ({status_code})"
    if detail:
        message += f": {detail}"

    if status_code >= 500:
        err_cls: type[ProviderError] = ServerError
    else:
        err_cls = _STATUS_MAP.get(status_code, ClientError)
        if err_cls is ClientError and "rate limit" in detail.lower():
            err_cls = RateLimitError

    try:
        raw: Any = json.loads(body_text)
    except (json.JSONDecodeError, TypeError):
        raw = body_text

    return err_cls(
        message,
        provider=provider,
        status_code=status_code,
        error_code=_extract_error_code(body_text),
        raw=raw,
    )
