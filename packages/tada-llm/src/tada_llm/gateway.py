"""Uniform chat-completion gateway over the provider adapters."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx

from tada_llm.decoder import decode_events
from tada_llm.errors import (
    ConfigurationError,
    MalformedResponseError,
    RequestTimeoutError,
    TransientNetworkError,
    UnsupportedOperationError,
    error_from_response,
)
from tada_llm.providers import ProviderAdapter
from tada_llm.registry import AdapterRegistry
from tada_llm.retry import RetryPolicy, retry
from tada_llm.sanitize import parse_model_json
from tada_llm.stream import CompletionStream, read_until_cancelled
from tada_llm.types import ModelInfo, OutputMode, ProviderSettings, RequestIntent

_logger = logging.getLogger(__name__)


class Gateway:
    """Routes one uniform request shape to whichever vendor settings name.

    Stateless between calls: settings arrive with every call and each
    stream owns its own response and decoder buffer.
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._registry = registry or AdapterRegistry.default()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(300.0))
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    async def close(self) -> None:
        """Close the HTTP client if the gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -- Configuration --

    def check_settings(self, settings: ProviderSettings) -> ProviderAdapter:
        """Return the adapter for settings, or raise ConfigurationError."""
        if not self._registry.is_known(settings.provider):
            raise ConfigurationError(f"Provider {settings.provider} not found.")
        adapter = self._registry.get(settings.provider)
        if adapter.info.requires_api_key and not settings.api_key:
            raise ConfigurationError(f"API key is required for {adapter.name}.")
        if not settings.model:
            raise ConfigurationError("A model must be selected.")
        if adapter.info.requires_base_url and not settings.base_url:
            raise ConfigurationError(f"Base URL is required for {adapter.name}.")
        return adapter

    def validate(self, settings: ProviderSettings | None) -> bool:
        if settings is None:
            return False
        try:
            self.check_settings(settings)
        except ConfigurationError:
            return False
        return True

    # -- Operations --

    async def test_connection(self, settings: ProviderSettings) -> bool:
        """Send a minimal one-token request. Raises a classified error on failure."""
        adapter = self.check_settings(settings)
        intent = RequestIntent(
            model=settings.model,
            system_prompt="",
            user_prompt="Hi",
            max_tokens=1,
        )
        await self._request_json(
            adapter,
            "POST",
            adapter.chat_endpoint(settings),
            headers=adapter.headers(settings.api_key),
            payload=adapter.build_payload(intent),
        )
        return True

    async def fetch_models(self, settings: ProviderSettings) -> list[ModelInfo]:
        """List models from the vendor's catalog endpoint."""
        if not self._registry.is_known(settings.provider):
            raise ConfigurationError(f"Provider {settings.provider} not found.")
        adapter = self._registry.get(settings.provider)
        if not adapter.supports_model_listing:
            raise UnsupportedOperationError(
                "This provider does not support dynamic model fetching."
            )
        if adapter.info.requires_api_key and not settings.api_key:
            raise ConfigurationError("API key is required to fetch models.")

        url = adapter.models_endpoint(settings)
        data = await retry(
            lambda: self._request_json(
                adapter, "GET", url, headers=adapter.headers(settings.api_key)
            ),
            self._retry_policy,
        )
        return adapter.parse_models(data)

    async def complete(
        self,
        settings: ProviderSettings,
        system_prompt: str,
        user_prompt: str,
        *,
        output: OutputMode = OutputMode.TEXT,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Non-streaming completion returning the model's text."""
        adapter = self.check_settings(settings)
        intent = RequestIntent(
            model=settings.model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            output=output,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        url = adapter.chat_endpoint(settings)
        headers = adapter.headers(settings.api_key)
        payload = adapter.build_payload(intent)

        data = await retry(
            lambda: self._request_json(adapter, "POST", url, headers=headers, payload=payload),
            self._retry_policy,
        )
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Unexpected response from {adapter.id}", raw=str(data)
            )
        return adapter.extract_content(data)

    async def extract_json(
        self,
        settings: ProviderSettings,
        prompt: str,
        system_prompt: str,
    ) -> Any:
        """Structured extraction: request JSON where supported and parse it leniently."""
        content = await self.complete(
            settings, system_prompt, prompt, output=OutputMode.JSON
        )
        _logger.debug("Raw structured content from %s: %s", settings.provider, content)
        return parse_model_json(content)

    async def stream_completion(
        self,
        settings: ProviderSettings,
        system_prompt: str,
        user_prompt: str,
        cancel: asyncio.Event | None = None,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionStream:
        """Open a streaming completion and return its text fragments.

        Opening the connection is retried. Once fragments flow, setting
        ``cancel`` ends the stream quietly.
        """
        adapter = self.check_settings(settings)
        intent = RequestIntent(
            model=settings.model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=True,
        )
        request = self._client.build_request(
            "POST",
            adapter.chat_endpoint(settings, stream=True),
            headers=adapter.headers(settings.api_key),
            json=adapter.build_payload(intent),
        )

        response = await retry(
            lambda: self._open_stream(adapter, request), self._retry_policy
        )
        return CompletionStream(
            self._fragments(adapter, response, cancel),
            cancel=cancel,
            on_close=response.aclose,
        )

    # -- Transport --

    async def _request_json(
        self,
        adapter: ProviderAdapter,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        payload: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Request to {adapter.id} timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(
                f"Network error talking to {adapter.id}: {exc}", cause=exc
            ) from exc

        if not response.is_success:
            raise error_from_response(adapter.id, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"{adapter.id} returned a non-JSON body", raw=response.text, cause=exc
            ) from exc

    async def _open_stream(
        self, adapter: ProviderAdapter, request: httpx.Request
    ) -> httpx.Response:
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Request to {adapter.id} timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(
                f"Network error talking to {adapter.id}: {exc}", cause=exc
            ) from exc

        if not response.is_success:
            try:
                await response.aread()
            finally:
                await response.aclose()
            raise error_from_response(adapter.id, response.status_code, response.text)
        return response

    async def _fragments(
        self,
        adapter: ProviderAdapter,
        response: httpx.Response,
        cancel: asyncio.Event | None,
    ) -> AsyncIterator[str]:
        chunks = read_until_cancelled(response.aiter_bytes(), cancel)
        try:
            async for event in decode_events(chunks, adapter.framing):
                if adapter.is_stream_end(event):
                    return
                delta = adapter.extract_stream_delta(event)
                if isinstance(delta, str) and delta:
                    yield delta
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Stream from {adapter.id} timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(
                f"Stream from {adapter.id} interrupted: {exc}", cause=exc
            ) from exc
        finally:
            await chunks.aclose()
