"""HTTP surface over the AI gateway."""

from __future__ import annotations

import dataclasses
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from tada.prompts import ANALYZE_TASK_SYSTEM_PROMPT, SUGGEST_LIST_SYSTEM_PROMPT
from tada_llm import (
    ConfigurationError,
    Gateway,
    GatewayError,
    MalformedResponseError,
    ProviderError,
    ProviderSettings,
    TransientNetworkError,
    UnsupportedOperationError,
    analyze_task,
    list_providers,
    suggest_list,
)

_logger = logging.getLogger(__name__)

# Most specific first.
_ERROR_STATUS: list[tuple[type[GatewayError], int]] = [
    (ConfigurationError, 400),
    (UnsupportedOperationError, 501),
    (ProviderError, 502),
    (MalformedResponseError, 502),
    (TransientNetworkError, 504),
]


class SettingsBody(BaseModel):
    provider: str = "openai"
    model: str = ""
    api_key: str = ""
    base_url: str | None = None

    def to_settings(self) -> ProviderSettings:
        return ProviderSettings(
            provider=self.provider,
            model=self.model,
            api_key=self.api_key,
            base_url=self.base_url or None,
        )


class CompletionBody(BaseModel):
    settings: SettingsBody
    system_prompt: str = ""
    user_prompt: str
    temperature: float | None = None
    max_tokens: int | None = None


class AnalyzeBody(BaseModel):
    settings: SettingsBody
    prompt: str
    system_prompt: str = ANALYZE_TASK_SYSTEM_PROMPT


class SuggestListBody(BaseModel):
    settings: SettingsBody
    task_title: str
    available_lists: list[str] = []
    system_prompt: str = SUGGEST_LIST_SYSTEM_PROMPT


def _status_for(error: GatewayError) -> int:
    for cls, status in _ERROR_STATUS:
        if isinstance(error, cls):
            return status
    return 500


def _sse(payload: dict | str) -> str:
    data = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"data: {data}\n\n"


def create_app(gateway: Gateway | None = None) -> FastAPI:
    """Build the app. A gateway created here is closed on shutdown."""
    owned = gateway is None
    gw = gateway or Gateway()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owned:
            await gw.close()

    app = FastAPI(title="Tada AI Gateway", lifespan=lifespan)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        status = _status_for(exc)
        if status >= 500:
            _logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.get("/providers")
    async def get_providers():
        """Known vendors and what each one needs."""
        return [
            {
                "id": info.id,
                "name": info.name,
                "description": info.description,
                "requires_api_key": info.requires_api_key,
                "requires_base_url": info.requires_base_url,
                "default_base_url": info.base_url or None,
                "models": [dataclasses.asdict(m) for m in info.models],
            }
            for info in list_providers()
        ]

    @app.post("/validate")
    async def validate_settings(body: SettingsBody):
        try:
            gw.check_settings(body.to_settings())
        except ConfigurationError as e:
            return {"valid": False, "reason": str(e)}
        return {"valid": True, "reason": None}

    @app.post("/test-connection")
    async def test_connection(body: SettingsBody):
        return {"ok": await gw.test_connection(body.to_settings())}

    @app.post("/models")
    async def fetch_models(body: SettingsBody):
        models = await gw.fetch_models(body.to_settings())
        return [dataclasses.asdict(m) for m in models]

    @app.post("/analyze-task")
    async def analyze(body: AnalyzeBody):
        result = await analyze_task(
            gw, body.settings.to_settings(), body.prompt, body.system_prompt
        )
        return dataclasses.asdict(result)

    @app.post("/suggest-list")
    async def suggest(body: SuggestListBody):
        result = await suggest_list(
            gw,
            body.settings.to_settings(),
            body.task_title,
            body.available_lists,
            body.system_prompt,
        )
        return {
            "listName": result.list_name,
            "confidence": result.confidence.value,
            "reason": result.reason,
        }

    @app.post("/complete")
    async def complete(body: CompletionBody):
        """SSE stream of ``{"delta": ...}`` frames terminated by ``[DONE]``."""
        # Opened before responding so setup failures map to a status code.
        stream = await gw.stream_completion(
            body.settings.to_settings(),
            body.system_prompt,
            body.user_prompt,
            temperature=body.temperature,
            max_tokens=body.max_tokens,
        )

        async def event_stream():
            async with stream:
                try:
                    async for delta in stream:
                        yield _sse({"delta": delta})
                except GatewayError as e:
                    _logger.warning("Stream interrupted: %s", e)
                    yield _sse({"error": str(e)})
            yield _sse("[DONE]")

        return StreamingResponse(event_stream(), media_type="text/event-stream")

    return app


app = create_app()
