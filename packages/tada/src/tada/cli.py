"""CLI entry point for the Tada AI gateway."""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import json
import logging
import signal
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click

from tada.prompts import ANALYZE_TASK_SYSTEM_PROMPT, SUGGEST_LIST_SYSTEM_PROMPT
from tada_llm import (
    Gateway,
    GatewayError,
    ProviderSettings,
    analyze_task,
    list_providers,
    suggest_list,
)

T = TypeVar("T")


def provider_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Add --provider/--model/--api-key/--base-url, read from TADA_AI_* too."""
    fn = click.option("--base-url", envvar="TADA_AI_BASE_URL", default=None,
                      help="Override the vendor endpoint")(fn)
    fn = click.option("--api-key", envvar="TADA_AI_API_KEY", default="",
                      help="Vendor API key")(fn)
    fn = click.option("--model", envvar="TADA_AI_MODEL", default="",
                      help="Model id")(fn)
    fn = click.option("--provider", envvar="TADA_AI_PROVIDER", default="openai",
                      show_default=True, help="Provider id")(fn)
    return fn


def _settings(provider: str, model: str, api_key: str, base_url: str | None) -> ProviderSettings:
    return ProviderSettings(
        provider=provider, model=model, api_key=api_key, base_url=base_url or None
    )


def _run(factory: Callable[[Gateway], Awaitable[T]]) -> T:
    """Run a coroutine against a fresh gateway; gateway errors exit with status 1."""

    async def runner() -> T:
        async with Gateway() as gateway:
            return await factory(gateway)

    try:
        return asyncio.run(runner())
    except GatewayError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Tada: talk to many LLM vendors through one gateway."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Request log lines include the URL, and Gemini keys travel in the query.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@main.command()
def providers():
    """List known providers."""
    for info in list_providers():
        needs = []
        if info.requires_api_key:
            needs.append("api key")
        if info.requires_base_url:
            needs.append("base url")
        suffix = f" (needs {', '.join(needs)})" if needs else ""
        click.echo(f"{info.id:<12} {info.name}{suffix}")


@main.command("validate")
@provider_options
def validate_cmd(provider: str, model: str, api_key: str, base_url: str | None):
    """Check that settings are complete without calling the vendor."""
    settings = _settings(provider, model, api_key, base_url)

    async def check(gateway: Gateway) -> None:
        gateway.check_settings(settings)

    _run(check)
    click.echo("Settings are valid")


@main.command("test")
@provider_options
def test_cmd(provider: str, model: str, api_key: str, base_url: str | None):
    """Send a minimal request to verify the connection."""
    settings = _settings(provider, model, api_key, base_url)
    _run(lambda gateway: gateway.test_connection(settings))
    click.echo(f"Connection to {provider} OK")


@main.command()
@provider_options
def models(provider: str, model: str, api_key: str, base_url: str | None):
    """List models offered by the provider."""
    settings = _settings(provider, model, api_key, base_url)
    for info in _run(lambda gateway: gateway.fetch_models(settings)):
        click.echo(info.id if info.name == info.id else f"{info.id}  {info.name}")


@main.command()
@click.argument("prompt")
@click.option("--system", "system_prompt", default="", help="System prompt")
@click.option("--temperature", type=float, default=None)
@click.option("--max-tokens", type=int, default=None)
@provider_options
def chat(
    prompt: str,
    system_prompt: str,
    temperature: float | None,
    max_tokens: int | None,
    provider: str,
    model: str,
    api_key: str,
    base_url: str | None,
):
    """Stream a completion to stdout. Ctrl-C stops it cleanly."""
    settings = _settings(provider, model, api_key, base_url)

    async def stream_to_stdout(gateway: Gateway) -> bool:
        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        # Windows event loops have no signal handlers.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signal.SIGINT, cancel.set)
        try:
            stream = await gateway.stream_completion(
                settings, system_prompt, prompt, cancel,
                temperature=temperature, max_tokens=max_tokens,
            )
            async with stream:
                await stream.collect(lambda delta: click.echo(delta, nl=False))
            return stream.cancelled
        finally:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(signal.SIGINT)

    cancelled = _run(stream_to_stdout)
    click.echo()
    if cancelled:
        click.echo("[Cancelled]", err=True)


@main.command()
@click.argument("prompt")
@click.option("--system", "system_prompt", default=ANALYZE_TASK_SYSTEM_PROMPT,
              help="System prompt describing the JSON shape")
@provider_options
def analyze(prompt: str, system_prompt: str, provider: str, model: str,
            api_key: str, base_url: str | None):
    """Turn a free-form note into a structured task (JSON)."""
    settings = _settings(provider, model, api_key, base_url)
    result = _run(lambda gateway: analyze_task(gateway, settings, prompt, system_prompt))
    click.echo(json.dumps(dataclasses.asdict(result), indent=2, ensure_ascii=False))


@main.command("suggest-list")
@click.argument("title")
@click.option("--list", "lists", multiple=True, help="An available list (repeatable)")
@click.option("--system", "system_prompt", default=SUGGEST_LIST_SYSTEM_PROMPT,
              help="System prompt describing the JSON shape")
@provider_options
def suggest_list_cmd(title: str, lists: tuple[str, ...], system_prompt: str,
                     provider: str, model: str, api_key: str, base_url: str | None):
    """Pick the best list for a task title."""
    settings = _settings(provider, model, api_key, base_url)
    result = _run(
        lambda gateway: suggest_list(gateway, settings, title, list(lists), system_prompt)
    )
    click.echo(f"{result.list_name} ({result.confidence.value})")
    if result.reason:
        click.echo(f"Reason: {result.reason}")


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", default=8000, type=int, help="Port to bind")
def serve(host: str, port: int):
    """Start the HTTP server."""
    import uvicorn

    from tada.server import app

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
