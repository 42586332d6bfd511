"""Tests for CLI entry point."""

import json
import logging

import pytest
from click.testing import CliRunner
from pytest_httpx import HTTPXMock, IteratorStream

from tada.cli import main

OPENAI_CHAT = "https://api.openai.com/v1/chat/completions"
OPENAI_ARGS = ["--provider", "openai", "--model", "gpt-4o", "--api-key", "sk-test"]


@pytest.fixture
def runner():
    return CliRunner()


def _chat_response(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class TestProvidersCommand:
    def test_lists_catalog(self, runner):
        result = runner.invoke(main, ["providers"])
        assert result.exit_code == 0
        assert "ollama" in result.output
        assert "custom" in result.output
        assert "needs api key, base url" in result.output

    def test_verbose_keeps_request_urls_out_of_logs(self, runner):
        result = runner.invoke(main, ["--verbose", "providers"])
        assert result.exit_code == 0
        assert logging.getLogger("httpx").level == logging.WARNING


class TestValidateCommand:
    def test_valid(self, runner):
        result = runner.invoke(main, ["validate", *OPENAI_ARGS])
        assert result.exit_code == 0
        assert "Settings are valid" in result.output

    def test_missing_key(self, runner):
        result = runner.invoke(
            main, ["validate", "--provider", "claude", "--model", "claude-3-5-haiku-20241022"]
        )
        assert result.exit_code == 1
        assert "API key is required" in result.output

    def test_reads_environment(self, runner):
        result = runner.invoke(
            main,
            ["validate"],
            env={"TADA_AI_PROVIDER": "ollama", "TADA_AI_MODEL": "llama2", "TADA_AI_API_KEY": ""},
        )
        assert result.exit_code == 0


class TestGatewayCommands:
    def test_connection_ok(self, runner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=OPENAI_CHAT, json=_chat_response("."))
        result = runner.invoke(main, ["test", *OPENAI_ARGS])
        assert result.exit_code == 0
        assert "Connection to openai OK" in result.output

    def test_connection_failure_exits_1(self, runner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=OPENAI_CHAT, status_code=401, json={"error": {"message": "Invalid API key"}}
        )
        result = runner.invoke(main, ["test", *OPENAI_ARGS])
        assert result.exit_code == 1
        assert "API Error (401): Invalid API key" in result.output

    def test_models(self, runner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://api.openai.com/v1/models", json={"data": [{"id": "gpt-4o"}]}
        )
        result = runner.invoke(main, ["models", *OPENAI_ARGS])
        assert result.exit_code == 0
        assert result.output.strip() == "gpt-4o"

    def test_models_unsupported(self, runner):
        result = runner.invoke(main, ["models", "--provider", "claude", "--api-key", "k"])
        assert result.exit_code == 1
        assert "does not support" in result.output

    def test_chat_streams(self, runner, httpx_mock: HTTPXMock):
        frames = [
            f"data: {json.dumps({'choices': [{'delta': {'content': t}}]})}\n\n".encode()
            for t in ("Hel", "lo")
        ]
        httpx_mock.add_response(url=OPENAI_CHAT, stream=IteratorStream(frames + [b"data: [DONE]\n\n"]))
        result = runner.invoke(main, ["chat", "Say hello", *OPENAI_ARGS])
        assert result.exit_code == 0
        assert result.output == "Hello\n"

    def test_analyze(self, runner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=OPENAI_CHAT,
            json=_chat_response('{"title": "Buy milk", "tags": ["home"], "priority": 1}'),
        )
        result = runner.invoke(main, ["analyze", "need milk", *OPENAI_ARGS])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["title"] == "Buy milk"
        assert data["priority"] == 1

    def test_suggest_list(self, runner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=OPENAI_CHAT,
            json=_chat_response('{"listName": "Home", "confidence": "high", "reason": "chore"}'),
        )
        result = runner.invoke(
            main, ["suggest-list", "Buy milk", "--list", "Work", "--list", "Home", *OPENAI_ARGS]
        )
        assert result.exit_code == 0
        assert "Home (high)" in result.output
        body = json.loads(httpx_mock.get_request().content)
        assert body["messages"][1]["content"] == 'Task: "Buy milk"\nAvailable lists: Work, Home'
