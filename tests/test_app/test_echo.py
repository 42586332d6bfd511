"""Tests for tada.echo."""

import json
import time

import httpx
import pytest
from pytest_httpx import HTTPXMock, IteratorStream

from tada.echo import build_echo_system_prompt, generate_echo_report, recent_tasks
from tada.models import EchoStyle, InMemoryTaskStore, StoredSummary, Task
from tada_llm import Gateway, ProviderSettings, RetryPolicy

OPENAI_CHAT = "https://api.openai.com/v1/chat/completions"
DAY = 24 * 60 * 60
NOW = 1_700_000_000.0


def _summary(text: str) -> StoredSummary:
    return StoredSummary(id=text, period_key="p", list_key="l", task_ids=[], summary_text=text)


@pytest.fixture
async def gateway():
    async with httpx.AsyncClient() as client:
        yield Gateway(http_client=client, retry_policy=RetryPolicy(max_retries=0))


class TestRecentTasks:
    def test_window(self):
        tasks = [
            Task(id="a", title="fresh", updated_at=NOW - DAY),
            Task(id="b", title="stale", updated_at=NOW - 30 * DAY),
            Task(id="c", title="done lately", updated_at=NOW - 30 * DAY,
                 completed=True, completed_at=NOW - 2 * DAY),
        ]
        assert [t.id for t in recent_tasks(tasks, now=NOW)] == ["a", "c"]


class TestBuildEchoSystemPrompt:
    def test_context_sections(self):
        tasks = [
            Task(id="a", title="Ship release", completed=True, updated_at=NOW),
            Task(id="b", title="Draft roadmap", updated_at=NOW),
        ]
        summaries = [_summary(f"summary {i}") for i in range(5)]
        prompt = build_echo_system_prompt(
            ["engineer", "unknown"],
            tasks,
            summaries,
            personas={"engineer": "You write for a software engineer."},
            past_examples="- Optimized module architecture",
            now=NOW,
        )
        assert "You write for a software engineer." in prompt
        assert "- Ship release (Done)\n- Draft roadmap (In Progress)" in prompt
        assert "summary 0\n---\nsummary 1\n---\nsummary 2" in prompt
        assert "summary 3" not in prompt
        assert "User's Past Approved Style:\n- Optimized module architecture" in prompt
        assert "**English**" in prompt

    def test_language_and_style(self):
        prompt = build_echo_system_prompt(
            [], [], [], language="zh-CN", style=EchoStyle.EXPLORATION, now=NOW
        )
        assert "**Simplified Chinese**" in prompt
        assert "Focus heavily (80%) on 'Exploration'" in prompt
        assert "Recent Tasks" not in prompt

    def test_user_activity(self):
        with_input = build_echo_system_prompt([], [], [], user_input="Browsing news", now=NOW)
        assert 'they were doing: "Browsing news"' in with_input
        without = build_echo_system_prompt([], [], [], now=NOW)
        assert "The user has not specified specific activities." in without

    def test_summary_images_stripped(self):
        summaries = [_summary("Chart ![c](data:image/png;base64,AAAA) here")]
        prompt = build_echo_system_prompt([], [], summaries, now=NOW)
        assert "base64" not in prompt


class TestGenerateEchoReport:
    @pytest.mark.asyncio
    async def test_streams_and_persists(self, httpx_mock: HTTPXMock, gateway):
        frames = [
            f"data: {json.dumps({'choices': [{'delta': {'content': t}}]})}\n\n".encode()
            for t in ("- Monitored ", "industry trends")
        ]
        httpx_mock.add_response(url=OPENAI_CHAT, stream=IteratorStream(frames + [b"data: [DONE]\n\n"]))
        store = InMemoryTaskStore([Task(id="a", title="Ship", updated_at=time.time())])
        settings = ProviderSettings(provider="openai", model="gpt-4o", api_key="sk-test")

        report = await generate_echo_report(
            gateway, settings, store, ["engineer"],
            style=EchoStyle.REFLECTION, user_input="Chatting",
        )

        assert report.content == "- Monitored industry trends"
        assert report.style == EchoStyle.REFLECTION
        assert report.user_input == "Chatting"
        assert store.fetch_echo_reports() == [report]

        body = json.loads(httpx_mock.get_request().content)
        assert body["messages"][1]["content"] == "Generate Daily Report"
        assert "- Ship (In Progress)" in body["messages"][0]["content"]
