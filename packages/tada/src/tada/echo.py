"""Echo report: a daily work report ghostwritten from recent activity."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Mapping, Sequence

from tada.models import EchoReport, EchoStyle, StoredSummary, Task, TaskStore
from tada.prompts import (
    ECHO_SYSTEM_TEMPLATE,
    NO_USER_ACTIVITY,
    STYLE_INSTRUCTIONS,
    USER_ACTIVITY_TEMPLATE,
    strip_base64_images,
)
from tada_llm import Gateway, ProviderSettings

_logger = logging.getLogger(__name__)

RECENT_WINDOW_SECONDS = 7 * 24 * 60 * 60
RECENT_SUMMARY_COUNT = 3
USER_PROMPT = "Generate Daily Report"


def target_language(language: str) -> str:
    return "Simplified Chinese" if language == "zh-CN" else "English"


def recent_tasks(tasks: Sequence[Task], now: float | None = None) -> list[Task]:
    """Tasks completed or touched within the last seven days."""
    cutoff = (now if now is not None else time.time()) - RECENT_WINDOW_SECONDS
    return [
        t for t in tasks
        if (t.completed_at and t.completed_at > cutoff) or t.updated_at > cutoff
    ]


def build_echo_system_prompt(
    job_types: Sequence[str],
    tasks: Sequence[Task],
    summaries: Sequence[StoredSummary],
    *,
    personas: Mapping[str, str] | None = None,
    past_examples: str = "",
    language: str = "en",
    style: EchoStyle = EchoStyle.BALANCED,
    user_input: str = "",
    now: float | None = None,
) -> str:
    """Assemble the ghostwriter system prompt.

    ``personas`` maps a job type to its persona text; job types without
    one are left out. ``summaries`` must be newest first.
    """
    personas = personas or {}
    persona_text = "\n\n".join(personas[j] for j in job_types if personas.get(j))

    task_context = "\n".join(
        f"- {t.title} ({'Done' if t.completed else 'In Progress'})"
        for t in recent_tasks(tasks, now)
    )
    summary_context = "\n---\n".join(
        strip_base64_images(s.summary_text) for s in summaries[:RECENT_SUMMARY_COUNT]
    )

    history = []
    if task_context:
        history.append(f"Recent Tasks:\n{task_context}")
    if summary_context:
        history.append(f"Recent Summaries:\n{summary_context}")
    if past_examples:
        history.append(f"User's Past Approved Style:\n{past_examples}")

    return ECHO_SYSTEM_TEMPLATE.format(
        personas=persona_text,
        style_instruction=STYLE_INSTRUCTIONS[style.value],
        user_input_context=(
            USER_ACTIVITY_TEMPLATE.format(user_input=user_input)
            if user_input else NO_USER_ACTIVITY
        ),
        target_language=target_language(language),
        history="\n".join(history),
    )


async def generate_echo_report(
    gateway: Gateway,
    settings: ProviderSettings,
    store: TaskStore,
    job_types: Sequence[str],
    *,
    personas: Mapping[str, str] | None = None,
    past_examples: str = "",
    language: str = "en",
    style: EchoStyle = EchoStyle.BALANCED,
    user_input: str = "",
    on_delta: Callable[[str], None] | None = None,
    cancel: asyncio.Event | None = None,
) -> EchoReport | None:
    """Stream an echo report and persist it. Returns None if cancelled."""
    gateway.check_settings(settings)

    system_prompt = build_echo_system_prompt(
        job_types,
        store.fetch_tasks(),
        store.fetch_summaries(),
        personas=personas,
        past_examples=past_examples,
        language=language,
        style=style,
        user_input=user_input,
    )
    stream = await gateway.stream_completion(settings, system_prompt, USER_PROMPT, cancel)
    async with stream:
        text = await stream.collect(on_delta)

    if stream.cancelled:
        _logger.info("Echo report cancelled")
        return None
    return store.create_echo_report(text, list(job_types), style, user_input)
