"""Periodic AI summary over a selection of tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from tada.models import StoredSummary, Task, TaskStore
from tada.prompts import strip_base64_images
from tada_llm import Gateway, ProviderSettings

_logger = logging.getLogger(__name__)


def _status(task: Task) -> str:
    status = "Completed" if task.completed else "Incomplete"
    if task.complete_percentage:
        status += f", {task.complete_percentage}% done"
    return status


def build_summary_prompt(tasks: Sequence[Task], future_tasks: Sequence[Task]) -> str:
    if tasks:
        lines = [
            f'- Task: "{t.title}" (Status: {_status(t)})\n'
            f"  Notes: {strip_base64_images(t.content or 'N/A')}"
            for t in tasks
        ]
        period = "## Tasks from the summary period:\n" + "\n".join(lines)
    else:
        period = "No tasks were selected for the primary summary period."

    if future_tasks:
        lines = [
            f'- Task: "{t.title}" (Due: {t.due_date.isoformat() if t.due_date else "N/A"})'
            for t in future_tasks
        ]
        upcoming = "\n\n## Upcoming tasks for future planning context:\n" + "\n".join(lines)
    else:
        upcoming = "\n\nNo specific upcoming tasks were provided for context."

    return period + upcoming


async def generate_summary(
    gateway: Gateway,
    settings: ProviderSettings,
    store: TaskStore,
    task_ids: Sequence[str],
    future_task_ids: Sequence[str],
    period_key: str,
    list_key: str,
    system_prompt: str,
    on_delta: Callable[[str], None] | None = None,
    cancel: asyncio.Event | None = None,
) -> StoredSummary | None:
    """Stream a summary of the selected tasks and persist it.

    Returns None, persisting nothing, when ``cancel`` fires mid-stream.
    """
    gateway.check_settings(settings)

    all_tasks = store.fetch_tasks()
    tasks = [t for t in all_tasks if t.id in task_ids]
    future_tasks = [t for t in all_tasks if t.id in future_task_ids]
    if not tasks and not future_tasks:
        raise ValueError("No tasks were provided for summary.")

    prompt = build_summary_prompt(tasks, future_tasks)
    stream = await gateway.stream_completion(settings, system_prompt, prompt, cancel)
    async with stream:
        text = await stream.collect(on_delta)

    if stream.cancelled:
        _logger.info("Summary for %s/%s cancelled", period_key, list_key)
        return None
    return store.create_summary(period_key, list_key, list(task_ids), text)
