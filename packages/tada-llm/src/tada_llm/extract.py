"""Structured extraction: task analysis and list suggestion."""

from __future__ import annotations

import logging
from typing import Sequence

from tada_llm.errors import MalformedResponseError
from tada_llm.gateway import Gateway
from tada_llm.types import Confidence, ListSuggestion, ProviderSettings, TaskAnalysis

_logger = logging.getLogger(__name__)

DEFAULT_LIST = "Inbox"


async def analyze_task(
    gateway: Gateway,
    settings: ProviderSettings,
    prompt: str,
    system_prompt: str,
) -> TaskAnalysis:
    """Turn a free-form task description into a structured analysis."""
    data = await gateway.extract_json(settings, prompt, system_prompt)
    if not isinstance(data, dict):
        raise MalformedResponseError(
            "Task analysis is not a JSON object", raw=str(data)
        )
    return TaskAnalysis.from_dict(data)


async def suggest_list(
    gateway: Gateway,
    settings: ProviderSettings,
    task_title: str,
    available_lists: Sequence[str],
    system_prompt: str,
) -> ListSuggestion:
    """Pick the best list for a task from the user's lists.

    The inbox is always acceptable. A name outside ``available_lists``
    falls back to the inbox with low confidence.
    """
    prompt = f'Task: "{task_title}"\nAvailable lists: {", ".join(available_lists)}'
    data = await gateway.extract_json(settings, prompt, system_prompt)
    if not isinstance(data, dict):
        raise MalformedResponseError(
            "List suggestion is not a JSON object", raw=str(data)
        )

    suggestion = ListSuggestion.from_dict(data)
    if suggestion.list_name != DEFAULT_LIST and suggestion.list_name not in available_lists:
        _logger.warning(
            "Suggested list %r not found in available lists, defaulting to %s",
            suggestion.list_name, DEFAULT_LIST,
        )
        return ListSuggestion(
            list_name=DEFAULT_LIST,
            confidence=Confidence.LOW,
            reason="Suggested list not found",
        )
    return suggestion
