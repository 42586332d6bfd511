"""Core type definitions for the AI provider gateway."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"


class OutputMode(Enum):
    TEXT = "text"
    JSON = "json"


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class ProviderSettings:
    provider: str = "openai"
    model: str = ""
    api_key: str = ""
    base_url: str | None = None

    @classmethod
    def from_env(cls) -> ProviderSettings:
        """Read settings from TADA_AI_* environment variables."""
        return cls(
            provider=os.environ.get("TADA_AI_PROVIDER", "openai"),
            model=os.environ.get("TADA_AI_MODEL", ""),
            api_key=os.environ.get("TADA_AI_API_KEY", ""),
            base_url=os.environ.get("TADA_AI_BASE_URL") or None,
        )


@dataclass(frozen=True)
class RequestIntent:
    model: str
    system_prompt: str
    user_prompt: str
    output: OutputMode = OutputMode.TEXT
    temperature: float | None = None
    max_tokens: int | None = None
    stream: bool = False

    @property
    def wants_json(self) -> bool:
        return self.output == OutputMode.JSON


@dataclass
class ConversationTurn:
    role: Role = Role.USER
    text: str = ""

    @classmethod
    def user(cls, text: str) -> ConversationTurn:
        return cls(role=Role.USER, text=text)

    @classmethod
    def assistant(cls, text: str) -> ConversationTurn:
        return cls(role=Role.ASSISTANT, text=text)


@dataclass
class ModelInfo:
    id: str
    name: str
    description: str | None = None


@dataclass
class Subtask:
    title: str = ""
    due_date: str | None = None


@dataclass
class TaskAnalysis:
    title: str = ""
    content: str | None = None
    subtasks: list[Subtask] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    priority: int | None = None
    due_date: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskAnalysis:
        subtasks = []
        for item in data.get("subtasks") or []:
            if isinstance(item, dict):
                subtasks.append(
                    Subtask(title=str(item.get("title", "")), due_date=item.get("dueDate"))
                )
            elif isinstance(item, str):
                subtasks.append(Subtask(title=item))

        priority = data.get("priority")
        try:
            priority = int(priority) if priority is not None else None
        except (TypeError, ValueError):
            priority = None

        return cls(
            title=str(data.get("title", "")),
            content=data.get("content"),
            subtasks=subtasks,
            tags=[str(t) for t in data.get("tags") or []],
            priority=priority,
            due_date=data.get("dueDate"),
        )


@dataclass
class ListSuggestion:
    list_name: str = "Inbox"
    confidence: Confidence = Confidence.LOW
    reason: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListSuggestion:
        try:
            confidence = Confidence(str(data.get("confidence", "low")).lower())
        except ValueError:
            confidence = Confidence.LOW
        return cls(
            list_name=str(data.get("listName", "")),
            confidence=confidence,
            reason=data.get("reason"),
        )
