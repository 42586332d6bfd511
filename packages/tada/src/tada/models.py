"""Task-app records consumed by the AI workflows."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Protocol


class EchoStyle(Enum):
    EXPLORATION = "exploration"
    REFLECTION = "reflection"
    BALANCED = "balanced"


@dataclass
class Task:
    id: str
    title: str
    completed: bool = False
    complete_percentage: int | None = None
    content: str | None = None
    due_date: date | None = None
    updated_at: float = field(default_factory=time.time)
    completed_at: float | None = None


@dataclass
class StoredSummary:
    id: str
    period_key: str
    list_key: str
    task_ids: list[str]
    summary_text: str
    created_at: float = field(default_factory=time.time)


@dataclass
class EchoReport:
    id: str
    content: str
    job_types: list[str]
    style: EchoStyle = EchoStyle.BALANCED
    user_input: str = ""
    created_at: float = field(default_factory=time.time)


class TaskStore(Protocol):
    """Persistence the workflows read tasks from and write results to."""

    def fetch_tasks(self) -> list[Task]:
        ...

    def fetch_summaries(self) -> list[StoredSummary]:
        """Summaries, newest first."""
        ...

    def create_summary(
        self, period_key: str, list_key: str, task_ids: list[str], summary_text: str
    ) -> StoredSummary:
        ...

    def create_echo_report(
        self, content: str, job_types: list[str], style: EchoStyle, user_input: str
    ) -> EchoReport:
        ...


def _new_id() -> str:
    return str(uuid.uuid4())[:8]


class InMemoryTaskStore:
    """Dict-backed TaskStore for the CLI, the server and tests."""

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self._summaries: list[StoredSummary] = []
        self._echo_reports: list[EchoReport] = []

    def add_task(self, task: Task) -> None:
        self._tasks[task.id] = task

    def fetch_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def fetch_summaries(self) -> list[StoredSummary]:
        return list(self._summaries)

    def fetch_echo_reports(self) -> list[EchoReport]:
        return list(self._echo_reports)

    def create_summary(
        self, period_key: str, list_key: str, task_ids: list[str], summary_text: str
    ) -> StoredSummary:
        summary = StoredSummary(
            id=_new_id(),
            period_key=period_key,
            list_key=list_key,
            task_ids=list(task_ids),
            summary_text=summary_text,
        )
        self._summaries.insert(0, summary)
        return summary

    def create_echo_report(
        self, content: str, job_types: list[str], style: EchoStyle, user_input: str
    ) -> EchoReport:
        report = EchoReport(
            id=_new_id(),
            content=content,
            job_types=list(job_types),
            style=style,
            user_input=user_input,
        )
        self._echo_reports.insert(0, report)
        return report
