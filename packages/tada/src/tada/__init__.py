"""Tada task-app workflows built on the AI gateway."""

from tada.models import EchoReport, EchoStyle, InMemoryTaskStore, StoredSummary, Task, TaskStore
from tada.summary import build_summary_prompt, generate_summary
from tada.echo import build_echo_system_prompt, generate_echo_report
from tada.polish import PolishSession
