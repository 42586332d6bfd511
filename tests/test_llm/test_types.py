"""Tests for tada_llm.types."""

import os

import pytest
from unittest.mock import patch

from tada_llm.types import (
    Confidence,
    ConversationTurn,
    ListSuggestion,
    OutputMode,
    ProviderSettings,
    RequestIntent,
    Role,
    TaskAnalysis,
)


class TestProviderSettings:
    def test_defaults(self):
        settings = ProviderSettings()
        assert settings.provider == "openai"
        assert settings.base_url is None

    @patch.dict(
        os.environ,
        {
            "TADA_AI_PROVIDER": "claude",
            "TADA_AI_MODEL": "claude-3-5-haiku-20241022",
            "TADA_AI_API_KEY": "sk-ant",
            "TADA_AI_BASE_URL": "",
        },
        clear=False,
    )
    def test_from_env(self):
        settings = ProviderSettings.from_env()
        assert settings.provider == "claude"
        assert settings.model == "claude-3-5-haiku-20241022"
        assert settings.api_key == "sk-ant"
        assert settings.base_url is None


class TestRequestIntent:
    def test_wants_json(self):
        intent = RequestIntent(model="m", system_prompt="s", user_prompt="u")
        assert not intent.wants_json
        json_intent = RequestIntent(
            model="m", system_prompt="s", user_prompt="u", output=OutputMode.JSON
        )
        assert json_intent.wants_json

    def test_frozen(self):
        intent = RequestIntent(model="m", system_prompt="s", user_prompt="u")
        with pytest.raises(AttributeError):
            intent.model = "other"


class TestConversationTurn:
    def test_constructors(self):
        assert ConversationTurn.user("hi").role == Role.USER
        assert ConversationTurn.assistant("hello").role == Role.ASSISTANT
        assert ConversationTurn.assistant("hello").text == "hello"


class TestTaskAnalysis:
    def test_from_dict(self):
        data = {
            "title": "Plan trip",
            "content": "Book flights",
            "subtasks": [{"title": "Flights", "dueDate": "2024-06-01"}, "Hotel"],
            "tags": ["travel"],
            "priority": "2",
            "dueDate": "2024-06-10",
        }
        analysis = TaskAnalysis.from_dict(data)
        assert analysis.title == "Plan trip"
        assert analysis.subtasks[0].due_date == "2024-06-01"
        assert analysis.subtasks[1].title == "Hotel"
        assert analysis.priority == 2
        assert analysis.due_date == "2024-06-10"

    def test_missing_keys(self):
        analysis = TaskAnalysis.from_dict({"title": "x"})
        assert analysis.subtasks == []
        assert analysis.tags == []
        assert analysis.priority is None

    def test_bad_priority(self):
        assert TaskAnalysis.from_dict({"priority": "high"}).priority is None


class TestListSuggestion:
    def test_from_dict(self):
        s = ListSuggestion.from_dict({"listName": "Work", "confidence": "HIGH", "reason": "job"})
        assert s.list_name == "Work"
        assert s.confidence == Confidence.HIGH
        assert s.reason == "job"

    def test_unknown_confidence_is_low(self):
        assert ListSuggestion.from_dict({"confidence": "sure"}).confidence == Confidence.LOW
