"""Editor polish: multi-turn refinement of a selected passage."""

from __future__ import annotations

import asyncio
from typing import Callable

from tada.prompts import POLISH_SYSTEM_PROMPT
from tada_llm import ConversationTurn, Gateway, ProviderSettings, Role

GENERAL_POLISH = "General Polish"
DEFAULT_INSTRUCTION = "Polish this text."


class PolishSession:
    """Conversation about one piece of selected text.

    Each call to ``polish`` adds a user turn and, unless cancelled, the
    assistant's reply. The whole history is replayed in every prompt.
    """

    def __init__(self, selected_text: str, language: str = "en"):
        self.selected_text = selected_text
        self.language = language
        self.history: list[ConversationTurn] = []

    @property
    def target_language(self) -> str:
        return "Simplified Chinese" if self.language.startswith("zh") else "English"

    def build_user_prompt(self, instruction: str) -> str:
        prompt = ""
        if self.history:
            prompt += "<conversation_history>\n"
            for turn in self.history:
                prompt += f'<message role="{turn.role.value}">\n{turn.text}\n</message>\n'
            prompt += "</conversation_history>\n\n"

        prompt += (
            "<context_data>\n"
            f"    <target_language>{self.target_language}</target_language>\n"
            "    <source_text>\n"
            f"{self.selected_text}\n"
            "    </source_text>\n"
            "</context_data>\n\n"
            "<user_instruction>\n"
            f"{instruction}\n"
            "</user_instruction>\n\n"
            "Output:"
        )
        return prompt

    async def polish(
        self,
        gateway: Gateway,
        settings: ProviderSettings,
        instruction: str | None = None,
        cancel: asyncio.Event | None = None,
        on_delta: Callable[[str], None] | None = None,
    ) -> str | None:
        """Run one refinement turn. Returns the reply, or None if cancelled."""
        instruction = (instruction or "").strip()
        self.history.append(ConversationTurn.user(instruction or GENERAL_POLISH))
        return await self._generate(gateway, settings, instruction, cancel, on_delta)

    async def regenerate(
        self,
        gateway: Gateway,
        settings: ProviderSettings,
        cancel: asyncio.Event | None = None,
        on_delta: Callable[[str], None] | None = None,
    ) -> str | None:
        """Discard the last reply and answer the last instruction again."""
        if len(self.history) < 2:
            return None
        if self.history[-1].role == Role.ASSISTANT:
            self.history.pop()

        last = self.history[-1]
        if last.role != Role.USER:
            return None
        instruction = "" if last.text == GENERAL_POLISH else last.text
        return await self._generate(gateway, settings, instruction, cancel, on_delta)

    async def _generate(
        self,
        gateway: Gateway,
        settings: ProviderSettings,
        instruction: str,
        cancel: asyncio.Event | None,
        on_delta: Callable[[str], None] | None,
    ) -> str | None:
        prompt = self.build_user_prompt(instruction or DEFAULT_INSTRUCTION)
        stream = await gateway.stream_completion(
            settings, POLISH_SYSTEM_PROMPT, prompt, cancel
        )
        async with stream:
            text = await stream.collect(on_delta)

        if stream.cancelled:
            return None
        self.history.append(ConversationTurn.assistant(text))
        return text
