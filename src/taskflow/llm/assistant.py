# src/taskflow/llm/assistant.py

"""
Task assistant: subtask breakdown and priority suggestions on top of an LLMClient.

The model is asked for strict JSON; anything else (transport errors,
prose around the JSON, wrong shapes, unknown priorities) surfaces as
CollaboratorError so the edit session can recover at its boundary.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.errors import CollaboratorError
from ..core.ports import LLMClient, PrioritySuggestion, SubtaskSuggestion
from ..tasks.task_models import Priority

logger = logging.getLogger(__name__)

MAX_SUBTASKS = 5

SUBTASKS_SYSTEM_PROMPT = """
You are a task breakdown module for a personal task board.

Break the given task down into 3 to 5 actionable subtasks.
Keep titles concise and descriptions helpful.

Output format:
Return STRICT JSON only. No extra text. No Markdown.
A JSON array of objects: [{"title": "...", "description": "..."}]
""".strip()

PRIORITY_SYSTEM_PROMPT = """
You are a task prioritization module for a personal task board.

Suggest a priority level for the given task based on typical project
management standards and how close its due date is.

Output format:
Return STRICT JSON only. No extra text. No Markdown.
{"priority": "LOW" | "MEDIUM" | "HIGH" | "URGENT", "reason": "..."}
""".strip()


def _extract_json(raw: str, opener: str, closer: str) -> str:
    raw = raw.strip()
    if raw.startswith(opener) and raw.endswith(closer):
        return raw
    first = raw.find(opener)
    last = raw.rfind(closer)
    if first != -1 and last != -1 and last > first:
        return raw[first : last + 1]
    return raw


class TaskAssistant:
    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    def _ask(self, system_prompt: str, user_text: str) -> str:
        try:
            return "".join(self._llm.stream_chat([{"role": "user", "content": user_text}], system_prompt))
        except Exception as e:
            # Any client failure (network, quota, auth) is a collaborator failure here.
            raise CollaboratorError(f"AI request failed: {e}") from e

    def _parse(self, text: str, opener: str, closer: str) -> Any:
        try:
            return json.loads(_extract_json(text, opener, closer))
        except json.JSONDecodeError as e:
            logger.debug("Unparseable AI output: %r", text[:500])
            raise CollaboratorError("AI returned unparseable data.") from e

    def generate_subtasks(self, title: str, description: str) -> list[SubtaskSuggestion]:
        text = self._ask(
            SUBTASKS_SYSTEM_PROMPT,
            f'I have a task: "{title}".\nDescription: "{description}".',
        )
        if not text.strip():
            return []

        data = self._parse(text, "[", "]")
        if isinstance(data, dict):
            # Some models wrap the list: {"subtasks": [...]}
            data = data.get("subtasks")
        if not isinstance(data, list):
            raise CollaboratorError("AI returned subtasks in an unexpected shape.")

        out: list[SubtaskSuggestion] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            st_title = str(item.get("title") or "").strip()
            if not st_title:
                continue
            out.append(SubtaskSuggestion(title=st_title, description=str(item.get("description") or "")))

        if len(out) > MAX_SUBTASKS:
            logger.debug("Truncating %d subtask suggestions to %d", len(out), MAX_SUBTASKS)
            out = out[:MAX_SUBTASKS]
        return out

    def suggest_priority(self, title: str, due_date: str | None) -> PrioritySuggestion:
        text = self._ask(
            PRIORITY_SYSTEM_PROMPT,
            f'Analyze this task: "{title}" due on {due_date or "no specific date"}.',
        )
        data = self._parse(text, "{", "}")
        if not isinstance(data, dict):
            raise CollaboratorError("AI returned priority in an unexpected shape.")

        raw = str(data.get("priority") or "").strip().upper()
        try:
            priority = Priority(raw)
        except ValueError as e:
            raise CollaboratorError(f"AI suggested unknown priority {raw!r}.") from e
        return PrioritySuggestion(priority=priority, reason=str(data.get("reason") or ""))
