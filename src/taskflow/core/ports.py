# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/LLM providers swappable and makes testing easier.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..tasks.task_models import Priority, Task

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TaskRepo(Protocol):
    """
    Persistence for the whole task collection.

    load() returns None when nothing was ever saved (first run),
    save() rewrites the full collection.
    """

    def load(self) -> list[Task] | None: ...
    def save(self, tasks: Sequence[Task]) -> None: ...


@dataclass(frozen=True, slots=True)
class SubtaskSuggestion:
    title: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class PrioritySuggestion:
    priority: Priority
    reason: str = ""


class AssistantClient(Protocol):
    """
    AI collaborator for the edit session.

    Implementations raise CollaboratorError on any failure
    (transport, quota, unparseable output).
    """

    def generate_subtasks(self, title: str, description: str) -> list[SubtaskSuggestion]: ...
    def suggest_priority(self, title: str, due_date: str | None) -> PrioritySuggestion: ...
