# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .edit_session import EditSession
from .ports import AssistantClient


@dataclass(slots=True)
class AppState:
    """
    Everything a connector needs, wired once in the composition root.

    The store is the single writer; connectors hold at most one open edit session.
    """

    settings: Any
    store: TaskStore
    assistant: AssistantClient | None = None

    session: EditSession | None = None
    search_query: str = ""

    def open_session(self, task_id: str | None = None) -> EditSession:
        if self.session is not None:
            self.session.close()
        task = self.store.get(task_id) if task_id else None
        self.session = EditSession(self.store, self.assistant, task)
        return self.session

    def close_session(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None
