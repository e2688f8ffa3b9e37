# src/taskflow/core/edit_session.py

"""
Edit session: the draft of one task being created or edited.

Key invariants:
- the draft is private to the session; the store changes only on save(),
- AI calls mutate only the draft, and only while the session is still open
  (a result arriving after close() is discarded),
- one AI call at a time per session; manual edits stay available meanwhile,
- save() validates before generating an id, so a rejected save leaves no trace.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from enum import StrEnum

from ..tasks.task_models import (
    Priority,
    Subtask,
    Task,
    TaskStatus,
    add_empty_subtask,
    append_subtasks,
    delete_subtask,
    new_id,
    now_ms,
    rename_subtask,
    toggle_subtask,
    validate_title,
)
from ..tasks.task_store import TaskStore
from .errors import CollaboratorError
from .ports import AssistantClient

logger = logging.getLogger(__name__)

AI_UNAVAILABLE_NOTICE = "AI is currently unavailable. Please try again."


class AIOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    SUPERSEDED = "superseded"  # session closed before the result arrived
    BUSY = "busy"  # another AI call is still running on this session
    SKIPPED = "skipped"  # nothing to ask about (empty title)


class EditSession:
    def __init__(
        self,
        store: TaskStore,
        assistant: AssistantClient | None = None,
        task: Task | None = None,
    ) -> None:
        self._store = store
        self._assistant = assistant
        self.original = task

        self.title = task.title if task else ""
        self.description = task.description if task else ""
        self.status = task.status if task else TaskStatus.TODO
        self.priority = task.priority if task else Priority.MEDIUM
        self.due_date: str | None = task.due_date if task else None
        self.subtasks: tuple[Subtask, ...] = task.subtasks if task else ()

        self.active = True
        self.ai_working = False
        self.notice: str | None = None
        self.last_reason: str | None = None

    @property
    def is_new(self) -> bool:
        return self.original is None

    # ---- subtask edits ----

    def add_empty_subtask(self) -> Subtask:
        self.subtasks = add_empty_subtask(self.subtasks)
        return self.subtasks[-1]

    def toggle_subtask(self, subtask_id: str) -> None:
        self.subtasks = toggle_subtask(self.subtasks, subtask_id)

    def rename_subtask(self, subtask_id: str, title: str) -> None:
        self.subtasks = rename_subtask(self.subtasks, subtask_id, title)

    def delete_subtask(self, subtask_id: str) -> None:
        self.subtasks = delete_subtask(self.subtasks, subtask_id)

    # ---- AI assist ----

    def _can_ask(self) -> AIOutcome | None:
        if not self.active:
            return AIOutcome.SUPERSEDED
        if self._assistant is None or not self.title:
            return AIOutcome.SKIPPED
        if self.ai_working:
            return AIOutcome.BUSY
        return None

    async def generate_subtasks(self) -> AIOutcome:
        blocked = self._can_ask()
        if blocked is not None:
            return blocked
        assert self._assistant is not None

        self.ai_working = True
        self.notice = None
        try:
            suggestions = await asyncio.to_thread(
                self._assistant.generate_subtasks, self.title, self.description
            )
        except CollaboratorError as e:
            logger.info("Subtask generation failed: %s", e)
            if not self.active:
                return AIOutcome.SUPERSEDED
            self.notice = AI_UNAVAILABLE_NOTICE
            return AIOutcome.FAILURE
        finally:
            self.ai_working = False

        if not self.active:
            logger.debug("Discarding %d subtask suggestions for closed session", len(suggestions))
            return AIOutcome.SUPERSEDED

        self.subtasks = append_subtasks(self.subtasks, (s.title for s in suggestions))
        logger.debug("Appended %d AI subtasks", len(suggestions))
        return AIOutcome.SUCCESS

    async def suggest_priority(self) -> AIOutcome:
        blocked = self._can_ask()
        if blocked is not None:
            return blocked
        assert self._assistant is not None

        self.ai_working = True
        try:
            suggestion = await asyncio.to_thread(
                self._assistant.suggest_priority, self.title, self.due_date
            )
        except CollaboratorError as e:
            # Priority suggestions are optional: keep the current value.
            logger.warning("Priority suggestion failed, keeping %s: %s", self.priority, e)
            return AIOutcome.SUPERSEDED if not self.active else AIOutcome.FAILURE
        finally:
            self.ai_working = False

        if not self.active:
            return AIOutcome.SUPERSEDED

        self.priority = suggestion.priority
        self.last_reason = suggestion.reason or None
        return AIOutcome.SUCCESS

    # ---- lifecycle ----

    def build_task(self) -> Task:
        validate_title(self.title)
        if self.original is not None:
            return replace(
                self.original,
                title=self.title,
                description=self.description,
                status=self.status,
                priority=self.priority,
                due_date=self.due_date or None,
                subtasks=self.subtasks,
            )
        return Task(
            id=new_id(),
            title=self.title,
            description=self.description,
            status=self.status,
            priority=self.priority,
            created_at=now_ms(),
            due_date=self.due_date or None,
            subtasks=self.subtasks,
            tags=(),
        )

    def save(self) -> Task:
        """Commit the draft to the store and close the session."""
        if not self.active:
            raise RuntimeError("Edit session is closed.")
        task = self.build_task()
        if self.original is None:
            saved = self._store.create(task)
        else:
            saved = self._store.update(task)
        self.close()
        return saved

    def close(self) -> None:
        self.active = False
