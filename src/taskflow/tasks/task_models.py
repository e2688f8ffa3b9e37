# src/taskflow/tasks/task_models.py

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from ..core.errors import ValidationError

logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """Board column a task sits in. Order of COLUMNS defines the workflow."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"

    @classmethod
    def from_storage(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw))
        except ValueError:
            logger.warning("Unknown task status %r in storage; using TODO.", raw)
            return cls.TODO


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def from_storage(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            logger.warning("Unknown task priority %r in storage; using MEDIUM.", raw)
            return cls.MEDIUM


class MoveDirection(StrEnum):
    FORWARD = "forward"
    BACK = "back"


@dataclass(frozen=True, slots=True)
class Column:
    status: TaskStatus
    title: str
    accent: str


COLUMNS: tuple[Column, ...] = (
    Column(TaskStatus.TODO, "To Do", "slate"),
    Column(TaskStatus.IN_PROGRESS, "In Progress", "indigo"),
    Column(TaskStatus.REVIEW, "Review", "orange"),
    Column(TaskStatus.DONE, "Done", "green"),
)


@dataclass(frozen=True, slots=True)
class Subtask:
    id: str
    title: str = ""
    completed: bool = False


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    created_at: int = 0
    due_date: str | None = None
    subtasks: tuple[Subtask, ...] = ()
    tags: tuple[str, ...] = ()


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


def validate_title(title: str | None) -> None:
    if title is None or not title.strip():
        raise ValidationError("Task title must not be empty.")


def normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Tags behave as a set; keep first occurrence order for stable output."""
    seen: dict[str, None] = {}
    for t in tags:
        s = str(t).strip()
        if s:
            seen.setdefault(s, None)
    return tuple(seen)


# ---- subtask operations (pure: return a new tuple) ----


def add_empty_subtask(subtasks: tuple[Subtask, ...]) -> tuple[Subtask, ...]:
    return (*subtasks, Subtask(id=new_id()))


def append_subtasks(subtasks: tuple[Subtask, ...], titles: Iterable[str]) -> tuple[Subtask, ...]:
    return (*subtasks, *(Subtask(id=new_id(), title=t, completed=False) for t in titles))


def toggle_subtask(subtasks: tuple[Subtask, ...], subtask_id: str) -> tuple[Subtask, ...]:
    return tuple(replace(st, completed=not st.completed) if st.id == subtask_id else st for st in subtasks)


def rename_subtask(subtasks: tuple[Subtask, ...], subtask_id: str, title: str) -> tuple[Subtask, ...]:
    # Empty titles are allowed; a freshly added step is blank until typed into.
    return tuple(replace(st, title=title) if st.id == subtask_id else st for st in subtasks)


def delete_subtask(subtasks: tuple[Subtask, ...], subtask_id: str) -> tuple[Subtask, ...]:
    return tuple(st for st in subtasks if st.id != subtask_id)


# ---- serialization (JSON field names match the stored layout) ----


def task_to_dict(task: Task) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "createdAt": task.created_at,
        "subtasks": [{"id": st.id, "title": st.title, "completed": st.completed} for st in task.subtasks],
        "tags": list(task.tags),
    }
    if task.due_date:
        data["dueDate"] = task.due_date
    return data


def _subtask_from_dict(raw: Any) -> Subtask | None:
    if not isinstance(raw, Mapping) or not raw.get("id"):
        return None
    return Subtask(
        id=str(raw["id"]),
        title=str(raw.get("title") or ""),
        completed=bool(raw.get("completed", False)),
    )


def task_from_dict(raw: Any) -> Task | None:
    """Build a Task from a stored JSON object. Returns None for unusable entries."""
    if not isinstance(raw, Mapping):
        return None
    tid = raw.get("id")
    title = raw.get("title")
    if not tid or title is None:
        return None

    subtasks_raw = raw.get("subtasks") or []
    subtasks: tuple[Subtask, ...] = ()
    if isinstance(subtasks_raw, list):
        subtasks = tuple(st for st in map(_subtask_from_dict, subtasks_raw) if st is not None)

    tags_raw = raw.get("tags") or []
    tags = normalize_tags(tags_raw) if isinstance(tags_raw, list) else ()

    try:
        created_at = int(raw.get("createdAt") or 0)
    except (TypeError, ValueError):
        created_at = 0

    due = raw.get("dueDate")
    return Task(
        id=str(tid),
        title=str(title),
        description=str(raw.get("description") or ""),
        status=TaskStatus.from_storage(raw.get("status")),
        priority=Priority.from_storage(raw.get("priority")),
        created_at=created_at,
        due_date=str(due) if due else None,
        subtasks=subtasks,
        tags=tags,
    )
