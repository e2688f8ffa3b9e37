# src/taskflow/tasks/notifications.py

"""
Notification rules derived from the task collection.

Stateless: nothing is acknowledged or stored, every call recomputes
the lists from the tasks it is given.

Rules:
- urgent: priority URGENT and not DONE
- due soon: has a due date, not DONE, due in 0..3 days (today counts, overdue does not)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

DUE_SOON_DAYS = 3


class NotificationKind(StrEnum):
    URGENT = "urgent"
    DUE_SOON = "due_soon"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    task_id: str
    headline: str
    message: str
    label: str


def _parse_due(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def days_until_due(task: Task, today: date) -> int | None:
    if not task.due_date:
        return None
    due = _parse_due(task.due_date)
    if due is None:
        logger.debug("Unparseable due date %r on task id=%s", task.due_date, task.id)
        return None
    return (due - today).days


def urgent_open_tasks(tasks: Sequence[Task]) -> list[Task]:
    return [t for t in tasks if t.priority is Priority.URGENT and t.status is not TaskStatus.DONE]


def urgent_count(tasks: Sequence[Task]) -> int:
    return len(urgent_open_tasks(tasks))


def due_soon(tasks: Sequence[Task], today: date | None = None, *, within_days: int = DUE_SOON_DAYS) -> list[Task]:
    if today is None:
        today = date.today()
    out: list[Task] = []
    for t in tasks:
        if t.status is TaskStatus.DONE:
            continue
        diff = days_until_due(t, today)
        if diff is not None and 0 <= diff <= within_days:
            out.append(t)
    return out


def derive_notifications(tasks: Sequence[Task], today: date | None = None) -> list[Notification]:
    """Urgent alerts first, then approaching deadlines, each in collection order."""
    if today is None:
        today = date.today()

    out: list[Notification] = [
        Notification(
            kind=NotificationKind.URGENT,
            task_id=t.id,
            headline="Urgent Attention Required",
            message=f'Task "{t.title}" is marked as Urgent. Please review it immediately.',
            label="Priority Alert",
        )
        for t in urgent_open_tasks(tasks)
    ]
    for t in due_soon(tasks, today):
        out.append(
            Notification(
                kind=NotificationKind.DUE_SOON,
                task_id=t.id,
                headline="Approaching Deadline",
                message=f'Task "{t.title}" is due soon.',
                label=t.due_date or "Soon",
            )
        )
    return out
