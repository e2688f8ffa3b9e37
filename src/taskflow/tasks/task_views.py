# src/taskflow/tasks/task_views.py

"""
Read-only projections of the task collection.

Everything here is a pure function of its inputs: the board recomputes
views from the latest store snapshot on demand.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from .task_models import COLUMNS, Column, Task, TaskStatus


class SubtaskProgress(NamedTuple):
    completed: int
    total: int
    percent: int


def filter_by_search(tasks: Sequence[Task], query: str | None) -> list[Task]:
    """Case-insensitive substring match on title or description."""
    if not query:
        return list(tasks)
    q = query.lower()
    return [t for t in tasks if q in t.title.lower() or q in t.description.lower()]


def bucket_by_column(
    tasks: Iterable[Task],
    columns: Sequence[Column] = COLUMNS,
) -> dict[TaskStatus, list[Task]]:
    buckets: dict[TaskStatus, list[Task]] = {c.status: [] for c in columns}
    for t in tasks:
        bucket = buckets.get(t.status)
        # Tasks with a status outside the given columns are not shown anywhere.
        if bucket is not None:
            bucket.append(t)
    return buckets


def column_counts(tasks: Iterable[Task], columns: Sequence[Column] = COLUMNS) -> dict[TaskStatus, int]:
    return {status: len(items) for status, items in bucket_by_column(tasks, columns).items()}


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def subtask_progress(task: Task) -> SubtaskProgress:
    total = len(task.subtasks)
    completed = sum(1 for st in task.subtasks if st.completed)
    percent = 0 if total == 0 else _round_half_up(completed / total * 100)
    return SubtaskProgress(completed, total, percent)
