# src/taskflow/cli/render.py

"""Plain-text rendering of the board, task cards, notifications and the edit draft."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..core.edit_session import EditSession
from ..tasks.notifications import NotificationKind, derive_notifications, urgent_count
from ..tasks.styles import BOLD, DIM, color, priority_badge, status_text
from ..tasks.task_models import COLUMNS, Subtask, Task
from ..tasks.task_views import bucket_by_column, filter_by_search, subtask_progress

SHORT_ID = 8


def short_id(task_id: str) -> str:
    return task_id[:SHORT_ID]


def _checkbox(st: Subtask) -> str:
    return "[x]" if st.completed else "[ ]"


def render_card(task: Task) -> str:
    line = f"  {color(short_id(task.id), DIM)} {priority_badge(task.priority)} {status_text(task.status, task.title)}"
    extras: list[str] = []
    progress = subtask_progress(task)
    if progress.total:
        extras.append(f"{progress.completed}/{progress.total} {progress.percent}%")
    if task.due_date:
        extras.append(f"due {task.due_date}")
    if task.tags:
        extras.append("#" + " #".join(task.tags))
    if extras:
        line += color(f"  ({', '.join(extras)})", DIM)
    return line


def render_board(tasks: Sequence[Task], query: str = "") -> str:
    visible = filter_by_search(tasks, query)
    buckets = bucket_by_column(visible)
    lines: list[str] = []
    if query:
        lines.append(f'Search: "{query}" ({len(visible)} of {len(tasks)} tasks)')
    for col in COLUMNS:
        items = buckets[col.status]
        lines.append(color(f"{col.title} ({len(items)})", BOLD))
        if not items:
            lines.append(color("  No tasks", DIM))
        lines.extend(render_card(t) for t in items)
    n = urgent_count(tasks)
    if n:
        lines.append(f"Notifications: {n} urgent")
    return "\n".join(lines)


def render_task(task: Task) -> str:
    progress = subtask_progress(task)
    lines = [
        f"{status_text(task.status, task.title)}  {priority_badge(task.priority)}",
        f"  id: {task.id}",
        f"  status: {task.status.value}",
        f"  due: {task.due_date or '-'}",
    ]
    if task.description:
        lines.append(f"  {task.description}")
    if task.tags:
        lines.append(f"  tags: {', '.join(task.tags)}")
    lines.append(f"  subtasks: {progress.completed}/{progress.total} ({progress.percent}%)")
    for i, st in enumerate(task.subtasks, start=1):
        lines.append(f"    {i}. {_checkbox(st)} {st.title}")
    return "\n".join(lines)


def render_notifications(tasks: Sequence[Task], today: date | None = None) -> str:
    items = derive_notifications(tasks, today)
    if not items:
        return "All caught up! No new alerts or deadlines at the moment."
    lines = ["Notifications:"]
    for n in items:
        marker = "!" if n.kind is NotificationKind.URGENT else "~"
        lines.append(f"  {marker} {n.headline} [{n.label}] {n.message}")
    return "\n".join(lines)


def render_session(session: EditSession) -> str:
    header = "New task" if session.is_new else f"Editing {short_id(session.original.id)}"  # type: ignore[union-attr]
    lines = [
        f"{header}{' (AI working...)' if session.ai_working else ''}",
        f"  title: {session.title or '<empty>'}",
        f"  description: {session.description or '-'}",
        f"  status: {session.status.value}",
        f"  priority: {session.priority.value}",
        f"  due: {session.due_date or '-'}",
    ]
    done = sum(1 for st in session.subtasks if st.completed)
    lines.append(f"  subtasks: {done}/{len(session.subtasks)}")
    for i, st in enumerate(session.subtasks, start=1):
        lines.append(f"    {i}. {_checkbox(st)} {st.title}")
    return "\n".join(lines)
