# tests/test_notifications.py

from __future__ import annotations

from datetime import date

from taskflow.tasks.notifications import (
    NotificationKind,
    derive_notifications,
    due_soon,
    urgent_count,
    urgent_open_tasks,
)
from taskflow.tasks.task_models import Priority, TaskStatus

from .conftest import make_task

TODAY = date(2024, 1, 10)


def test_due_soon_window_boundaries() -> None:
    tasks = [
        make_task("A", due_date="2024-01-10"),
        make_task("B", due_date="2024-01-13"),
        make_task("C", due_date="2024-01-14"),
        make_task("D", due_date="2024-01-09"),
        make_task("E", due_date="2024-01-11", status=TaskStatus.DONE),
    ]
    assert [t.id for t in due_soon(tasks, TODAY)] == ["A", "B"]


def test_due_soon_ignores_missing_or_bad_dates() -> None:
    tasks = [make_task("none"), make_task("bad", due_date="soon-ish")]
    assert due_soon(tasks, TODAY) == []


def test_due_soon_accepts_datetime_strings() -> None:
    tasks = [make_task("a", due_date="2024-01-12T09:00:00")]
    assert [t.id for t in due_soon(tasks, TODAY)] == ["a"]


def test_urgent_open_tasks_excludes_done() -> None:
    tasks = [
        make_task("done", priority=Priority.URGENT, status=TaskStatus.DONE),
        make_task("review", priority=Priority.URGENT, status=TaskStatus.REVIEW),
        make_task("high", priority=Priority.HIGH),
        make_task("todo", priority=Priority.URGENT),
    ]
    assert [t.id for t in urgent_open_tasks(tasks)] == ["review", "todo"]
    assert urgent_count(tasks) == 2


def test_derive_notifications_urgent_first_then_due() -> None:
    tasks = [
        make_task("due", "Ship release", due_date="2024-01-11"),
        make_task("hot", "Fix outage", priority=Priority.URGENT),
    ]
    feed = derive_notifications(tasks, TODAY)

    assert [(n.kind, n.task_id) for n in feed] == [
        (NotificationKind.URGENT, "hot"),
        (NotificationKind.DUE_SOON, "due"),
    ]
    assert '"Fix outage"' in feed[0].message
    assert feed[1].label == "2024-01-11"


def test_notifications_are_recomputed_each_call() -> None:
    tasks = [make_task("hot", priority=Priority.URGENT)]
    assert len(derive_notifications(tasks, TODAY)) == 1
    assert len(derive_notifications(tasks, TODAY)) == 1
    assert derive_notifications([], TODAY) == []
