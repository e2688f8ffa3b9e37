# tests/test_commands.py

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.cli.commands import CommandRegistry, registry
from taskflow.core.state import AppState
from taskflow.llm.offline import OfflineLLMClient
from taskflow.tasks.task_models import Priority, TaskStatus

from .conftest import make_task


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_move_and_delete(state: AppState) -> None:
    reply = registry.handle(state, "/add Write the report")
    assert reply is not None and reply.startswith("Created")
    task = state.store.tasks()[0]
    assert task.title == "Write the report"

    assert "IN_PROGRESS" in (registry.handle(state, f"/move {task.id[:8]} forward") or "")
    assert state.store.get(task.id).status is TaskStatus.IN_PROGRESS

    registry.handle(state, f"/rm {task.id}")
    assert state.store.tasks() == ()


def test_add_blank_title_is_rejected(state: AppState) -> None:
    reply = registry.handle(state, "/add    ")
    assert reply == "Task title must not be empty."
    assert state.store.tasks() == ()


def test_move_back_from_todo_stays(state: AppState) -> None:
    state.store.create(make_task("abc"))
    assert "stays in TODO" in (registry.handle(state, "/move abc back") or "")


def test_search_filters_board(state: AppState) -> None:
    state.store.create(make_task("1", "Alpha report"))
    state.store.create(make_task("2", "Beta launch"))

    board = registry.handle(state, "/search launch") or ""
    assert "Beta launch" in board
    assert "Alpha report" not in board

    board = registry.handle(state, "/search") or ""
    assert "Alpha report" in board


def test_edit_session_flow_with_ai(state: AppState) -> None:
    registry.handle(state, "/new Plan offsite")
    registry.handle(state, "/due 2024-03-01")
    registry.handle(state, "/ai steps")
    registry.handle(state, "/ai priority")
    registry.handle(state, "/step done 1")
    reply = registry.handle(state, "/save") or ""

    assert reply.startswith("Saved")
    assert state.session is None
    task = state.store.tasks()[0]
    assert task.due_date == "2024-03-01"
    assert task.priority is Priority.HIGH
    assert [st.title for st in task.subtasks] == ["Plan", "Build", "Ship"]
    assert task.subtasks[0].completed


def test_session_commands_need_open_session(state: AppState) -> None:
    assert "No task is being edited" in (registry.handle(state, "/title x") or "")


def test_notify_lists_urgent(state: AppState) -> None:
    state.store.create(make_task("1", "Fix outage", priority=Priority.URGENT))
    reply = registry.handle(state, "/n") or ""
    assert "Urgent Attention Required" in reply
    assert "Fix outage" in reply


def test_notify_all_caught_up(state: AppState) -> None:
    assert "All caught up" in (registry.handle(state, "/notify") or "")


def test_bootstrap_seeds_demo_and_uses_offline_ai(settings: SimpleNamespace) -> None:
    settings.seed_demo = True
    state = create_initial_state(settings=settings)

    assert [t.title for t in state.store.tasks()] == ["Research Competitors", "Update Landing Page"]
    assert settings.storage_path.exists()
    assert isinstance(state.assistant._llm, OfflineLLMClient)  # type: ignore[union-attr]


def test_bootstrap_logs_friendly_reason_for_offline_ai(
    settings: SimpleNamespace, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="taskflow.cli.bootstrap"):
        create_initial_state(settings=settings)

    assert "missing API key" in caplog.text
