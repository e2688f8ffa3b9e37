# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.tasks.task_models import Priority, Subtask, Task, TaskStatus
from taskflow.tasks.task_repository import InMemoryTaskRepository
from taskflow.tasks.task_store import TaskStore

from .fakes import FakeAssistant


def make_task(
    task_id: str,
    title: str = "Task",
    *,
    description: str = "",
    status: TaskStatus = TaskStatus.TODO,
    priority: Priority = Priority.MEDIUM,
    due_date: str | None = None,
    subtasks: tuple[Subtask, ...] = (),
) -> Task:
    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        priority=priority,
        created_at=1_700_000_000_000,
        due_date=due_date,
        subtasks=subtasks,
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment.
    """
    return SimpleNamespace(
        app_name="taskflow",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        storage_slot="taskflow-tasks",
        seed_demo=False,
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        llm_models=["test/model"],
        extra_headers={},
    )


@pytest.fixture()
def repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture()
def store(repo: InMemoryTaskRepository) -> TaskStore:
    return TaskStore(repo)


@pytest.fixture()
def assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, assistant: FakeAssistant) -> AppState:
    return AppState(settings=settings, store=store, assistant=assistant)
