# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (repository/store/LLM assistant),
- seeds demo tasks on the very first run.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.assistant import TaskAssistant
from ..llm.client import OpenRouterLLMClient, friendly_llm_error_message
from ..llm.offline import OfflineLLMClient
from ..tasks.task_models import Priority, Subtask, Task, TaskStatus, now_ms
from ..tasks.task_repository import JsonFileTaskRepository
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def demo_tasks() -> list[Task]:
    created = now_ms()
    return [
        Task(
            id="1",
            title="Research Competitors",
            description="Analyze top 3 competitors in the SaaS market regarding pricing and features.",
            status=TaskStatus.IN_PROGRESS,
            priority=Priority.HIGH,
            created_at=created,
            due_date="2023-12-25",
            subtasks=(
                Subtask(id="s1", title="Identify top 3 competitors", completed=True),
                Subtask(id="s2", title="Create comparison matrix", completed=False),
            ),
            tags=("Strategy",),
        ),
        Task(
            id="2",
            title="Update Landing Page",
            description="Refresh the hero section with new copy and illustrations.",
            status=TaskStatus.TODO,
            priority=Priority.MEDIUM,
            created_at=created,
            tags=("Design",),
        ),
    ]


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except RuntimeError as e:
        # Fallback for demos / local runs without external services.
        logger.warning("Using offline AI assistant: %s", friendly_llm_error_message(e))
        return OfflineLLMClient()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repo = JsonFileTaskRepository(settings.storage_path, settings.storage_slot)
    store = TaskStore(repo, initial=demo_tasks() if settings.seed_demo else None)

    return AppState(
        settings=settings,
        store=store,
        assistant=TaskAssistant(create_llm_client(settings)),
    )
