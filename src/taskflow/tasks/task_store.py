# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from ..core.errors import NotFoundError, ValidationError
from ..core.ports import TaskRepo
from .task_models import COLUMNS, MoveDirection, Task, validate_title

logger = logging.getLogger(__name__)

TasksListener = Callable[[tuple[Task, ...]], None]


class TaskStore:
    """
    In-memory task collection with whole-collection persistence.

    The store is the only writer:
    - every mutation builds a new collection,
    - the repository saves it,
    - only then the new collection replaces the old one.
    A failed save leaves the store unchanged (the StorageError propagates).

    Single-threaded by contract; no locking.
    """

    def __init__(self, repo: TaskRepo, initial: Iterable[Task] | None = None) -> None:
        self._repo = repo
        self._listeners: list[TasksListener] = []

        loaded = repo.load()
        if loaded is None:
            self._tasks: tuple[Task, ...] = tuple(initial or ())
            if self._tasks:
                repo.save(self._tasks)
                logger.info("TaskStore seeded with %d tasks", len(self._tasks))
        else:
            self._tasks = tuple(loaded)
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    def _commit(self, new_tasks: tuple[Task, ...]) -> None:
        self._repo.save(new_tasks)
        self._tasks = new_tasks
        for listener in list(self._listeners):
            try:
                listener(new_tasks)
            except Exception:
                logger.exception("TaskStore listener failed.")

    # ---- queries ----

    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        i = self._index_of(task_id)
        return self._tasks[i] if i >= 0 else None

    def find_by_prefix(self, prefix: str) -> list[Task]:
        """Tasks whose id starts with prefix (exact id match wins)."""
        prefix = (prefix or "").strip()
        if not prefix:
            return []
        exact = self.get(prefix)
        if exact is not None:
            return [exact]
        return [t for t in self._tasks if t.id.startswith(prefix)]

    def subscribe(self, listener: TasksListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- mutations ----

    def create(self, task: Task) -> Task:
        validate_title(task.title)
        if self._index_of(task.id) >= 0:
            raise ValidationError(f"Task id {task.id} already exists.")

        self._commit((*self._tasks, task))
        logger.debug("Task created id=%s status=%s priority=%s", task.id, task.status, task.priority)
        return task

    def update(self, task: Task) -> Task:
        i = self._index_of(task.id)
        if i < 0:
            raise NotFoundError(f"Task id {task.id} not found.")
        validate_title(task.title)

        current = self._tasks[i]
        if task.created_at != current.created_at:
            logger.warning("Ignoring created_at change on task id=%s", task.id)
            task = replace(task, created_at=current.created_at)

        self._commit((*self._tasks[:i], task, *self._tasks[i + 1 :]))
        logger.debug("Task updated id=%s", task.id)
        return task

    def delete(self, task_id: str) -> bool:
        i = self._index_of(task_id)
        if i < 0:
            return False
        self._commit((*self._tasks[:i], *self._tasks[i + 1 :]))
        logger.debug("Task deleted id=%s", task_id)
        return True

    def move(self, task_id: str, direction: MoveDirection | str) -> Task | None:
        """
        Move a task one column forward or back.

        Transitions are strictly adjacent: TODO -> IN_PROGRESS -> REVIEW -> DONE.
        Forward from DONE, back from TODO and unknown ids are no-ops.
        Returns the task as it is after the call (None if the id is unknown).
        """
        direction = MoveDirection(direction)

        i = self._index_of(task_id)
        if i < 0:
            return None
        task = self._tasks[i]

        statuses = [c.status for c in COLUMNS]
        if task.status not in statuses:
            return task
        current = statuses.index(task.status)
        new_index = current + 1 if direction is MoveDirection.FORWARD else current - 1
        if not 0 <= new_index < len(statuses):
            return task

        moved = replace(task, status=statuses[new_index])
        self._commit((*self._tasks[:i], moved, *self._tasks[i + 1 :]))
        logger.debug("Task moved id=%s %s -> %s", task_id, task.status, moved.status)
        return moved
