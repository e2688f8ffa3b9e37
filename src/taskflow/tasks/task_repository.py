# src/taskflow/tasks/task_repository.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..core.errors import StorageError
from .task_models import Task, task_from_dict, task_to_dict

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "taskflow-tasks"


class JsonFileTaskRepository:
    """
    Key-value JSON file store holding the task collection under one named slot.

    File layout: {"<slot>": [<task>, ...], "<other slot>": ...}
    - load once at startup,
    - every save rewrites the whole collection (tmp file + os.replace),
    - other slots in the same file are left untouched.
    """

    def __init__(self, path: str | Path, slot: str = DEFAULT_SLOT) -> None:
        self._path = Path(path)
        self._slot = slot

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not contain a JSON object.")
        return data

    def load(self) -> list[Task] | None:
        data = self._read_all()
        if self._slot not in data:
            return None

        raw_items = data[self._slot]
        if not isinstance(raw_items, list):
            raise StorageError(f"Slot {self._slot!r} in {self._path} is not a JSON array.")

        tasks: list[Task] = []
        seen: set[str] = set()
        for raw in raw_items:
            task = task_from_dict(raw)
            if task is None:
                logger.warning("Skipping malformed task entry in %s: %r", self._path, raw)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s in %s", task.id, self._path)
                continue
            seen.add(task.id)
            tasks.append(task)

        logger.info("Loaded %d tasks from %s [%s]", len(tasks), self._path, self._slot)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        data = self._read_all()
        data[self._slot] = [task_to_dict(t) for t in tasks]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Saved %d tasks to %s [%s]", len(tasks), self._path, self._slot)


class InMemoryTaskRepository:
    """Repository without a backing file (tests, throwaway sessions)."""

    def __init__(self, tasks: Sequence[Task] | None = None) -> None:
        self.saved: list[Task] | None = list(tasks) if tasks is not None else None
        self.save_count = 0

    def load(self) -> list[Task] | None:
        return list(self.saved) if self.saved is not None else None

    def save(self, tasks: Sequence[Task]) -> None:
        self.saved = list(tasks)
        self.save_count += 1
