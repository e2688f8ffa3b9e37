# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace

import pytest

from taskflow.core.errors import NotFoundError, StorageError, ValidationError
from taskflow.tasks.task_models import MoveDirection, TaskStatus
from taskflow.tasks.task_repository import InMemoryTaskRepository
from taskflow.tasks.task_store import TaskStore

from .conftest import make_task
from .fakes import FailingRepo


def test_create_appends_in_insertion_order(store: TaskStore, repo: InMemoryTaskRepository) -> None:
    store.create(make_task("a", "First"))
    store.create(make_task("b", "Second"))
    store.create(make_task("c", "First"))  # same title is fine

    assert [t.id for t in store.tasks()] == ["a", "b", "c"]
    assert repo.saved is not None
    assert [t.id for t in repo.saved] == ["a", "b", "c"]


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_create_rejects_blank_title(store: TaskStore, repo: InMemoryTaskRepository, title: str) -> None:
    store.create(make_task("a"))
    before = store.tasks()

    with pytest.raises(ValidationError):
        store.create(make_task("b", title))

    assert store.tasks() == before
    assert repo.save_count == 1


def test_create_rejects_duplicate_id(store: TaskStore) -> None:
    store.create(make_task("a"))
    with pytest.raises(ValidationError):
        store.create(make_task("a", "Other"))
    assert len(store.tasks()) == 1


def test_update_replaces_in_place(store: TaskStore) -> None:
    for tid in ("a", "b", "c"):
        store.create(make_task(tid, tid.upper()))

    store.update(replace(store.get("b"), title="Bee"))

    assert [t.title for t in store.tasks()] == ["A", "Bee", "C"]


def test_update_missing_id_is_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.update(make_task("ghost"))


def test_update_keeps_created_at(store: TaskStore) -> None:
    original = store.create(make_task("a"))
    updated = store.update(replace(original, title="New", created_at=1))
    assert updated.created_at == original.created_at
    assert store.get("a").created_at == original.created_at


def test_update_rejects_blank_title(store: TaskStore) -> None:
    original = store.create(make_task("a", "Keep"))
    with pytest.raises(ValidationError):
        store.update(replace(original, title="  "))
    assert store.get("a").title == "Keep"


def test_create_then_delete_restores_collection(store: TaskStore) -> None:
    store.create(make_task("a"))
    store.create(make_task("b"))
    before = store.tasks()

    store.create(make_task("x", "Temp"))
    assert store.delete("x") is True

    assert store.tasks() == before


def test_delete_missing_id_is_noop(store: TaskStore, repo: InMemoryTaskRepository) -> None:
    store.create(make_task("a"))
    saves = repo.save_count
    assert store.delete("nope") is False
    assert len(store.tasks()) == 1
    assert repo.save_count == saves


def test_forward_moves_walk_every_column_then_stop(store: TaskStore) -> None:
    store.create(make_task("a"))
    seen = [store.get("a").status]
    for _ in range(6):
        seen.append(store.move("a", MoveDirection.FORWARD).status)

    assert seen[:4] == [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, TaskStatus.DONE]
    assert set(seen[4:]) == {TaskStatus.DONE}


def test_forward_from_done_is_noop(store: TaskStore, repo: InMemoryTaskRepository) -> None:
    store.create(make_task("a", status=TaskStatus.DONE))
    saves = repo.save_count
    assert store.move("a", "forward").status is TaskStatus.DONE
    assert repo.save_count == saves


def test_back_from_todo_is_noop(store: TaskStore) -> None:
    store.create(make_task("a"))
    assert store.move("a", "back").status is TaskStatus.TODO


def test_back_moves_one_column(store: TaskStore) -> None:
    store.create(make_task("a", status=TaskStatus.REVIEW))
    assert store.move("a", MoveDirection.BACK).status is TaskStatus.IN_PROGRESS


def test_move_unknown_id_returns_none(store: TaskStore) -> None:
    assert store.move("ghost", "forward") is None


def test_move_rejects_unknown_direction(store: TaskStore) -> None:
    store.create(make_task("a"))
    with pytest.raises(ValueError):
        store.move("a", "sideways")


def test_failed_save_leaves_store_unchanged() -> None:
    store = TaskStore(FailingRepo([make_task("a")]))

    with pytest.raises(StorageError):
        store.create(make_task("b"))
    with pytest.raises(StorageError):
        store.move("a", "forward")

    assert [t.id for t in store.tasks()] == ["a"]
    assert store.get("a").status is TaskStatus.TODO


def test_seed_only_when_nothing_saved() -> None:
    repo = InMemoryTaskRepository()
    seeded = TaskStore(repo, initial=[make_task("demo")])
    assert [t.id for t in seeded.tasks()] == ["demo"]
    assert repo.saved is not None

    repo.saved = []
    again = TaskStore(repo, initial=[make_task("demo")])
    assert again.tasks() == ()


def test_subscribers_receive_new_snapshot(store: TaskStore) -> None:
    snapshots = []
    unsubscribe = store.subscribe(snapshots.append)

    store.create(make_task("a"))
    store.move("a", "forward")
    unsubscribe()
    store.delete("a")

    assert len(snapshots) == 2
    assert snapshots[-1][0].status is TaskStatus.IN_PROGRESS


def test_find_by_prefix(store: TaskStore) -> None:
    store.create(make_task("abc123"))
    store.create(make_task("abd456"))

    assert [t.id for t in store.find_by_prefix("abc")] == ["abc123"]
    assert len(store.find_by_prefix("ab")) == 2
    assert store.find_by_prefix("") == []
