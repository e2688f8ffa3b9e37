# src/taskflow/core/errors.py

"""
Error taxonomy shared by the store, the edit session and the AI boundary.

- ValidationError: user input rejected before any mutation (empty title, duplicate id).
- NotFoundError: update() on an id the store does not hold (caller bug).
- CollaboratorError: AI call failed or returned data we cannot use.
- StorageError: repository could not read/write the persisted slot.
"""

from __future__ import annotations


class TaskFlowError(Exception):
    """Base class for all expected taskflow errors."""


class ValidationError(TaskFlowError):
    pass


class NotFoundError(TaskFlowError):
    pass


class CollaboratorError(TaskFlowError):
    pass


class StorageError(TaskFlowError):
    pass
