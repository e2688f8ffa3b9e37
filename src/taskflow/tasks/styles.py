# src/taskflow/tasks/styles.py

"""
Console styles keyed by the task enumerations.

Both tables are checked against their enum at import time, so adding a
status or priority without a style fails on startup instead of rendering
an unstyled card.

Color output is disabled when stdout is not a TTY or NO_COLOR is set
(FORCE_COLOR=1 forces it on).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from enum import Enum
from typing import TypeVar

from .task_models import Priority, TaskStatus

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR

RESET = "0"
BOLD = "1"
DIM = "2"

# ANSI foreground codes matching the board accents.
_SLATE = "37"
_INDIGO = "94"
_ORANGE = "33"
_GREEN = "32"
_BLUE = "34"
_RED = "31"

E = TypeVar("E", bound=Enum)


def _exhaustive(mapping: Mapping[E, str], enum_cls: type[E]) -> Mapping[E, str]:
    missing = [m.value for m in enum_cls if m not in mapping]
    if missing:
        raise RuntimeError(f"Missing style for {enum_cls.__name__}: {', '.join(missing)}")
    return mapping


STATUS_ACCENT: Mapping[TaskStatus, str] = _exhaustive(
    {
        TaskStatus.TODO: _SLATE,
        TaskStatus.IN_PROGRESS: _INDIGO,
        TaskStatus.REVIEW: _ORANGE,
        TaskStatus.DONE: _GREEN,
    },
    TaskStatus,
)

PRIORITY_STYLE: Mapping[Priority, str] = _exhaustive(
    {
        Priority.LOW: _BLUE,
        Priority.MEDIUM: _SLATE,
        Priority.HIGH: _ORANGE,
        Priority.URGENT: f"{BOLD};{_RED}",
    },
    Priority,
)


def color(text: str, *codes: str) -> str:
    if not _ENABLE or not codes:
        return text
    return f"\033[{';'.join(codes)}m{text}\033[{RESET}m"


def status_text(status: TaskStatus, text: str) -> str:
    return color(text, STATUS_ACCENT[status])


def priority_badge(priority: Priority) -> str:
    return color(f"[{priority.value}]", PRIORITY_STYLE[priority])
