# src/taskflow/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import cast

from ..core.edit_session import AIOutcome, EditSession
from ..core.errors import TaskFlowError
from ..core.state import AppState
from ..tasks.notifications import urgent_count
from ..tasks.task_models import MoveDirection, Priority, Task, TaskStatus
from ..tasks.task_views import column_counts
from .render import render_board, render_notifications, render_session, render_task, short_id

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Expected errors (validation etc.) become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                return cast(CommandHandler3, handler)(state, args, emit)
            return cast(CommandHandler2, handler)(state, args)
        except TaskFlowError as e:
            logger.info("Command /%s rejected: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _resolve(state: AppState, args: list[str]) -> Task | str:
    """Find one task by id or unique id prefix. Returns the task or an error reply."""
    if not args:
        return "Missing task id."
    matches = state.store.find_by_prefix(args[0])
    if not matches:
        return f"No task with id {args[0]}."
    if len(matches) > 1:
        return f"Ambiguous id {args[0]}: matches {', '.join(short_id(t.id) for t in matches)}."
    return matches[0]


def _session(state: AppState) -> EditSession | str:
    if state.session is None or not state.session.active:
        return "No task is being edited. Use /new or /edit <id> first."
    return state.session


def _step_id(session: EditSession, raw: str) -> str | None:
    try:
        n = int(raw)
    except ValueError:
        return None
    if 1 <= n <= len(session.subtasks):
        return session.subtasks[n - 1].id
    return None


# ---- board commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks()
    counts = column_counts(tasks)
    per_column = ", ".join(f"{s.value}={n}" for s, n in counts.items())
    path = getattr(state.settings, "storage_path", "-")
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({per_column})\n"
        f"  Urgent open: {urgent_count(tasks)}\n"
        f"  Storage: {path}\n"
        f"  Editing: {'yes' if state.session is not None and state.session.active else 'no'}"
    )


def cmd_board(state: AppState, args: list[str]) -> str:
    return render_board(state.store.tasks(), state.search_query)


def cmd_search(state: AppState, args: list[str]) -> str:
    state.search_query = " ".join(args)
    return render_board(state.store.tasks(), state.search_query)


def cmd_show(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    return render_task(task)


def cmd_add(state: AppState, args: list[str]) -> str:
    session = EditSession(state.store, state.assistant)
    session.title = " ".join(args)
    task = session.save()
    return f"Created {short_id(task.id)}: {task.title}"


def cmd_move(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    raw = (args[1] if len(args) > 1 else "").lower()
    aliases = {"f": "forward", "fwd": "forward", "next": "forward", "b": "back", "prev": "back"}
    try:
        direction = MoveDirection(aliases.get(raw, raw))
    except ValueError:
        return "Usage: /move <id> forward|back"
    moved = state.store.move(task.id, direction)
    if moved is None or moved.status is task.status:
        return f"{short_id(task.id)} stays in {task.status.value}."
    return f"{short_id(task.id)} moved to {moved.status.value}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    state.store.delete(task.id)
    if state.session is not None and state.session.original is not None and state.session.original.id == task.id:
        state.close_session()
    return f"Deleted {short_id(task.id)}: {task.title}"


def cmd_notify(state: AppState, args: list[str]) -> str:
    return render_notifications(state.store.tasks())


# ---- edit session commands ----


def cmd_new(state: AppState, args: list[str]) -> str:
    session = state.open_session()
    if args:
        session.title = " ".join(args)
    return render_session(session)


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    return render_session(state.open_session(task.id))


def cmd_title(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    session.title = " ".join(args)
    return render_session(session)


def cmd_desc(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    session.description = " ".join(args)
    return render_session(session)


def cmd_due(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    if not args or args[0].lower() in ("none", "-", "clear"):
        session.due_date = None
        return render_session(session)
    try:
        session.due_date = date.fromisoformat(args[0]).isoformat()
    except ValueError:
        return "Usage: /due YYYY-MM-DD | /due none"
    return render_session(session)


def cmd_priority(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    try:
        session.priority = Priority(args[0].upper()) if args else session.priority
    except ValueError:
        return f"Usage: /priority {' | '.join(p.value for p in Priority)}"
    return render_session(session)


def cmd_set_status(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    try:
        session.status = TaskStatus(args[0].upper()) if args else session.status
    except ValueError:
        return f"Usage: /set-status {' | '.join(s.value for s in TaskStatus)}"
    return render_session(session)


def cmd_step(state: AppState, args: list[str]) -> str:
    """
    /step add              -> append an empty step
    /step done <n>         -> toggle step n
    /step title <n> <text> -> rename step n
    /step rm <n>           -> delete step n
    """
    session = _session(state)
    if isinstance(session, str):
        return session
    usage = "Usage: /step add | /step done <n> | /step title <n> <text> | /step rm <n>"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add":
        session.add_empty_subtask()
        return render_session(session)

    sid = _step_id(session, args[1]) if len(args) > 1 else None
    if sid is None:
        return usage
    if sub == "done":
        session.toggle_subtask(sid)
    elif sub == "title":
        session.rename_subtask(sid, " ".join(args[2:]))
    elif sub in ("rm", "del", "delete"):
        session.delete_subtask(sid)
    else:
        return usage
    return render_session(session)


def cmd_ai(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /ai steps     -> ask AI to break the task down into subtasks
    /ai priority  -> ask AI to suggest a priority
    """
    session = _session(state)
    if isinstance(session, str):
        return session
    sub = args[0].lower() if args else ""
    if sub not in ("steps", "priority"):
        return "Usage: /ai steps | /ai priority"

    if emit:
        emit("[AI] Working...")

    if sub == "steps":
        outcome = asyncio.run(session.generate_subtasks())
    else:
        outcome = asyncio.run(session.suggest_priority())

    if outcome is AIOutcome.SKIPPED:
        return "Set a title first (/title <text>)."
    if outcome is AIOutcome.BUSY:
        return "AI is already working on this task."
    if outcome is AIOutcome.SUPERSEDED:
        return "Edit session was closed; AI result discarded."
    if outcome is AIOutcome.FAILURE:
        return session.notice or f"AI could not suggest a priority; keeping {session.priority.value}."

    text = render_session(session)
    if sub == "priority" and session.last_reason:
        text += f"\n  reason: {session.last_reason}"
    return text


def cmd_save(state: AppState, args: list[str]) -> str:
    session = _session(state)
    if isinstance(session, str):
        return session
    task = session.save()
    state.session = None
    return f"Saved {short_id(task.id)}: {task.title}"


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.session is None:
        return "Nothing to cancel."
    state.close_session()
    return "Edit discarded."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts and storage location.")
registry.register("board", cmd_board, help_text="Show the board (honors the current search).", aliases=["b", "ls"])
registry.register("search", cmd_search, help_text="Filter the board: /search <text> (empty clears).")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text="Quick-create a task: /add <title>.")
registry.register("move", cmd_move, help_text="Move a task: /move <id> forward|back.", aliases=["mv"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("notify", cmd_notify, help_text="Show urgent and due-soon notifications.", aliases=["n"])
registry.register("new", cmd_new, help_text="Start editing a new task: /new [title].")
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <id>.")
registry.register("title", cmd_title, help_text="Set draft title.")
registry.register("desc", cmd_desc, help_text="Set draft description.")
registry.register("due", cmd_due, help_text="Set draft due date: /due YYYY-MM-DD | none.")
registry.register("priority", cmd_priority, help_text="Set draft priority: LOW|MEDIUM|HIGH|URGENT.", aliases=["p"])
registry.register("set-status", cmd_set_status, help_text="Set draft status: TODO|IN_PROGRESS|REVIEW|DONE.")
registry.register("step", cmd_step, help_text="Edit subtasks: /step add | done <n> | title <n> <text> | rm <n>.")
registry.register("ai", cmd_ai, help_text="AI assist: /ai steps | /ai priority.")
registry.register("save", cmd_save, help_text="Save the draft to the board.")
registry.register("cancel", cmd_cancel, help_text="Discard the draft.")
