# src/taskdash/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date
from typing import Any, cast

from ..core.i18n import SUPPORTED_LANGUAGES, supported_language
from ..core.state import AppState
from ..tasks.task_actions import confirm_delete, confirm_update
from ..tasks.task_export import write_export
from ..tasks.task_models import Task, TaskPriority, TaskStatus, validate_task_fields
from ..tasks.task_selectors import (
    TaskFilters,
    completion_rate,
    filtered_tasks,
    overdue_count,
    priority_breakdown,
    statistics,
    task_by_id,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# Console spelling -> Task field name.
FIELD_ALIASES = {
    "title": "title",
    "description": "description",
    "desc": "description",
    "status": "status",
    "priority": "priority",
    "due": "due_date",
    "due_date": "due_date",
    "assignee": "assigned_to",
    "assigned_to": "assigned_to",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like '/command arg key="some value"'.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
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

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def parse_assignments(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """
    Split ["status=pending", "fix", "bug"] into ({"status": "pending"}, ["fix", "bug"]).

    Keys are mapped through FIELD_ALIASES; unknown keys are kept as-is so the
    caller can report them.
    """
    fields: dict[str, str] = {}
    words: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            words.append(arg)
            continue
        fields[FIELD_ALIASES.get(key.lower(), key.lower())] = value
    return fields, words


def _status_label(state: AppState, status: TaskStatus) -> str:
    key = "inProgress" if status == TaskStatus.IN_PROGRESS else status.value
    return state.translator(f"tasks.status.{key}")


def format_task(state: AppState, task: Task) -> str:
    priority = state.translator(f"tasks.priority.{task.priority.value}")
    return (
        f"[{task.id}] {task.title} ({_status_label(state, task.status)}, {priority})\n"
        f"      {task.description}\n"
        f"      due: {task.due_date} | assignee: {task.assigned_to}"
    )


def _find(state: AppState, args: list[str]) -> Task | str:
    if not args:
        return "Task id is required."
    task = task_by_id(state.store.tasks, args[0])
    if task is None:
        return f"No task with id {args[0]}."
    return task


def _unknown_fields(fields: dict[str, str]) -> list[str]:
    known = set(FIELD_ALIASES.values())
    return sorted(k for k in fields if k not in known)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Language: {state.language}\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} "
        f"({getattr(settings, 'storage_path', '?')}) key={state.persistence.key}\n"
        f"  Autosave: {'on' if state.persistence.attached else 'off'}\n"
        f"  Tasks: {len(state.store)}\n"
        f"  Loading: {'yes' if state.store.loading else 'no'}\n"
        f"  Error: {state.store.error or '-'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                       -> tasks matching the active /filter
    /list bug                   -> search "bug" (plus the active filter)
    /list status=pending        -> override one filter field for this call
    """
    fields, words = parse_assignments(args)
    base = state.filters
    filters = TaskFilters(
        search=" ".join(words) if words else fields.get("search", base.search),
        status=fields.get("status", base.status),
        priority=fields.get("priority", base.priority),
    )

    tasks = state.store.tasks
    shown = filtered_tasks(tasks, filters)
    header = state.translator.format("tasks.list.showing", count=len(shown), total=len(tasks))
    if not shown:
        return f"{header}\n{state.translator('tasks.list.emptyTitle')}"
    return "\n".join([header, *(format_task(state, t) for t in shown)])


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                                   -> show active filter
    /filter status=pending priority=high      -> set fields
    /filter search="login"                    -> set search
    /filter clear                             -> reset everything to "all"
    """
    if args and args[0].lower() == "clear":
        state.filters = TaskFilters()
        return "Filters cleared."

    fields, _words = parse_assignments(args)
    if fields:
        status = fields.get("status", state.filters.status)
        priority = fields.get("priority", state.filters.priority)
        if status not in ("all", None) and status not in set(TaskStatus):
            return f"Unknown status: {status}"
        if priority not in ("all", None) and priority not in set(TaskPriority):
            return f"Unknown priority: {priority}"
        state.filters = TaskFilters(
            search=fields.get("search", state.filters.search),
            status=status,
            priority=priority,
        )

    f = state.filters
    active = "active" if f.is_active() else "inactive"
    return f"Filter ({active}): search={f.search or '-'} status={f.status} priority={f.priority}"


def cmd_show(state: AppState, args: list[str]) -> str:
    found = _find(state, args)
    if isinstance(found, str):
        return found
    return format_task(state, found)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Fix bug" description="Crash when saving a task" due=2024-12-20 assignee=Ann
         [status=pending] [priority=high]
    """
    fields, _words = parse_assignments(args)
    unknown = _unknown_fields(fields)
    if unknown:
        return f"Unknown fields: {', '.join(unknown)}"

    problems = validate_task_fields(fields)
    if problems:
        return "Cannot add task:\n" + "\n".join(f"  - {p}" for p in problems)

    task = state.store.create_task(
        title=fields["title"].strip(),
        description=fields["description"].strip(),
        due_date=fields["due_date"].strip(),
        assigned_to=fields["assigned_to"].strip(),
        status=fields.get("status", TaskStatus.PENDING),
        priority=fields.get("priority", TaskPriority.MEDIUM),
    )
    return f"Task added: {task.id}"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/edit <id> key=value ...   (fields: title, description, status, priority, due, assignee)"""
    found = _find(state, args)
    if isinstance(found, str):
        return found

    fields, _words = parse_assignments(args[1:])
    if not fields:
        return "Nothing to change. Usage: /edit <id> status=completed ..."
    unknown = _unknown_fields(fields)
    if unknown:
        return f"Unknown fields: {', '.join(unknown)}"

    problems = validate_task_fields(fields, partial=True)
    if problems:
        return "Cannot update task:\n" + "\n".join(f"  - {p}" for p in problems)

    updates: dict[str, Any] = {k: v.strip() for k, v in fields.items()}
    if emit is not None:
        emit("Saving...")
    delay = state.settings.simulated_delay_seconds
    applied = asyncio.run(confirm_update(state.store, found.id, updates, delay_seconds=delay))
    return f"Task updated: {found.id}" if applied else "Update failed."


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    found = _find(state, args)
    if isinstance(found, str):
        return found
    if emit is not None:
        emit("Deleting...")
    delay = state.settings.simulated_delay_seconds
    applied = asyncio.run(confirm_delete(state.store, found.id, delay_seconds=delay))
    return f"Task deleted: {found.id}" if applied else "Delete failed."


def cmd_stats(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    t = state.translator
    stats = statistics(tasks)
    prio = priority_breakdown(tasks)
    return (
        f"{t('dashboard.stats.totalTasks')}: {stats.total}\n"
        f"  {t('tasks.status.completed')}: {stats.completed}\n"
        f"  {t('tasks.status.inProgress')}: {stats.in_progress}\n"
        f"  {t('tasks.status.pending')}: {stats.pending}\n"
        f"  {t('tasks.priority.high')}/{t('tasks.priority.medium')}/{t('tasks.priority.low')}: "
        f"{prio.high}/{prio.medium}/{prio.low}\n"
        f"  {t('analytics.metrics.completionRate')}: {completion_rate(tasks)}%\n"
        f"  {t('analytics.metrics.overdue')}: {overdue_count(tasks, date.today())}"
    )


def cmd_export(state: AppState, args: list[str]) -> str:
    directory = args[0] if args else getattr(state.settings, "export_dir", ".")
    try:
        path = write_export(state.store.tasks, directory)
    except OSError as e:
        logger.exception("Export failed dir=%s", directory)
        return f"Export failed: {e}"
    return f"Exported {len(state.store)} tasks to {path}"


def cmd_lang(state: AppState, args: list[str]) -> str:
    choices = ", ".join(SUPPORTED_LANGUAGES)
    if not args:
        return f"Language: {state.language} (available: {choices})"
    code = supported_language(args[0])
    if code is None:
        return f"Unsupported language: {args[0]}. Available: {choices}"
    seeded = state.set_language(code)
    suffix = " Sample tasks loaded." if seeded else ""
    return f"Language set to {state.language}.{suffix}"


def cmd_reset(state: AppState, args: list[str]) -> str:
    """/reset confirm -> drop all tasks and reload the sample set."""
    if not args or args[0].lower() != "confirm":
        return "This replaces all tasks with the sample set. Run /reset confirm to proceed."
    state.seed_policy.reset_to_seed(state.translator)
    return f"Reset done. {len(state.store)} sample tasks loaded."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show language, storage and store flags.")
registry.register("list", cmd_list, help_text="List tasks: /list [search] [status=..] [priority=..].", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Set the list filter: /filter status=.. priority=.. search=.. | clear.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text='Add a task: /add title=".." description=".." due=.. assignee=..')
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> key=value ...")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("export", cmd_export, help_text="Export tasks as JSON: /export [dir].")
registry.register("lang", cmd_lang, help_text="Show or switch language: /lang [en|ru].")
registry.register("reset", cmd_reset, help_text="Replace all tasks with the sample set: /reset confirm.")
