# src/taskflow/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..board.errors import BoardError
from ..board.layout import BoardLayout
from ..board.models import DEFAULT_SECTION_COLOR, SECTION_TEMPLATES, EntityRef, Mutation
from ..core.state import AppState
from ..dnd.gesture import Point

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# Contact id used for synthetic console gestures.
CONSOLE_CONTACT = 1
UNSORTED_TOKENS = ("-", "unsorted", "none")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /board, ...)."""

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
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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
        except Exception:
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


def _section_arg(raw: str) -> str | None:
    return None if raw.lower() in UNSORTED_TOKENS else raw


def _describe(mutations: list[Mutation]) -> str:
    if not mutations:
        return "nothing changed"
    return f"{len(mutations)} change(s)"


def render_board(state: AppState, scope_id: str) -> str:
    store = state.store
    lines = [f"Board '{scope_id}':"]
    columns: list[tuple[str | None, str]] = [(None, "Unsorted")]
    columns += [(c.id, f"{c.name} [{c.id}] (order {c.order})") for c in store.containers_of(scope_id)]
    for container_id, title in columns:
        members = store.members_of(container_id, scope_id)
        if container_id is None and not members:
            continue
        lines.append(f"  {title}")
        if not members:
            lines.append("    (empty)")
        for it in members:
            mark = "x" if it.completed else " "
            lines.append(f"    {it.order:>3} [{mark}] {it.title} ({it.id})")
    return "\n".join(lines)


# ---- synthetic gestures ----


def _drive_drag(
    state: AppState,
    ref: EntityRef,
    start: Callable[[BoardLayout], Point],
    target: Callable[[BoardLayout], Point],
) -> list[Mutation]:
    """
    Press, move past the activation threshold, hover the target, release.

    The layout is re-read before release because the hover may already have
    moved the task into another column.
    """
    ctrl = state.controller
    layout = state.layout_for()

    origin = start(layout)
    ctrl.press(CONSOLE_CONTACT, origin, ref)
    nudge = ctrl.recognizer.pointer.distance + 1.0
    ctrl.move(CONSOLE_CONTACT, (origin[0], origin[1] + nudge))
    if not ctrl.recognizer.is_active:
        ctrl.cancel(CONSOLE_CONTACT)
        return []

    mutations: list[Mutation] = []
    mutations += ctrl.move(CONSOLE_CONTACT, target(layout))

    layout = state.layout_for()
    mutations += ctrl.release(CONSOLE_CONTACT, target(layout))
    state.layout_for()
    return mutations


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    store = state.store
    persisted = "ON" if state.repo is not None else "OFF"
    return (
        "Status:\n"
        f"  Scope: {state.current_scope}\n"
        f"  Sections: {len(store.containers_of(state.current_scope))}"
        f" | tasks: {len(store.items())} in {len(store.scopes())} scope(s)\n"
        f"  Persistence: {persisted}\n"
        f"  Drag activation: pointer {getattr(settings, 'pointer_distance', 8.0)}px,"
        f" touch {getattr(settings, 'touch_delay_ms', 200.0)}ms"
        f" / {getattr(settings, 'touch_tolerance', 8.0)}px\n"
        f"  Revert on cancel: {'ON' if state.controller.engine.revert_on_cancel else 'OFF'}"
    )


def cmd_board(state: AppState, args: list[str]) -> str:
    scope = args[0] if args else state.current_scope
    return render_board(state, scope)


def cmd_scope(state: AppState, args: list[str]) -> str:
    if not args:
        scopes = ", ".join(state.store.scopes()) or "(none yet)"
        return f"Current scope: {state.current_scope}. Known scopes: {scopes}"
    state.current_scope = args[0]
    return f"Switched to scope '{state.current_scope}'."


def cmd_seed(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /seed -> create "To Do", "In Progress", "Done" in an empty scope
    """
    scope = state.current_scope
    if state.store.containers_of(scope):
        return f"Scope '{scope}' already has sections."
    wanted = {"To Do", "In Progress", "Done"}
    created = [
        state.store.create_container(scope, name, color=color)
        for name, color in SECTION_TEMPLATES
        if name in wanted
    ]
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[BOARD] Seeded {len(created)} sections.")
    return render_board(state, scope)


def cmd_section(state: AppState, args: list[str]) -> str:
    """
    /section add <name> [color]
    /section del <id>
    /section rename <id> <name>
    """
    usage = "Usage: /section add <name> [#color] | /section del <id> | /section rename <id> <name>"
    if not args:
        return usage
    sub, rest = args[0].lower(), args[1:]
    store = state.store

    try:
        if sub == "add" and rest:
            color = DEFAULT_SECTION_COLOR
            if len(rest) > 1 and rest[-1].startswith("#"):
                color, rest = rest[-1], rest[:-1]
            c = store.create_container(state.current_scope, " ".join(rest), color=color)
            return f"Section created: {c.name} ({c.id}), order {c.order}."

        if sub in ("del", "delete", "rm") and len(rest) == 1:
            released = store.delete_container(rest[0])
            return f"Section deleted. {len(released)} task(s) moved to Unsorted."

        if sub == "rename" and len(rest) >= 2:
            c = store.update_container(rest[0], name=" ".join(rest[1:]))
            return f"Section renamed: {c.name} ({c.id})."
    except (BoardError, ValueError) as exc:
        return f"Cannot {sub} section: {exc}"

    return usage


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add <section|-> <title...>
    /task del <id>
    """
    usage = "Usage: /task add <section|-> <title> | /task del <id>"
    if not args:
        return usage
    sub, rest = args[0].lower(), args[1:]
    store = state.store

    try:
        if sub == "add" and len(rest) >= 2:
            it = store.create_item(
                state.current_scope, " ".join(rest[1:]), container_id=_section_arg(rest[0])
            )
            return f"Task added: {it.title} ({it.id}), order {it.order}."

        if sub in ("del", "delete", "rm") and len(rest) == 1:
            it = store.delete_item(rest[0])
            return f"Task deleted: {it.title}."
    except (BoardError, ValueError) as exc:
        return f"Cannot {sub} task: {exc}"

    return usage


def cmd_drag(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /drag <task> <section|->          -> drop on the section body (append)
    /drag <task> <section|-> <index>  -> drop on the insertion slot <index>
    """
    if len(args) not in (2, 3):
        return "Usage: /drag <task> <section|-> [index]"

    task_id, section_id = args[0], _section_arg(args[1])
    item = state.store.find_item(task_id)
    if item is None or item.scope_id != state.current_scope:
        return f"No task {task_id} in scope '{state.current_scope}'."
    if section_id is not None and state.store.find_container(section_id) is None:
        return f"No section {section_id}."

    index: int | None = None
    if len(args) == 3:
        try:
            index = max(0, int(args[2]))
        except ValueError:
            return "Index must be an integer."

    def target(layout: BoardLayout) -> Point:
        if index is None:
            return layout.container_center(section_id)
        count = len(state.store.members_of(section_id, state.current_scope))
        return layout.slot_center(section_id, min(index, count))

    logger.debug("Console drag task=%s -> section=%s index=%s", task_id, section_id, index)
    mutations = _drive_drag(state, EntityRef.item(task_id), lambda lay: lay.item_center(task_id), target)
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[DRAG] {_describe(mutations)}")
    return render_board(state, state.current_scope)


def cmd_drag_section(state: AppState, args: list[str]) -> str:
    """
    /drag-section <section> <target-section>  -> put <section> at <target-section>'s place
    """
    if len(args) != 2:
        return "Usage: /drag-section <section> <target-section>"
    src, dst = args
    for sid in (src, dst):
        c = state.store.find_container(sid)
        if c is None or c.scope_id != state.current_scope:
            return f"No section {sid} in scope '{state.current_scope}'."

    _drive_drag(
        state,
        EntityRef.container(src),
        lambda lay: lay.header_center(src),
        lambda lay: lay.header_center(dst),
    )
    return render_board(state, state.current_scope)


def quick_add(state: AppState, text: str) -> str:
    """Plain console input becomes a task in the Unsorted pseudo-section."""
    try:
        it = state.store.create_item(state.current_scope, text)
    except ValueError as exc:
        return f"Cannot add task: {exc}"
    return f"Task added to Unsorted: {it.title} ({it.id})."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show scope, counts and drag settings.")
registry.register("board", cmd_board, help_text="Show the board: /board [scope].", aliases=["b"])
registry.register("scope", cmd_scope, help_text="Switch scope: /scope <name>.")
registry.register("seed", cmd_seed, help_text="Create To Do / In Progress / Done sections.")
registry.register(
    "section", cmd_section, help_text="Sections: /section add | del | rename.", aliases=["s"]
)
registry.register("task", cmd_task, help_text="Tasks: /task add <section|-> <title> | /task del <id>.", aliases=["t"])
registry.register("drag", cmd_drag, help_text="Drag a task: /drag <task> <section|-> [index].")
registry.register(
    "drag-section", cmd_drag_section, help_text="Reorder sections: /drag-section <section> <target>."
)
