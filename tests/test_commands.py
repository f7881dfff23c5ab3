# tests/test_commands.py

from __future__ import annotations

from taskflow.cli.commands import CommandRegistry, quick_add, registry

from .fakes import ids, orders


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def _seeded(state) -> tuple[str, str]:
    registry.handle(state, "/section add Todo")
    registry.handle(state, "/section add Done #10b981")
    todo, done = state.store.containers_of(state.current_scope)
    state.store.create_item("s1", "first", container_id=todo.id, item_id="t1")
    state.store.create_item("s1", "second", container_id=todo.id, item_id="t2")
    state.store.create_item("s1", "third", container_id=done.id, item_id="d1")
    return todo.id, done.id


def test_section_and_task_commands(state) -> None:
    todo, done = _seeded(state)
    assert state.store.get_container(done).color == "#10b981"

    reply = registry.handle(state, "/task add - loose end")
    assert "order 0" in (reply or "")
    assert "Cannot" in (registry.handle(state, "/task add nope x") or "")

    assert "renamed" in (registry.handle(state, f"/section rename {todo} To Do") or "")
    assert state.store.get_container(todo).name == "To Do"

    reply = registry.handle(state, f"/section del {todo}")
    assert "2 task(s) moved to Unsorted" in (reply or "")
    assert set(ids(state.store, None)) >= {"t1", "t2"}

    assert "Usage" in (registry.handle(state, "/section") or "")


def test_board_renders_sections_and_hides_empty_unsorted(state) -> None:
    _seeded(state)
    board = registry.handle(state, "/board") or ""
    assert "Unsorted" not in board
    assert "Todo [" in board
    assert "first (t1)" in board

    quick_add(state, "inbox item")
    assert "Unsorted" in (registry.handle(state, "/b") or "")


def test_drag_command_moves_task_between_sections(state) -> None:
    todo, done = _seeded(state)
    emitted: list[str] = []

    board = registry.handle(state, f"/drag t1 {done} 0", emit=emitted.append) or ""

    assert orders(state.store, done) == [("t1", 0), ("d1", 1)]
    assert ids(state.store, todo) == ["t2"]
    assert "first (t1)" in board
    assert emitted and emitted[0].startswith("[DRAG]")


def test_drag_command_appends_and_reorders_within_section(state) -> None:
    todo, done = _seeded(state)

    registry.handle(state, f"/drag d1 {todo}")
    assert ids(state.store, todo) == ["t1", "t2", "d1"]

    registry.handle(state, f"/drag d1 {todo} 0")
    assert orders(state.store, todo) == [("d1", 0), ("t1", 1), ("t2", 2)]

    registry.handle(state, "/drag t2 -")
    assert ids(state.store, None) == ["t2"]


def test_drag_command_rejects_bad_input(state) -> None:
    _seeded(state)
    assert "Usage" in (registry.handle(state, "/drag t1") or "")
    assert "No task" in (registry.handle(state, "/drag ghost -") or "")
    assert "No section" in (registry.handle(state, "/drag t1 ghost") or "")
    assert "integer" in (registry.handle(state, "/drag t1 - first") or "")


def test_drag_section_command(state) -> None:
    todo, done = _seeded(state)
    registry.handle(state, f"/drag-section {done} {todo}")
    assert [c.id for c in state.store.containers_of("s1")] == [done, todo]
    assert [c.order for c in state.store.containers_of("s1")] == [0, 1]


def test_seed_and_status(state) -> None:
    notes: list[str] = []
    board = registry.handle(state, "/seed", emit=notes.append) or ""
    assert "To Do" in board and "In Progress" in board and "Done" in board
    assert notes == ["[BOARD] Seeded 3 sections."]
    assert "already has sections" in (registry.handle(state, "/seed") or "")

    status = registry.handle(state, "/status") or ""
    assert "Scope: s1" in status
    assert "Persistence: ON" in status

    assert "Switched" in (registry.handle(state, "/scope other") or "")
    assert state.current_scope == "other"
    assert "/drag" in (registry.handle(state, "/help") or "")
