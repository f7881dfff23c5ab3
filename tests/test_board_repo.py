# tests/test_board_repo.py

from __future__ import annotations

import sqlite3
from pathlib import Path

from taskflow.board.board_repo import BoardRepo
from taskflow.board.models import ChangeKind, EntityRef, StoreChange
from taskflow.board.store import OrderedEntityStore
from taskflow.dnd.hit_test import HitKind, HitResult
from taskflow.dnd.reconcile import ReconciliationEngine

from .fakes import ids, orders


def _reload(db_path: Path) -> OrderedEntityStore:
    st = OrderedEntityStore()
    BoardRepo(db_path).attach(st)
    return st


def test_changes_are_persisted_and_reloaded(tmp_path: Path) -> None:
    db = tmp_path / "board.sqlite3"
    st = OrderedEntityStore()
    repo = BoardRepo(db)
    repo.attach(st)

    st.create_container("s1", "Todo", container_id="T", color="#f59e0b")
    st.create_container("s1", "Done", container_id="D")
    st.create_item("s1", "write docs", container_id="T", item_id="w")
    st.create_item("s1", "ship", container_id="T", item_id="s")
    st.create_item("s2", "elsewhere", item_id="e")

    engine = ReconciliationEngine(st)
    hit = HitResult(kind=HitKind.OVER_SLOT, scope_id="s1", container_id="D", index=0)
    engine.drag_end(EntityRef.item("s"), hit)

    assert repo.count_items() == 3
    assert repo.count_containers() == 2

    again = _reload(db)
    assert ids(again, "T") == ["w"]
    assert orders(again, "D") == [("s", 0)]
    assert ids(again, None, "s2") == ["e"]
    todo = again.get_container("T")
    assert (todo.name, todo.color, todo.order) == ("Todo", "#f59e0b", 1)


def test_deleted_section_members_reload_as_unsorted(tmp_path: Path) -> None:
    db = tmp_path / "board.sqlite3"
    st = _reload(db)
    st.create_container("s1", "Doomed", container_id="X")
    st.create_item("s1", "one", container_id="X", item_id="1")
    st.create_item("s1", "two", container_id="X", item_id="2")

    st.delete_container("X")
    st.delete_item("2")

    again = _reload(db)
    assert again.find_container("X") is None
    assert orders(again, None) == [("1", 0)]


def test_schema_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE sections (id TEXT PRIMARY KEY, scope_id TEXT NOT NULL, ord INTEGER)")
    conn.execute(
        "CREATE TABLE tasks (id TEXT PRIMARY KEY, scope_id TEXT NOT NULL, section_id TEXT, ord INTEGER)"
    )
    conn.execute("INSERT INTO sections(id, scope_id, ord) VALUES ('A', 's1', 1)")
    conn.execute("INSERT INTO tasks(id, scope_id, section_id, ord) VALUES ('t', 's1', 'A', 0)")
    conn.commit()
    conn.close()

    st = _reload(db)
    assert st.get_container("A").name == ""
    item = st.get_item("t")
    assert (item.container_id, item.order, item.completed) == ("A", 0, False)


def test_state_fixture_wires_persistence(state, settings) -> None:
    state.store.create_item("s1", "remember me", item_id="r")
    assert state.repo is not None

    again = _reload(settings.board_db_path)
    assert again.get_item("r").title == "remember me"


def test_change_without_entity_is_logged_not_raised(tmp_path: Path) -> None:
    repo = BoardRepo(tmp_path / "board.sqlite3")

    repo.handle_change(StoreChange(ChangeKind.ITEM_UPDATED, "ghost", None))
    repo.handle_change(StoreChange(ChangeKind.CONTAINER_ADDED, "ghost", None))

    assert repo.count_items() == 0
    assert repo.count_containers() == 0
