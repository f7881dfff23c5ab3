# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.board.layout import BoardLayout
from taskflow.board.store import OrderedEntityStore
from taskflow.cli.bootstrap import build_controller, create_initial_state
from taskflow.core.state import AppState
from taskflow.dnd.controller import DragDropController

from .fakes import RecordingListener

SCOPE = "s1"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        console_enabled=False,
        # Paths (tmp per test run)
        data_dir=tmp_path,
        board_db_path=tmp_path / "board.sqlite3",
        persist=True,
        default_scope=SCOPE,
        # Drag activation
        pointer_distance=8.0,
        touch_delay_ms=10.0,
        touch_tolerance=8.0,
        revert_on_cancel=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired exactly like the CLI does it (real SQLite repo in tmp_path)."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def store() -> OrderedEntityStore:
    """
    Scope s1 with two sections and three tasks:

        A: a(0) b(1)
        B: x(0)
    """
    st = OrderedEntityStore()
    st.create_container(SCOPE, "A", container_id="A")
    st.create_container(SCOPE, "B", container_id="B")
    st.create_item(SCOPE, "task a", container_id="A", item_id="a")
    st.create_item(SCOPE, "task b", container_id="A", item_id="b")
    st.create_item(SCOPE, "task x", container_id="B", item_id="x")
    return st


@pytest.fixture()
def recorder(store: OrderedEntityStore) -> RecordingListener:
    listener = RecordingListener()
    store.subscribe(listener)
    return listener


@pytest.fixture()
def controller(store: OrderedEntityStore, settings: SimpleNamespace) -> DragDropController:
    return build_controller(store, settings)


@pytest.fixture()
def layout(store: OrderedEntityStore, controller: DragDropController) -> BoardLayout:
    """Geometry for scope s1, refreshed after every applied mutation like a renderer would."""
    lay = BoardLayout(store, controller.resolver, SCOPE)
    lay.refresh()
    controller.on_mutations = lambda _m: lay.refresh()
    return lay
