# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, drag components and SQLite persistence into AppState.
"""

from __future__ import annotations

import logging

from ..board.board_repo import BoardRepo
from ..board.store import OrderedEntityStore
from ..config import get_settings
from ..core.state import AppState
from ..dnd.controller import DragDropController
from ..dnd.gesture import GestureRecognizer, PointerActivation, TouchActivation
from ..dnd.hit_test import HitTestResolver
from ..dnd.reconcile import ReconciliationEngine

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.board_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_controller(store: OrderedEntityStore, settings) -> DragDropController:
    recognizer = GestureRecognizer(
        pointer=PointerActivation(distance=float(getattr(settings, "pointer_distance", 8.0))),
        touch=TouchActivation(
            delay_ms=float(getattr(settings, "touch_delay_ms", 200.0)),
            tolerance=float(getattr(settings, "touch_tolerance", 8.0)),
        ),
    )
    engine = ReconciliationEngine(
        store, revert_on_cancel=bool(getattr(settings, "revert_on_cancel", False))
    )
    return DragDropController(store, recognizer, HitTestResolver(store), engine)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = OrderedEntityStore()

    repo: BoardRepo | None = None
    if getattr(settings, "persist", True):
        _ensure_local_dirs(settings)
        repo = BoardRepo(settings.board_db_path)
        repo.attach(store)

    state = AppState(
        settings=settings,
        store=store,
        controller=build_controller(store, settings),
        repo=repo,
        current_scope=str(getattr(settings, "default_scope", "inbox")),
    )

    # Rendering-layer duty: keep drop-target geometry in sync with the store.
    state.controller.on_mutations = lambda _mutations: state.layout_for()
    return state
