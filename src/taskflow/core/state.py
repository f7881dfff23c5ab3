# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..board.layout import BoardLayout
from ..board.store import OrderedEntityStore
from ..dnd.controller import DragDropController
from .ports import BoardPersistence


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: OrderedEntityStore
    controller: DragDropController
    repo: BoardPersistence | None = None

    # Scope (view/board) the console is looking at.
    current_scope: str = "inbox"
    layouts: dict[str, BoardLayout] = field(default_factory=dict)

    def layout_for(self, scope_id: str | None = None) -> BoardLayout:
        """Return the (refreshed) layout of a scope, creating it on first use."""
        scope = scope_id or self.current_scope
        layout = self.layouts.get(scope)
        if layout is None:
            layout = BoardLayout(self.store, self.controller.resolver, scope)
            self.layouts[scope] = layout
        layout.refresh()
        return layout
