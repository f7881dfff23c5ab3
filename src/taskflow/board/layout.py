# src/taskflow/board/layout.py

from __future__ import annotations

"""
Synthetic board geometry.

Stands in for a real renderer: lays a scope out as columns (unassigned
pseudo-section first, then sections by order) and registers every column,
task row and insertion slot with the hit-test resolver.

Column layout, top to bottom:
    header            (section drop target / drag handle)
    slot 0
    task 0
    slot 1
    ...
    task n-1
    slot n
    padding

The column body rect spans header to padding, so a pointer in the header
or padding resolves to the section itself.
"""

import logging

from ..dnd.gesture import Point
from ..dnd.hit_test import DropTarget, HitTestResolver, Rect, TargetKind
from .store import OrderedEntityStore

logger = logging.getLogger(__name__)

COLUMN_WIDTH = 280.0
COLUMN_GAP = 24.0
HEADER_HEIGHT = 40.0
ROW_HEIGHT = 48.0
SLOT_HEIGHT = 8.0
COLUMN_PADDING = 32.0


class BoardLayout:
    def __init__(self, store: OrderedEntityStore, resolver: HitTestResolver, scope_id: str) -> None:
        self.store = store
        self.resolver = resolver
        self.scope_id = scope_id
        self._columns: dict[str | None, Rect] = {}
        self._headers: dict[str | None, Rect] = {}
        self._rows: dict[str, Rect] = {}
        self._slots: dict[tuple[str | None, int], Rect] = {}

    def column_ids(self) -> list[str | None]:
        return [None] + [c.id for c in self.store.containers_of(self.scope_id)]

    def refresh(self) -> None:
        """Recompute geometry from the store and re-register all drop targets."""
        self._columns.clear()
        self._headers.clear()
        self._rows.clear()
        self._slots.clear()
        targets: list[DropTarget] = []

        for col, container_id in enumerate(self.column_ids()):
            x = col * (COLUMN_WIDTH + COLUMN_GAP)
            members = self.store.members_of(container_id, self.scope_id)

            self._headers[container_id] = Rect(x, 0.0, COLUMN_WIDTH, HEADER_HEIGHT)
            y = HEADER_HEIGHT
            for index, item in enumerate(members):
                slot = Rect(x, y, COLUMN_WIDTH, SLOT_HEIGHT)
                self._slots[(container_id, index)] = slot
                targets.append(self._slot_target(slot, container_id, index))
                y += SLOT_HEIGHT

                row = Rect(x, y, COLUMN_WIDTH, ROW_HEIGHT)
                self._rows[item.id] = row
                targets.append(
                    DropTarget(
                        kind=TargetKind.ITEM,
                        rect=row,
                        scope_id=self.scope_id,
                        container_id=container_id,
                        item_id=item.id,
                    )
                )
                y += ROW_HEIGHT

            last = Rect(x, y, COLUMN_WIDTH, SLOT_HEIGHT)
            self._slots[(container_id, len(members))] = last
            targets.append(self._slot_target(last, container_id, len(members)))
            y += SLOT_HEIGHT + COLUMN_PADDING

            column = Rect(x, 0.0, COLUMN_WIDTH, y)
            self._columns[container_id] = column
            targets.append(
                DropTarget(
                    kind=TargetKind.CONTAINER,
                    rect=column,
                    scope_id=self.scope_id,
                    container_id=container_id,
                )
            )

        self.resolver.replace_all(targets)
        logger.debug("Layout refreshed scope=%s targets=%d", self.scope_id, len(targets))

    def _slot_target(self, rect: Rect, container_id: str | None, index: int) -> DropTarget:
        return DropTarget(
            kind=TargetKind.SLOT,
            rect=rect,
            scope_id=self.scope_id,
            container_id=container_id,
            slot_index=index,
        )

    # ---- geometry lookups ----

    def item_center(self, item_id: str) -> Point:
        return self._rows[item_id].center

    def slot_center(self, container_id: str | None, index: int) -> Point:
        return self._slots[(container_id, index)].center

    def header_center(self, container_id: str | None) -> Point:
        return self._headers[container_id].center

    def container_center(self, container_id: str | None) -> Point:
        """A point in the column's bottom padding (body, no task or slot)."""
        column = self._columns[container_id]
        return (column.x + column.width / 2.0, column.y + column.height - COLUMN_PADDING / 2.0)
