# src/taskflow/dnd/reconcile.py

from __future__ import annotations

"""
Reconciliation engine.

Decides which store mutations a drag produces:

- drag_over: optimistic section change for a dragged task, so the task shows
  up in the hovered section while the pointer is still moving. Applied many
  times per gesture, never reverted by default.
- drag_end: the commit. The target section is renumbered 0..n-1 around the
  dropped task (the section the task left keeps its values). Section drags
  renumber the whole scope.

Only entries whose values actually change are written. A task dropped on
itself or on its own section body keeps its place, and its section is still
renumbered. Stale ids, cross-scope targets and drops on nothing are silent
no-ops.
"""

import logging
from dataclasses import dataclass

from ..board.errors import BoardError
from ..board.models import (
    Container,
    ContainerReorder,
    EntityRef,
    Item,
    ItemMove,
    ItemReorder,
    Mutation,
)
from ..board.store import OrderedEntityStore
from .hit_test import HitKind, HitResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Origin:
    ref: EntityRef
    container_id: str | None
    order: int


class ReconciliationEngine:
    def __init__(self, store: OrderedEntityStore, *, revert_on_cancel: bool = False) -> None:
        self._store = store
        self.revert_on_cancel = revert_on_cancel
        self._origin: _Origin | None = None

    # ---- session ----

    def drag_start(self, ref: EntityRef) -> None:
        self._origin = None
        if not ref.is_item:
            return
        item = self._store.find_item(ref.id)
        if item is None:
            return
        self._origin = _Origin(ref=ref, container_id=item.container_id, order=item.order)

    def drag_cancel(self, ref: EntityRef) -> list[Mutation]:
        origin, self._origin = self._origin, None
        if not self.revert_on_cancel or origin is None or origin.ref != ref:
            return []
        item = self._store.find_item(ref.id)
        if item is None:
            return []
        if item.container_id == origin.container_id and item.order == origin.order:
            return []
        if origin.container_id is not None and self._store.find_container(origin.container_id) is None:
            # Origin section was deleted meanwhile; leave the task where it is.
            return []
        return self._apply([ItemMove(item.id, origin.container_id, origin.order)])

    # ---- drag over ----

    def drag_over(self, ref: EntityRef, hit: HitResult | None) -> list[Mutation]:
        if hit is None or not ref.is_item:
            # Sections are only reordered on drop.
            return []

        item = self._store.find_item(ref.id)
        if item is None or hit.item_id == item.id:
            return []
        if not self._valid_item_target(item, hit):
            return []
        if hit.container_id == item.container_id:
            return []

        siblings = self._siblings(item, hit.container_id)
        index = self._insertion_index(hit, siblings)
        return self._apply([ItemMove(item.id, hit.container_id, index)])

    # ---- drag end ----

    def drag_end(self, ref: EntityRef, hit: HitResult | None) -> list[Mutation]:
        self._origin = None
        if hit is None:
            return []
        if ref.is_item:
            return self._commit_item(ref, hit)
        return self._commit_container(ref, hit)

    def _commit_item(self, ref: EntityRef, hit: HitResult) -> list[Mutation]:
        item = self._store.find_item(ref.id)
        if item is None:
            return []
        if not self._valid_item_target(item, hit):
            return []

        target = hit.container_id
        keep_place = hit.item_id == item.id or (
            hit.kind is HitKind.OVER_CONTAINER and target == item.container_id
        )
        if keep_place:
            # Dropped on itself or on its own section body. drag_over may have left
            # a colliding order behind, so the section is still renumbered.
            target = item.container_id
        siblings = self._siblings(item, target)
        index = self._current_index(item) if keep_place else self._insertion_index(hit, siblings)
        final: list[Item] = siblings[:index] + [item] + siblings[index:]

        planned: list[Mutation] = []
        for position, entry in enumerate(final):
            if entry.id == item.id:
                if item.container_id != target:
                    planned.append(ItemMove(item.id, target, position))
                elif item.order != position:
                    planned.append(ItemReorder(item.id, position))
            elif entry.order != position:
                planned.append(ItemReorder(entry.id, position))

        if planned:
            logger.debug(
                "Commit task=%s section=%s index=%s mutations=%d",
                item.id,
                target,
                index,
                len(planned),
            )
        return self._apply(planned)

    def _commit_container(self, ref: EntityRef, hit: HitResult) -> list[Mutation]:
        dragged = self._store.find_container(ref.id)
        if dragged is None:
            return []

        target_id = hit.container_id
        if target_id is None or target_id == dragged.id:
            # The unassigned pseudo-section is pinned first and cannot be a reorder target.
            return []
        over = self._store.find_container(target_id)
        if over is None or over.scope_id != dragged.scope_id:
            return []

        others: list[Container] = [
            c for c in self._store.containers_of(dragged.scope_id) if c.id != dragged.id
        ]
        over_index = next(i for i, c in enumerate(others) if c.id == over.id)
        final = others[:over_index] + [dragged] + others[over_index:]

        planned: list[Mutation] = [
            ContainerReorder(c.id, position)
            for position, c in enumerate(final)
            if c.order != position
        ]
        if planned:
            logger.debug(
                "Commit section=%s before=%s mutations=%d", dragged.id, over.id, len(planned)
            )
        return self._apply(planned)

    # ---- helpers ----

    def _valid_item_target(self, item: Item, hit: HitResult) -> bool:
        if hit.scope_id != item.scope_id:
            return False
        if hit.container_id is None:
            return True
        container = self._store.find_container(hit.container_id)
        return container is not None and container.scope_id == item.scope_id

    def _siblings(self, item: Item, container_id: str | None) -> list[Item]:
        return [m for m in self._store.members_of(container_id, item.scope_id) if m.id != item.id]

    def _current_index(self, item: Item) -> int:
        members = self._store.members_of(item.container_id, item.scope_id)
        return next(i for i, m in enumerate(members) if m.id == item.id)

    @staticmethod
    def _insertion_index(hit: HitResult, siblings: list[Item]) -> int:
        if hit.kind is HitKind.OVER_ITEM:
            for i, m in enumerate(siblings):
                if m.id == hit.item_id:
                    return i
            return len(siblings)
        if hit.kind is HitKind.OVER_CONTAINER:
            return len(siblings)
        return max(0, min(hit.index, len(siblings)))

    def _apply(self, mutations: list[Mutation]) -> list[Mutation]:
        applied: list[Mutation] = []
        try:
            for m in mutations:
                if isinstance(m, ItemMove):
                    self._store.apply_item_move(m.item_id, m.container_id, m.order)
                elif isinstance(m, ItemReorder):
                    self._store.apply_item_reorder(m.item_id, m.order)
                else:
                    self._store.apply_container_reorder(m.container_id, m.order)
                applied.append(m)
        except BoardError as exc:
            logger.debug("Reconciliation aborted: %s", exc)
        return applied
