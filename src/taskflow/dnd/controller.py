# src/taskflow/dnd/controller.py

from __future__ import annotations

"""
Drag & drop controller.

Glue between the three drag components:
- raw input goes into the GestureRecognizer,
- every resulting DragOver/DragEnd is hit-tested by the HitTestResolver,
- the ReconciliationEngine turns (dragged entity, hit) into store mutations.

The drag lifecycle callbacks (drag_start/over/end/cancel) are public so a
rendering layer that already has its own gesture source can call them
directly.

While a drag is active the dragged entity's registered rect follows the
pointer (active_rect), and hit-testing scores targets against that rect.
A drag started without a position falls back to pointer scoring.
"""

import logging
from collections.abc import Callable

from ..board.models import EntityRef, Mutation
from ..board.store import OrderedEntityStore
from .gesture import (
    DragCancel,
    DragEnd,
    DragEvent,
    DragOver,
    DragStart,
    GestureRecognizer,
    InputType,
    Point,
)
from .hit_test import HitResult, HitTestResolver, Rect
from .reconcile import ReconciliationEngine

logger = logging.getLogger(__name__)

MutationHook = Callable[[list[Mutation]], None]


class DragDropController:
    def __init__(
        self,
        store: OrderedEntityStore,
        recognizer: GestureRecognizer,
        resolver: HitTestResolver,
        engine: ReconciliationEngine,
        *,
        on_mutations: MutationHook | None = None,
    ) -> None:
        self.store = store
        self.recognizer = recognizer
        self.resolver = resolver
        self.engine = engine
        self.on_mutations = on_mutations

        self.active_ref: EntityRef | None = None
        self.last_hit: HitResult | None = None
        self.active_rect: Rect | None = None

        # Rect of the dragged entity when the drag started, and the pointer position then.
        self._start_rect: Rect | None = None
        self._anchor: Point | None = None

    # ---- drag lifecycle callbacks ----

    def drag_start(self, ref: EntityRef, position: Point | None = None) -> None:
        self.active_ref = ref
        self.last_hit = None
        self._anchor = position
        self._start_rect = self.resolver.rect_of(ref) if position is not None else None
        self.active_rect = self._start_rect
        self.engine.drag_start(ref)
        logger.debug("Drag session started ref=%s rect=%s", ref, self._start_rect)

    def drag_over(self, ref: EntityRef, position: Point) -> list[Mutation]:
        hit = self._resolve(position)
        self.last_hit = hit
        return self._notify(self.engine.drag_over(ref, hit))

    def drag_end(self, ref: EntityRef, position: Point) -> list[Mutation]:
        hit = self._resolve(position)
        self.last_hit = hit
        try:
            return self._notify(self.engine.drag_end(ref, hit))
        finally:
            self.active_ref = None
            self._reset_rect()

    def drag_cancel(self, ref: EntityRef) -> list[Mutation]:
        try:
            return self._notify(self.engine.drag_cancel(ref))
        finally:
            self.active_ref = None
            self.last_hit = None
            self._reset_rect()

    def _resolve(self, position: Point) -> HitResult | None:
        if self._start_rect is not None and self._anchor is not None:
            dx = position[0] - self._anchor[0]
            dy = position[1] - self._anchor[1]
            self.active_rect = self._start_rect.translated(dx, dy)
        return self.resolver.resolve(position, active_rect=self.active_rect)

    def _reset_rect(self) -> None:
        self.active_rect = None
        self._start_rect = None
        self._anchor = None

    def dispatch(self, event: DragEvent | None) -> list[Mutation]:
        """Route one recognizer event to the matching lifecycle callback."""
        if event is None:
            return []
        if isinstance(event, DragStart):
            self.drag_start(event.ref, event.position)
            return []
        if isinstance(event, DragOver):
            return self.drag_over(event.ref, event.position)
        if isinstance(event, DragEnd):
            return self.drag_end(event.ref, event.position)
        if isinstance(event, DragCancel):
            return self.drag_cancel(event.ref)
        raise TypeError(f"unknown drag event: {event!r}")

    # ---- raw input ----

    def press(
        self,
        contact_id: int,
        position: Point,
        ref: EntityRef,
        *,
        input_type: InputType = InputType.POINTER,
        now: float | None = None,
    ) -> None:
        self.recognizer.press(contact_id, position, ref, input_type=input_type, now=now)

    def move(self, contact_id: int, position: Point, *, now: float | None = None) -> list[Mutation]:
        return self.dispatch(self.recognizer.move(contact_id, position, now=now))

    def release(self, contact_id: int, position: Point, *, now: float | None = None) -> list[Mutation]:
        return self.dispatch(self.recognizer.release(contact_id, position, now=now))

    def cancel(self, contact_id: int | None = None) -> list[Mutation]:
        return self.dispatch(self.recognizer.cancel(contact_id))

    def tick(self, now: float | None = None) -> list[Mutation]:
        return self.dispatch(self.recognizer.tick(now))

    def _notify(self, mutations: list[Mutation]) -> list[Mutation]:
        if mutations and self.on_mutations is not None:
            try:
                self.on_mutations(mutations)
            except Exception:
                logger.exception("on_mutations hook failed")
        return mutations
