# src/taskflow/dnd/hit_test.py

from __future__ import annotations

"""
Hit-test resolver.

The rendering layer registers drop targets (section bodies, task rows and
insertion slots) with their current bounding boxes. During a drag the
resolver picks the target under the pointer and turns it into an insertion
index against the live store.

Choosing between overlapping targets uses the closest-corners distance:
the mean distance from the pointer (or from each corner of the dragged
rect) to the four corners of the candidate. Ties prefer slots, then tasks,
then sections.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from ..board.models import EntityRef
from ..board.store import OrderedEntityStore
from .gesture import Point

logger = logging.getLogger(__name__)


class TargetKind(StrEnum):
    CONTAINER = "container"
    ITEM = "item"
    SLOT = "slot"


class HitKind(StrEnum):
    OVER_CONTAINER = "over_container"
    OVER_ITEM = "over_item"
    OVER_SLOT = "over_slot"


# Lower wins when distances are equal.
_TIE_BREAK = {TargetKind.SLOT: 0, TargetKind.ITEM: 1, TargetKind.CONTAINER: 2}


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def corners(self) -> tuple[Point, Point, Point, Point]:
        right = self.x + self.width
        bottom = self.y + self.height
        return ((self.x, self.y), (right, self.y), (self.x, bottom), (right, bottom))

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def translated(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


@dataclass(frozen=True, slots=True)
class DropTarget:
    """
    One registered drop zone.

    container_id=None addresses the scope's unassigned pseudo-section.
    """

    kind: TargetKind
    rect: Rect
    scope_id: str
    container_id: str | None
    item_id: str | None = None
    slot_index: int | None = None

    @property
    def key(self) -> str:
        if self.kind is TargetKind.ITEM:
            return f"item:{self.item_id}"
        section = self.container_id or "unsorted"
        if self.kind is TargetKind.SLOT:
            return f"{self.scope_id}:{section}:slot:{self.slot_index}"
        return f"{self.scope_id}:{section}"


@dataclass(frozen=True, slots=True)
class HitResult:
    kind: HitKind
    scope_id: str
    container_id: str | None
    index: int
    item_id: str | None = None


def closest_corners_distance(target: Rect, position: Point, active_rect: Rect | None = None) -> float:
    if active_rect is None:
        return sum(math.dist(position, c) for c in target.corners) / 4.0
    return sum(math.dist(a, b) for a, b in zip(active_rect.corners, target.corners)) / 4.0


class HitTestResolver:
    def __init__(self, store: OrderedEntityStore) -> None:
        self._store = store
        self._targets: dict[str, DropTarget] = {}

    # ---- registry ----

    def register(self, target: DropTarget) -> None:
        self._targets[target.key] = target

    def unregister(self, key: str) -> None:
        self._targets.pop(key, None)

    def clear(self) -> None:
        self._targets.clear()

    def replace_all(self, targets: Iterable[DropTarget]) -> None:
        self._targets = {t.key: t for t in targets}

    def targets(self) -> list[DropTarget]:
        return list(self._targets.values())

    def rect_of(self, ref: EntityRef) -> Rect | None:
        """Registered rect of a draggable entity: its task row or its section body."""
        if ref.is_item:
            target = self._targets.get(f"item:{ref.id}")
            return None if target is None else target.rect
        for target in self._targets.values():
            if target.kind is TargetKind.CONTAINER and target.container_id == ref.id:
                return target.rect
        return None

    # ---- resolution ----

    def resolve(self, position: Point, *, active_rect: Rect | None = None) -> HitResult | None:
        candidates: list[tuple[float, int, int, DropTarget]] = []
        for n, target in enumerate(self._targets.values()):
            if not target.rect.contains(position):
                continue
            score = closest_corners_distance(target.rect, position, active_rect)
            candidates.append((score, _TIE_BREAK[target.kind], n, target))

        candidates.sort(key=lambda c: (c[0], c[1], c[2]))
        for _score, _prio, _n, target in candidates:
            hit = self._to_hit(target)
            if hit is not None:
                return hit
        return None

    def _to_hit(self, target: DropTarget) -> HitResult | None:
        store = self._store

        if target.container_id is not None:
            container = store.find_container(target.container_id)
            if container is None or container.scope_id != target.scope_id:
                logger.debug("Stale drop target skipped: %s", target.key)
                return None

        if target.kind is TargetKind.ITEM:
            item = store.find_item(target.item_id or "")
            if item is None:
                logger.debug("Stale task target skipped: %s", target.key)
                return None
            members = store.members_of(item.container_id, item.scope_id)
            index = next(i for i, m in enumerate(members) if m.id == item.id)
            return HitResult(
                kind=HitKind.OVER_ITEM,
                scope_id=item.scope_id,
                container_id=item.container_id,
                index=index,
                item_id=item.id,
            )

        if target.kind is TargetKind.SLOT:
            count = len(store.members_of(target.container_id, target.scope_id))
            index = max(0, min(int(target.slot_index or 0), count))
            return HitResult(
                kind=HitKind.OVER_SLOT,
                scope_id=target.scope_id,
                container_id=target.container_id,
                index=index,
            )

        count = len(store.members_of(target.container_id, target.scope_id))
        return HitResult(
            kind=HitKind.OVER_CONTAINER,
            scope_id=target.scope_id,
            container_id=target.container_id,
            index=count,
        )
