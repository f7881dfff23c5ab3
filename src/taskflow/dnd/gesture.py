# src/taskflow/dnd/gesture.py

from __future__ import annotations

"""
Gesture recognizer.

Turns raw press/move/release input into drag sessions:

    IDLE --press--> ARMED --threshold--> ACTIVE --release--> IDLE
                      |                    |
                      +--release/scroll--> IDLE (no event, taps still work)
                                           +--cancel--> IDLE (DragCancel)

Pointer contacts activate after moving more than `distance` pixels.
Touch contacts activate after being held for `delay_ms` without drifting
more than `tolerance` pixels; drifting further first is a scroll and drops
the contact.

Only one contact can be ACTIVE at a time. The recognizer never reads or
writes the store; it only carries the EntityRef captured on press.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import StrEnum

from ..board.models import EntityRef

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class InputType(StrEnum):
    POINTER = "pointer"
    TOUCH = "touch"


class GesturePhase(StrEnum):
    IDLE = "idle"
    ARMED = "armed"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class PointerActivation:
    distance: float = 8.0


@dataclass(frozen=True, slots=True)
class TouchActivation:
    delay_ms: float = 200.0
    tolerance: float = 8.0

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0


# ---- events ----


@dataclass(frozen=True, slots=True)
class DragStart:
    ref: EntityRef
    position: Point


@dataclass(frozen=True, slots=True)
class DragOver:
    ref: EntityRef
    position: Point


@dataclass(frozen=True, slots=True)
class DragEnd:
    ref: EntityRef
    position: Point


@dataclass(frozen=True, slots=True)
class DragCancel:
    ref: EntityRef


DragEvent = DragStart | DragOver | DragEnd | DragCancel


@dataclass(slots=True)
class _Contact:
    contact_id: int
    input_type: InputType
    ref: EntityRef
    start: Point
    started_at: float
    phase: GesturePhase = GesturePhase.ARMED
    last: Point | None = None


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class GestureRecognizer:
    def __init__(
        self,
        *,
        pointer: PointerActivation | None = None,
        touch: TouchActivation | None = None,
    ) -> None:
        self.pointer = pointer or PointerActivation()
        self.touch = touch or TouchActivation()
        self._contacts: dict[int, _Contact] = {}
        self._active_id: int | None = None

    # ---- accessors ----

    @property
    def is_active(self) -> bool:
        return self._active_id is not None

    @property
    def active_ref(self) -> EntityRef | None:
        if self._active_id is None:
            return None
        return self._contacts[self._active_id].ref

    def phase(self, contact_id: int) -> GesturePhase:
        contact = self._contacts.get(contact_id)
        return GesturePhase.IDLE if contact is None else contact.phase

    # ---- transitions ----

    def press(
        self,
        contact_id: int,
        position: Point,
        ref: EntityRef,
        *,
        input_type: InputType = InputType.POINTER,
        now: float | None = None,
    ) -> None:
        if self._active_id is not None:
            logger.debug("Press ignored contact=%s (contact %s is dragging)", contact_id, self._active_id)
            return
        if contact_id in self._contacts:
            return

        self._contacts[contact_id] = _Contact(
            contact_id=contact_id,
            input_type=InputType(input_type),
            ref=ref,
            start=(float(position[0]), float(position[1])),
            started_at=time.monotonic() if now is None else now,
        )

    def move(
        self,
        contact_id: int,
        position: Point,
        *,
        now: float | None = None,
    ) -> DragEvent | None:
        contact = self._contacts.get(contact_id)
        if contact is None:
            return None
        now = time.monotonic() if now is None else now
        contact.last = position

        if contact.phase is GesturePhase.ACTIVE:
            return DragOver(contact.ref, position)

        moved = _distance(contact.start, position)

        if contact.input_type is InputType.POINTER:
            if moved > self.pointer.distance:
                return self._activate(contact, position)
            return None

        # Touch: moving before the hold delay means the user is scrolling.
        held_long_enough = (now - contact.started_at) >= self.touch.delay_seconds
        if moved > self.touch.tolerance:
            if held_long_enough:
                # Delay elapsed without a timer tick; activation happened "at" the delay.
                return self._activate(contact, position)
            logger.debug("Touch contact=%s moved %.1fpx before hold; treated as scroll", contact_id, moved)
            del self._contacts[contact_id]
            return None
        if held_long_enough:
            return self._activate(contact, position)
        return None

    def tick(self, now: float | None = None) -> DragEvent | None:
        """Activate a touch contact whose hold delay has elapsed."""
        if self._active_id is not None:
            return None
        now = time.monotonic() if now is None else now
        for contact in list(self._contacts.values()):
            if contact.input_type is not InputType.TOUCH:
                continue
            if (now - contact.started_at) >= self.touch.delay_seconds:
                return self._activate(contact, contact.last or contact.start)
        return None

    def release(
        self,
        contact_id: int,
        position: Point,
        *,
        now: float | None = None,
    ) -> DragEvent | None:
        contact = self._contacts.pop(contact_id, None)
        if contact is None:
            return None
        if contact.phase is not GesturePhase.ACTIVE:
            # Tap/click: no drag happened.
            return None
        self._active_id = None
        logger.debug("Drag end ref=%s at %s", contact.ref, position)
        return DragEnd(contact.ref, position)

    def cancel(self, contact_id: int | None = None) -> DragEvent | None:
        """
        Abort the active drag (focus loss, escape key...).

        With a contact id only that contact is dropped; without one every
        tracked contact is.
        """
        if contact_id is None:
            active = self._contacts.get(self._active_id) if self._active_id is not None else None
            self._contacts.clear()
        else:
            active = self._contacts.pop(contact_id, None)
            if active is not None and active.phase is not GesturePhase.ACTIVE:
                return None

        if active is None:
            return None
        self._contacts.pop(active.contact_id, None)
        self._active_id = None
        logger.debug("Drag cancelled ref=%s", active.ref)
        return DragCancel(active.ref)

    def _activate(self, contact: _Contact, position: Point) -> DragStart:
        contact.phase = GesturePhase.ACTIVE
        self._active_id = contact.contact_id
        # Other contacts that were merely armed cannot start a second drag.
        for other_id in [cid for cid in self._contacts if cid != contact.contact_id]:
            del self._contacts[other_id]
        logger.debug(
            "Drag start ref=%s input=%s at %s", contact.ref, contact.input_type.value, position
        )
        return DragStart(contact.ref, position)
