# src/taskflow/dnd/input_pump.py

from __future__ import annotations

"""
Input pump.

An asyncio consumer that feeds raw input events to the drag controller in
arrival order. The rendering layer (or a test) puts InputEvents on a queue;
the pump never blocks on anything but the queue itself.

Touch activation is time based, so for every touch press the pump schedules
a controller.tick() after the configured hold delay. Releasing or cancelling
the contact first drops its timer.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..board.models import EntityRef
from .controller import DragDropController
from .gesture import InputType, Point

logger = logging.getLogger(__name__)


class InputAction(StrEnum):
    PRESS = "press"
    MOVE = "move"
    RELEASE = "release"
    CANCEL = "cancel"


@dataclass(slots=True, frozen=True)
class InputEvent:
    action: InputAction
    contact_id: int
    position: Point = (0.0, 0.0)
    ref: EntityRef | None = None
    input_type: InputType = InputType.POINTER


async def run_input_pump(
        queue: asyncio.Queue[InputEvent | None],
        controller: DragDropController,
        *,
        clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    Consume input events until a None sentinel arrives.

    Handler failures are logged and the pump keeps going; a broken event
    must not kill the drag source for the rest of the session.
    To stop the pump early, cancel the coroutine/task.
    """
    loop = asyncio.get_running_loop()
    # One hold timer per touch contact; dropped when it fires or the contact ends.
    pending_ticks: dict[int, asyncio.TimerHandle] = {}

    def _tick(contact_id: int) -> None:
        pending_ticks.pop(contact_id, None)
        try:
            controller.tick(clock())
        except Exception:
            logger.exception("touch activation tick failed")

    def _drop_tick(contact_id: int) -> None:
        handle = pending_ticks.pop(contact_id, None)
        if handle is not None:
            handle.cancel()

    try:
        while True:
            event = await queue.get()
            try:
                if event is None:
                    logger.debug("Input pump stopping (sentinel).")
                    return

                now = clock()
                if event.action is InputAction.PRESS:
                    if event.ref is None:
                        logger.debug("Press without a draggable ref ignored contact=%s", event.contact_id)
                        continue
                    controller.press(
                        event.contact_id,
                        event.position,
                        event.ref,
                        input_type=event.input_type,
                        now=now,
                    )
                    if event.input_type is InputType.TOUCH:
                        _drop_tick(event.contact_id)
                        delay = controller.recognizer.touch.delay_seconds
                        pending_ticks[event.contact_id] = loop.call_later(
                            delay, _tick, event.contact_id
                        )
                elif event.action is InputAction.MOVE:
                    controller.move(event.contact_id, event.position, now=now)
                elif event.action is InputAction.RELEASE:
                    _drop_tick(event.contact_id)
                    controller.release(event.contact_id, event.position, now=now)
                else:
                    _drop_tick(event.contact_id)
                    controller.cancel(event.contact_id)
            except Exception:
                logger.exception("input event failed action=%s", getattr(event, "action", None))
            finally:
                queue.task_done()
    finally:
        for handle in pending_ticks.values():
            handle.cancel()
        pending_ticks.clear()
