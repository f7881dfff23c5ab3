# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from taskflow.board.models import StoreChange
from taskflow.board.store import OrderedEntityStore


@dataclass(slots=True)
class RecordingListener:
    """
    Store listener used in tests.

    - Captures every StoreChange for assertions
    """

    changes: list[StoreChange] = field(default_factory=list)

    def __call__(self, change: StoreChange) -> None:
        self.changes.append(change)

    def clear(self) -> None:
        self.changes.clear()


def ids(store: OrderedEntityStore, container_id: str | None, scope_id: str = "s1") -> list[str]:
    return [it.id for it in store.members_of(container_id, scope_id)]


def orders(store: OrderedEntityStore, container_id: str | None, scope_id: str = "s1") -> list[tuple[str, int]]:
    return [(it.id, it.order) for it in store.members_of(container_id, scope_id)]
