# src/taskflow/board/store.py

from __future__ import annotations

"""
Ordered entity store.

Holds tasks (items) and sections (containers) keyed by id and exposes narrow
mutation methods. The store has no notion of dragging: callers compute
consistent order values and the store just records them.

Order rules kept here:
- new sections go after every existing section of the scope (max + 1)
- new tasks go at the end of their section (order = highest sibling order + 1,
  which is the sibling count while the section has no gaps)
- deleting a section moves its tasks to the unassigned pseudo-section and
  keeps their order values (gaps are fine, reconciliation closes them later)
"""

import itertools
import logging
import time
import uuid
from collections.abc import Iterable
from dataclasses import replace

from ..core.ports import MutationListener
from .errors import EntityNotFoundError, ScopeMismatchError
from .models import (
    DEFAULT_SECTION_COLOR,
    ChangeKind,
    Container,
    EntityKind,
    Item,
    StoreChange,
)

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class OrderedEntityStore:
    def __init__(
        self,
        items: Iterable[Item] = (),
        containers: Iterable[Container] = (),
    ) -> None:
        self._items: dict[str, Item] = {}
        self._containers: dict[str, Container] = {}
        # Insertion sequence: stable tie-break for equal order values.
        self._seq: dict[str, int] = {}
        self._counter = itertools.count()
        self._listeners: list[MutationListener] = []
        self._load(items, containers)

    # ---- listeners ----

    def subscribe(self, listener: MutationListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: MutationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: ChangeKind, entity: Item | Container) -> None:
        change = StoreChange(kind=kind, entity_id=entity.id, entity=entity)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Store listener failed on %s id=%s", kind.value, entity.id)

    # ---- bulk load ----

    def _load(self, items: Iterable[Item], containers: Iterable[Container]) -> None:
        for c in containers:
            self._containers[c.id] = c
            self._seq[c.id] = next(self._counter)
        for it in items:
            self._items[it.id] = it
            self._seq[it.id] = next(self._counter)

    def load(self, items: Iterable[Item], containers: Iterable[Container]) -> None:
        """Replace the whole content (no change events are emitted)."""
        self._items.clear()
        self._containers.clear()
        self._seq.clear()
        self._load(items, containers)
        logger.debug(
            "Store loaded items=%d sections=%d", len(self._items), len(self._containers)
        )

    # ---- lookups ----

    def get_item(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise EntityNotFoundError(EntityKind.ITEM, item_id)
        return item

    def get_container(self, container_id: str) -> Container:
        container = self._containers.get(container_id)
        if container is None:
            raise EntityNotFoundError(EntityKind.CONTAINER, container_id)
        return container

    def find_item(self, item_id: str) -> Item | None:
        return self._items.get(item_id)

    def find_container(self, container_id: str) -> Container | None:
        return self._containers.get(container_id)

    def items(self) -> list[Item]:
        return list(self._items.values())

    def containers(self) -> list[Container]:
        return list(self._containers.values())

    def scopes(self) -> list[str]:
        seen: dict[str, None] = {}
        for c in self._containers.values():
            seen.setdefault(c.scope_id, None)
        for it in self._items.values():
            seen.setdefault(it.scope_id, None)
        return list(seen)

    # ---- queries ----

    def members_of(self, container_id: str | None, scope_id: str) -> list[Item]:
        """Tasks of one section (or of the unassigned pseudo-section), ascending order."""
        members = [
            it
            for it in self._items.values()
            if it.container_id == container_id and it.scope_id == scope_id
        ]
        members.sort(key=lambda it: (it.order, self._seq[it.id]))
        return members

    def containers_of(self, scope_id: str) -> list[Container]:
        """Sections of a scope, ascending order. The pseudo-section is not included."""
        found = [c for c in self._containers.values() if c.scope_id == scope_id]
        found.sort(key=lambda c: (c.order, self._seq[c.id]))
        return found

    # ---- item mutations ----

    def _check_target(self, item: Item, container_id: str | None) -> None:
        if container_id is None:
            return
        container = self.get_container(container_id)
        if container.scope_id != item.scope_id:
            raise ScopeMismatchError(item.scope_id, container.scope_id)

    def apply_item_move(self, item_id: str, new_container_id: str | None, new_order: int) -> Item:
        """Set section + order of one task. Siblings are not touched."""
        item = self.get_item(item_id)
        self._check_target(item, new_container_id)
        updated = replace(
            item,
            container_id=new_container_id,
            order=int(new_order),
            updated_at=time.time(),
        )
        self._items[item_id] = updated
        logger.debug(
            "Item moved id=%s section=%s -> %s order=%s -> %s",
            item_id,
            item.container_id,
            new_container_id,
            item.order,
            new_order,
        )
        self._emit(ChangeKind.ITEM_UPDATED, updated)
        return updated

    def apply_item_reorder(self, item_id: str, new_order: int) -> Item:
        item = self.get_item(item_id)
        updated = replace(item, order=int(new_order), updated_at=time.time())
        self._items[item_id] = updated
        logger.debug("Item reordered id=%s order=%s -> %s", item_id, item.order, new_order)
        self._emit(ChangeKind.ITEM_UPDATED, updated)
        return updated

    def create_item(
        self,
        scope_id: str,
        title: str,
        *,
        container_id: str | None = None,
        item_id: str | None = None,
    ) -> Item:
        if not scope_id or not scope_id.strip():
            raise ValueError("scope_id is required")
        if not title or not title.strip():
            raise ValueError("title is required")
        if item_id is not None and item_id in self._items:
            raise ValueError(f"duplicate task id: {item_id}")

        now = time.time()
        item = Item(
            id=item_id or _new_id("task"),
            scope_id=scope_id,
            container_id=container_id,
            order=0,
            title=title.strip(),
            created_at=now,
            updated_at=now,
        )
        self._check_target(item, container_id)
        siblings = self.members_of(container_id, scope_id)
        item = replace(item, order=max((m.order for m in siblings), default=-1) + 1)

        self._items[item.id] = item
        self._seq[item.id] = next(self._counter)
        logger.debug(
            "Item created id=%s scope=%s section=%s order=%s",
            item.id,
            scope_id,
            container_id,
            item.order,
        )
        self._emit(ChangeKind.ITEM_ADDED, item)
        return item

    def delete_item(self, item_id: str) -> Item:
        """Remove a task. Remaining siblings keep their order values."""
        item = self.get_item(item_id)
        del self._items[item_id]
        self._seq.pop(item_id, None)
        logger.debug("Item deleted id=%s", item_id)
        self._emit(ChangeKind.ITEM_REMOVED, item)
        return item

    # ---- container mutations ----

    def apply_container_reorder(self, container_id: str, new_order: int) -> Container:
        container = self.get_container(container_id)
        updated = replace(container, order=int(new_order), updated_at=time.time())
        self._containers[container_id] = updated
        logger.debug(
            "Section reordered id=%s order=%s -> %s", container_id, container.order, new_order
        )
        self._emit(ChangeKind.CONTAINER_UPDATED, updated)
        return updated

    def create_container(
        self,
        scope_id: str,
        name: str,
        *,
        color: str = DEFAULT_SECTION_COLOR,
        container_id: str | None = None,
    ) -> Container:
        """
        Create a section after every existing section of the scope.

        order = max(existing orders, default 0) + 1, so existing sections never
        need a reindex.
        """
        if not scope_id or not scope_id.strip():
            raise ValueError("scope_id is required")
        if not name or not name.strip():
            raise ValueError("name is required")
        if container_id is not None and container_id in self._containers:
            raise ValueError(f"duplicate section id: {container_id}")

        max_order = max((c.order for c in self.containers_of(scope_id)), default=0)
        now = time.time()
        container = Container(
            id=container_id or _new_id("section"),
            scope_id=scope_id,
            order=max_order + 1,
            name=name.strip(),
            color=color or DEFAULT_SECTION_COLOR,
            created_at=now,
            updated_at=now,
        )
        self._containers[container.id] = container
        self._seq[container.id] = next(self._counter)
        logger.debug(
            "Section created id=%s scope=%s order=%s", container.id, scope_id, container.order
        )
        self._emit(ChangeKind.CONTAINER_ADDED, container)
        return container

    def update_container(
        self,
        container_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
    ) -> Container:
        container = self.get_container(container_id)
        if name is not None and not name.strip():
            raise ValueError("name must not be blank")
        updated = replace(
            container,
            name=container.name if name is None else name.strip(),
            color=container.color if color is None else color,
            updated_at=time.time(),
        )
        self._containers[container_id] = updated
        self._emit(ChangeKind.CONTAINER_UPDATED, updated)
        return updated

    def delete_container(self, container_id: str) -> list[Item]:
        """
        Remove a section; its tasks become unassigned with their order unchanged.

        Returns the former members (already moved).
        """
        container = self.get_container(container_id)
        members = self.members_of(container_id, container.scope_id)

        del self._containers[container_id]
        self._seq.pop(container_id, None)
        self._emit(ChangeKind.CONTAINER_REMOVED, container)

        now = time.time()
        released: list[Item] = []
        for it in members:
            updated = replace(it, container_id=None, updated_at=now)
            self._items[it.id] = updated
            released.append(updated)
            self._emit(ChangeKind.ITEM_UPDATED, updated)

        logger.debug("Section deleted id=%s released=%d", container_id, len(released))
        return released
