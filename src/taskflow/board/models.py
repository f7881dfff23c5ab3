# src/taskflow/board/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Original UI palette; the first entry is the default for new sections.
SECTION_COLORS: tuple[str, ...] = (
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # yellow
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#06b6d4",  # cyan
    "#f97316",  # orange
    "#84cc16",  # lime
    "#ec4899",  # pink
    "#6b7280",  # gray
)

DEFAULT_SECTION_COLOR = SECTION_COLORS[0]

SECTION_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("To Do", "#6b7280"),
    ("In Progress", "#f59e0b"),
    ("Review", "#8b5cf6"),
    ("Done", "#10b981"),
    ("Backlog", "#3b82f6"),
    ("Testing", "#ec4899"),
)


class EntityKind(StrEnum):
    ITEM = "item"
    CONTAINER = "container"


@dataclass(frozen=True, slots=True)
class Item:
    """
    A task.

    container_id=None means the task sits in the scope's unassigned
    pseudo-section. `order` is local to the (scope, container) pair.
    """

    id: str
    scope_id: str
    container_id: str | None
    order: int

    title: str = ""
    completed: bool = False
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(frozen=True, slots=True)
class Container:
    """A section of a view (board column / list group)."""

    id: str
    scope_id: str
    order: int

    name: str = ""
    color: str = DEFAULT_SECTION_COLOR
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(frozen=True, slots=True)
class EntityRef:
    """What is being dragged: either an item or a section, by id."""

    kind: EntityKind
    id: str

    @classmethod
    def item(cls, item_id: str) -> EntityRef:
        return cls(EntityKind.ITEM, item_id)

    @classmethod
    def container(cls, container_id: str) -> EntityRef:
        return cls(EntityKind.CONTAINER, container_id)

    @property
    def is_item(self) -> bool:
        return self.kind is EntityKind.ITEM

    @property
    def is_container(self) -> bool:
        return self.kind is EntityKind.CONTAINER


# ---- mutation commands emitted by the reconciliation engine ----


@dataclass(frozen=True, slots=True)
class ItemMove:
    item_id: str
    container_id: str | None
    order: int


@dataclass(frozen=True, slots=True)
class ItemReorder:
    item_id: str
    order: int


@dataclass(frozen=True, slots=True)
class ContainerReorder:
    container_id: str
    order: int


Mutation = ItemMove | ItemReorder | ContainerReorder


# ---- store change notifications ----


class ChangeKind(StrEnum):
    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_REMOVED = "item_removed"
    CONTAINER_ADDED = "container_added"
    CONTAINER_UPDATED = "container_updated"
    CONTAINER_REMOVED = "container_removed"


@dataclass(frozen=True, slots=True)
class StoreChange:
    """
    Emitted after every store mutation.

    `entity` is the new value for added/updated changes and the last known
    value for removals.
    """

    kind: ChangeKind
    entity_id: str
    entity: Item | Container
