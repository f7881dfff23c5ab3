# src/taskflow/board/errors.py

from __future__ import annotations


class BoardError(Exception):
    """Base class for store-level failures."""


class EntityNotFoundError(BoardError, KeyError):
    """An item or section id is not (or no longer) present in the store."""

    def __init__(self, kind: str, entity_id: str | None) -> None:
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return f"{self.kind} not found: {self.entity_id}"


class ScopeMismatchError(BoardError, ValueError):
    """A section from one scope was used as a target for an item of another."""

    def __init__(self, item_scope: str, container_scope: str) -> None:
        super().__init__(
            f"section scope {container_scope!r} does not match item scope {item_scope!r}"
        )
        self.item_scope = item_scope
        self.container_scope = container_scope
