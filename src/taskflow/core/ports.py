# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps persistence/notification backends swappable and makes testing easier.
"""

from typing import Protocol

from ..board.models import Container, Item, StoreChange


class MutationListener(Protocol):
    """
    Anything that wants to observe store mutations
    (persistence, user-facing notifications, analytics...).
    """

    def __call__(self, change: StoreChange) -> None: ...


class BoardPersistence(Protocol):
    """Durable save/load of sections and tasks (SQLite in BoardRepo)."""

    def load_items(self) -> list[Item]: ...
    def load_containers(self) -> list[Container]: ...

    def handle_change(self, change: StoreChange) -> None: ...

    def close(self) -> None: ...
