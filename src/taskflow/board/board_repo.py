# src/taskflow/board/board_repo.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .models import ChangeKind, Container, Item, StoreChange
from .store import OrderedEntityStore

logger = logging.getLogger(__name__)


class BoardRepo:
    """
    SQLite persistence for sections and tasks.

    The store stays the single source of truth while the app runs; this repo
    loads it on startup and then mirrors every StoreChange (one row write per
    change).

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "board.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            sections, tasks = self.count_containers(), self.count_items()
        except Exception:
            sections, tasks = -1, -1
        logger.info("BoardRepo ready db=%s sections=%s tasks=%s", self._db_path, sections, tasks)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS sections (
                    id TEXT PRIMARY KEY,
                    scope_id TEXT NOT NULL,
                    ord INTEGER NOT NULL DEFAULT 0,
                    name TEXT NOT NULL DEFAULT '',
                    color TEXT NOT NULL DEFAULT '#3b82f6',
                    created_at REAL NOT NULL DEFAULT 0,
                    updated_at REAL NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    scope_id TEXT NOT NULL,
                    section_id TEXT,
                    ord INTEGER NOT NULL DEFAULT 0,
                    title TEXT NOT NULL DEFAULT '',
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL DEFAULT 0,
                    updated_at REAL NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns.
            def add_cols(table: str, wanted: dict[str, str]) -> None:
                cur.execute(f"PRAGMA table_info({table})")
                cols = {row["name"] for row in cur.fetchall()}
                for name, decl in wanted.items():
                    if name in cols:
                        continue
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    logger.info("BoardRepo migration: added column %s.%s", table, name)

            add_cols(
                "sections",
                {
                    "name": "TEXT NOT NULL DEFAULT ''",
                    "color": "TEXT NOT NULL DEFAULT '#3b82f6'",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "updated_at": "REAL NOT NULL DEFAULT 0",
                },
            )
            add_cols(
                "tasks",
                {
                    "title": "TEXT NOT NULL DEFAULT ''",
                    "completed": "INTEGER NOT NULL DEFAULT 0",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "updated_at": "REAL NOT NULL DEFAULT 0",
                },
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_sections_scope ON sections(scope_id, ord)")
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_section ON tasks(scope_id, section_id, ord)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> Item:
        return Item(
            id=str(row["id"]),
            scope_id=str(row["scope_id"]),
            container_id=row["section_id"],
            order=int(row["ord"] or 0),
            title=str(row["title"] or ""),
            completed=bool(row["completed"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _row_to_container(row: sqlite3.Row) -> Container:
        return Container(
            id=str(row["id"]),
            scope_id=str(row["scope_id"]),
            order=int(row["ord"] or 0),
            name=str(row["name"] or ""),
            color=str(row["color"] or "#3b82f6"),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count_items(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def count_containers(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM sections").fetchone()
            return int(n)
        finally:
            conn.close()

    def load_items(self) -> list[Item]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM tasks ORDER BY scope_id, section_id, ord, created_at"
            ).fetchall()
            return [self._row_to_item(r) for r in rows]
        finally:
            conn.close()

    def load_containers(self) -> list[Container]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM sections ORDER BY scope_id, ord, created_at").fetchall()
            return [self._row_to_container(r) for r in rows]
        finally:
            conn.close()

    def upsert_item(self, item: Item) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, scope_id, section_id, ord, title, completed, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    scope_id = excluded.scope_id,
                    section_id = excluded.section_id,
                    ord = excluded.ord,
                    title = excluded.title,
                    completed = excluded.completed,
                    updated_at = excluded.updated_at
                """,
                (
                    item.id,
                    item.scope_id,
                    item.container_id,
                    int(item.order),
                    item.title,
                    1 if item.completed else 0,
                    float(item.created_at),
                    float(item.updated_at),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def upsert_container(self, container: Container) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO sections(id, scope_id, ord, name, color, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    scope_id = excluded.scope_id,
                    ord = excluded.ord,
                    name = excluded.name,
                    color = excluded.color,
                    updated_at = excluded.updated_at
                """,
                (
                    container.id,
                    container.scope_id,
                    int(container.order),
                    container.name,
                    container.color,
                    float(container.created_at),
                    float(container.updated_at),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_item(self, item_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM tasks WHERE id = ?", (item_id,))
            conn.commit()
        finally:
            conn.close()

    def delete_container(self, container_id: str) -> None:
        """Delete the section row only; member rows are re-saved by their own changes."""
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM sections WHERE id = ?", (container_id,))
            conn.commit()
        finally:
            conn.close()

    # ---- store wiring ----

    def handle_change(self, change: StoreChange) -> None:
        entity = change.entity
        if change.kind is ChangeKind.ITEM_REMOVED:
            self.delete_item(change.entity_id)
        elif change.kind is ChangeKind.CONTAINER_REMOVED:
            self.delete_container(change.entity_id)
        elif isinstance(entity, Item):
            self.upsert_item(entity)
        elif isinstance(entity, Container):
            self.upsert_container(entity)
        else:
            logger.warning("Unexpected store change ignored: %s %s", change.kind, change.entity_id)

    def attach(self, store: OrderedEntityStore) -> None:
        """Load persisted rows into the store and save every later change."""
        items = self.load_items()
        containers = self.load_containers()
        store.load(items, containers)
        store.subscribe(self.handle_change)
        logger.info(
            "Board loaded from %s: sections=%d tasks=%d", self._db_path, len(containers), len(items)
        )
