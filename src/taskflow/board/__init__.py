"""
Board subsystem.

Components:
- models.py: data structures (Item, Container, EntityRef, mutation commands)
- store.py: in-memory ordered store, single source of truth
- board_repo.py: SQLite-backed persistence attached to the store
- layout.py: synthetic column geometry that registers drop targets
"""
