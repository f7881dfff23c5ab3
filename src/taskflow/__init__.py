"""
taskflow: ordering and drag/drop reconciliation core of a single-user task board.

Components:
- board/store.py: ordered store of tasks and sections
- board/board_repo.py: SQLite persistence mirrored from store changes
- dnd/gesture.py: press/move/release -> drag sessions
- dnd/hit_test.py: pointer position -> drop target + insertion index
- dnd/reconcile.py: drag events -> minimal store mutations
- dnd/controller.py: wires the three together
"""

__version__ = "0.1.0"
