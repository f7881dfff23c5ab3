"""
Drag & drop subsystem.

Components:
- gesture.py: activation thresholds and the IDLE/ARMED/ACTIVE state machine
- hit_test.py: drop-target registry and closest-corners resolution
- reconcile.py: optimistic drag-over moves and drag-end commits
- controller.py: lifecycle callbacks wiring the pieces together
- input_pump.py: asyncio consumer of raw input events
"""
