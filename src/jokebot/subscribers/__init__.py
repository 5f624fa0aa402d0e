"""
Subscriber subsystem.

Components:
- models.py: Subscriber entity and its pure state transitions
- store.py: SQLite-backed storage + query/update helpers
- service.py: subscription mutations used by the command surface
"""
