"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, TaskStatus, Priority)
- task_persistence.py: JSON (de)serialization over a key-value store + export
- task_store.py: the canonical in-memory collection and its mutations
- transitions.py: status rules (list checkbox, kanban drop, timer completion)
"""
