"""TaskMate: a local personal task manager with a kanban board and a focus timer."""

__version__ = "0.1.0"
