"""Kanban board positioning engine with optimistic moves and real-time sync."""

__version__ = "0.1.0"
