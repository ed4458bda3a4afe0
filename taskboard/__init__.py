"""Taskboard: projects, nested tasks and a user directory over JSON snapshots."""

__version__ = "0.1.0"
