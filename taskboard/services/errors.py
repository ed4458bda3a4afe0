"""Exceptions raised by the project/task and user services."""

from __future__ import annotations


class TaskboardError(Exception):
    """Base class for service-level failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TaskboardError):
    """The addressed entity does not exist."""


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str | None):
        super().__init__(f"Project with ID '{project_id}' not found.")
        self.project_id = project_id


class TaskNotFoundError(NotFoundError):
    def __init__(self, project_id: str | None, task_id: str | None):
        super().__init__(f"Task with ID '{task_id}' not found in project '{project_id}'.")
        self.project_id = project_id
        self.task_id = task_id


class AlreadyExistsError(TaskboardError):
    """An entity with the supplied id is already present."""
