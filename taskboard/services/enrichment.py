"""
Derived, non-persisted fields for projects and tasks.

Everything here is computed from the project list and the user directory
and only mutates the in-memory records handed in. Nothing is written back.
"""

from __future__ import annotations

from typing import Iterable, Optional

from taskboard.core.config import PERCENT_MODE_EXACT, PERCENT_MODE_TRUNCATE
from taskboard.domain.models import Project, ProjectTask, TaskStatus, User

UNKNOWN_USER = "Unknown User"
NOT_ASSIGNED = "Not Assigned"


def display_name(user: User) -> str:
    return f"{user.first_name or ''} {user.last_name or ''}"


def index_users(users: Iterable[User]) -> dict[str, User]:
    """Map user id to user. The first record wins when ids repeat."""
    index: dict[str, User] = {}
    for user in users:
        if user.id is not None:
            index.setdefault(user.id, user)
    return index


def percent_complete(tasks: list[ProjectTask], mode: str = PERCENT_MODE_TRUNCATE) -> float:
    """
    Share of tasks in Done.

    The default mode divides with integer semantics before scaling, so any
    project that is not fully done reports 0. ``exact`` mode returns the real
    percentage rounded to two places.
    """
    total = len(tasks)
    completed = sum(1 for task in tasks if task.status == TaskStatus.DONE)
    if completed == 0 or total == 0:
        return 0
    if mode == PERCENT_MODE_EXACT:
        return round(completed * 100 / total, 2)
    return completed // total * 100


def enrich_tasks(
    tasks: list[ProjectTask],
    users: Iterable[User] | dict[str, User],
    project_id: Optional[str] = None,
) -> list[ProjectTask]:
    """Fill ``assignedToDisplayName`` and, when given, stamp the owning project id."""
    index = users if isinstance(users, dict) else index_users(users)
    for task in tasks:
        if project_id is not None:
            task.project_id = project_id
        user = index.get(task.assigned_to) if task.assigned_to is not None else None
        task.assigned_to_display_name = display_name(user) if user else NOT_ASSIGNED
    return tasks


def enrich_projects(
    projects: list[Project],
    users: Iterable[User] | dict[str, User],
    *,
    mode: str = PERCENT_MODE_TRUNCATE,
) -> list[Project]:
    """Fill creator display name and completion percentage, then enrich every task."""
    index = users if isinstance(users, dict) else index_users(users)
    for project in projects:
        creator = index.get(project.created_by) if project.created_by is not None else None
        project.created_by_display_name = display_name(creator) if creator else UNKNOWN_USER
        project.percent_complete = percent_complete(project.project_tasks, mode)
        enrich_tasks(project.project_tasks, index, project.id)
    return projects
