"""
Project and task use cases on top of the projects snapshot.

Every operation runs its own full cycle: load the whole document, work on
the in-memory list, save the whole document. Without ``serialize_writes``
two overlapping cycles race and the last save wins.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import nullcontext
from datetime import datetime, timezone
from typing import Optional

from taskboard.core.config import Settings, get_settings
from taskboard.domain.models import Project, ProjectTask
from taskboard.repositories.json_storage import ProjectStore
from taskboard.services.enrichment import enrich_projects, enrich_tasks, index_users
from taskboard.services.errors import AlreadyExistsError, ProjectNotFoundError, TaskNotFoundError
from taskboard.services.user_service import UserService

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


class ProjectService:
    """CRUD over projects and their nested tasks."""

    def __init__(
        self,
        store: ProjectStore | None = None,
        users: UserService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store or ProjectStore(self.settings.projects_path)
        self.users = users or UserService(settings=self.settings)

    # -------------------------------------- helpers --------------------------------------
    def _cycle(self):
        """Serialization point for read-modify-write, when enabled."""
        return self.store.lock if self.settings.serialize_writes else nullcontext()

    def _user_index(self):
        return index_users(self.users.list_users())

    def _enriched(self, projects: list[Project]) -> list[Project]:
        return enrich_projects(projects, self._user_index(), mode=self.settings.percent_mode)

    def _replace(self, items: list, old, new) -> None:
        """Swap ``old`` for ``new``: appended at the end, or in place when preserve_position is on."""
        if self.settings.preserve_position:
            items[items.index(old)] = new
            return
        items.remove(old)
        items.append(new)

    @staticmethod
    def _find_project(projects: list[Project], project_id: str) -> Optional[Project]:
        return next((p for p in projects if p.id == project_id), None)

    @staticmethod
    def _find_task(project: Project, task_id: str) -> Optional[ProjectTask]:
        return next((t for t in project.project_tasks if t.id == task_id), None)

    @staticmethod
    def _prepare_nested_tasks(project: Project) -> None:
        """Fill missing task ids, stamp the project id and reject repeated task ids."""
        seen: set[str] = set()
        for task in project.project_tasks:
            if _blank(task.id):
                task.id = _new_id()
            if task.id in seen:
                raise AlreadyExistsError(f"Task with ID '{task.id}' already exists.")
            seen.add(task.id)
            task.project_id = project.id

    # -------------------------------------- projects --------------------------------------
    def list_projects(self) -> list[Project]:
        return self._enriched(self.store.load())

    def list_projects_by_creator(self, created_by_id: str) -> list[Project]:
        """Projects whose creator id contains ``created_by_id`` (substring, not equality)."""
        projects = self._enriched(self.store.load())
        return [p for p in projects if p.created_by is not None and created_by_id in p.created_by]

    def get_project(self, project_id: str) -> Optional[Project]:
        project = self._find_project(self.store.load(), project_id)
        if project is None:
            logger.debug("Project %s not found", project_id)
            return None
        return self._enriched([project])[0]

    def create_project(self, project: Project) -> Project:
        if _blank(project.id):
            project.id = _new_id()
        if project.created_on is None:
            project.created_on = datetime.now(timezone.utc)
        with self._cycle():
            projects = self.store.load()
            if self._find_project(projects, project.id) is not None:
                raise AlreadyExistsError(f"Project with ID '{project.id}' already exists.")
            self._prepare_nested_tasks(project)
            projects.append(project)
            self.store.save(projects)
        logger.info("Created project %s", project.id)
        return self._enriched([project])[0]

    def update_project(self, project_id: str, project: Project) -> None:
        """Full replacement. Creator, creation time and id always come from the stored record."""
        with self._cycle():
            projects = self.store.load()
            existing = self._find_project(projects, project_id)
            if existing is None:
                raise ProjectNotFoundError(project_id)
            project.created_by = existing.created_by
            project.created_on = existing.created_on
            project.id = project_id
            self._prepare_nested_tasks(project)
            self._replace(projects, existing, project)
            self.store.save(projects)
        logger.info("Updated project %s", project_id)

    def delete_project(self, project_id: str) -> None:
        with self._cycle():
            projects = self.store.load()
            existing = self._find_project(projects, project_id)
            if existing is None:
                raise ProjectNotFoundError(project_id)
            projects.remove(existing)
            self.store.save(projects)
        logger.info("Deleted project %s", project_id)

    # -------------------------------------- tasks --------------------------------------
    def list_tasks(self, project_id: str) -> list[ProjectTask]:
        project = self.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project.project_tasks

    def get_task(self, project_id: str, task_id: str) -> Optional[ProjectTask]:
        project = self._find_project(self.store.load(), project_id)
        task = self._find_task(project, task_id) if project is not None else None
        if task is None:
            logger.debug("Task %s not found in project %s", task_id, project_id)
            return None
        return enrich_tasks([task], self._user_index(), project_id)[0]

    def add_task(self, project_id: str, task: ProjectTask) -> ProjectTask:
        with self._cycle():
            projects = self.store.load()
            project = self._find_project(projects, project_id)
            if project is None:
                raise ProjectNotFoundError(project_id)
            if _blank(task.id):
                task.id = _new_id()
            if self._find_task(project, task.id) is not None:
                raise AlreadyExistsError(f"Task with ID '{task.id}' already exists.")
            task.project_id = project_id
            project.project_tasks.append(task)
            self.store.save(projects)
        logger.info("Added task %s to project %s", task.id, project_id)
        return enrich_tasks([task], self._user_index(), project_id)[0]

    def update_task(self, project_id: str, task_id: str, task: ProjectTask) -> None:
        """Full replacement. Task id and owning project id cannot change."""
        with self._cycle():
            projects = self.store.load()
            project = self._find_project(projects, project_id)
            if project is None:
                raise ProjectNotFoundError(project_id)
            existing = self._find_task(project, task_id)
            if existing is None:
                raise TaskNotFoundError(project_id, task_id)
            task.id = task_id
            task.project_id = project_id
            self._replace(project.project_tasks, existing, task)
            self.store.save(projects)
        logger.info("Updated task %s in project %s", task_id, project_id)

    def delete_task(self, project_id: str, task_id: str) -> None:
        with self._cycle():
            projects = self.store.load()
            project = self._find_project(projects, project_id)
            if project is None:
                raise ProjectNotFoundError(project_id)
            existing = self._find_task(project, task_id)
            if existing is None:
                raise TaskNotFoundError(project_id, task_id)
            project.project_tasks.remove(existing)
            self.store.save(projects)
        logger.info("Deleted task %s from project %s", task_id, project_id)

    def list_tasks_by_assignee(self, assigned_to_id: str) -> list[ProjectTask]:
        """Scan every project for tasks assigned exactly to ``assigned_to_id``."""
        matches: list[ProjectTask] = []
        for project in self.store.load():
            for task in project.project_tasks:
                task.project_id = project.id
                if task.assigned_to == assigned_to_id:
                    matches.append(task)
        return enrich_tasks(matches, self._user_index())
