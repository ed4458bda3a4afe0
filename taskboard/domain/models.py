"""Typed records for projects, tasks and users, plus the snapshot envelopes."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ProjectStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class TaskStatus(str, Enum):
    NEW = "New"
    READY = "Ready"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


def _lower_first(key: Any) -> Any:
    if isinstance(key, str) and key:
        return key[0].lower() + key[1:]
    return key


def coerce_enum(enum_cls: type[Enum], value: Any) -> Any:
    """Accept enum names in any case and the integer ordinals older exports used."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        members = list(enum_cls)
        if 0 <= value < len(members):
            return members[value]
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
    return value


class CamelModel(BaseModel):
    """Base record: camelCase on the wire, PascalCase keys tolerated on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {_lower_first(key): value for key, value in data.items()}
        return data


class ProjectTask(CamelModel):
    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    assigned_to: Optional[str] = None
    project_id: Optional[str] = None

    # computed on read, never persisted
    assigned_to_display_name: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> Any:
        return coerce_enum(TaskStatus, value)


class Project(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    created_by: Optional[str] = None
    created_on: Optional[datetime] = None
    project_tasks: list[ProjectTask] = Field(default_factory=list)

    # computed on read, never persisted
    created_by_display_name: Optional[str] = None
    percent_complete: Optional[Union[int, float]] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> Any:
        if value is None:
            return ProjectStatus.NOT_STARTED
        return coerce_enum(ProjectStatus, value)

    @field_validator("project_tasks", mode="before")
    @classmethod
    def tasks_default(cls, value: Any) -> Any:
        return [] if value is None else value


PROJECT_DERIVED_FIELDS = {"created_by_display_name", "percent_complete"}
TASK_DERIVED_FIELDS = {"assigned_to_display_name"}


class User(CamelModel):
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class PublicUser(CamelModel):
    """User as returned over HTTP: everything except the password."""

    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(**user.model_dump(exclude={"password"}))


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProjectData(CamelModel):
    """Snapshot envelope persisted as the whole projects document."""

    export_date: Optional[datetime] = None
    project_count: Optional[int] = None
    projects: list[Project] = Field(default_factory=list)

    @field_validator("projects", mode="before")
    @classmethod
    def projects_default(cls, value: Any) -> Any:
        return [] if value is None else value


class UserData(CamelModel):
    """Snapshot envelope persisted as the whole users document."""

    export_date: Optional[datetime] = None
    user_count: Optional[int] = None
    users: list[User] = Field(default_factory=list)

    @field_validator("users", mode="before")
    @classmethod
    def users_default(cls, value: Any) -> Any:
        return [] if value is None else value
