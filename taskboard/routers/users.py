from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from taskboard.domain.models import LoginRequest, Project, ProjectTask, PublicUser
from taskboard.services.project_service import ProjectService
from taskboard.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["user"])


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def _get_project_service(request: Request) -> ProjectService:
    svc = getattr(getattr(request.app, "state", None), "project_service", None)
    if not svc:
        raise RuntimeError("ProjectService not configured")
    return svc


@router.get("", response_model=list[PublicUser])
def get_users(request: Request):
    return [PublicUser.from_user(user) for user in _get_user_service(request).list_users()]


@router.post("/login", response_model=PublicUser)
def login(payload: LoginRequest, request: Request):
    user = _get_user_service(request).login(payload.email, payload.password)
    if user is None:
        raise HTTPException(401, "Invalid email or password.")
    return PublicUser.from_user(user)


@router.get("/{user_id}", response_model=PublicUser)
def get_user(user_id: str, request: Request):
    user = _get_user_service(request).get_user(user_id)
    if user is None:
        raise HTTPException(404, f"User with ID '{user_id}' not found.")
    return PublicUser.from_user(user)


@router.get("/{user_id}/projects", response_model=list[Project])
def get_user_projects(user_id: str, request: Request):
    return _get_project_service(request).list_projects_by_creator(user_id)


@router.get("/{user_id}/tasks", response_model=list[ProjectTask])
def get_user_tasks(user_id: str, request: Request):
    return _get_project_service(request).list_tasks_by_assignee(user_id)
