from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from taskboard.domain.models import Project, ProjectTask
from taskboard.services.errors import AlreadyExistsError, NotFoundError
from taskboard.services.project_service import ProjectService

router = APIRouter(prefix="/api/project", tags=["project"])


def _get_project_service(request: Request) -> ProjectService:
    svc = getattr(getattr(request.app, "state", None), "project_service", None)
    if not svc:
        raise RuntimeError("ProjectService not configured")
    return svc


@router.get("", response_model=list[Project])
def get_projects(request: Request):
    return _get_project_service(request).list_projects()


@router.get("/{project_id}", response_model=Project)
def get_project(project_id: str, request: Request):
    project = _get_project_service(request).get_project(project_id)
    if project is None:
        raise HTTPException(404, f"Project with ID '{project_id}' not found.")
    return project


@router.post("", response_model=Project, status_code=201)
def create_project(project: Project, request: Request, response: Response):
    try:
        saved = _get_project_service(request).create_project(project)
    except AlreadyExistsError as exc:
        raise HTTPException(400, exc.message)
    response.headers["Location"] = str(request.url_for("get_project", project_id=saved.id))
    return saved


@router.put("/{project_id}", status_code=204)
def update_project(project_id: str, project: Project, request: Request):
    try:
        _get_project_service(request).update_project(project_id, project)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    except AlreadyExistsError as exc:
        raise HTTPException(400, exc.message)
    return Response(status_code=204)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: str, request: Request):
    try:
        _get_project_service(request).delete_project(project_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return Response(status_code=204)


# -------------------------------------- tasks --------------------------------------
@router.get("/{project_id}/tasks", response_model=list[ProjectTask])
def get_project_tasks(project_id: str, request: Request):
    try:
        return _get_project_service(request).list_tasks(project_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)


@router.get("/{project_id}/tasks/{task_id}", response_model=ProjectTask)
def get_project_task(project_id: str, task_id: str, request: Request):
    task = _get_project_service(request).get_task(project_id, task_id)
    if task is None:
        raise HTTPException(404, f"Task with ID '{task_id}' not found in project '{project_id}'.")
    return task


@router.post("/{project_id}/tasks", response_model=ProjectTask, status_code=201)
def add_task_to_project(project_id: str, task: ProjectTask, request: Request, response: Response):
    try:
        saved = _get_project_service(request).add_task(project_id, task)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    except AlreadyExistsError as exc:
        raise HTTPException(400, exc.message)
    response.headers["Location"] = str(
        request.url_for("get_project_task", project_id=project_id, task_id=saved.id)
    )
    return saved


@router.put("/{project_id}/tasks/{task_id}", status_code=204)
def update_project_task(project_id: str, task_id: str, task: ProjectTask, request: Request):
    try:
        _get_project_service(request).update_task(project_id, task_id, task)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return Response(status_code=204)


@router.delete("/{project_id}/tasks/{task_id}", status_code=204)
def delete_project_task(project_id: str, task_id: str, request: Request):
    try:
        _get_project_service(request).delete_task(project_id, task_id)
    except NotFoundError as exc:
        raise HTTPException(404, exc.message)
    return Response(status_code=204)
