"""FastAPI application entrypoint."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.config import Settings, get_settings
from taskboard.repositories.json_storage import StorageError
from taskboard.routers import projects as projects_router
from taskboard.routers import users as users_router
from taskboard.services.project_service import ProjectService
from taskboard.services.user_service import UserService

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.warning("HTTPException at %s: %s", request.url.path, message)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error at %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request payload.", "details": jsonable_errors(exc)},
    )


async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure at %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Stored data is unreadable."})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with services wired from ``settings`` (environment by default)."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Taskboard API")

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:4200", "http://127.0.0.1:4200"})
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    user_service = UserService(settings=settings)
    app.state.user_service = user_service
    app.state.project_service = ProjectService(users=user_service, settings=settings)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)

    app.include_router(projects_router.router)
    app.include_router(users_router.router)

    @app.get("/")
    def read_root() -> dict[str, str]:
        """Basic health endpoint."""
        return {"status": "ok"}

    logger.info("Taskboard API ready (data dir %s)", settings.data_dir)
    return app


app = create_app()
