"""
Configuration helpers for the Taskboard backend.

Everything the services need from the environment (data directory, document
names, behaviour switches, CORS origins) is read here once, so routers and
services never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PERCENT_MODE_TRUNCATE = "truncate"
PERCENT_MODE_EXACT = "exact"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    projects_file: str
    users_file: str
    percent_mode: str
    preserve_position: bool
    serialize_writes: bool
    cors_origins: tuple[str, ...]
    log_level: str

    @property
    def projects_path(self) -> Path:
        return self.data_dir / self.projects_file

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _csv(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    percent_mode = (os.getenv("TASKBOARD_PERCENT_MODE") or PERCENT_MODE_TRUNCATE).strip().lower()
    if percent_mode not in {PERCENT_MODE_TRUNCATE, PERCENT_MODE_EXACT}:
        percent_mode = PERCENT_MODE_TRUNCATE

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("TASKBOARD_DATA_DIR") or "Data"),
        projects_file=os.getenv("TASKBOARD_PROJECTS_FILE") or "projects.json",
        users_file=os.getenv("TASKBOARD_USERS_FILE") or "users.json",
        percent_mode=percent_mode,
        preserve_position=_bool(os.getenv("TASKBOARD_PRESERVE_POSITION"), False),
        serialize_writes=_bool(os.getenv("TASKBOARD_SERIALIZE_WRITES"), False),
        cors_origins=_csv(os.getenv("TASKBOARD_CORS_ORIGINS", "http://localhost:4200")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
