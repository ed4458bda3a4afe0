"""
JSON snapshot persistence.

Each document (projects.json, users.json) is read and written as a whole:
load deserializes the complete envelope, save replaces the complete file.
There is no partial-file representation and no locking here; callers that
want a serialization point take ``store.lock`` around their read-modify-write
cycle.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from taskboard.domain.models import (
    PROJECT_DERIVED_FIELDS,
    TASK_DERIVED_FIELDS,
    Project,
    ProjectData,
    User,
    UserData,
)

logger = logging.getLogger(__name__)

# One lock per resolved document path, kept for the life of the process.
# Only the configured projects/users documents are ever opened, so it stays small.
_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


class StorageError(Exception):
    """Raised when a persisted document cannot be deserialized."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonDocumentStore:
    """Whole-file read/write of one JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def read_document(self) -> dict | None:
        """Return the parsed document, or None when the file is missing or blank."""
        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise StorageError(self.path, f"not valid UTF-8 ({exc})") from exc
        if not text.strip():
            return None
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageError(self.path, f"malformed JSON ({exc})") from exc
        if not isinstance(payload, dict):
            raise StorageError(self.path, "expected a JSON object at the top level")
        return payload

    def write_document(self, payload: dict) -> None:
        """Replace the file with ``payload`` (write to a temp sibling, then rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)


class ProjectStore(JsonDocumentStore):
    """Projects document: ``{exportDate, projectCount, projects[]}``."""

    def load(self) -> list[Project]:
        payload = self.read_document()
        if payload is None:
            return []
        try:
            data = ProjectData.model_validate(payload)
        except ValidationError as exc:
            raise StorageError(self.path, f"invalid projects document ({exc.error_count()} errors)") from exc
        return data.projects

    def save(self, projects: list[Project]) -> None:
        envelope = ProjectData(export_date=self._now(), project_count=len(projects), projects=projects)
        payload = envelope.model_dump(
            mode="json",
            by_alias=True,
            exclude={
                "projects": {
                    "__all__": {
                        **{name: True for name in PROJECT_DERIVED_FIELDS},
                        "project_tasks": {"__all__": TASK_DERIVED_FIELDS},
                    }
                }
            },
        )
        self.write_document(payload)
        logger.debug("Saved %s projects to %s", len(projects), self.path)


class UserStore(JsonDocumentStore):
    """Users document: ``{exportDate, userCount, users[]}``."""

    def load(self) -> list[User]:
        payload = self.read_document()
        if payload is None:
            return []
        try:
            data = UserData.model_validate(payload)
        except ValidationError as exc:
            raise StorageError(self.path, f"invalid users document ({exc.error_count()} errors)") from exc
        return data.users

    def save(self, users: list[User]) -> None:
        envelope = UserData(export_date=self._now(), user_count=len(users), users=users)
        self.write_document(envelope.model_dump(mode="json", by_alias=True))
        logger.debug("Saved %s users to %s", len(users), self.path)
