"""Read-only access to the user directory (login, listing, lookups)."""

from __future__ import annotations

import logging
from typing import Optional

from taskboard.core.config import Settings, get_settings
from taskboard.core.security import verify_password
from taskboard.domain.models import User
from taskboard.repositories.json_storage import UserStore

logger = logging.getLogger(__name__)


class UserService:
    """Lookups over users.json. There is no mutation API."""

    def __init__(self, store: UserStore | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.store = store or UserStore(self.settings.users_path)

    def list_users(self) -> list[User]:
        """Return the whole directory, password fields included."""
        return self.store.load()

    def get_user(self, user_id: str) -> Optional[User]:
        return next((user for user in self.store.load() if user.id == user_id), None)

    def login(self, email: str | None, password: str | None) -> Optional[User]:
        if not (email or "").strip() or not (password or "").strip():
            return None
        for user in self.store.load():
            if user.email == email and verify_password(password, user.password):
                logger.info("Login succeeded for user %s", user.id)
                return user
        logger.info("Login failed for %s", email)
        return None
