"""
Session store.

Holds the authenticated identity in memory and mirrors every change to
durable storage under USER_STORAGE_KEY. State is only read from storage when
load() is called.
"""

from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..auth.models import AuthenticatedUser, UserRole
from ..utils.logger import get_logger
from .storage import LocalStorage

logger = get_logger(__name__)

USER_STORAGE_KEY = "store.auth.user"


class SessionStore:
    """Authenticated user state for one client context."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._current_user: Optional[AuthenticatedUser] = None

    def load(self) -> Optional[AuthenticatedUser]:
        """Restore the persisted user. Unreadable data leaves the store unauthenticated."""
        self._current_user = None
        stored = self.storage.get_item(USER_STORAGE_KEY)
        if not stored:
            return None
        try:
            self._current_user = AuthenticatedUser.model_validate(json.loads(stored))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning("Failed to parse persisted user", error=str(e))
            return None
        logger.debug("Session restored", role=self._current_user.role)
        return self._current_user

    @property
    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    @property
    def role(self) -> Optional[UserRole]:
        return self._current_user.role if self._current_user else None

    @property
    def token(self) -> Optional[str]:
        return self._current_user.token if self._current_user else None

    @property
    def role_prefix(self) -> str:
        role = self.role
        if not role:
            return ""
        return f"/{role}"

    def set_user(self, user: Optional[AuthenticatedUser]) -> None:
        self._current_user = user
        if user is not None:
            self.storage.set_item(USER_STORAGE_KEY, json.dumps(user.to_storage(), ensure_ascii=False))
        else:
            self.storage.remove_item(USER_STORAGE_KEY)

    def clear(self) -> None:
        self._current_user = None
        self.storage.remove_item(USER_STORAGE_KEY)
