from __future__ import annotations

from typing import Any, MutableMapping

from springops.core.models import UserSession


TOKEN_KEY = "authToken"
REFRESH_KEY = "refreshToken"
ROLE_KEY = "userRole"
USER_KEY = "userData"


class SessionStore:
    """Auth token, role and user profile kept in a per-browser mapping.

    In the app the mapping is NiceGUI's ``app.storage.user``; tests pass a dict.
    Written at login/logout only, read on every page build.
    """

    def __init__(self, storage: MutableMapping[str, Any] | None = None):
        self._storage: MutableMapping[str, Any] = storage if storage is not None else {}

    def get_token(self) -> str | None:
        return self._storage.get(TOKEN_KEY) or None

    def get_refresh_token(self) -> str | None:
        return self._storage.get(REFRESH_KEY) or None

    def get_role(self) -> str | None:
        return self._storage.get(ROLE_KEY) or None

    def get_user(self) -> dict:
        user = self._storage.get(USER_KEY)
        return dict(user) if isinstance(user, dict) else {}

    def current(self) -> UserSession:
        return UserSession(token=self.get_token(), role=self.get_role(), user=self.get_user())

    def set_session(self, *, token: str, role: str, user: dict | None = None, refresh_token: str | None = None) -> None:
        self._storage[TOKEN_KEY] = token
        self._storage[ROLE_KEY] = role
        self._storage[USER_KEY] = dict(user or {})
        if refresh_token:
            self._storage[REFRESH_KEY] = refresh_token

    def clear_session(self) -> None:
        for key in (TOKEN_KEY, REFRESH_KEY, ROLE_KEY, USER_KEY):
            self._storage.pop(key, None)


def browser_session() -> SessionStore:
    """Session store for the current NiceGUI client (requires a page context)."""
    from nicegui import app

    return SessionStore(app.storage.user)
