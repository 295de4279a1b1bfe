from __future__ import annotations

import logging

from nicegui import ui

from springops.api import ApiClient, Backend
from springops.api.session import SessionStore, browser_session
from springops.api.throttle import ThrottledGetCache
from springops.core.models import UserSession
from springops.core.roles import check_access
from springops.settings import Settings

logger = logging.getLogger(__name__)

# Shared by every browser client; cache keys carry the auth token.
_GET_CACHE = ThrottledGetCache()


def backend_for(settings: Settings, session: SessionStore | None = None) -> Backend:
    client = ApiClient(
        settings.api_base_url,
        session if session is not None else browser_session(),
        timeout=settings.request_timeout,
        cache=_GET_CACHE,
    )
    return Backend(client)


def require_role(route: str, session: UserSession) -> bool:
    """Navigate away and return False when the session may not see ``route``."""
    decision = check_access(route, session)
    if decision.allowed:
        return True
    logger.info("Access to %s denied for role %r; redirecting to %s", route, session.role, decision.redirect_to)
    ui.navigate.to(decision.redirect_to)
    return False


def redirect_if_signed_out(backend: Backend) -> bool:
    """After a 401 the session is cleared; send the user back to login."""
    if backend.session.get_token():
        return False
    ui.notify("Your session has expired. Please log in again.", type="warning")
    ui.navigate.to("/login")
    return True
