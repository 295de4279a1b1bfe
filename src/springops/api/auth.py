from __future__ import annotations

import logging

from springops.api.client import ApiClient
from springops.api.results import ApiResult, ErrorKind
from springops.core.roles import is_valid_role

logger = logging.getLogger(__name__)


def _role_of(user: dict) -> str:
    primary = user.get("primary_role")
    if isinstance(primary, dict):
        return str(primary.get("name") or "unknown")
    if isinstance(primary, str) and primary:
        return primary
    return str(user.get("role") or "unknown")


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str, *, expected_role: str | None = None) -> ApiResult:
        """Log in and persist the session; returns ``{token, role, user}`` on success."""
        res = await self.client.post("/auth/login/", {"email": email, "password": password})
        if not res.ok:
            logger.info("Login failed for %s: %s", email, res.message)
            return res

        body = res.data if isinstance(res.data, dict) else {}
        payload = body.get("data") if isinstance(body.get("data"), dict) else body
        token = payload.get("access") or payload.get("token")
        user = payload.get("user") if isinstance(payload.get("user"), dict) else {}
        role = _role_of(user)

        if not token:
            return ApiResult.failure(ErrorKind.AUTH, "Login response did not include an access token", status=res.status)
        if expected_role and role != expected_role:
            return ApiResult.failure(
                ErrorKind.AUTH,
                f"Access denied. Only {expected_role}s are allowed to login here. You are logged in as a {role}.",
                status=res.status,
            )
        if not is_valid_role(role):
            logger.warning("User %s logged in with unknown role %r", email, role)

        self.client.session.set_session(token=token, role=role, user=user, refresh_token=payload.get("refresh"))
        self.client.cache.clear()
        logger.info("User %s logged in as %s", email, role)
        return ApiResult.success({"token": token, "role": role, "user": user}, status=res.status)

    async def logout(self) -> None:
        refresh = self.client.session.get_refresh_token()
        if self.client.session.get_token():
            res = await self.client.post("/auth/logout/", {"refresh": refresh} if refresh else {})
            if not res.ok:
                logger.warning("Logout request failed: %s", res.message)
        self.client.session.clear_session()
        self.client.cache.clear()
