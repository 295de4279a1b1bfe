"""Unread workflow notifications shown in the header bell.

The bell is driven by ``poll()`` on a fixed timer; anything that can call
``poll()`` (or feed ``apply()``) can drive it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from springops.api.results import ApiResult, ErrorKind
from springops.core.models import Notification
from springops.core.roles import get_role_config

logger = logging.getLogger(__name__)

MO_GONE_MESSAGE = "This manufacturing order is no longer available. The notification has been removed."

_MO_DETAIL_ROLES = {"manager", "production_head", "supervisor"}


@dataclass(frozen=True)
class OpenOutcome:
    route: str | None = None
    message: str | None = None
    removed: bool = False


def route_for(notification: Notification, role: str | None) -> str | None:
    """Page a notification leads to for the given role, if any."""
    cfg = get_role_config(role)
    if cfg is None:
        return None
    base = cfg["path"]
    if notification.related_mo and role in _MO_DETAIL_ROLES:
        return f"{base}/mo-detail/{notification.related_mo}"
    if notification.notification_type == "mo_approved" and role == "manager":
        return f"{base}/mo-approval"
    return None


class NotificationFeed:
    def __init__(self, api, role: str | None, *, limit: int = 10, mo_lookup=None):
        self.api = api
        self.role = role
        self.limit = int(limit)
        # Optional async callable(mo_ref) -> ApiResult used to confirm the MO still exists.
        self._mo_lookup = mo_lookup
        self.notifications: list[Notification] = []
        self.unread_count = 0
        self.loading = False
        self.last_error: ErrorKind | None = None

    def apply(self, res: ApiResult) -> None:
        if not res.ok:
            self.last_error = res.error
            if res.error == ErrorKind.RATE_LIMITED:
                logger.warning("Rate limited while fetching notifications - will retry on next poll")
            else:
                logger.error("Error fetching notifications: %s", res.message)
            return
        self.last_error = None
        rows = res.items
        self.notifications = [Notification.from_api(r) for r in rows[: self.limit]]
        self.unread_count = res.count

    async def poll(self, *, force: bool = False) -> list[Notification]:
        self.loading = True
        try:
            res = await self.api.unread(cached=not force)
        finally:
            self.loading = False
        self.apply(res)
        return self.notifications

    def _drop(self, notification_id) -> None:
        before = len(self.notifications)
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        if len(self.notifications) < before:
            self.unread_count = max(0, self.unread_count - 1)

    async def open(self, notification: Notification) -> OpenOutcome:
        res = await self.api.mark_read(notification.id)
        if not res.ok:
            logger.error("Error handling notification click: %s", res.message)
            if res.error == ErrorKind.NOT_FOUND or (notification.related_mo and notification.mo_id):
                self._drop(notification.id)
                return OpenOutcome(message=MO_GONE_MESSAGE, removed=True)
            return OpenOutcome(message=res.message)

        if notification.related_mo and self._mo_lookup is not None:
            lookup = await self._mo_lookup(notification.related_mo)
            if not lookup.ok and lookup.error == ErrorKind.NOT_FOUND:
                logger.warning("MO %s referenced by notification %s no longer exists", notification.related_mo, notification.id)
                self._drop(notification.id)
                return OpenOutcome(message=MO_GONE_MESSAGE, removed=True)

        await self.poll(force=True)
        return OpenOutcome(route=route_for(notification, self.role))

    async def dismiss(self, notification_id) -> bool:
        res = await self.api.mark_read(notification_id)
        if not res.ok:
            logger.error("Error dismissing notification: %s", res.message)
            return False
        await self.poll(force=True)
        return True

    async def mark_all_read(self) -> bool:
        res = await self.api.mark_all_read()
        if not res.ok:
            logger.error("Error marking all notifications read: %s", res.message)
            return False
        self.notifications = []
        self.unread_count = 0
        return True
