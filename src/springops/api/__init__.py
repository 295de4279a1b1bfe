"""REST service layer: one module per backend domain over a shared client."""

from __future__ import annotations

from springops.api.admin import AdminApi
from springops.api.auth import AuthApi
from springops.api.client import ApiClient
from springops.api.fg_store import FgStoreApi
from springops.api.inventory import InventoryApi
from springops.api.manufacturing import ManufacturingApi
from springops.api.notifications import NotificationsApi
from springops.api.outsourcing import OutsourcingApi
from springops.api.packing_zone import PackingZoneApi
from springops.api.patrol import PatrolApi
from springops.api.process_supervisor import ProcessSupervisorApi
from springops.api.results import ApiError, ApiResult, ErrorKind
from springops.api.work_centers import WorkCentersApi


class Backend:
    """All domain APIs bound to one client (and so one session)."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthApi(client)
        self.manufacturing = ManufacturingApi(client)
        self.fg_store = FgStoreApi(client)
        self.notifications = NotificationsApi(client)
        self.outsourcing = OutsourcingApi(client)
        self.process_supervisor = ProcessSupervisorApi(client)
        self.work_centers = WorkCentersApi(client)
        self.inventory = InventoryApi(client)
        self.patrol = PatrolApi(client)
        self.packing_zone = PackingZoneApi(client)
        self.admin = AdminApi(client)

    @property
    def session(self):
        return self.client.session


__all__ = ["ApiClient", "ApiError", "ApiResult", "Backend", "ErrorKind"]
