import asyncio
import inspect
import re
import weakref

from springops.core.models import Notification
from springops.core.roles import ROLE_HIERARCHY
from springops.services.notifications import route_for
from springops.services.workflows import FinalInspectionFlow
from springops.ui import dialogs, pages, widgets


def _page_patterns() -> list[re.Pattern]:
    src = inspect.getsource(pages.register_pages)
    paths = re.findall(r'@ui\.page\("([^"]+)"\)', src)
    return [re.compile("^" + re.sub(r"\{[^}]+\}", "[^/]+", p) + "$") for p in paths]


def test_every_notification_target_is_a_registered_page():
    patterns = _page_patterns()
    assert patterns

    samples = [Notification(id=1, related_mo=7), Notification(id=2, notification_type="mo_approved")]
    targets = set()
    for role, _, _ in ROLE_HIERARCHY:
        for n in samples:
            target = route_for(n, role)
            if target is not None:
                targets.add(target)

    assert "/manager/mo-approval" in targets
    for target in targets:
        assert any(p.match(target) for p in patterns), target


def test_skip_rework_clears_flow_and_refetches():
    class FakeDialog:
        closed = False

        def close(self):
            self.closed = True

    refreshed = []

    async def on_done():
        refreshed.append(True)

    flow = FinalInspectionFlow(api=None, pending_completion={"id": 5, "rework_quantity": 4}, pending_batch={"id": 3})
    assert flow.awaiting_redirect
    dialog = FakeDialog()
    asyncio.run(dialogs.skip_rework(flow, dialog, on_done=on_done))

    assert dialog.closed
    assert refreshed == [True]
    assert not flow.awaiting_redirect


def test_theme_is_applied_once_per_client(monkeypatch):
    class FakeClient:
        pass

    class FakeContext:
        client = None

    applied = []
    ctx = FakeContext()
    monkeypatch.setattr(widgets, "context", ctx)
    monkeypatch.setattr(widgets, "apply_theme", lambda: applied.append(ctx.client))
    monkeypatch.setattr(widgets, "_themed_clients", weakref.WeakSet())

    first, second = FakeClient(), FakeClient()
    ctx.client = first
    widgets.ensure_theme()
    widgets.ensure_theme()
    ctx.client = second
    widgets.ensure_theme()

    assert applied == [first, second]
