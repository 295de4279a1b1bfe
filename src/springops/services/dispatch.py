from __future__ import annotations

import asyncio
import logging

from springops.api.results import ApiError, ApiResult, ErrorKind
from springops.core.dispatch import DispatchDraft, transaction_payload
from springops.core.forms import FormValidationError

logger = logging.getLogger(__name__)


class DispatchIncomplete(ApiError):
    """Some dispatch transactions were not created or not confirmed.

    Nothing is rolled back; ``unconfirmed`` lists transactions that exist on
    the backend but still need to be confirmed (or cancelled) by hand.
    """

    def __init__(self, message: str, *, created: list, unconfirmed: list, kind: ErrorKind = ErrorKind.SERVER, status=None):
        super().__init__(message, kind=kind, status=status)
        self.created = list(created)
        self.unconfirmed = list(unconfirmed)


def _transaction_id(res: ApiResult):
    data = res.data
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    if isinstance(data, dict):
        return data.get("id") or data.get("transaction_id")
    return None


async def confirm_dispatch(
    fg_store_api,
    draft: DispatchDraft,
    *,
    verified: bool,
    supervisor_id,
    confirmation_notes: str = "",
) -> list:
    """Create one dispatch transaction per line, then confirm them all.

    Returns the confirmed transaction ids. Raises ``DispatchIncomplete`` on any
    failure after at least one call was made.
    """
    if not verified:
        raise FormValidationError({"verified": "Please confirm that you have physically verified the dispatch"})
    if not draft.lines:
        raise FormValidationError({"general": "Nothing to dispatch"})

    payloads = [
        transaction_payload(draft, line, supervisor_id=supervisor_id, confirmation_notes=confirmation_notes)
        for line in draft.lines
    ]
    created_results = await asyncio.gather(*(fg_store_api.create_transaction(p) for p in payloads))

    created = []
    failures: list[ApiResult] = []
    for line, res in zip(draft.lines, created_results):
        if res.ok and _transaction_id(res) is not None:
            created.append(_transaction_id(res))
        else:
            failures.append(res)
            logger.error("Creating dispatch transaction for batch %s failed: %s", line.batch_id, res.message)

    if failures:
        if created:
            logger.warning(
                "Dispatch for MO %s partially created; unconfirmed transactions need manual reconciliation: %s",
                draft.mo.get("mo_id"),
                created,
            )
        first = failures[0]
        raise DispatchIncomplete(
            first.message or "Failed to create dispatch transaction",
            created=created,
            unconfirmed=created,
            kind=first.error or ErrorKind.SERVER,
            status=first.status,
        )

    confirm_results = await asyncio.gather(
        *(fg_store_api.confirm_transaction(tid, confirmation_notes) for tid in created)
    )
    unconfirmed = [tid for tid, res in zip(created, confirm_results) if not res.ok]
    if unconfirmed:
        logger.warning(
            "Dispatch for MO %s: %d of %d transactions not confirmed, manual reconciliation needed: %s",
            draft.mo.get("mo_id"),
            len(unconfirmed),
            len(created),
            unconfirmed,
        )
        first = next(res for res in confirm_results if not res.ok)
        raise DispatchIncomplete(
            first.message or "Failed to confirm dispatch",
            created=created,
            unconfirmed=unconfirmed,
            kind=first.error or ErrorKind.SERVER,
            status=first.status,
        )

    logger.info("Dispatched %s units for MO %s in %d transactions", draft.total_quantity, draft.mo.get("mo_id"), len(created))
    return created
