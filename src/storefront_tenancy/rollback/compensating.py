"""Best-effort compensating rollback of a workflow's created resources.

When a multi-step workflow fails part-way, :class:`CompensatingRollback`
deletes every resource its :class:`~storefront_tenancy.rollback.ledger.WriteLedger`
recorded, newest first, so dependants (order items) go before the resources
they reference (the order).

Guarantees
----------
* Deletes run sequentially, in reverse creation order.
* A failed delete is logged and the sweep continues with the next entry.
* :meth:`CompensatingRollback.rollback` never raises.  The caller re-raises
  the error that triggered it.

Non-guarantees
--------------
The sweep is not atomic and is not retried.  If a delete fails, the resource
is left behind and reported in :attr:`RollbackReport.failed`; reconciling
such leftovers is up to the caller.

Usage::

    rollback = CompensatingRollback(documents, files)

    async with rollback.guard() as ledger:
        doc = await documents.create_document("orders", {...})
        ledger.track_document("orders", doc.id)
        ...   # any exception here deletes what was tracked, then propagates
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from storefront_tenancy.core.exceptions import ResourceNotFoundError
from storefront_tenancy.core.types import LedgerEntry, ResourceKind
from storefront_tenancy.rollback.ledger import WriteLedger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from storefront_tenancy.documents.base import DocumentStore, FileStore

logger = logging.getLogger(__name__)


class RollbackReport(BaseModel):
    """Outcome of one rollback sweep.

    Attributes:
        deleted: Entries removed by this sweep, in deletion order.
        missing: Entries that were already gone.
        failed: Entries whose delete raised; these resources may remain.
    """

    model_config = ConfigDict(frozen=True)

    deleted: tuple[LedgerEntry, ...] = ()
    missing: tuple[LedgerEntry, ...] = ()
    failed: tuple[LedgerEntry, ...] = ()

    @property
    def complete(self) -> bool:
        """``True`` when no tracked resource can remain behind."""
        return not self.failed

    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.missing) + len(self.failed)


class CompensatingRollback:
    """Reverse-order, best-effort deleter for ledger entries.

    Args:
        documents: Store whose ``delete_document`` removes document entries.
        files: Store whose ``delete_file`` removes file entries.
    """

    def __init__(self, documents: DocumentStore, files: FileStore) -> None:
        self.documents = documents
        self.files = files

    async def rollback(self, ledger: WriteLedger) -> RollbackReport:
        """Delete every tracked resource, newest first.

        Never raises.  Returns a :class:`RollbackReport` that callers may
        ignore.
        """
        entries = ledger.entries()
        if not entries:
            return RollbackReport()

        logger.info("Rolling back %d created resource(s)", len(entries))
        deleted: list[LedgerEntry] = []
        missing: list[LedgerEntry] = []
        failed: list[LedgerEntry] = []

        for entry in reversed(entries):
            try:
                await self._delete(entry)
            except ResourceNotFoundError:
                logger.info(
                    "Rollback: %s %s/%s already gone",
                    entry.kind.value,
                    entry.container_id,
                    entry.resource_id,
                )
                missing.append(entry)
            except Exception as exc:
                logger.warning(
                    "Rollback: failed to delete %s %s/%s: %s",
                    entry.kind.value,
                    entry.container_id,
                    entry.resource_id,
                    exc,
                )
                failed.append(entry)
            else:
                deleted.append(entry)

        report = RollbackReport(
            deleted=tuple(deleted),
            missing=tuple(missing),
            failed=tuple(failed),
        )
        if report.complete:
            logger.info("Rollback finished: %d deleted, %d already gone", len(deleted), len(missing))
        else:
            logger.warning(
                "Rollback incomplete: %d deleted, %d already gone, %d left behind",
                len(deleted),
                len(missing),
                len(failed),
            )
        return report

    async def _delete(self, entry: LedgerEntry) -> None:
        if entry.kind == ResourceKind.DOCUMENT:
            await self.documents.delete_document(entry.container_id, entry.resource_id)
        else:
            await self.files.delete_file(entry.container_id, entry.resource_id)

    @asynccontextmanager
    async def guard(self, ledger: WriteLedger | None = None) -> AsyncIterator[WriteLedger]:
        """Yield a ledger and roll it back if the block raises.

        The original exception is re-raised unchanged after the sweep.  On
        success the ledger is simply discarded.

        Cancellation also triggers the sweep.  It runs shielded, so a second
        cancel while deleting does not leave tracked resources behind.
        """
        ledger = ledger if ledger is not None else WriteLedger()
        try:
            yield ledger
        except BaseException:
            await asyncio.shield(self.rollback(ledger))
            raise


__all__ = ["CompensatingRollback", "RollbackReport"]
