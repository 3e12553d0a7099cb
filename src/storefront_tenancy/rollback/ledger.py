"""Per-workflow record of successfully created resources.

A :class:`WriteLedger` is created at the start of one workflow invocation,
passed to every step, and discarded at the end.  Steps call :meth:`track`
immediately after a create call returns, and never before, so the ledger
always lists exactly what exists at the moment of failure.

The ledger is append-only and is never shared between concurrent
invocations, so it needs no locking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storefront_tenancy.core.types import LedgerEntry, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterator


class WriteLedger:
    """Ordered, append-only list of :class:`LedgerEntry` records.

    Example::

        ledger = WriteLedger()
        address = await documents.create_document("addresses", {...})
        ledger.track_document("addresses", address.id)
        order = await documents.create_document("orders", {...})
        ledger.track_document("orders", order.id)

        ledger.entries()  # (LedgerEntry(addresses/...), LedgerEntry(orders/...))
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[LedgerEntry] = []

    def track(self, kind: ResourceKind | str, container_id: str, resource_id: str) -> LedgerEntry:
        """Append a created resource and return its entry.

        Raises:
            ValueError: When *kind* is not a :class:`ResourceKind` or an ID is empty.
        """
        entry = LedgerEntry(kind=ResourceKind(kind), container_id=container_id, resource_id=resource_id)
        self._entries.append(entry)
        return entry

    def track_document(self, collection_id: str, document_id: str) -> LedgerEntry:
        return self.track(ResourceKind.DOCUMENT, collection_id, document_id)

    def track_file(self, bucket_id: str, file_id: str) -> LedgerEntry:
        return self.track(ResourceKind.FILE, bucket_id, file_id)

    def entries(self) -> tuple[LedgerEntry, ...]:
        """Return a snapshot of all entries in creation order."""
        return tuple(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"WriteLedger(entries={len(self._entries)})"


__all__ = ["WriteLedger"]
