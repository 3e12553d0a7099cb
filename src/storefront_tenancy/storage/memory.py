"""In-memory store directory for testing and development.

Warning:
    All store records are **lost when the process exits**.  Use this
    directory for tests, local development, and demos.  For production use
    ``SQLAlchemyStoreDirectory``, optionally wrapped in
    ``RedisStoreDirectory``.

Design notes
------------
- ``_stores`` (id → Store) and ``_domain_map`` (domain → id) are kept in
  sync by every mutating method, so both lookups are O(1).
- ``list()`` sorts by ``created_at`` descending to mirror the SQL backend.
- Mutating methods hold ``_lock`` for their whole read-check-mutate
  sequence.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING

from storefront_tenancy.core.exceptions import StoreNotFoundError
from storefront_tenancy.storage.directory import StoreDirectory

if TYPE_CHECKING:
    from storefront_tenancy.core.types import Store, StoreStatus

logger = logging.getLogger(__name__)


class InMemoryStoreDirectory(StoreDirectory):
    """Dictionary-backed :class:`StoreDirectory`.

    Example::

        directory = InMemoryStoreDirectory()
        await directory.create(Store(id="s1", domain="acme", name="Acme"))

        await directory.find_store_by_domain("acme")    # → Store(id="s1", ...)
        await directory.find_store_by_domain("globex")  # → None
    """

    def __init__(self) -> None:
        self._stores: dict[str, Store] = {}
        self._domain_map: dict[str, str] = {}
        self._lock = asyncio.Lock()
        logger.debug("InMemoryStoreDirectory initialised")

    ###################
    # Read operations #
    ###################

    async def find_store_by_domain(self, domain: str) -> Store | None:
        store_id = self._domain_map.get(domain)
        if store_id is None:
            return None
        return self._stores[store_id]

    async def get_by_id(self, store_id: str) -> Store:
        store = self._stores.get(store_id)
        if store is None:
            raise StoreNotFoundError(identifier=store_id)
        return store

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        status: StoreStatus | None = None,
    ) -> list[Store]:
        stores = list(self._stores.values())
        if status is not None:
            stores = [s for s in stores if s.status == status]
        stores.sort(key=lambda s: s.created_at, reverse=True)
        return stores[skip : skip + limit]

    async def count(self, status: StoreStatus | None = None) -> int:
        if status is None:
            return len(self._stores)
        return sum(1 for s in self._stores.values() if s.status == status)

    ####################
    # Write operations #
    ####################

    async def create(self, store: Store) -> Store:
        """Persist a new store.

        Raises:
            ValueError: When ``id`` or ``domain`` already exists.
        """
        async with self._lock:
            if store.id in self._stores:
                msg = f"Store id={store.id!r} already exists."
                raise ValueError(msg)
            if store.domain in self._domain_map:
                msg = f"Store domain={store.domain!r} already exists."
                raise ValueError(msg)
            self._stores[store.id] = store
            self._domain_map[store.domain] = store.id
        logger.debug("Created store id=%s domain=%s", store.id, store.domain)
        return store

    async def update(self, store: Store) -> Store:
        """Replace an existing store, re-indexing its domain if it changed.

        Raises:
            StoreNotFoundError: When ``store.id`` is not in the directory.
            ValueError: When the new domain is bound to another store.
        """
        async with self._lock:
            old = self._stores.get(store.id)
            if old is None:
                raise StoreNotFoundError(identifier=store.id)
            if old.domain != store.domain:
                owner = self._domain_map.get(store.domain)
                if owner is not None and owner != store.id:
                    msg = f"Store domain={store.domain!r} already exists."
                    raise ValueError(msg)
                del self._domain_map[old.domain]
                self._domain_map[store.domain] = store.id
            updated = store.model_copy(update={"updated_at": datetime.now(UTC)})
            self._stores[store.id] = updated
        logger.debug("Updated store id=%s", store.id)
        return updated

    async def set_status(self, store_id: str, status: StoreStatus) -> Store:
        async with self._lock:
            store = self._stores.get(store_id)
            if store is None:
                raise StoreNotFoundError(identifier=store_id)
            updated = store.model_copy(update={"status": status, "updated_at": datetime.now(UTC)})
            self._stores[store_id] = updated
        logger.debug("Set store %s status → %s", store_id, status.value)
        return updated

    async def delete(self, store_id: str) -> None:
        async with self._lock:
            store = self._stores.get(store_id)
            if store is None:
                raise StoreNotFoundError(identifier=store_id)
            del self._domain_map[store.domain]
            del self._stores[store_id]
        logger.debug("Deleted store id=%s", store_id)

    ########################
    # Test / debug helpers #
    ########################

    def clear(self) -> None:
        """Remove every store.  Use in test teardown."""
        self._stores.clear()
        self._domain_map.clear()


__all__ = ["InMemoryStoreDirectory"]
