"""Abstract store directory: the repository of store (tenant) records.

``StoreDirectory`` is the collaborator the router consults once per tenant
request.  Concrete implementations (in-memory, SQLAlchemy, Redis cache
wrapper) all satisfy this interface so the router, middleware, and manager
never depend on a particular backend.

Lookup contract
---------------
The router's single lookup, :meth:`StoreDirectory.find_store_by_domain`,
distinguishes two outcomes that must never be confused:

* **no such store** → return ``None``.  The router renders "store not found".
* **backend failure** → raise :class:`StoreDirectoryError`.  The router
  redirects to the error page.

Management lookups by ID (:meth:`get_by_id`) raise
:class:`~storefront_tenancy.core.exceptions.StoreNotFoundError` instead,
matching the rest of the CRUD surface.

Extending
---------
Subclass ``StoreDirectory`` and implement every ``@abstractmethod``::

    class HttpStoreDirectory(StoreDirectory):
        async def find_store_by_domain(self, domain: str) -> Store | None: ...
        # ... implement all other abstract methods
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storefront_tenancy.core.types import Store, StoreStatus

logger = logging.getLogger(__name__)


class StoreDirectory(ABC):
    """Abstract base class for store directory backends.

    Implementations must be:

    - **Fully async**: every method is a coroutine.
    - **Concurrency-safe**: one instance is created at startup and shared
      across all requests.
    - **Honest about absence**: ``find_store_by_domain`` returns ``None`` for
      an unknown domain and raises only on genuine backend failure.
    """

    ####################
    # Routing lookup   #
    ####################

    @abstractmethod
    async def find_store_by_domain(self, domain: str) -> Store | None:
        """Return the store bound to *domain*, or ``None``.

        Args:
            domain: Subdomain label (e.g. ``"acme"``).

        Returns:
            The matching :class:`Store` or ``None`` when no store is bound.

        Raises:
            StoreDirectoryError: On transport or backend failure.
        """

    ############################
    # Management operations    #
    ############################

    @abstractmethod
    async def get_by_id(self, store_id: str) -> Store:
        """Fetch a store by its opaque ID.

        Raises:
            StoreNotFoundError: When no store with *store_id* exists.
        """

    @abstractmethod
    async def create(self, store: Store) -> Store:
        """Persist a new store record.

        Args:
            store: Fully-populated store.  ``id`` and ``domain`` must be unique.

        Returns:
            The stored record.

        Raises:
            ValueError: When the ``id`` or ``domain`` already exists.
            StoreDirectoryError: On unexpected backend failure.
        """

    @abstractmethod
    async def update(self, store: Store) -> Store:
        """Replace all mutable fields of an existing store.

        Because ``Store`` is immutable, build a modified copy first::

            updated = await directory.update(store.model_copy(update={"name": "New"}))

        Raises:
            StoreNotFoundError: When ``store.id`` does not exist.
        """

    @abstractmethod
    async def set_status(self, store_id: str, status: StoreStatus) -> Store:
        """Change the lifecycle status of a store.

        Raises:
            StoreNotFoundError: When *store_id* does not exist.
        """

    @abstractmethod
    async def delete(self, store_id: str) -> None:
        """Remove a store record.

        Raises:
            StoreNotFoundError: When *store_id* does not exist.
        """

    @abstractmethod
    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        status: StoreStatus | None = None,
    ) -> Sequence[Store]:
        """Return a page of stores, newest first.

        Args:
            skip: Number of records to skip.
            limit: Maximum number of records to return.
            status: When provided, only stores with this status are returned.
        """

    @abstractmethod
    async def count(self, status: StoreStatus | None = None) -> int:
        """Return the number of stores, optionally filtered by status."""

    async def exists(self, domain: str) -> bool:
        """Return ``True`` if a store is bound to *domain*."""
        return await self.find_store_by_domain(domain) is not None

    async def close(self) -> None:
        """Release any resources held by this directory.

        The base implementation is a no-op.  Backends holding engines or
        connection pools must override it.
        """


__all__ = ["StoreDirectory"]
