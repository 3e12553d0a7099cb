"""Redis read-through cache in front of a store directory.

:class:`RedisStoreDirectory` wraps any
:class:`~storefront_tenancy.storage.directory.StoreDirectory` and caches the
router's domain lookups.

Cache architecture
------------------
::

    TenantRouter.route(acme.example.com)
        │
        ▼
    RedisStoreDirectory.find_store_by_domain("acme")
        │
        ├── Redis HIT   ──→ deserialise → return Store
        │
        ├── Redis DOWN  ──→ WARNING, fall through to primary
        │
        └── Redis MISS
                │
                ▼
            primary.find_store_by_domain("acme")
                │
                ├── Store → SETEX {prefix}:domain:acme → return Store
                └── None  → return None   (never cached)

Only positive results are cached, so a store registered a moment ago is
visible on the very next request.  Every write goes to the primary first and
then deletes the affected domain keys; Redis is never the source of truth.

Installation
------------
Requires the ``redis`` extra::

    pip install storefront-tenancy[redis]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from storefront_tenancy.core.types import Store
from storefront_tenancy.storage.directory import StoreDirectory

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storefront_tenancy.core.types import StoreStatus

logger = logging.getLogger(__name__)


def _require_redis() -> Any:
    """Import ``redis.asyncio`` and raise ``ImportError`` with an actionable message on miss."""
    try:
        from redis import asyncio as aioredis  # noqa: PLC0415

    except ImportError as exc:
        raise ImportError(
            "RedisStoreDirectory requires the 'redis' extra:\n"
            "    pip install storefront-tenancy[redis]"
        ) from exc
    else:
        return aioredis


class RedisStoreDirectory(StoreDirectory):
    """Redis read-through cache on top of a primary :class:`StoreDirectory`.

    Args:
        redis_url: Redis connection URL (e.g. ``redis://localhost:6379/0``).
        primary: Backing directory for cold reads and every write.
        ttl: Cache TTL in seconds.
        key_prefix: Prefix applied to all Redis keys.

    Example::

        primary = SQLAlchemyStoreDirectory("postgresql+asyncpg://user:pass@db/shop")
        directory = RedisStoreDirectory("redis://localhost:6379/0", primary, ttl=300)
        await directory.initialize()
    """

    def __init__(
        self,
        redis_url: str,
        primary: StoreDirectory,
        ttl: int = 300,
        key_prefix: str = "storefront:store",
    ) -> None:
        aioredis = _require_redis()
        self._primary = primary
        self._ttl = ttl
        self._prefix = key_prefix
        self._redis: Any = aioredis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=False,
        )
        logger.info("RedisStoreDirectory initialised ttl=%ds prefix=%s", ttl, key_prefix)

    @property
    def primary(self) -> StoreDirectory:
        return self._primary

    ###########################################
    # Lifecycle, delegated to the primary     #
    ###########################################

    async def initialize(self) -> None:
        """Initialise the primary directory if it supports it."""
        if hasattr(self._primary, "initialize"):
            await self._primary.initialize()

    async def close(self) -> None:
        """Close the Redis connection pool and the primary directory."""
        await self._redis.aclose()
        await self._primary.close()
        logger.info("RedisStoreDirectory closed")

    ####################
    # Internal helpers #
    ####################

    def _domain_key(self, domain: str) -> str:
        return f"{self._prefix}:domain:{domain}"

    async def _cache_get(self, domain: str) -> Store | None:
        """Return the cached store for *domain*, or ``None`` on miss or failure."""
        try:
            cached = await self._redis.get(self._domain_key(domain))
        except Exception as exc:
            logger.warning("Cache read failed for domain=%s: %s; using primary directory", domain, exc)
            return None
        if cached is None:
            return None
        try:
            return Store.model_validate_json(cached)
        except ValueError:
            logger.warning("Discarding corrupt cache entry for domain=%s", domain)
            return None

    async def _cache_set(self, store: Store) -> None:
        try:
            await self._redis.setex(
                self._domain_key(store.domain),
                self._ttl,
                store.model_dump_json().encode("utf-8"),
            )
            logger.debug("Cached store domain=%s ttl=%ds", store.domain, self._ttl)
        except Exception as exc:
            logger.warning("Cache write failed for domain=%s: %s", store.domain, exc)

    async def _cache_invalidate(self, *domains: str) -> None:
        keys = [self._domain_key(d) for d in dict.fromkeys(domains)]
        try:
            await self._redis.delete(*keys)
            logger.debug("Invalidated cache for domains=%s", ", ".join(domains))
        except Exception as exc:
            logger.warning(
                "Cache invalidation failed for domains=%s: %s; entries expire after %ds",
                ", ".join(domains),
                exc,
                self._ttl,
            )

    ###################
    # Read operations #
    ###################

    async def find_store_by_domain(self, domain: str) -> Store | None:
        cached = await self._cache_get(domain)
        if cached is not None:
            logger.debug("Cache hit domain=%s", domain)
            return cached
        store = await self._primary.find_store_by_domain(domain)
        if store is not None:
            await self._cache_set(store)
        return store

    async def get_by_id(self, store_id: str) -> Store:
        return await self._primary.get_by_id(store_id)

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        status: StoreStatus | None = None,
    ) -> Sequence[Store]:
        return await self._primary.list(skip=skip, limit=limit, status=status)

    async def count(self, status: StoreStatus | None = None) -> int:
        return await self._primary.count(status=status)

    ####################
    # Write operations #
    ####################

    async def create(self, store: Store) -> Store:
        created = await self._primary.create(store)
        await self._cache_invalidate(created.domain)
        return created

    async def update(self, store: Store) -> Store:
        old = await self._primary.get_by_id(store.id)
        updated = await self._primary.update(store)
        await self._cache_invalidate(old.domain, updated.domain)
        return updated

    async def set_status(self, store_id: str, status: StoreStatus) -> Store:
        updated = await self._primary.set_status(store_id, status)
        await self._cache_invalidate(updated.domain)
        return updated

    async def delete(self, store_id: str) -> None:
        old = await self._primary.get_by_id(store_id)
        await self._primary.delete(store_id)
        await self._cache_invalidate(old.domain)


__all__ = ["RedisStoreDirectory"]
