"""Store directory backends.

:class:`StoreDirectory`
    Abstract interface consumed by the router and the manager.

:class:`InMemoryStoreDirectory`
    Dictionary-backed; tests and development.

:class:`SQLAlchemyStoreDirectory`
    Async SQLAlchemy; PostgreSQL, SQLite, MySQL.

``RedisStoreDirectory``
    Read-through cache wrapper; import from
    :mod:`storefront_tenancy.storage.redis` (requires the ``redis`` extra).
"""

from storefront_tenancy.storage.database import SQLAlchemyStoreDirectory
from storefront_tenancy.storage.directory import StoreDirectory
from storefront_tenancy.storage.memory import InMemoryStoreDirectory

__all__ = [
    "InMemoryStoreDirectory",
    "SQLAlchemyStoreDirectory",
    "StoreDirectory",
]
