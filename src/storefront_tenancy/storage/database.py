"""SQLAlchemy async store directory.

Persists store records in a ``stores`` table through any async SQLAlchemy
driver:

+------------------+--------------------------+-------------------------------+
| Database         | Install extra            | URL scheme                    |
+==================+==========================+===============================+
| PostgreSQL       | ``[postgres]``           | ``postgresql+asyncpg://``     |
+------------------+--------------------------+-------------------------------+
| SQLite           | ``[sqlite]``             | ``sqlite+aiosqlite://``       |
+------------------+--------------------------+-------------------------------+
| MySQL / MariaDB  | ``[mysql]``              | ``mysql+aiomysql://``         |
+------------------+--------------------------+-------------------------------+

The ORM model (:class:`StoreModel`) uses only portable column types so the
same schema works on every supported dialect.

Error mapping
-------------
* ``find_store_by_domain`` returns ``None`` for an unknown domain and wraps
  every ``SQLAlchemyError`` in
  :class:`~storefront_tenancy.core.exceptions.StoreDirectoryError`, which the
  router turns into an error redirect.
* Write operations map ``IntegrityError`` to ``ValueError`` (duplicate id or
  domain) and other failures to ``StoreDirectoryError``.
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from typing import Any

from sqlalchemy import DateTime, String, Text, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from storefront_tenancy.core.exceptions import StoreDirectoryError, StoreNotFoundError
from storefront_tenancy.core.types import Store, StoreStatus, StoreType
from storefront_tenancy.storage.directory import StoreDirectory
from storefront_tenancy.utils.db_compat import build_async_engine, detect_dialect, ensure_utc

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ORM layer
# ---------------------------------------------------------------------------


class _Base(DeclarativeBase):
    """Private declarative base scoped to this module."""


class StoreModel(_Base):
    """SQLAlchemy ORM model for the ``stores`` table.

    ``metadata`` is stored as JSON-encoded ``TEXT`` for portability.
    """

    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    domain: Mapped[str] = mapped_column(
        String(63),
        unique=True,
        nullable=False,
        index=True,
        comment="Bound subdomain label.",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active", index=True)
    owner_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    store_type: Mapped[str] = mapped_column(String(50), nullable=False, default="virtual")
    metadata_json: Mapped[str] = mapped_column(
        "metadata",
        Text,
        nullable=False,
        default="{}",
        server_default="{}",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_domain(self) -> Store:
        """Convert this row to an immutable :class:`~storefront_tenancy.core.types.Store`."""
        try:
            meta: dict[str, Any] = json.loads(self.metadata_json or "{}")
        except (json.JSONDecodeError, TypeError):
            meta = {}
        return Store(
            id=self.id,
            domain=self.domain,
            name=self.name,
            status=StoreStatus(self.status),
            owner_id=self.owner_id,
            store_type=StoreType(self.store_type),
            metadata=meta,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
        )


# ---------------------------------------------------------------------------
# Directory implementation
# ---------------------------------------------------------------------------


class SQLAlchemyStoreDirectory(StoreDirectory):
    """Async SQLAlchemy-backed store directory.

    Lifecycle::

        directory = SQLAlchemyStoreDirectory("postgresql+asyncpg://user:pass@db/shop")
        await directory.initialize()   # create table if not exists
        # ... serve requests ...
        await directory.close()        # dispose pool on shutdown

    Pass *engine* to share one pool with the SQL document and file stores;
    a shared engine is not disposed by :meth:`close`.

    Args:
        database_url: Async SQLAlchemy URL.  Ignored when *engine* is given.
        engine: Existing engine to reuse.
        pool_size: Persistent connections in the pool.
        max_overflow: Extra connections under burst load.
        echo: Log every SQL statement (development only).
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("SQLAlchemyStoreDirectory requires database_url or engine.")
            engine = build_async_engine(database_url, pool_size, max_overflow, echo)
            self._owns_engine = True
        else:
            self._owns_engine = False
        self._engine: AsyncEngine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(
            "SQLAlchemyStoreDirectory ready dialect=%s",
            detect_dialect(str(self._engine.url)).value,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the ``stores`` table if it does not already exist (idempotent)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(_Base.metadata.create_all)
        logger.info("stores table ready")

    async def close(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()
        logger.info("SQLAlchemyStoreDirectory closed")

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def find_store_by_domain(self, domain: str) -> Store | None:
        try:
            async with self._session_factory() as session:
                row = await session.execute(select(StoreModel).where(StoreModel.domain == domain))
                model = row.scalar_one_or_none()
                return model.to_domain() if model is not None else None
        except SQLAlchemyError as exc:
            raise StoreDirectoryError(
                operation="find_store_by_domain",
                reason=str(exc),
                details={"domain": domain},
            ) from exc

    async def get_by_id(self, store_id: str) -> Store:
        async with self._session_factory() as session:
            row = await session.execute(select(StoreModel).where(StoreModel.id == store_id))
            model = row.scalar_one_or_none()
            if model is None:
                raise StoreNotFoundError(identifier=store_id)
            return model.to_domain()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        status: StoreStatus | None = None,
    ) -> list[Store]:
        async with self._session_factory() as session:
            query = select(StoreModel)
            if status is not None:
                query = query.where(StoreModel.status == status.value)
            query = query.order_by(StoreModel.created_at.desc()).offset(skip).limit(limit)
            result = await session.execute(query)
            return [m.to_domain() for m in result.scalars().all()]

    async def count(self, status: StoreStatus | None = None) -> int:
        async with self._session_factory() as session:
            query = select(func.count(StoreModel.id))
            if status is not None:
                query = query.where(StoreModel.status == status.value)
            result = await session.execute(query)
            return result.scalar() or 0

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create(self, store: Store) -> Store:
        async with self._session_factory() as session:
            model = StoreModel(
                id=store.id,
                domain=store.domain,
                name=store.name,
                status=store.status.value,
                owner_id=store.owner_id,
                store_type=store.store_type.value,
                metadata_json=json.dumps(store.metadata),
                created_at=store.created_at,
                updated_at=store.updated_at,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(  # noqa: B904
                    f"Store id={store.id!r} or domain={store.domain!r} already exists."
                )
            except Exception as exc:
                await session.rollback()
                raise StoreDirectoryError(operation="create", reason=str(exc)) from exc
            await session.refresh(model)
            logger.info("Created store id=%s domain=%s", store.id, store.domain)
            return model.to_domain()

    async def update(self, store: Store) -> Store:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(StoreModel).where(StoreModel.id == store.id))
                model = result.scalar_one_or_none()
                if model is None:
                    raise StoreNotFoundError(identifier=store.id)
                model.domain = store.domain
                model.name = store.name
                model.status = store.status.value
                model.owner_id = store.owner_id
                model.store_type = store.store_type.value
                model.metadata_json = json.dumps(store.metadata)
                model.updated_at = datetime.now(UTC)
                await session.commit()
                await session.refresh(model)
                logger.info("Updated store id=%s", store.id)
                return model.to_domain()
            except StoreNotFoundError:
                raise
            except IntegrityError:
                await session.rollback()
                raise ValueError(f"Store domain={store.domain!r} already exists.")  # noqa: B904
            except Exception as exc:
                await session.rollback()
                raise StoreDirectoryError(operation="update", reason=str(exc)) from exc

    async def set_status(self, store_id: str, status: StoreStatus) -> Store:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(StoreModel).where(StoreModel.id == store_id))
                model = result.scalar_one_or_none()
                if model is None:
                    raise StoreNotFoundError(identifier=store_id)
                model.status = status.value
                model.updated_at = datetime.now(UTC)
                await session.commit()
                await session.refresh(model)
                logger.info("Set store %s status → %s", store_id, status.value)
                return model.to_domain()
            except StoreNotFoundError:
                raise
            except Exception as exc:
                await session.rollback()
                raise StoreDirectoryError(operation="set_status", reason=str(exc)) from exc

    async def delete(self, store_id: str) -> None:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(StoreModel).where(StoreModel.id == store_id))
                model = result.scalar_one_or_none()
                if model is None:
                    raise StoreNotFoundError(identifier=store_id)
                await session.delete(model)
                await session.commit()
                logger.info("Deleted store id=%s", store_id)
            except StoreNotFoundError:
                raise
            except Exception as exc:
                await session.rollback()
                raise StoreDirectoryError(operation="delete", reason=str(exc)) from exc


__all__ = ["SQLAlchemyStoreDirectory", "StoreModel"]
