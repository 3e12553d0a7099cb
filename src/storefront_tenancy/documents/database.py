"""SQLAlchemy async document and file stores.

Two portable tables:

``documents``
    ``(collection_id, id)`` primary key, JSON payload in ``TEXT``.

``files``
    ``(bucket_id, id)`` primary key, metadata columns plus a ``LargeBinary``
    content column.

Both stores accept either a URL or an existing
:class:`~sqlalchemy.ext.asyncio.AsyncEngine`, so they can share one pool
with :class:`~storefront_tenancy.storage.database.SQLAlchemyStoreDirectory`.

Every driver error surfaces as
:class:`~storefront_tenancy.core.exceptions.BackendError`; an absent row
surfaces as :class:`~storefront_tenancy.core.exceptions.ResourceNotFoundError`.
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Integer, LargeBinary, String, Text, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from storefront_tenancy.core.exceptions import BackendError, ResourceNotFoundError
from storefront_tenancy.core.types import Document, ResourceKind, StoredFile
from storefront_tenancy.documents.base import DocumentStore, FileStore
from storefront_tenancy.utils.db_compat import build_async_engine, ensure_utc
from storefront_tenancy.utils.security import generate_resource_id

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ORM layer
# ---------------------------------------------------------------------------


class _Base(DeclarativeBase):
    """Private declarative base scoped to this module."""


class DocumentModel(_Base):
    """ORM model for the ``documents`` table."""

    __tablename__ = "documents"

    collection_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    data_json: Mapped[str] = mapped_column("data", Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def to_domain(self) -> Document:
        try:
            data: dict[str, Any] = json.loads(self.data_json or "{}")
        except (json.JSONDecodeError, TypeError):
            data = {}
        return Document(
            id=self.id,
            collection_id=self.collection_id,
            data=data,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
        )


class FileModel(_Base):
    """ORM model for the ``files`` table."""

    __tablename__ = "files"

    bucket_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def to_domain(self) -> StoredFile:
        return StoredFile(
            id=self.id,
            bucket_id=self.bucket_id,
            filename=self.filename,
            content_type=self.content_type,
            size=self.size,
            created_at=ensure_utc(self.created_at),
        )


# ---------------------------------------------------------------------------
# Shared engine handling
# ---------------------------------------------------------------------------


class _SQLAlchemyBackend:
    """Engine and session-factory plumbing shared by both stores."""

    def __init__(
        self,
        database_url: str | None,
        engine: AsyncEngine | None,
        pool_size: int,
        max_overflow: int,
        echo: bool,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ValueError(f"{type(self).__name__} requires database_url or engine.")
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

    async def initialize(self) -> None:
        """Create the ``documents`` and ``files`` tables if missing (idempotent)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(_Base.metadata.create_all)
        logger.info("%s tables ready", type(self).__name__)

    async def close(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class SQLAlchemyDocumentStore(_SQLAlchemyBackend, DocumentStore):
    """Async SQLAlchemy :class:`DocumentStore`.

    Args:
        database_url: Async SQLAlchemy URL.  Ignored when *engine* is given.
        engine: Existing engine to share.  Not disposed by :meth:`close`.
        pool_size: Persistent connections in the pool.
        max_overflow: Extra connections under burst load.
        echo: Log every SQL statement.
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
        super().__init__(database_url, engine, pool_size, max_overflow, echo)

    async def _load(self, session: AsyncSession, collection_id: str, document_id: str) -> DocumentModel:
        model = await session.get(DocumentModel, (collection_id, document_id))
        if model is None:
            raise ResourceNotFoundError(ResourceKind.DOCUMENT, collection_id, document_id)
        return model

    async def create_document(
        self,
        collection_id: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> Document:
        document_id = document_id or generate_resource_id()
        now = datetime.now(UTC)
        async with self._session_factory() as session:
            model = DocumentModel(
                collection_id=collection_id,
                id=document_id,
                data_json=json.dumps(dict(data)),
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(  # noqa: B904
                    f"Document id={document_id!r} already exists in {collection_id!r}."
                )
            except SQLAlchemyError as exc:
                await session.rollback()
                raise BackendError(operation="create_document", reason=str(exc)) from exc
            logger.debug("Created document %s/%s", collection_id, document_id)
            return model.to_domain()

    async def get_document(self, collection_id: str, document_id: str) -> Document:
        try:
            async with self._session_factory() as session:
                return (await self._load(session, collection_id, document_id)).to_domain()
        except SQLAlchemyError as exc:
            raise BackendError(operation="get_document", reason=str(exc)) from exc

    async def update_document(
        self,
        collection_id: str,
        document_id: str,
        data: Mapping[str, Any],
    ) -> Document:
        async with self._session_factory() as session:
            try:
                model = await self._load(session, collection_id, document_id)
                current = json.loads(model.data_json or "{}")
                model.data_json = json.dumps({**current, **data})
                model.updated_at = datetime.now(UTC)
                await session.commit()
                logger.debug("Updated document %s/%s", collection_id, document_id)
                return model.to_domain()
            except ResourceNotFoundError:
                raise
            except SQLAlchemyError as exc:
                await session.rollback()
                raise BackendError(operation="update_document", reason=str(exc)) from exc

    async def delete_document(self, collection_id: str, document_id: str) -> None:
        async with self._session_factory() as session:
            try:
                model = await self._load(session, collection_id, document_id)
                await session.delete(model)
                await session.commit()
                logger.debug("Deleted document %s/%s", collection_id, document_id)
            except ResourceNotFoundError:
                raise
            except SQLAlchemyError as exc:
                await session.rollback()
                raise BackendError(operation="delete_document", reason=str(exc)) from exc

    async def list_documents(
        self,
        collection_id: str,
        filters: Mapping[str, Any] | None = None,
        limit: int = 100,
    ) -> list[Document]:
        query = (
            select(DocumentModel)
            .where(DocumentModel.collection_id == collection_id)
            .order_by(DocumentModel.created_at.asc())
        )
        # Payloads are opaque TEXT, so filters are applied after loading.
        if not filters:
            query = query.limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                documents = [m.to_domain() for m in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise BackendError(operation="list_documents", reason=str(exc)) from exc
        if filters:
            documents = [
                d for d in documents if all(d.data.get(k) == v for k, v in filters.items())
            ]
        return documents[:limit]


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class SQLAlchemyFileStore(_SQLAlchemyBackend, FileStore):
    """Async SQLAlchemy :class:`FileStore` keeping content in the database.

    Suitable for icons and small attachments.  Takes the same arguments as
    :class:`SQLAlchemyDocumentStore`.
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
        super().__init__(database_url, engine, pool_size, max_overflow, echo)

    async def create_file(
        self,
        bucket_id: str,
        content: bytes,
        filename: str,
        content_type: str | None = None,
        file_id: str | None = None,
    ) -> StoredFile:
        file_id = file_id or generate_resource_id()
        async with self._session_factory() as session:
            model = FileModel(
                bucket_id=bucket_id,
                id=file_id,
                filename=filename,
                content_type=content_type,
                size=len(content),
                content=bytes(content),
                created_at=datetime.now(UTC),
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(f"File id={file_id!r} already exists in {bucket_id!r}.")  # noqa: B904
            except SQLAlchemyError as exc:
                await session.rollback()
                raise BackendError(operation="create_file", reason=str(exc)) from exc
            logger.debug("Stored file %s/%s (%d bytes)", bucket_id, file_id, model.size)
            return model.to_domain()

    async def get_file(self, bucket_id: str, file_id: str) -> tuple[StoredFile, bytes]:
        try:
            async with self._session_factory() as session:
                model = await session.get(FileModel, (bucket_id, file_id))
                if model is None:
                    raise ResourceNotFoundError(ResourceKind.FILE, bucket_id, file_id)
                return model.to_domain(), model.content
        except SQLAlchemyError as exc:
            raise BackendError(operation="get_file", reason=str(exc)) from exc

    async def delete_file(self, bucket_id: str, file_id: str) -> None:
        async with self._session_factory() as session:
            try:
                model = await session.get(FileModel, (bucket_id, file_id))
                if model is None:
                    raise ResourceNotFoundError(ResourceKind.FILE, bucket_id, file_id)
                await session.delete(model)
                await session.commit()
                logger.debug("Deleted file %s/%s", bucket_id, file_id)
            except ResourceNotFoundError:
                raise
            except SQLAlchemyError as exc:
                await session.rollback()
                raise BackendError(operation="delete_file", reason=str(exc)) from exc


__all__ = [
    "DocumentModel",
    "FileModel",
    "SQLAlchemyDocumentStore",
    "SQLAlchemyFileStore",
]
