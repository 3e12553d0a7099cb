"""In-memory document and file stores for tests and development.

Data lives in nested dictionaries keyed by collection (or bucket) and then
by resource ID, and is lost when the process exits.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING, Any

from storefront_tenancy.core.exceptions import ResourceNotFoundError
from storefront_tenancy.core.types import Document, ResourceKind, StoredFile
from storefront_tenancy.documents.base import DocumentStore, FileStore
from storefront_tenancy.utils.security import generate_resource_id

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed :class:`DocumentStore`.

    Example::

        documents = InMemoryDocumentStore()
        doc = await documents.create_document("orders", {"status": "pending"})
        await documents.delete_document("orders", doc.id)
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = asyncio.Lock()

    def _get(self, collection_id: str, document_id: str) -> Document:
        document = self._collections.get(collection_id, {}).get(document_id)
        if document is None:
            raise ResourceNotFoundError(ResourceKind.DOCUMENT, collection_id, document_id)
        return document

    async def create_document(
        self,
        collection_id: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> Document:
        document_id = document_id or generate_resource_id()
        async with self._lock:
            collection = self._collections.setdefault(collection_id, {})
            if document_id in collection:
                msg = f"Document id={document_id!r} already exists in {collection_id!r}."
                raise ValueError(msg)
            document = Document(id=document_id, collection_id=collection_id, data=dict(data))
            collection[document_id] = document
        logger.debug("Created document %s/%s", collection_id, document_id)
        return document

    async def get_document(self, collection_id: str, document_id: str) -> Document:
        return self._get(collection_id, document_id)

    async def update_document(
        self,
        collection_id: str,
        document_id: str,
        data: Mapping[str, Any],
    ) -> Document:
        async with self._lock:
            current = self._get(collection_id, document_id)
            updated = current.model_copy(
                update={"data": {**current.data, **data}, "updated_at": datetime.now(UTC)}
            )
            self._collections[collection_id][document_id] = updated
        logger.debug("Updated document %s/%s", collection_id, document_id)
        return updated

    async def delete_document(self, collection_id: str, document_id: str) -> None:
        async with self._lock:
            self._get(collection_id, document_id)
            del self._collections[collection_id][document_id]
        logger.debug("Deleted document %s/%s", collection_id, document_id)

    async def list_documents(
        self,
        collection_id: str,
        filters: Mapping[str, Any] | None = None,
        limit: int = 100,
    ) -> list[Document]:
        documents = sorted(
            self._collections.get(collection_id, {}).values(),
            key=lambda d: d.created_at,
        )
        if filters:
            documents = [
                d for d in documents if all(d.data.get(k) == v for k, v in filters.items())
            ]
        return documents[:limit]

    def count(self, collection_id: str) -> int:
        """Number of documents currently in *collection_id*."""
        return len(self._collections.get(collection_id, {}))

    def clear(self) -> None:
        """Remove every document.  Use in test teardown."""
        self._collections.clear()


class InMemoryFileStore(FileStore):
    """Dictionary-backed :class:`FileStore`."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, tuple[StoredFile, bytes]]] = {}
        self._lock = asyncio.Lock()

    def _get(self, bucket_id: str, file_id: str) -> tuple[StoredFile, bytes]:
        entry = self._buckets.get(bucket_id, {}).get(file_id)
        if entry is None:
            raise ResourceNotFoundError(ResourceKind.FILE, bucket_id, file_id)
        return entry

    async def create_file(
        self,
        bucket_id: str,
        content: bytes,
        filename: str,
        content_type: str | None = None,
        file_id: str | None = None,
    ) -> StoredFile:
        file_id = file_id or generate_resource_id()
        async with self._lock:
            bucket = self._buckets.setdefault(bucket_id, {})
            if file_id in bucket:
                msg = f"File id={file_id!r} already exists in {bucket_id!r}."
                raise ValueError(msg)
            stored = StoredFile(
                id=file_id,
                bucket_id=bucket_id,
                filename=filename,
                content_type=content_type,
                size=len(content),
            )
            bucket[file_id] = (stored, bytes(content))
        logger.debug("Stored file %s/%s (%d bytes)", bucket_id, file_id, stored.size)
        return stored

    async def get_file(self, bucket_id: str, file_id: str) -> tuple[StoredFile, bytes]:
        return self._get(bucket_id, file_id)

    async def delete_file(self, bucket_id: str, file_id: str) -> None:
        async with self._lock:
            self._get(bucket_id, file_id)
            del self._buckets[bucket_id][file_id]
        logger.debug("Deleted file %s/%s", bucket_id, file_id)

    def count(self, bucket_id: str) -> int:
        """Number of files currently in *bucket_id*."""
        return len(self._buckets.get(bucket_id, {}))

    def clear(self) -> None:
        self._buckets.clear()


__all__ = ["InMemoryDocumentStore", "InMemoryFileStore"]
