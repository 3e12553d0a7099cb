"""Abstract document and file stores.

Workflows write through these two interfaces and compensating rollback
deletes through them.  Neither offers multi-resource transactions: each
call is independently durable, which is exactly why workflows keep a
:class:`~storefront_tenancy.rollback.ledger.WriteLedger`.

Failure contract
----------------
* A missing resource raises
  :class:`~storefront_tenancy.core.exceptions.ResourceNotFoundError`.
  Rollback treats it as "already gone".
* A transport or driver failure raises
  :class:`~storefront_tenancy.core.exceptions.BackendError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from storefront_tenancy.core.types import Document, StoredFile


class DocumentStore(ABC):
    """Collection-scoped JSON document CRUD."""

    @abstractmethod
    async def create_document(
        self,
        collection_id: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> Document:
        """Create a document in *collection_id*.

        Args:
            collection_id: Target collection.
            data: JSON-serialisable payload.
            document_id: Explicit ID; generated when omitted.

        Raises:
            ValueError: When *document_id* already exists in the collection.
            BackendError: On backend failure.
        """

    @abstractmethod
    async def get_document(self, collection_id: str, document_id: str) -> Document:
        """Fetch one document.

        Raises:
            ResourceNotFoundError: When the document does not exist.
        """

    @abstractmethod
    async def update_document(
        self,
        collection_id: str,
        document_id: str,
        data: Mapping[str, Any],
    ) -> Document:
        """Shallow-merge *data* into an existing document.

        Raises:
            ResourceNotFoundError: When the document does not exist.
        """

    @abstractmethod
    async def delete_document(self, collection_id: str, document_id: str) -> None:
        """Delete one document.

        Raises:
            ResourceNotFoundError: When the document does not exist.
            BackendError: On backend failure.
        """

    @abstractmethod
    async def list_documents(
        self,
        collection_id: str,
        filters: Mapping[str, Any] | None = None,
        limit: int = 100,
    ) -> Sequence[Document]:
        """Return documents whose top-level fields equal every pair in *filters*.

        Results are ordered by creation time, oldest first.
        """

    async def close(self) -> None:
        """Release backend resources.  No-op by default."""


class FileStore(ABC):
    """Bucket-scoped binary file storage."""

    @abstractmethod
    async def create_file(
        self,
        bucket_id: str,
        content: bytes,
        filename: str,
        content_type: str | None = None,
        file_id: str | None = None,
    ) -> StoredFile:
        """Upload *content* into *bucket_id* and return its metadata.

        Raises:
            ValueError: When *file_id* already exists in the bucket.
            BackendError: On backend failure.
        """

    @abstractmethod
    async def get_file(self, bucket_id: str, file_id: str) -> tuple[StoredFile, bytes]:
        """Return the metadata and content of one file.

        Raises:
            ResourceNotFoundError: When the file does not exist.
        """

    @abstractmethod
    async def delete_file(self, bucket_id: str, file_id: str) -> None:
        """Delete one file.

        Raises:
            ResourceNotFoundError: When the file does not exist.
            BackendError: On backend failure.
        """

    async def close(self) -> None:
        """Release backend resources.  No-op by default."""


__all__ = ["DocumentStore", "FileStore"]
