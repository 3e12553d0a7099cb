"""Document and file stores written by workflows and swept by rollback."""

from storefront_tenancy.documents.base import DocumentStore, FileStore
from storefront_tenancy.documents.database import SQLAlchemyDocumentStore, SQLAlchemyFileStore
from storefront_tenancy.documents.memory import InMemoryDocumentStore, InMemoryFileStore

__all__ = [
    "DocumentStore",
    "FileStore",
    "InMemoryDocumentStore",
    "InMemoryFileStore",
    "SQLAlchemyDocumentStore",
    "SQLAlchemyFileStore",
]
