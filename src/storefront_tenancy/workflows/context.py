"""Explicit dependency bundle passed to every workflow.

Workflows never reach for module-level clients: the document store, file
store, and configuration arrive through a :class:`WorkflowContext`, so tests
substitute in-memory fakes without touching process-wide state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storefront_tenancy.rollback.compensating import CompensatingRollback

if TYPE_CHECKING:
    from storefront_tenancy.core.config import StorefrontConfig
    from storefront_tenancy.documents.base import DocumentStore, FileStore


class WorkflowContext:
    """Stores and settings one workflow invocation writes through.

    Args:
        config: Supplies collection and bucket IDs.
        documents: Document store for creates, updates, and rollback deletes.
        files: File store for uploads and rollback deletes.
    """

    __slots__ = ("config", "documents", "files")

    def __init__(
        self,
        config: StorefrontConfig,
        documents: DocumentStore,
        files: FileStore,
    ) -> None:
        self.config = config
        self.documents = documents
        self.files = files

    def rollback(self) -> CompensatingRollback:
        """Return a rollback bound to this context's stores."""
        return CompensatingRollback(self.documents, self.files)

    def __repr__(self) -> str:
        return (
            f"WorkflowContext(documents={type(self.documents).__name__}, "
            f"files={type(self.files).__name__})"
        )


__all__ = ["WorkflowContext"]
