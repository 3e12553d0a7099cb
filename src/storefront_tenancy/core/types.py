"""Domain types, enumerations, and value objects for storefront-tenancy.

This module is the single source of truth for the library's domain
vocabulary.  Other modules import *from* this module, never the reverse, to
keep the dependency graph acyclic.

Design notes
------------
* Enumerations use :class:`~enum.StrEnum` so values serialise to plain
  strings in JSON, logs, and database rows.
* Every model is a Pydantic ``frozen=True`` model.  Route decisions, ledger
  entries, and stores are created once and never mutated, which makes them
  safe to share across async tasks and to compare in tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class StoreStatus(StrEnum):
    """Lifecycle status of a store.

    The store-management feature owns these transitions; routing only reads
    the value.
    """

    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class StoreType(StrEnum):
    """Kind of storefront bound to a subdomain."""

    VIRTUAL = "virtual"
    PHYSICAL = "physical"


class ResourceKind(StrEnum):
    """Kind of resource recorded in a :class:`LedgerEntry`."""

    DOCUMENT = "document"
    FILE = "file"


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


class Store(BaseModel):
    """Immutable store (tenant) record.

    To produce a modified copy use :meth:`model_copy`::

        updated = store.model_copy(update={"status": StoreStatus.SUSPENDED})

    Attributes:
        id: Opaque unique identifier.
        domain: Subdomain label the store is bound to (e.g. ``"acme"``).
        name: Display name.
        status: Current :class:`StoreStatus`.
        owner_id: ID of the owning user.
        store_type: Virtual (curating) or physical (inventory) storefront.
        metadata: Application-defined key-value store.
        created_at: Creation timestamp in UTC.
        updated_at: Last-modification timestamp in UTC.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "store-123",
                    "domain": "acme",
                    "name": "Acme Outfitters",
                    "status": "active",
                    "store_type": "virtual",
                }
            ]
        },
    )

    id: str = Field(..., min_length=1, max_length=255, description="Unique opaque store ID.")
    domain: str = Field(..., min_length=1, max_length=63, description="Bound subdomain label.")
    name: str = Field(..., min_length=1, max_length=255, description="Display name.")
    status: StoreStatus = Field(default=StoreStatus.ACTIVE, description="Lifecycle status.")
    owner_id: str | None = Field(default=None, description="Owning user ID.")
    store_type: StoreType = Field(default=StoreType.VIRTUAL, description="Storefront kind.")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Application data.")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Creation timestamp (UTC).",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Last-modification timestamp (UTC).",
    )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def is_active(self) -> bool:
        """Return ``True`` if this store's status is :attr:`StoreStatus.ACTIVE`."""
        return self.status == StoreStatus.ACTIVE


# ---------------------------------------------------------------------------
# Routing value objects
# ---------------------------------------------------------------------------


class SubdomainInfo(BaseModel):
    """Result of parsing a request hostname.

    Attributes:
        subdomain: The tenant label, or ``None`` when the host addresses the
            main site.
        is_localhost: ``True`` when the host contains ``localhost``.
        main_domain: Last two labels for public hosts; the full host in
            localhost mode.
    """

    model_config = ConfigDict(frozen=True)

    subdomain: str | None = None
    is_localhost: bool = False
    main_domain: str = ""


class RouteRequest(BaseModel):
    """The part of an inbound request the router is allowed to see.

    Attributes:
        hostname: Raw ``Host`` value (may carry a port), or ``None`` when the
            request had none.
        path: URL path, always beginning with ``/``.
        query_string: Raw query string without the leading ``?``.
    """

    model_config = ConfigDict(frozen=True)

    hostname: str | None = None
    path: str = "/"
    query_string: str = ""


class RouteDecision(BaseModel):
    """Base class of every terminal routing outcome."""

    model_config = ConfigDict(frozen=True)


class Passthrough(RouteDecision):
    """Serve the main site unmodified."""


class Rejected(RouteDecision):
    """The request addressed a reserved subdomain.

    Attributes:
        reason: Operator-facing reason.
        subdomain: The reserved label that was requested.
        status_code: HTTP status sent to the client.
        message: Client-facing message placed in the JSON body.
    """

    reason: str
    subdomain: str | None = None
    status_code: int = 403
    message: str = "This subdomain is reserved"

    @property
    def body(self) -> dict[str, str]:
        return {"message": self.message}


class RewrittenTo(RouteDecision):
    """Serve tenant content from an internally rewritten path.

    Attributes:
        path: Rewritten path, e.g. ``/store/acme/products``.
        query_string: Original query string, carried unchanged.
        subdomain: The resolved tenant label.
        store: The store the subdomain resolved to.
    """

    path: str
    query_string: str = ""
    subdomain: str
    store: Store

    @property
    def target(self) -> str:
        """Return the rewritten path including the original query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path


class NotFound(RouteDecision):
    """No store is bound to the requested subdomain.

    Attributes:
        subdomain: The label that matched no store.
        path: Route that renders the "store not found" page.
    """

    subdomain: str
    path: str = "/store-not-found"


class ErrorRedirect(RouteDecision):
    """Routing failed; send the client to the generic error page.

    Attributes:
        target: Absolute URL of the error page on the main domain.
    """

    target: str
    status_code: int = 307


# ---------------------------------------------------------------------------
# Write ledger
# ---------------------------------------------------------------------------


class LedgerEntry(BaseModel):
    """One successfully created resource, recorded for compensating rollback.

    Attributes:
        kind: Whether the resource is a document or a stored file.
        container_id: Collection ID (documents) or bucket ID (files).
        resource_id: Document or file ID.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    container_id: str = Field(..., min_length=1)
    resource_id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Documents and files
# ---------------------------------------------------------------------------


class Document(BaseModel):
    """A JSON document stored in a collection.

    Attributes:
        id: Document ID, unique within its collection.
        collection_id: Owning collection.
        data: Document payload.
        created_at: Creation timestamp (UTC).
        updated_at: Last-modification timestamp (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    collection_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StoredFile(BaseModel):
    """Metadata of a file held in a storage bucket.

    Attributes:
        id: File ID, unique within its bucket.
        bucket_id: Owning bucket.
        filename: Original file name.
        content_type: MIME type, if known.
        size: Size in bytes.
        created_at: Upload timestamp (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    bucket_id: str
    filename: str
    content_type: str | None = None
    size: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


__all__ = [
    "Document",
    "ErrorRedirect",
    "LedgerEntry",
    "NotFound",
    "Passthrough",
    "Rejected",
    "ResourceKind",
    "RewrittenTo",
    "RouteDecision",
    "RouteRequest",
    "Store",
    "StoreStatus",
    "StoreType",
    "StoredFile",
    "SubdomainInfo",
]
