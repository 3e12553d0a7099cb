"""storefront-tenancy: subdomain-routed multi-store tenancy for FastAPI.

The package serves many stores from one code base.  A request to
``acme.example.com/products`` is internally rewritten to
``/store/acme/products`` once ``acme`` resolves to a registered store;
reserved labels get a ``403``, unknown labels a dedicated "store not found"
page, and any routing failure a redirect to the main domain's error page.

Multi-step writes (placing an order, creating a category) run under a
compensating rollback: every created document or file is tracked and, if a
later step fails, deleted again newest first.

Quick start
-----------
.. code-block:: python

    from fastapi import FastAPI
    from storefront_tenancy import (
        StorefrontConfig,
        StorefrontManager,
        StorefrontRoutingMiddleware,
    )

    config = StorefrontConfig(
        main_domain="example.com",
        database_url="sqlite+aiosqlite:///./shop.db",
    )
    manager = StorefrontManager.from_config(config)

    app = FastAPI(lifespan=manager.create_lifespan())
    app.add_middleware(StorefrontRoutingMiddleware, manager=manager)

Public surface
--------------
The symbols exported below form the stable public API.

Optional extras
---------------
``RedisStoreDirectory`` needs ``pip install storefront-tenancy[redis]`` at
construction time; importing it is always safe.
"""

from storefront_tenancy.core.config import StorefrontConfig
from storefront_tenancy.core.context import (
    StoreContext,
    get_current_store,
    get_current_store_optional,
)
from storefront_tenancy.core.exceptions import (
    BackendError,
    ConfigurationError,
    HostnameMissingError,
    ReservedSubdomainError,
    ResourceNotFoundError,
    StoreDirectoryError,
    StoreNotFoundError,
    StorefrontError,
    WorkflowError,
)
from storefront_tenancy.core.types import (
    Document,
    ErrorRedirect,
    LedgerEntry,
    NotFound,
    Passthrough,
    Rejected,
    ResourceKind,
    RewrittenTo,
    RouteDecision,
    RouteRequest,
    Store,
    StoredFile,
    StoreStatus,
    StoreType,
    SubdomainInfo,
)
from storefront_tenancy.documents.base import DocumentStore, FileStore
from storefront_tenancy.documents.database import SQLAlchemyDocumentStore, SQLAlchemyFileStore
from storefront_tenancy.documents.memory import InMemoryDocumentStore, InMemoryFileStore
from storefront_tenancy.manager import StorefrontManager
from storefront_tenancy.middleware.routing import StorefrontRoutingMiddleware
from storefront_tenancy.resolution.router import TenantRouter
from storefront_tenancy.resolution.subdomain import parse_subdomain
from storefront_tenancy.rollback.compensating import CompensatingRollback, RollbackReport
from storefront_tenancy.rollback.ledger import WriteLedger
from storefront_tenancy.storage.database import SQLAlchemyStoreDirectory
from storefront_tenancy.storage.directory import StoreDirectory
from storefront_tenancy.storage.memory import InMemoryStoreDirectory
from storefront_tenancy.storage.redis import RedisStoreDirectory
from storefront_tenancy.workflows import (
    Address,
    OrderDraft,
    OrderLine,
    PlacedOrder,
    StoreDraft,
    Upload,
    WorkflowContext,
    create_category,
    create_store,
    place_order,
)

try:
    from importlib.metadata import version as _pkg_version
    __version__: str = _pkg_version("storefront-tenancy")
except Exception:  # pragma: no cover - package not installed
    __version__ = "0.0.0.dev0"

__all__ = [  # NOQA
    # Version
    "__version__",
    # Configuration
    "StorefrontConfig",
    # Manager
    "StorefrontManager",
    # Domain types
    "Document",
    "LedgerEntry",
    "ResourceKind",
    "Store",
    "StoreStatus",
    "StoreType",
    "StoredFile",
    "SubdomainInfo",
    # Routing
    "ErrorRedirect",
    "NotFound",
    "Passthrough",
    "Rejected",
    "RewrittenTo",
    "RouteDecision",
    "RouteRequest",
    "TenantRouter",
    "parse_subdomain",
    # Context
    "StoreContext",
    "get_current_store",
    "get_current_store_optional",
    # Exceptions
    "BackendError",
    "ConfigurationError",
    "HostnameMissingError",
    "ReservedSubdomainError",
    "ResourceNotFoundError",
    "StoreDirectoryError",
    "StoreNotFoundError",
    "StorefrontError",
    "WorkflowError",
    # Store directories
    "InMemoryStoreDirectory",
    "RedisStoreDirectory",
    "SQLAlchemyStoreDirectory",
    "StoreDirectory",
    # Documents and files
    "DocumentStore",
    "FileStore",
    "InMemoryDocumentStore",
    "InMemoryFileStore",
    "SQLAlchemyDocumentStore",
    "SQLAlchemyFileStore",
    # Rollback
    "CompensatingRollback",
    "RollbackReport",
    "WriteLedger",
    # Workflows
    "Address",
    "OrderDraft",
    "OrderLine",
    "PlacedOrder",
    "StoreDraft",
    "Upload",
    "WorkflowContext",
    "create_category",
    "create_store",
    "place_order",
    # Middleware
    "StorefrontRoutingMiddleware",
]
