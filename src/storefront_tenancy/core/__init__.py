"""Core abstractions: types, config, context, and exceptions."""

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

__all__ = [
    # Config
    "StorefrontConfig",
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
    # Types
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
