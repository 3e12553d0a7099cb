"""Custom exceptions for storefront-tenancy.

All exceptions derive from ``StorefrontError`` so callers can catch the
entire family with a single ``except StorefrontError`` clause while still
being able to handle individual sub-types.

Exception hierarchy::

    StorefrontError
    ├── ConfigurationError
    ├── StoreNotFoundError
    ├── StoreDirectoryError
    ├── ReservedSubdomainError
    ├── HostnameMissingError
    ├── ResourceNotFoundError
    ├── BackendError
    └── WorkflowError

Design decisions:
    - Every exception carries a structured ``details`` dict that is safe to
      log.  It must never contain raw secrets or user PII.
    - Messages are operator-focused.  Client-facing responses are built by
      the routing middleware, never from these messages.
"""

from __future__ import annotations

from typing import Any


class StorefrontError(Exception):
    """Base exception for all storefront-tenancy errors.

    Attributes:
        message: Human-readable description of the error.
        details: Supplementary key-value context.  Safe to log.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class ConfigurationError(StorefrontError):
    """Raised when the configuration contains an invalid or inconsistent value.

    Attributes:
        parameter: The name of the invalid configuration field.
        reason: Why the current value is invalid.
    """

    def __init__(
        self,
        parameter: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Invalid configuration for {parameter!r}: {reason}", details)
        self.parameter = parameter
        self.reason = reason


class StoreNotFoundError(StorefrontError):
    """Raised when a store cannot be located by its ID.

    Domain lookups made by the router never raise this; they return ``None``.

    Attributes:
        identifier: The ID or domain that was looked up.
    """

    def __init__(
        self,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Store not found: {identifier!r}" if identifier else "Store not found"
        super().__init__(message, details)
        self.identifier = identifier


class StoreDirectoryError(StorefrontError):
    """Raised when the store directory backend fails (transport, driver, I/O).

    The router converts this into an error redirect; it is never shown to
    the client.

    Attributes:
        operation: Directory operation that failed (e.g. ``"find_store_by_domain"``).
        reason: Concise description of the failure.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Store directory {operation!r} failed: {reason}", details)
        self.operation = operation
        self.reason = reason


class ReservedSubdomainError(StorefrontError):
    """Raised when a reserved label is used as a store domain.

    Attributes:
        subdomain: The reserved label.
    """

    def __init__(
        self,
        subdomain: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Subdomain {subdomain!r} is reserved", details)
        self.subdomain = subdomain


class HostnameMissingError(StorefrontError):
    """Raised when a request carries no usable hostname."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("No hostname found in request", details)


class ResourceNotFoundError(StorefrontError):
    """Raised by document and file stores when a resource does not exist.

    Compensating rollback treats this as "already gone".

    Attributes:
        kind: ``"document"`` or ``"file"``.
        container_id: Collection or bucket ID.
        resource_id: Document or file ID.
    """

    def __init__(
        self,
        kind: str,
        container_id: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"{kind.capitalize()} {resource_id!r} not found in {container_id!r}",
            details,
        )
        self.kind = kind
        self.container_id = container_id
        self.resource_id = resource_id


class BackendError(StorefrontError):
    """Raised when a document or file store cannot complete an operation.

    Attributes:
        operation: The failed operation (e.g. ``"delete_document"``).
        reason: Concise description of the failure.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Backend operation {operation!r} failed: {reason}", details)
        self.operation = operation
        self.reason = reason


class WorkflowError(StorefrontError):
    """Raised when a multi-step write workflow cannot proceed.

    Attributes:
        workflow: Name of the workflow (e.g. ``"place_order"``).
        reason: Why the step failed.
    """

    def __init__(
        self,
        workflow: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Workflow {workflow!r} failed: {reason}", details)
        self.workflow = workflow
        self.reason = reason


__all__ = [
    "BackendError",
    "ConfigurationError",
    "HostnameMissingError",
    "ReservedSubdomainError",
    "ResourceNotFoundError",
    "StoreDirectoryError",
    "StoreNotFoundError",
    "StorefrontError",
    "WorkflowError",
]
