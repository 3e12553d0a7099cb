"""ASGI middleware for subdomain routing and store context injection."""

from storefront_tenancy.middleware.routing import StorefrontRoutingMiddleware

__all__ = ["StorefrontRoutingMiddleware"]
