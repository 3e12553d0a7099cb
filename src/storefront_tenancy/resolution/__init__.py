"""Tenant resolution: hostname parsing and request routing.

:func:`parse_subdomain`
    Pure hostname → :class:`~storefront_tenancy.core.types.SubdomainInfo`.

:class:`TenantRouter`
    Orchestrates reserved-name rejection, store lookup, path rewrite, and
    the not-found and error fallbacks.
"""

from storefront_tenancy.resolution.router import TenantRouter
from storefront_tenancy.resolution.subdomain import parse_subdomain

__all__ = ["TenantRouter", "parse_subdomain"]
