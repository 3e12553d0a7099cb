"""Tenant request router.

:class:`TenantRouter` turns a :class:`~storefront_tenancy.core.types.RouteRequest`
into exactly one terminal :class:`~storefront_tenancy.core.types.RouteDecision`.
It knows nothing about ASGI; the routing middleware builds the request and
applies the decision.

Decision order (first match wins)::

    no hostname                          → ErrorRedirect
    no subdomain / main host / www.main  → Passthrough
    reserved subdomain                   → Rejected (403)
    preview deployment host              → Passthrough
    store found for subdomain            → RewrittenTo /store/{sub}{path}
    no store for subdomain               → NotFound
    any exception in the steps above     → ErrorRedirect

A failed lookup is never retried within the same request, and an error
never falls through to another tenant's content.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from storefront_tenancy.core.exceptions import HostnameMissingError
from storefront_tenancy.core.types import (
    ErrorRedirect,
    NotFound,
    Passthrough,
    Rejected,
    RewrittenTo,
)
from storefront_tenancy.resolution.subdomain import parse_subdomain

if TYPE_CHECKING:
    from storefront_tenancy.core.config import StorefrontConfig
    from storefront_tenancy.core.types import RouteDecision, RouteRequest
    from storefront_tenancy.storage.directory import StoreDirectory

logger = logging.getLogger(__name__)


class TenantRouter:
    """Resolve inbound requests to main-site, tenant, or error outcomes.

    Args:
        config: Routing configuration (main domain, reserved labels, paths).
        directory: Store directory used for the single domain lookup.

    Example::

        router = TenantRouter(config, directory)
        decision = await router.route(
            RouteRequest(hostname="acme.example.com", path="/products", query_string="x=1")
        )
        # → RewrittenTo(path="/store/acme/products", query_string="x=1", ...)
    """

    def __init__(self, config: StorefrontConfig, directory: StoreDirectory) -> None:
        self.config = config
        self.directory = directory

    async def route(self, request: RouteRequest) -> RouteDecision:
        """Return the routing decision for *request*.

        Never raises.  Every failure becomes an :class:`ErrorRedirect` to the
        error page on the main domain.
        """
        try:
            return await self._route(request)
        except HostnameMissingError:
            logger.warning("Request without hostname (path=%s), redirecting to error page", request.path)
            return self._error_redirect()
        except Exception:
            logger.exception(
                "Routing failed for host=%r path=%s, redirecting to error page",
                request.hostname,
                request.path,
            )
            return self._error_redirect()

    async def _route(self, request: RouteRequest) -> RouteDecision:
        hostname = request.hostname
        if not hostname:
            raise HostnameMissingError(details={"path": request.path})

        info = parse_subdomain(hostname)
        subdomain = info.subdomain

        if subdomain is None or self.config.is_main_host(hostname):
            logger.debug("Passthrough for main host %s", hostname)
            return Passthrough()

        if self.config.is_reserved(subdomain):
            logger.info("Rejected reserved subdomain %r (host=%s)", subdomain, hostname)
            return Rejected(reason="reserved subdomain", subdomain=subdomain)

        if not info.is_localhost and self.config.is_preview_host(hostname):
            logger.debug("Passthrough for preview host %s", hostname)
            return Passthrough()

        store = await self.directory.find_store_by_domain(subdomain)
        if store is None:
            logger.debug("No store bound to subdomain %r", subdomain)
            return NotFound(subdomain=subdomain, path=self.config.store_not_found_path)

        rewritten = self.config.store_path(subdomain, request.path)
        logger.debug("Rewrote %s%s → %s (store=%s)", hostname, request.path, rewritten, store.id)
        return RewrittenTo(
            path=rewritten,
            query_string=request.query_string,
            subdomain=subdomain,
            store=store,
        )

    def _error_redirect(self) -> ErrorRedirect:
        return ErrorRedirect(target=self.config.error_redirect_url())


__all__ = ["TenantRouter"]
