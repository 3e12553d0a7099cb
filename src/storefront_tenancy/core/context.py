"""Async-safe store context management using :mod:`contextvars`.

When the routing middleware rewrites a request to tenant content it also
makes the resolved :class:`~storefront_tenancy.core.types.Store` available
to everything downstream through a :class:`~contextvars.ContextVar`.  Each
asyncio task gets its own copy, so concurrent requests never see each
other's store.

Public surface
--------------
:class:`StoreContext`
    Static-method namespace: ``set``, ``get``, ``get_optional``, ``reset``,
    ``clear`` and the ``scope`` context manager.

:func:`get_current_store`
    FastAPI dependency returning the current store or raising
    :class:`~storefront_tenancy.core.exceptions.StoreNotFoundError`.

:func:`get_current_store_optional`
    FastAPI dependency returning the current store or ``None``.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

from storefront_tenancy.core.exceptions import StoreNotFoundError

if TYPE_CHECKING:
    from storefront_tenancy.core.types import Store

_store_ctx: ContextVar[Store | None] = ContextVar("storefront_store", default=None)


class StoreContext:
    """Namespace for the per-request store.

    Usage in middleware::

        token = StoreContext.set(store)
        try:
            await app(scope, receive, send)
        finally:
            StoreContext.reset(token)
    """

    @staticmethod
    def set(store: Store) -> Token[Store | None]:
        """Make *store* current and return a token for :meth:`reset`."""
        return _store_ctx.set(store)

    @staticmethod
    def get() -> Store:
        """Return the current store.

        Raises:
            StoreNotFoundError: When called outside a rewritten tenant request.
        """
        store = _store_ctx.get()
        if store is None:
            raise StoreNotFoundError(
                details={
                    "hint": "No store is set in the current execution context. "
                    "Ensure the request was routed by StorefrontRoutingMiddleware."
                }
            )
        return store

    @staticmethod
    def get_optional() -> Store | None:
        """Return the current store, or ``None`` on main-site requests."""
        return _store_ctx.get()

    @staticmethod
    def reset(token: Token[Store | None]) -> None:
        """Restore the context captured in *token*."""
        _store_ctx.reset(token)

    @staticmethod
    def clear() -> None:
        """Unconditionally clear the current store."""
        _store_ctx.set(None)

    class scope:
        """Temporarily set a store for a ``with`` / ``async with`` block.

        Useful in background jobs and tests::

            async with StoreContext.scope(store):
                await send_newsletter()
        """

        def __init__(self, store: Store) -> None:
            self._store = store
            self._token: Token[Store | None] | None = None

        async def __aenter__(self) -> Store:
            self._token = _store_ctx.set(self._store)
            return self._store

        async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            if self._token is not None:
                _store_ctx.reset(self._token)

        def __enter__(self) -> Store:
            self._token = _store_ctx.set(self._store)
            return self._store

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            if self._token is not None:
                _store_ctx.reset(self._token)


def get_current_store() -> Store:
    """FastAPI dependency: return the store the request was routed to.

    Example::

        @app.get("/store/{domain}/products")
        async def products(store: Store = Depends(get_current_store)):
            ...
    """
    return StoreContext.get()


def get_current_store_optional() -> Store | None:
    """FastAPI dependency: return the routed store, or ``None``."""
    return StoreContext.get_optional()


__all__ = [
    "StoreContext",
    "get_current_store",
    "get_current_store_optional",
]
