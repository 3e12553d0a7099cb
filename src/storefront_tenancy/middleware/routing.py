"""Raw ASGI middleware that applies tenant routing decisions.

Every HTTP request is turned into a
:class:`~storefront_tenancy.core.types.RouteRequest`, handed to the
:class:`~storefront_tenancy.resolution.router.TenantRouter`, and the
resulting decision is applied:

+------------------+--------------------------------------------------------+
| Decision         | Effect                                                 |
+==================+========================================================+
| ``Passthrough``  | App called with the scope unchanged.                   |
+------------------+--------------------------------------------------------+
| ``Rejected``     | ``403`` JSON ``{"message": "This subdomain is          |
|                  | reserved"}``; the app is not called.                   |
+------------------+--------------------------------------------------------+
| ``RewrittenTo``  | Path rewritten to ``/store/{subdomain}{path}``, query  |
|                  | string kept; store set on ``StoreContext`` and         |
|                  | ``request.state.store``.                               |
+------------------+--------------------------------------------------------+
| ``NotFound``     | Path rewritten to the store-not-found route;           |
|                  | ``request.state.missing_store_domain`` holds the label.|
+------------------+--------------------------------------------------------+
| ``ErrorRedirect``| ``307`` to the error page on the main domain.          |
+------------------+--------------------------------------------------------+

Rewrites are internal: the client-visible URL and hostname never change.

Raw ASGI is used instead of ``BaseHTTPMiddleware`` so responses stream
unbuffered and the ``StoreContext`` contextvar is visible to background
tasks spawned by the handler.

Excluded paths
--------------
Requests whose path starts with an excluded prefix skip routing entirely.
The default list comes from ``StorefrontConfig.excluded_paths``::

    app.add_middleware(
        StorefrontRoutingMiddleware,
        manager=manager,
        excluded_paths=["/api", "/static", "/health"],
    )
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from storefront_tenancy.core.context import StoreContext
from storefront_tenancy.core.types import (
    ErrorRedirect,
    NotFound,
    Rejected,
    RewrittenTo,
    RouteRequest,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


def _json_response(
    send: Send,
    status_code: int,
    payload: dict[str, Any],
) -> Awaitable[None]:
    """Send a minimal JSON response.

    Returns:
        Coroutine that completes after the body is sent.
    """
    body = json.dumps(payload).encode("utf-8")
    headers: list[tuple[bytes, bytes]] = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
    ]

    async def _send() -> None:
        await send({"type": "http.response.start", "status": status_code, "headers": headers})
        await send({"type": "http.response.body", "body": body, "more_body": False})

    return _send()


def _redirect_response(send: Send, status_code: int, location: str) -> Awaitable[None]:
    """Send an empty-bodied redirect to *location*."""
    headers: list[tuple[bytes, bytes]] = [
        (b"location", location.encode("latin-1")),
        (b"content-length", b"0"),
    ]

    async def _send() -> None:
        await send({"type": "http.response.start", "status": status_code, "headers": headers})
        await send({"type": "http.response.body", "body": b"", "more_body": False})

    return _send()


def _header(scope: Scope, name: bytes) -> str | None:
    for key, value in scope.get("headers", ()):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def _set_state(scope: Scope, key: str, value: Any) -> None:
    """Attach *value* to ``request.state`` for dict or ``State`` scopes.

    A dict state is copied so the server's per-connection state is not mutated.
    """
    state = scope.get("state")
    if state is None or isinstance(state, dict):
        scope["state"] = {**(state or {}), key: value}
    else:
        setattr(state, key, value)


class StorefrontRoutingMiddleware:
    """Raw ASGI middleware that routes requests by subdomain.

    Args:
        app: The downstream ASGI application.
        manager: The configured :class:`~storefront_tenancy.manager.StorefrontManager`.
        excluded_paths: Path prefixes that bypass routing.  Defaults to the
            manager's ``config.excluded_paths``.

    Example::

        app.add_middleware(StorefrontRoutingMiddleware, manager=manager)
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: Any,  # StorefrontManager; Any avoids a circular import
        excluded_paths: list[str] | None = None,
    ) -> None:
        self._app = app
        self._manager = manager
        self._excluded: list[str] = (
            list(excluded_paths) if excluded_paths is not None else list(manager.config.excluded_paths)
        )

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._excluded)

    def _hostname(self, scope: Scope) -> str | None:
        if self._manager.config.trust_forwarded_host:
            forwarded = _header(scope, b"x-forwarded-host")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return _header(scope, b"host")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Route ``http`` scopes; pass every other scope type through."""
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path: str = scope.get("path", "/")
        if self._is_excluded(path):
            await self._app(scope, receive, send)
            return

        request = RouteRequest(
            hostname=self._hostname(scope),
            path=path,
            query_string=scope.get("query_string", b"").decode("latin-1"),
        )
        decision = await self._manager.router.route(request)

        if isinstance(decision, Rejected):
            await _json_response(send, decision.status_code, decision.body)
            return

        if isinstance(decision, ErrorRedirect):
            await _redirect_response(send, decision.status_code, decision.target)
            return

        if isinstance(decision, NotFound):
            rewritten = self._rewrite(scope, decision.path, decision.path.encode("utf-8"))
            rewritten["query_string"] = b""
            _set_state(rewritten, "missing_store_domain", decision.subdomain)
            await self._app(rewritten, receive, send)
            return

        if isinstance(decision, RewrittenTo):
            prefix = f"{self._manager.config.store_path_prefix}/{decision.subdomain}"
            original_raw = scope.get("raw_path") or path.encode("utf-8")
            if not original_raw.startswith(b"/"):
                original_raw = b"/" + original_raw
            raw_path = prefix.encode("utf-8") + original_raw
            rewritten = self._rewrite(scope, decision.path, raw_path)
            _set_state(rewritten, "store", decision.store)
            token = StoreContext.set(decision.store)
            try:
                await self._app(rewritten, receive, send)
            finally:
                StoreContext.reset(token)
            return

        await self._app(scope, receive, send)

    @staticmethod
    def _rewrite(scope: Scope, path: str, raw_path: bytes) -> Scope:
        rewritten = dict(scope)
        rewritten["path"] = path
        rewritten["raw_path"] = raw_path
        return rewritten


__all__ = ["StorefrontRoutingMiddleware"]
