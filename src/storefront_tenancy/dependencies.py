"""FastAPI dependency factories for the routed store and workflow contexts.

Closure-based factories capture the manager at startup, so handlers need no
``app.state`` lookups::

    get_workflow = make_workflow_dependency(manager)

    @app.post("/store/{domain}/checkout")
    async def checkout(
        store: StoreDep,
        ctx: Annotated[WorkflowContext, Depends(get_workflow)],
        draft: OrderDraft,
    ):
        placed = await place_order(ctx, draft.model_copy(update={"store_id": store.id}))
        return {"order_number": placed.order_number}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends

from storefront_tenancy.core.context import get_current_store, get_current_store_optional
from storefront_tenancy.core.types import Store

if TYPE_CHECKING:
    from storefront_tenancy.manager import StorefrontManager
    from storefront_tenancy.workflows.context import WorkflowContext

#: The store the request was rewritten to.  Raises outside tenant requests.
StoreDep = Annotated[Store, Depends(get_current_store)]

#: The routed store, or ``None`` on main-site requests.
StoreOptionalDep = Annotated[Store | None, Depends(get_current_store_optional)]


def make_workflow_dependency(manager: StorefrontManager) -> Any:
    """Create a dependency returning a fresh ``WorkflowContext`` per request.

    Args:
        manager: The configured :class:`~storefront_tenancy.manager.StorefrontManager`.

    Returns:
        A callable suitable for ``Depends``.
    """

    def _get_workflow_context() -> WorkflowContext:
        return manager.workflow_context()

    return _get_workflow_context


def make_directory_dependency(manager: StorefrontManager) -> Any:
    """Create a dependency returning the manager's store directory."""

    def _get_directory() -> Any:
        return manager.directory

    return _get_directory


__all__ = [
    "StoreDep",
    "StoreOptionalDep",
    "make_directory_dependency",
    "make_workflow_dependency",
]
