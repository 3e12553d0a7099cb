"""Multi-step write workflows protected by compensating rollback.

:func:`place_order`
    Address, order, order items, stock, attachments.

:func:`create_category`
    Icon upload followed by the category document.

:func:`create_store`
    Banner and logo uploads followed by the directory record.
"""

from storefront_tenancy.workflows.catalog import create_category
from storefront_tenancy.workflows.context import WorkflowContext
from storefront_tenancy.workflows.models import (
    Address,
    OrderDraft,
    OrderLine,
    PlacedOrder,
    StoreDraft,
    Upload,
)
from storefront_tenancy.workflows.orders import place_order
from storefront_tenancy.workflows.stores import check_store_domain, create_store

__all__ = [
    "Address",
    "OrderDraft",
    "OrderLine",
    "PlacedOrder",
    "StoreDraft",
    "Upload",
    "WorkflowContext",
    "check_store_domain",
    "create_category",
    "create_store",
    "place_order",
]
