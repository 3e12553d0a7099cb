"""Order placement: address, order, items, attachments, then stock.

:func:`place_order` performs a sequence of independent writes.  Each create
is tracked the moment it succeeds; if any later step fails, every tracked
resource is deleted newest first and the original error propagates::

    check stock             (reads only)
    create address          → track
    create order            → track
    for each line:
        create order item   → track
    for each attachment:
        upload file         → track
    decrement stock         (restored on failure)

Stock is checked before anything is written, so an order that cannot be
filled leaves no trace.  Decrements run last, once every create has
succeeded; if one of them fails the decrements already applied are put
back before the tracked resources are deleted.
"""

from __future__ import annotations

from collections import Counter
import logging
from typing import TYPE_CHECKING

from storefront_tenancy.core.exceptions import ResourceNotFoundError, WorkflowError
from storefront_tenancy.utils.security import generate_order_number
from storefront_tenancy.workflows.models import PlacedOrder

if TYPE_CHECKING:
    from storefront_tenancy.core.types import Document, StoredFile
    from storefront_tenancy.workflows.context import WorkflowContext
    from storefront_tenancy.workflows.models import OrderDraft

logger = logging.getLogger(__name__)

_WORKFLOW = "place_order"


async def place_order(ctx: WorkflowContext, draft: OrderDraft) -> PlacedOrder:
    """Create an order and everything it owns, or nothing at all.

    Args:
        ctx: Stores and collection IDs to write through.
        draft: Validated order input.

    Returns:
        The created documents and files.

    Raises:
        WorkflowError: A product is missing or has insufficient stock.
        StorefrontError: Any store failure, after rollback.
    """
    config = ctx.config
    documents = ctx.documents
    order_number = generate_order_number()
    quantities = _quantities(draft)

    for product_id, quantity in quantities.items():
        await _available_stock(ctx, product_id, quantity)

    async with ctx.rollback().guard() as ledger:
        address = await documents.create_document(
            config.addresses_collection,
            {"customer_id": draft.customer_id, **draft.address.model_dump(mode="json")},
        )
        ledger.track_document(address.collection_id, address.id)

        order = await documents.create_document(
            config.orders_collection,
            {
                "order_number": order_number,
                "customer_id": draft.customer_id,
                "store_id": draft.store_id,
                "address_id": address.id,
                "currency": draft.currency,
                "subtotal": draft.subtotal,
                "item_count": draft.item_count,
                "status": "pending",
                "notes": draft.notes,
            },
        )
        ledger.track_document(order.collection_id, order.id)

        items: list[Document] = []
        for line in draft.items:
            item = await documents.create_document(
                config.order_items_collection,
                {
                    "order_id": order.id,
                    "product_id": line.product_id,
                    "name": line.name,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "line_total": line.line_total,
                },
            )
            ledger.track_document(item.collection_id, item.id)
            items.append(item)

        attachments: list[StoredFile] = []
        for upload in draft.attachments:
            stored = await ctx.files.create_file(
                config.order_attachments_bucket,
                upload.content,
                upload.filename,
                content_type=upload.content_type,
            )
            ledger.track_file(stored.bucket_id, stored.id)
            attachments.append(stored)

        await _commit_stock(ctx, quantities)

    logger.info(
        "Placed order %s id=%s items=%d subtotal=%.2f %s",
        order_number,
        order.id,
        len(items),
        draft.subtotal,
        draft.currency,
    )
    return PlacedOrder(
        order_number=order_number,
        order=order,
        address=address,
        items=tuple(items),
        attachments=tuple(attachments),
    )


def _quantities(draft: OrderDraft) -> Counter[str]:
    """Total ordered quantity per product; a product may appear on several lines."""
    totals: Counter[str] = Counter()
    for line in draft.items:
        totals[line.product_id] += line.quantity
    return totals


async def _available_stock(ctx: WorkflowContext, product_id: str, quantity: int) -> int | None:
    """Return the product's current ``stock`` after checking it covers *quantity*.

    ``None`` means the product is not inventory-tracked.
    """
    try:
        product = await ctx.documents.get_document(ctx.config.products_collection, product_id)
    except ResourceNotFoundError as exc:
        raise WorkflowError(
            _WORKFLOW,
            f"product {product_id!r} does not exist",
            details={"product_id": product_id},
        ) from exc

    stock = product.data.get("stock")
    if stock is not None and stock < quantity:
        raise WorkflowError(
            _WORKFLOW,
            f"insufficient stock for product {product_id!r}",
            details={"product_id": product_id, "requested": quantity, "available": stock},
        )
    return stock


async def _commit_stock(ctx: WorkflowContext, quantities: Counter[str]) -> None:
    """Decrement stock for every tracked product, or for none of them.

    Stock is re-read here since it may have moved since the up-front check.
    """
    collection = ctx.config.products_collection
    applied: list[tuple[str, int]] = []
    try:
        for product_id, quantity in quantities.items():
            stock = await _available_stock(ctx, product_id, quantity)
            if stock is None:
                continue
            await ctx.documents.update_document(collection, product_id, {"stock": stock - quantity})
            applied.append((product_id, stock))
    except BaseException:
        for product_id, stock in reversed(applied):
            try:
                await ctx.documents.update_document(collection, product_id, {"stock": stock})
            except Exception as exc:
                logger.warning("Could not restore stock for product %s: %s", product_id, exc)
        raise


__all__ = ["place_order"]
