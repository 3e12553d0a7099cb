"""Catalog writes: categories with an uploaded icon."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from storefront_tenancy.core.exceptions import WorkflowError

if TYPE_CHECKING:
    from storefront_tenancy.core.types import Document
    from storefront_tenancy.workflows.context import WorkflowContext
    from storefront_tenancy.workflows.models import Upload

logger = logging.getLogger(__name__)

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase *name* and collapse non-alphanumerics into single hyphens.

    Example::

        slugify("Home & Garden")  # "home-garden"
    """
    return _SLUG_STRIP_RE.sub("-", name.lower()).strip("-")


async def create_category(
    ctx: WorkflowContext,
    name: str,
    icon: Upload,
    store_id: str | None = None,
    parent_id: str | None = None,
    description: str | None = None,
) -> Document:
    """Upload *icon*, then create the category document that references it.

    If the document create fails the icon is deleted again and the error
    propagates.

    Raises:
        WorkflowError: When *name* has no usable characters.
    """
    slug = slugify(name)
    if not slug:
        raise WorkflowError("create_category", "category name must contain letters or digits")

    async with ctx.rollback().guard() as ledger:
        stored = await ctx.files.create_file(
            ctx.config.catalog_icons_bucket,
            icon.content,
            icon.filename,
            content_type=icon.content_type,
        )
        ledger.track_file(stored.bucket_id, stored.id)

        category = await ctx.documents.create_document(
            ctx.config.categories_collection,
            {
                "name": name.strip(),
                "slug": slug,
                "description": description,
                "store_id": store_id,
                "parent_id": parent_id,
                "icon_file_id": stored.id,
                "icon_bucket_id": stored.bucket_id,
            },
        )
        ledger.track_document(category.collection_id, category.id)

    logger.info("Created category %r id=%s store=%s", slug, category.id, store_id)
    return category


__all__ = ["create_category", "slugify"]
