"""Store creation: branding uploads followed by the directory record.

:func:`create_store` checks the subdomain first, then uploads the banners
and the logo to the store assets bucket, tracking each file, and finally
binds the store in the directory.  If the directory write fails the uploads
are deleted again and the error propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from storefront_tenancy.core.exceptions import ReservedSubdomainError, WorkflowError
from storefront_tenancy.core.types import Store
from storefront_tenancy.utils.security import generate_resource_id
from storefront_tenancy.utils.validation import normalize_store_domain, validate_store_domain

if TYPE_CHECKING:
    from storefront_tenancy.core.config import StorefrontConfig
    from storefront_tenancy.storage.directory import StoreDirectory
    from storefront_tenancy.workflows.context import WorkflowContext
    from storefront_tenancy.workflows.models import StoreDraft

logger = logging.getLogger(__name__)


def check_store_domain(config: StorefrontConfig, domain: str) -> str:
    """Return *domain* normalised, or raise if it cannot be bound to a store.

    Raises:
        ValueError: When *domain* is not a valid lowercase DNS label.
        ReservedSubdomainError: When *domain* is reserved.
    """
    domain = normalize_store_domain(domain)
    if not validate_store_domain(domain):
        msg = (
            f"Invalid store domain {domain!r}. Must be 1-63 lowercase letters, "
            "digits, or hyphens, without a leading or trailing hyphen."
        )
        raise ValueError(msg)
    if config.is_reserved(domain):
        raise ReservedSubdomainError(domain)
    return domain


async def create_store(ctx: WorkflowContext, directory: StoreDirectory, draft: StoreDraft) -> Store:
    """Upload the store's branding and register it under ``draft.domain``.

    Args:
        ctx: File store and bucket IDs for the uploads.
        directory: Directory the new store is bound in.
        draft: Validated store input.

    Returns:
        The stored :class:`Store`; ``metadata`` references the uploaded files.

    Raises:
        ValueError: Invalid domain, or the directory rejected a duplicate.
        ReservedSubdomainError: The domain is reserved.
        WorkflowError: The subdomain is already taken.
        StorefrontError: Any store failure, after rollback.
    """
    domain = check_store_domain(ctx.config, draft.domain)
    if await directory.exists(domain):
        raise WorkflowError(
            "create_store",
            f"subdomain {domain!r} is already taken",
            details={"domain": domain},
        )

    bucket = ctx.config.store_assets_bucket
    async with ctx.rollback().guard() as ledger:
        banner_ids: list[str] = []
        for banner in draft.banners:
            stored = await ctx.files.create_file(
                bucket, banner.content, banner.filename, content_type=banner.content_type
            )
            ledger.track_file(stored.bucket_id, stored.id)
            banner_ids.append(stored.id)

        logo = await ctx.files.create_file(
            bucket, draft.logo.content, draft.logo.filename, content_type=draft.logo.content_type
        )
        ledger.track_file(logo.bucket_id, logo.id)

        store = await directory.create(
            Store(
                id=generate_resource_id("store"),
                domain=domain,
                name=draft.name,
                owner_id=draft.owner_id,
                store_type=draft.store_type,
                metadata={
                    "assets_bucket_id": bucket,
                    "logo_file_id": logo.id,
                    "banner_file_ids": banner_ids,
                    "description": draft.description,
                    "bio": draft.bio,
                    "operating_country": draft.operating_country,
                    "currency": draft.currency,
                },
            )
        )

    logger.info("Created store id=%s domain=%s banners=%d", store.id, store.domain, len(banner_ids))
    return store


__all__ = ["check_store_domain", "create_store"]
