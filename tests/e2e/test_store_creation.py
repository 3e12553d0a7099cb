"""End-to-end tests: store creation with branding uploads and rollback.

Verified:
* Banners and logo land in the store assets bucket and are referenced from metadata
* The new store is routable immediately
* A directory failure deletes every uploaded file
* A failed logo upload deletes the banners already uploaded
* Taken, reserved, and invalid subdomains are refused before any upload
"""

from __future__ import annotations

import pytest

from storefront_tenancy.core.exceptions import (
    BackendError,
    ReservedSubdomainError,
    StoreDirectoryError,
    WorkflowError,
)
from storefront_tenancy.core.types import RewrittenTo, RouteRequest
from storefront_tenancy.documents.memory import InMemoryFileStore
from storefront_tenancy.storage.memory import InMemoryStoreDirectory
from storefront_tenancy.workflows import StoreDraft, Upload, WorkflowContext, create_store

pytestmark = pytest.mark.e2e


class UnwritableDirectory(InMemoryStoreDirectory):
    async def create(self, store):
        raise StoreDirectoryError("create", "primary database unavailable")


class LogoRejectingFileStore(InMemoryFileStore):
    async def create_file(self, bucket_id, content, filename, content_type=None, file_id=None):
        if filename.startswith("logo"):
            raise BackendError("create_file", "image too large")
        return await super().create_file(bucket_id, content, filename, content_type, file_id)


def _draft(domain: str = "acme", banners: int = 2) -> StoreDraft:
    return StoreDraft(
        domain=domain,
        name="Acme Outfitters",
        owner_id="u-1",
        logo=Upload(filename="logo.png", content=b"png-logo", content_type="image/png"),
        banners=[
            Upload(filename=f"banner-{n}.jpg", content=f"jpg-{n}".encode(), content_type="image/jpeg")
            for n in range(banners)
        ],
        description="Outdoor gear",
        operating_country="GB",
        currency="GBP",
    )


class TestCreateStore:
    async def test_success(self, manager, files, config):
        store = await manager.create_store(_draft())

        bucket = config.store_assets_bucket
        assert store.domain == "acme"
        assert store.owner_id == "u-1"
        assert store.metadata["assets_bucket_id"] == bucket
        assert len(store.metadata["banner_file_ids"]) == 2
        assert files.count(bucket) == 3
        meta, content = await files.get_file(bucket, store.metadata["logo_file_id"])
        assert content == b"png-logo"
        assert meta.content_type == "image/png"

        decision = await manager.router.route(RouteRequest(hostname="acme.example.com", path="/"))
        assert isinstance(decision, RewrittenTo)
        assert decision.store.id == store.id

    async def test_directory_failure_deletes_uploads(self, workflow_ctx, files, config):
        with pytest.raises(StoreDirectoryError, match="unavailable"):
            await create_store(workflow_ctx, UnwritableDirectory(), _draft())
        assert files.count(config.store_assets_bucket) == 0

    async def test_logo_failure_deletes_banners(self, config, documents, directory):
        files = LogoRejectingFileStore()
        ctx = WorkflowContext(config, documents, files)

        with pytest.raises(BackendError, match="image too large"):
            await create_store(ctx, directory, _draft(banners=3))

        assert files.count(config.store_assets_bucket) == 0
        assert await directory.find_store_by_domain("acme") is None

    async def test_taken_subdomain(self, manager, files, config, acme):
        with pytest.raises(WorkflowError, match="already taken") as excinfo:
            await manager.create_store(_draft(domain="ACME"))
        assert excinfo.value.details == {"domain": "acme"}
        assert files.count(config.store_assets_bucket) == 0

    async def test_reserved_subdomain(self, manager, files, config):
        with pytest.raises(ReservedSubdomainError):
            await manager.create_store(_draft(domain="admin"))
        assert files.count(config.store_assets_bucket) == 0

    async def test_invalid_subdomain(self, manager, files, config):
        with pytest.raises(ValueError, match="Invalid store domain"):
            await manager.create_store(_draft(domain="-acme"))
        assert files.count(config.store_assets_bucket) == 0
