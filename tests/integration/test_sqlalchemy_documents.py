"""Integration tests: storefront_tenancy.documents.database

Document and file stores share one SQLite in-memory engine, the way
``StorefrontManager.from_config`` wires them.
"""

from __future__ import annotations

import pytest

from storefront_tenancy.core.exceptions import ResourceNotFoundError
from storefront_tenancy.documents.database import SQLAlchemyDocumentStore
from storefront_tenancy.rollback.compensating import CompensatingRollback
from storefront_tenancy.rollback.ledger import WriteLedger

pytest.importorskip("aiosqlite")

pytestmark = pytest.mark.integration


class TestDocuments:
    async def test_create_get(self, sqlite_documents):
        doc = await sqlite_documents.create_document("orders", {"status": "pending", "total": 12.5})
        fetched = await sqlite_documents.get_document("orders", doc.id)
        assert fetched.data == {"status": "pending", "total": 12.5}
        assert fetched.created_at.tzinfo is not None

    async def test_duplicate_id(self, sqlite_documents):
        await sqlite_documents.create_document("products", {}, document_id="p1")
        with pytest.raises(ValueError):
            await sqlite_documents.create_document("products", {}, document_id="p1")

    async def test_composite_key(self, sqlite_documents):
        await sqlite_documents.create_document("products", {"kind": "product"}, document_id="x")
        await sqlite_documents.create_document("orders", {"kind": "order"}, document_id="x")
        assert (await sqlite_documents.get_document("orders", "x")).data == {"kind": "order"}

    async def test_update_merges(self, sqlite_documents):
        await sqlite_documents.create_document("products", {"name": "Mug", "stock": 5}, document_id="p1")
        updated = await sqlite_documents.update_document("products", "p1", {"stock": 2})
        assert updated.data == {"name": "Mug", "stock": 2}

    async def test_update_missing(self, sqlite_documents):
        with pytest.raises(ResourceNotFoundError):
            await sqlite_documents.update_document("products", "nope", {"stock": 1})

    async def test_delete_then_missing(self, sqlite_documents):
        doc = await sqlite_documents.create_document("orders", {})
        await sqlite_documents.delete_document("orders", doc.id)
        with pytest.raises(ResourceNotFoundError):
            await sqlite_documents.get_document("orders", doc.id)
        with pytest.raises(ResourceNotFoundError):
            await sqlite_documents.delete_document("orders", doc.id)

    async def test_list_with_filters(self, sqlite_documents):
        for order_id in ("o1", "o2", "o1"):
            await sqlite_documents.create_document("order_items", {"order_id": order_id})
        assert len(await sqlite_documents.list_documents("order_items")) == 3
        assert len(await sqlite_documents.list_documents("order_items", {"order_id": "o1"})) == 2
        assert len(await sqlite_documents.list_documents("order_items", limit=2)) == 2

    async def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            SQLAlchemyDocumentStore()


class TestFiles:
    async def test_create_get(self, sqlite_files):
        stored = await sqlite_files.create_file("catalog-icons", b"\x89PNG\r\n", "icon.png", "image/png")
        meta, content = await sqlite_files.get_file("catalog-icons", stored.id)
        assert content == b"\x89PNG\r\n"
        assert meta.size == 6
        assert meta.filename == "icon.png"

    async def test_duplicate_id(self, sqlite_files):
        await sqlite_files.create_file("b", b"x", "a.txt", file_id="f1")
        with pytest.raises(ValueError):
            await sqlite_files.create_file("b", b"y", "a.txt", file_id="f1")

    async def test_delete_missing(self, sqlite_files):
        with pytest.raises(ResourceNotFoundError):
            await sqlite_files.delete_file("b", "nope")


class TestRollbackAgainstSQL:
    async def test_sweep_removes_rows(self, sqlite_documents, sqlite_files):
        ledger = WriteLedger()
        icon = await sqlite_files.create_file("catalog-icons", b"x", "i.png")
        ledger.track_file(icon.bucket_id, icon.id)
        doc = await sqlite_documents.create_document("categories", {"icon_file_id": icon.id})
        ledger.track_document(doc.collection_id, doc.id)
        await sqlite_documents.delete_document("categories", doc.id)

        report = await CompensatingRollback(sqlite_documents, sqlite_files).rollback(ledger)

        assert [e.resource_id for e in report.missing] == [doc.id]
        assert [e.resource_id for e in report.deleted] == [icon.id]
        with pytest.raises(ResourceNotFoundError):
            await sqlite_files.get_file("catalog-icons", icon.id)
