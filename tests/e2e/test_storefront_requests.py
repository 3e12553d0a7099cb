"""End-to-end tests: HTTP requests through routing into workflows.

A small storefront app is built on a manager with in-memory backends;
every request goes through StorefrontRoutingMiddleware first.
"""

from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
import pytest

from storefront_tenancy.core.exceptions import WorkflowError
from storefront_tenancy.dependencies import StoreDep, make_workflow_dependency
from storefront_tenancy.manager import StorefrontManager
from storefront_tenancy.middleware.routing import StorefrontRoutingMiddleware
from storefront_tenancy.workflows import OrderDraft, WorkflowContext, place_order

pytestmark = pytest.mark.e2e


def _build_shop(manager: StorefrontManager) -> FastAPI:
    app = FastAPI()
    app.add_middleware(StorefrontRoutingMiddleware, manager=manager)
    get_workflow = make_workflow_dependency(manager)

    @app.exception_handler(WorkflowError)
    async def _workflow_error(request: Request, exc: WorkflowError):
        return JSONResponse({"detail": exc.reason}, status_code=409)

    @app.get("/store-not-found")
    async def store_not_found():
        return JSONResponse({"detail": "store not found"}, status_code=404)

    @app.get("/store/{domain}/")
    async def home(store: StoreDep):
        return {"store": store.name, "status": store.status}

    @app.post("/store/{domain}/checkout", status_code=201)
    async def checkout(
        draft: OrderDraft,
        store: StoreDep,
        ctx: Annotated[WorkflowContext, Depends(get_workflow)],
    ):
        placed = await place_order(ctx, draft.model_copy(update={"store_id": store.id}))
        return {"order_number": placed.order_number, "store_id": placed.order.data["store_id"]}

    return app


def _checkout_payload(product_id: str, quantity: int) -> dict:
    return {
        "customer_id": "u-1",
        "address": {
            "full_name": "Ada Lovelace",
            "line1": "12 Analytical Row",
            "city": "London",
            "postal_code": "N1 9GU",
            "country": "GB",
        },
        "items": [{"product_id": product_id, "quantity": quantity, "unit_price": 4.5}],
    }


@pytest.fixture
def shop(manager) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=_build_shop(manager)),
        base_url="http://acme.example.com",
    )


class TestCheckout:
    async def test_order_placed_for_routed_store(self, shop, manager, documents):
        store = await manager.register_store("acme", "Acme Outfitters")
        await documents.create_document("products", {"stock": 3}, document_id="mug")

        async with shop:
            resp = await shop.post("/checkout", json=_checkout_payload("mug", 2))

        assert resp.status_code == 201
        assert resp.json()["store_id"] == store.id
        assert resp.json()["order_number"].startswith("ORD-")
        assert documents.count("orders") == 1
        assert (await documents.get_document("products", "mug")).data["stock"] == 1

    async def test_failed_checkout_leaves_no_order(self, shop, manager, documents):
        await manager.register_store("acme", "Acme Outfitters")
        await documents.create_document("products", {"stock": 1}, document_id="mug")

        async with shop:
            resp = await shop.post("/checkout", json=_checkout_payload("mug", 2))

        assert resp.status_code == 409
        assert "insufficient stock" in resp.json()["detail"]
        for collection in ("addresses", "orders", "order_items"):
            assert documents.count(collection) == 0


class TestStoreLifecycle:
    async def test_register_suspend_delete(self, shop, manager):
        async with shop:
            assert (await shop.get("/")).status_code == 404

            store = await manager.register_store("acme", "Acme Outfitters")
            resp = await shop.get("/")
            assert resp.json() == {"store": "Acme Outfitters", "status": "active"}

            await manager.suspend_store(store.id)
            resp = await shop.get("/")
            assert resp.status_code == 200
            assert resp.json()["status"] == "suspended"

            await manager.delete_store(store.id)
            assert (await shop.get("/")).status_code == 404
