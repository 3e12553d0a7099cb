"""
Storefront Example: Subdomain Stores with Rollback-Safe Checkout
================================================================
Serve many shops from one app: acme.example.com/products is answered by
the /store/{domain}/products route, with the resolved store available to
every handler.  Checkout writes an address, an order, and its items; if any
step fails, everything already written is deleted again.

What you'll learn
-----------------
- StorefrontRoutingMiddleware and the store-not-found / error routes
- StoreDep for the routed store
- place_order and create_category behind make_workflow_dependency
- Mapping WorkflowError to an HTTP response

Run
---
    pip install "storefront-tenancy[sqlite]"
    pip install "fastapi[standard]"
    STOREFRONT_MAIN_DOMAIN=localhost:8000 uvicorn main:app --reload

Test (subdomains of localhost resolve without DNS changes)
----
    # Main site
    curl http://localhost:8000/

    # Tenant storefront, rewritten to /store/acme/
    curl http://acme.localhost:8000/

    # Reserved subdomain → 403
    curl http://admin.localhost:8000/

    # Unknown store → store-not-found page (404)
    curl http://ghost.localhost:8000/

    # Checkout
    curl -X POST http://acme.localhost:8000/checkout \\
         -H "Content-Type: application/json" \\
         -d '{"customer_id": "u-1",
              "address": {"full_name": "Ada Lovelace", "line1": "12 Analytical Row",
                          "city": "London", "postal_code": "N1 9GU", "country": "GB"},
              "items": [{"product_id": "mug", "quantity": 1, "unit_price": 12.5}]}'
"""
from contextlib import asynccontextmanager
import logging
import os
from typing import Annotated

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from storefront_tenancy import (
    ResourceNotFoundError,
    StorefrontConfig,
    StorefrontManager,
    StorefrontRoutingMiddleware,
    WorkflowError,
)
from storefront_tenancy.dependencies import StoreDep, make_workflow_dependency
from storefront_tenancy.workflows import (
    OrderDraft,
    Upload,
    WorkflowContext,
    create_category,
    place_order,
)

logging.basicConfig(level=logging.INFO)

config = StorefrontConfig(
    main_domain=os.getenv("STOREFRONT_MAIN_DOMAIN", "localhost:8000"),
    database_url=os.getenv("STOREFRONT_DATABASE_URL", "sqlite+aiosqlite:///./storefront.db"),
    public_scheme="http",
)
manager = StorefrontManager.from_config(config)
get_workflow = make_workflow_dependency(manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await manager.initialize()
    if not await manager.directory.exists("acme"):
        await manager.register_store("acme", "Acme Outfitters", owner_id="u-admin")
    try:
        await manager.documents.get_document("products", "mug")
    except ResourceNotFoundError:
        await manager.documents.create_document("products", {"name": "Mug", "stock": 25}, document_id="mug")
    yield
    await manager.close()


app = FastAPI(title="Storefront Demo", lifespan=lifespan)
app.add_middleware(StorefrontRoutingMiddleware, manager=manager)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse({"detail": exc.reason}, status_code=409)


# ── Main site ─────────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/")
async def main_site():
    return {"site": "main", "message": "Open a shop at <name>.localhost:8000"}


@app.get("/error")
async def error_page():
    return JSONResponse({"detail": "Something went wrong. Please try again."}, status_code=500)


@app.get("/store-not-found")
async def store_not_found(request: Request):
    missing = getattr(request.state, "missing_store_domain", None)
    return JSONResponse({"detail": f"No store is registered at {missing!r}"}, status_code=404)


# ── Storefront routes (reached only through subdomain rewrites) ──────────────

@app.get("/store/{domain}/")
async def storefront_home(store: StoreDep):
    return {"store": store.name, "domain": store.domain, "status": store.status}


@app.post("/store/{domain}/checkout", status_code=201)
async def checkout(
    draft: OrderDraft,
    store: StoreDep,
    ctx: Annotated[WorkflowContext, Depends(get_workflow)],
):
    placed = await place_order(ctx, draft.model_copy(update={"store_id": store.id}))
    return {
        "order_number": placed.order_number,
        "order_id": placed.order.id,
        "subtotal": placed.order.data["subtotal"],
    }


@app.post("/store/{domain}/categories", status_code=201)
async def new_category(
    store: StoreDep,
    ctx: Annotated[WorkflowContext, Depends(get_workflow)],
    name: Annotated[str, Form()],
    icon: Annotated[UploadFile, File()],
):
    upload = Upload(
        filename=icon.filename or "icon",
        content=await icon.read(),
        content_type=icon.content_type,
    )
    category = await create_category(ctx, name, upload, store_id=store.id)
    return {"id": category.id, "slug": category.data["slug"]}
