"""Shared pytest fixtures for the storefront-tenancy test suite.

Hierarchy
---------
store_factory           callable that builds Store objects with sensible defaults
config                  StorefrontConfig for main domain ``example.com``
directory               fresh InMemoryStoreDirectory per test
acme                    active store bound to ``acme`` seeded into directory
documents / files       fresh in-memory document and file stores
workflow_ctx            WorkflowContext over the in-memory stores
sqlite_engine           shared SQLite :memory: engine
sqlite_directory        SQLAlchemyStoreDirectory on sqlite_engine
sqlite_documents        SQLAlchemyDocumentStore on sqlite_engine
sqlite_files            SQLAlchemyFileStore on sqlite_engine
manager                 StorefrontManager over the in-memory backends
asgi_app                minimal FastAPI + StorefrontRoutingMiddleware
client_for              factory: host → httpx.AsyncClient bound to asgi_app
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio

from storefront_tenancy.core.config import StorefrontConfig
from storefront_tenancy.core.context import StoreContext
from storefront_tenancy.core.types import Store, StoreStatus, StoreType
from storefront_tenancy.documents.memory import InMemoryDocumentStore, InMemoryFileStore
from storefront_tenancy.manager import StorefrontManager
from storefront_tenancy.middleware.routing import StorefrontRoutingMiddleware
from storefront_tenancy.storage.memory import InMemoryStoreDirectory
from storefront_tenancy.workflows.context import WorkflowContext

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine

    from storefront_tenancy.documents.database import SQLAlchemyDocumentStore, SQLAlchemyFileStore
    from storefront_tenancy.storage.database import SQLAlchemyStoreDirectory

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


#################
# Store factory #
#################


@pytest.fixture
def store_factory():
    """Return a factory that produces unique Store objects."""
    counter = [0]

    def _make(
        *,
        domain: str | None = None,
        name: str | None = None,
        status: StoreStatus = StoreStatus.ACTIVE,
        store_type: StoreType = StoreType.VIRTUAL,
        owner_id: str | None = "user-1",
        metadata: dict[str, Any] | None = None,
        store_id: str | None = None,
    ) -> Store:
        counter[0] += 1
        n = counter[0]
        ts = datetime.now(UTC)
        return Store(
            id=store_id or f"s-{uuid.uuid4().hex[:16]}",
            domain=domain or f"store-{n:04d}",
            name=name or f"Test Store {n}",
            status=status,
            store_type=store_type,
            owner_id=owner_id,
            metadata=metadata or {},
            created_at=ts,
            updated_at=ts,
        )

    return _make


@pytest.fixture(autouse=True)
def _clean_store_context():
    StoreContext.clear()
    yield
    StoreContext.clear()


##########
# Config #
##########


@pytest.fixture
def config() -> StorefrontConfig:
    return StorefrontConfig(main_domain="example.com", _env_file=None)


###################
# In-memory tiers #
###################


@pytest.fixture
def directory() -> InMemoryStoreDirectory:
    return InMemoryStoreDirectory()


@pytest_asyncio.fixture
async def acme(directory: InMemoryStoreDirectory, store_factory) -> Store:
    return await directory.create(store_factory(domain="acme", name="Acme Outfitters", store_id="s-acme"))


@pytest.fixture
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def files() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture
def workflow_ctx(
    config: StorefrontConfig,
    documents: InMemoryDocumentStore,
    files: InMemoryFileStore,
) -> WorkflowContext:
    return WorkflowContext(config, documents, files)


###############
# SQLite tier #
###############


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncIterator[AsyncEngine]:
    from storefront_tenancy.utils.db_compat import build_async_engine  # noqa: PLC0415

    engine = build_async_engine(SQLITE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_directory(sqlite_engine: AsyncEngine) -> AsyncIterator[SQLAlchemyStoreDirectory]:
    from storefront_tenancy.storage.database import SQLAlchemyStoreDirectory  # noqa: PLC0415

    d = SQLAlchemyStoreDirectory(engine=sqlite_engine)
    await d.initialize()
    yield d
    await d.close()


@pytest_asyncio.fixture
async def sqlite_documents(sqlite_engine: AsyncEngine) -> AsyncIterator[SQLAlchemyDocumentStore]:
    from storefront_tenancy.documents.database import SQLAlchemyDocumentStore  # noqa: PLC0415

    s = SQLAlchemyDocumentStore(engine=sqlite_engine)
    await s.initialize()
    yield s
    await s.close()


@pytest_asyncio.fixture
async def sqlite_files(sqlite_engine: AsyncEngine) -> AsyncIterator[SQLAlchemyFileStore]:
    from storefront_tenancy.documents.database import SQLAlchemyFileStore  # noqa: PLC0415

    s = SQLAlchemyFileStore(engine=sqlite_engine)
    await s.initialize()
    yield s
    await s.close()


###########
# Manager #
###########


@pytest_asyncio.fixture
async def manager(
    config: StorefrontConfig,
    directory: InMemoryStoreDirectory,
    documents: InMemoryDocumentStore,
    files: InMemoryFileStore,
) -> AsyncIterator[StorefrontManager]:
    m = StorefrontManager(config, directory, documents=documents, files=files)
    await m.initialize()
    yield m
    await m.close()


##########################
# ASGI app + HTTP client #
##########################


def build_app(manager: StorefrontManager) -> FastAPI:
    """Return a minimal FastAPI app wrapped in StorefrontRoutingMiddleware."""
    app = FastAPI()
    app.add_middleware(StorefrontRoutingMiddleware, manager=manager)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/ping")
    async def ping():
        return {"pong": True}

    @app.get("/")
    async def home():
        return {"site": "main"}

    @app.get("/about")
    async def about():
        return {"site": "main", "page": "about"}

    @app.get("/store-not-found")
    async def store_not_found(request: Request):
        return JSONResponse(
            {"missing": getattr(request.state, "missing_store_domain", None)},
            status_code=404,
        )

    @app.get("/store/{domain}/{path:path}")
    async def storefront(domain: str, path: str, request: Request):
        current = StoreContext.get()
        return {
            "domain": domain,
            "path": path,
            "query": request.url.query,
            "params": dict(request.query_params),
            "store_id": current.id,
            "state_store_id": request.state.store.id,
        }

    return app


@pytest_asyncio.fixture
async def asgi_app(manager: StorefrontManager):
    return build_app(manager)


@pytest_asyncio.fixture
async def client_for(asgi_app) -> AsyncIterator[Callable[[str], AsyncClient]]:
    """Return a factory producing clients whose ``Host`` is the given host."""
    clients: list[AsyncClient] = []

    def _make(host: str) -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=asgi_app), base_url=f"http://{host}")
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()
