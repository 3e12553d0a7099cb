"""Unit tests: storefront_tenancy.core.types

Verified:
* StrEnum values serialise as plain strings
* Store immutability, identity-based equality, is_active()
* Route decision payloads (Rejected body, RewrittenTo target)
* LedgerEntry validation
"""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from storefront_tenancy.core.types import (
    ErrorRedirect,
    LedgerEntry,
    NotFound,
    Rejected,
    ResourceKind,
    RewrittenTo,
    RouteRequest,
    Store,
    StoredFile,
    StoreStatus,
    StoreType,
)

pytestmark = pytest.mark.unit


class TestEnums:
    def test_status_values(self):
        assert {s.value for s in StoreStatus} == {"active", "pending", "suspended", "deleted"}

    def test_str_enum(self):
        assert StoreType.PHYSICAL == "physical"
        assert f"{ResourceKind.FILE}" == "file"


class TestStore:
    def test_defaults(self):
        store = Store(id="s1", domain="acme", name="Acme")
        assert store.status == StoreStatus.ACTIVE
        assert store.store_type == StoreType.VIRTUAL
        assert store.metadata == {}
        assert store.created_at.tzinfo is not None

    def test_frozen(self):
        store = Store(id="s1", domain="acme", name="Acme")
        with pytest.raises(ValidationError):
            store.name = "Other"

    def test_equality_by_id(self):
        a = Store(id="s1", domain="acme", name="Acme")
        b = a.model_copy(update={"name": "Renamed"})
        assert a == b
        assert len({a, b}) == 1

    def test_not_equal_to_other_types(self):
        assert Store(id="s1", domain="acme", name="Acme") != "s1"

    def test_is_active(self):
        store = Store(id="s1", domain="acme", name="Acme", status=StoreStatus.SUSPENDED)
        assert not store.is_active()

    def test_domain_length_limit(self):
        with pytest.raises(ValidationError):
            Store(id="s1", domain="a" * 64, name="Acme")

    def test_json_round_trip_preserves_fields(self):
        store = Store(id="s1", domain="acme", name="Acme", metadata={"plan": "pro"})
        restored = Store.model_validate_json(store.model_dump_json())
        assert restored.metadata == {"plan": "pro"}
        assert restored.created_at == store.created_at


class TestRouteDecisions:
    def test_route_request_defaults(self):
        request = RouteRequest()
        assert request.hostname is None
        assert request.path == "/"
        assert request.query_string == ""

    def test_rejected_body(self):
        decision = Rejected(reason="reserved subdomain", subdomain="admin")
        assert decision.status_code == 403
        assert decision.body == {"message": "This subdomain is reserved"}

    def test_rewritten_target_with_query(self):
        store = Store(id="s1", domain="acme", name="Acme")
        decision = RewrittenTo(
            path="/store/acme/products", query_string="x=1", subdomain="acme", store=store
        )
        assert decision.target == "/store/acme/products?x=1"

    def test_rewritten_target_without_query(self):
        store = Store(id="s1", domain="acme", name="Acme")
        decision = RewrittenTo(path="/store/acme/", subdomain="acme", store=store)
        assert decision.target == "/store/acme/"

    def test_not_found_default_path(self):
        assert NotFound(subdomain="ghost").path == "/store-not-found"

    def test_error_redirect_status(self):
        assert ErrorRedirect(target="https://example.com/error").status_code == 307


class TestLedgerEntry:
    def test_kind_coerced(self):
        entry = LedgerEntry(kind="document", container_id="orders", resource_id="o1")
        assert entry.kind is ResourceKind.DOCUMENT

    def test_empty_ids_rejected(self):
        with pytest.raises(ValidationError):
            LedgerEntry(kind=ResourceKind.FILE, container_id="", resource_id="f1")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            LedgerEntry(kind="table", container_id="c", resource_id="r")


class TestStoredFile:
    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            StoredFile(id="f1", bucket_id="b", filename="a.png", size=-1)
