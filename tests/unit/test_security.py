"""Unit tests: storefront_tenancy.utils.security"""

from __future__ import annotations

from datetime import UTC, datetime
import re

import pytest

from storefront_tenancy.utils.security import generate_order_number, generate_resource_id

pytestmark = pytest.mark.unit


class TestGenerateResourceId:
    def test_url_safe(self):
        rid = generate_resource_id()
        assert len(rid) == 16
        assert re.fullmatch(r"[A-Za-z0-9_\-]+", rid)

    def test_prefix(self):
        assert generate_resource_id("store").startswith("store-")

    def test_unique(self):
        assert len({generate_resource_id() for _ in range(500)}) == 500


class TestGenerateOrderNumber:
    def test_format(self):
        number = generate_order_number(datetime(2026, 1, 17, tzinfo=UTC))
        assert re.fullmatch(r"ORD-20260117-[0-9A-F]{6}", number)

    def test_defaults_to_now(self):
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{6}", generate_order_number())
