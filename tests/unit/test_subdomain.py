"""Unit tests: storefront_tenancy.resolution.subdomain

Verified:
* {label}.{domain}.{tld} yields label, www.{domain}.{tld} yields None
* www.{sub}.{domain}.{tld} skips the www label
* Localhost hosts keep the full host as main domain
* Only the outermost label is taken for deeper hosts
* Purity: same input, equal output; never raises
"""

from __future__ import annotations

import pytest

from storefront_tenancy.core.types import SubdomainInfo
from storefront_tenancy.resolution.subdomain import parse_subdomain

pytestmark = pytest.mark.unit


class TestPublicHosts:
    @pytest.mark.parametrize("label", ["acme", "shop-1", "x", "dashboardx"])
    def test_label_domain_tld(self, label):
        info = parse_subdomain(f"{label}.example.com")
        assert info.subdomain == label
        assert info.main_domain == "example.com"
        assert info.is_localhost is False

    def test_bare_root_domain(self):
        info = parse_subdomain("example.com")
        assert info.subdomain is None
        assert info.main_domain == "example.com"

    def test_www_root(self):
        info = parse_subdomain("www.example.com")
        assert info.subdomain is None
        assert info.main_domain == "example.com"

    def test_www_prefixed_tenant(self):
        info = parse_subdomain("www.acme.example.com")
        assert info.subdomain == "acme"
        assert info.main_domain == "example.com"

    def test_outermost_label_only(self):
        info = parse_subdomain("a.b.c.example.com")
        assert info.subdomain == "a"
        assert info.main_domain == "example.com"

    def test_multi_part_suffix_not_recognised(self):
        info = parse_subdomain("shop.example.co.uk")
        assert info.subdomain == "shop"
        assert info.main_domain == "co.uk"

    def test_single_label(self):
        info = parse_subdomain("intranet")
        assert info.subdomain is None
        assert info.main_domain == "intranet"

    def test_port_kept_verbatim(self):
        info = parse_subdomain("acme.example.com:8443")
        assert info.subdomain == "acme"
        assert info.main_domain == "example.com:8443"

    def test_case_not_folded(self):
        assert parse_subdomain("ACME.example.com").subdomain == "ACME"


class TestLocalhost:
    def test_tenant_on_localhost(self):
        info = parse_subdomain("acme.localhost:3000")
        assert info == SubdomainInfo(
            subdomain="acme", is_localhost=True, main_domain="acme.localhost:3000"
        )

    def test_plain_localhost(self):
        info = parse_subdomain("localhost:3000")
        assert info.subdomain is None
        assert info.is_localhost is True
        assert info.main_domain == "localhost:3000"

    def test_www_not_special_on_localhost(self):
        assert parse_subdomain("www.localhost").subdomain == "www"

    @pytest.mark.parametrize("host", ["localhost", "a.localhost", "a.b.localhost:8000"])
    def test_main_domain_is_host(self, host):
        info = parse_subdomain(host)
        assert info.is_localhost is True
        assert info.main_domain == host


class TestPurity:
    @pytest.mark.parametrize(
        "host",
        ["", ".", "..", "acme.example.com", "www.www.example.com", "acme.localhost:3000"],
    )
    def test_total_and_deterministic(self, host):
        assert parse_subdomain(host) == parse_subdomain(host)

    def test_empty_host(self):
        info = parse_subdomain("")
        assert info.subdomain is None
        assert info.main_domain == ""
