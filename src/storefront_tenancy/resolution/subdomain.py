"""Hostname parsing for subdomain-based store routing.

Splits a request hostname into the tenant label and the root domain it is
served under.

Example::

    acme.example.com        → subdomain "acme", main domain "example.com"
    www.example.com         → subdomain None,   main domain "example.com"
    www.acme.example.com    → subdomain "acme", main domain "example.com"
    acme.localhost:3000     → subdomain "acme", main domain "acme.localhost:3000"

Limitations
-----------
- The root domain is always the last two labels.  Multi-part public
  suffixes such as ``.co.uk`` are not recognised; ``shop.example.co.uk``
  yields subdomain ``"shop"`` only by accident of the label count.
- Only the outermost label is taken as the subdomain.  Deeper labels are
  ignored unless the outermost one is ``www``.
- The host is used verbatim: ports are not stripped and case is not folded.
"""

from __future__ import annotations

from storefront_tenancy.core.types import SubdomainInfo


def parse_subdomain(hostname: str) -> SubdomainInfo:
    """Parse *hostname* into a :class:`SubdomainInfo`.

    Pure and total: never raises, and identical input always yields an equal
    result.

    Args:
        hostname: Raw host value, possibly carrying a port.

    Returns:
        The extracted subdomain (or ``None``), whether the host is a
        localhost variant, and the main domain.
    """
    is_localhost = "localhost" in hostname
    parts = hostname.split(".")

    if is_localhost:
        return SubdomainInfo(
            subdomain=parts[0] if len(parts) > 1 else None,
            is_localhost=True,
            main_domain=hostname,
        )

    main_domain = ".".join(parts[-2:])
    remaining = parts[:-2]
    subdomain = remaining[0] if remaining else None

    if subdomain == "www":
        subdomain = remaining[1] if len(remaining) > 1 else None

    return SubdomainInfo(subdomain=subdomain, is_localhost=False, main_domain=main_domain)


__all__ = ["parse_subdomain"]
