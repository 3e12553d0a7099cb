"""Store-domain validation utilities.

A store domain is the single DNS label a tenant is served under
(``acme`` in ``acme.example.com``).  Every domain passes through
:func:`validate_store_domain` before it is persisted, so the router only
ever looks up labels that could have been registered.

Input length is capped *before* the regex runs to prevent ReDoS on
pathologically long strings.
"""

from __future__ import annotations

import re

# DNS label: letter or digit, then up to 61 letters/digits/hyphens, ending
# with a letter or digit.  1-63 characters total.
_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?\Z")

_MAX_INPUT_LEN: int = 253


def validate_store_domain(domain: str) -> bool:
    """Return ``True`` if *domain* is a valid, lowercase subdomain label.

    Examples::

        validate_store_domain("acme")         # True
        validate_store_domain("acme-outlet")  # True
        validate_store_domain("Acme")         # False  (uppercase)
        validate_store_domain("-acme")        # False  (leading hyphen)
        validate_store_domain("a.b")          # False  (two labels)
    """
    if not domain or not isinstance(domain, str):
        return False
    if len(domain) > _MAX_INPUT_LEN:
        return False
    return bool(_LABEL_RE.match(domain))


def normalize_store_domain(domain: str) -> str:
    """Lowercase and strip *domain* for storage and comparison.

    Example::

        normalize_store_domain("  Acme ")  # "acme"
    """
    return domain.strip().lower()


__all__ = ["normalize_store_domain", "validate_store_domain"]
