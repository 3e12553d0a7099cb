"""ID generation helpers.

All functions use Python's ``secrets`` module, which is backed by the
operating system's cryptographically secure random number generator.  Do
**not** replace calls here with ``random``.
"""

from __future__ import annotations

from datetime import UTC, datetime
import secrets


def generate_resource_id(prefix: str | None = None) -> str:
    """Generate an opaque, URL-safe ID for stores, documents, and files.

    Args:
        prefix: Optional short string prepended to the random part.

    Returns:
        ``"{prefix}-{random}"`` or just ``"{random}"``, where ``random`` is 16
        URL-safe base64 characters.

    Example::

        generate_resource_id()         # "aB3xYz9mQp2sKl7n"
        generate_resource_id("store")  # "store-Kl7nMf4wTv1cBz8p"
    """
    token = secrets.token_urlsafe(12)
    return f"{prefix}-{token}" if prefix else token


def generate_order_number(now: datetime | None = None) -> str:
    """Generate a human-friendly order number.

    Format: ``ORD-YYYYMMDD-XXXXXX`` where ``XXXXXX`` is six uppercase hex
    characters.

    Example::

        generate_order_number()  # "ORD-20260117-9F3A1C"
    """
    stamp = (now or datetime.now(UTC)).strftime("%Y%m%d")
    return f"ORD-{stamp}-{secrets.token_hex(3).upper()}"


__all__ = ["generate_order_number", "generate_resource_id"]
