"""Utility helpers: validation, ID generation, and database compatibility."""

from storefront_tenancy.utils.security import generate_order_number, generate_resource_id
from storefront_tenancy.utils.validation import normalize_store_domain, validate_store_domain

__all__ = [
    "generate_order_number",
    "generate_resource_id",
    "normalize_store_domain",
    "validate_store_domain",
]
