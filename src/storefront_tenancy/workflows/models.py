"""Input and output models for the multi-step write workflows."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from storefront_tenancy.core.types import Document, StoredFile, StoreType


class Address(BaseModel):
    """Delivery address captured at checkout."""

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(..., min_length=1, max_length=255)
    line1: str = Field(..., min_length=1, max_length=255)
    line2: str | None = None
    city: str = Field(..., min_length=1, max_length=120)
    state: str | None = None
    postal_code: str = Field(..., min_length=1, max_length=32)
    country: str = Field(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2 code.")
    phone: str | None = None


class OrderLine(BaseModel):
    """One product in an order."""

    model_config = ConfigDict(frozen=True)

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)
    name: str | None = None

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


class Upload(BaseModel):
    """A file supplied by the caller, e.g. an order attachment or a category icon."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1, max_length=255)
    content: bytes
    content_type: str | None = None


class OrderDraft(BaseModel):
    """Everything needed to place one order.

    Attributes:
        customer_id: Buyer's user ID.
        store_id: Store the order was placed in, if any.
        currency: ISO 4217 code the prices are expressed in.
        address: Delivery address; stored as its own document.
        items: At least one order line.
        attachments: Optional files uploaded with the order.
        notes: Free-form buyer note.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: str = Field(..., min_length=1)
    store_id: str | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    address: Address
    items: list[OrderLine] = Field(..., min_length=1)
    attachments: list[Upload] = Field(default_factory=list)
    notes: str | None = None

    @property
    def subtotal(self) -> float:
        return round(sum(line.unit_price * line.quantity for line in self.items), 2)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)


class StoreDraft(BaseModel):
    """A new storefront: its subdomain, display name, and branding images.

    Attributes:
        domain: Requested subdomain label.
        name: Display name.
        owner_id: Owning user ID.
        logo: Store logo, uploaded to the store assets bucket.
        banners: Banner images, uploaded before the logo.
        operating_country: ISO 3166-1 alpha-2 code.
        currency: ISO 4217 code prices are shown in.
    """

    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., min_length=1, max_length=63)
    name: str = Field(..., min_length=1, max_length=255)
    owner_id: str | None = None
    store_type: StoreType = StoreType.VIRTUAL
    logo: Upload
    banners: list[Upload] = Field(default_factory=list)
    description: str | None = None
    bio: str | None = None
    operating_country: str | None = Field(default=None, min_length=2, max_length=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class PlacedOrder(BaseModel):
    """Every resource a successful :func:`place_order` created."""

    model_config = ConfigDict(frozen=True)

    order_number: str
    order: Document
    address: Document
    items: tuple[Document, ...]
    attachments: tuple[StoredFile, ...] = ()


__all__ = ["Address", "OrderDraft", "OrderLine", "PlacedOrder", "StoreDraft", "Upload"]
