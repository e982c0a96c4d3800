"""Schemas for inbound order webhooks and the documents derived from them."""

from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CustomerPayload(BaseModel):
    """Customer object nested in an order webhook.

    Attributes:
        email: Customer email, may be missing or null
        first_name: Customer first name
        last_name: Customer last name
    """

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(frozen=True)


class AddressPayload(BaseModel):
    """Billing address of an order; only the identity fields are kept."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(frozen=True)


class LineItemPayload(BaseModel):
    """One product/quantity pair of an order.

    Attributes:
        product_id: Numeric Shopify product id, null for custom items
        title: Display title of the line item
        quantity: Purchased units; zero yields no records
    """

    product_id: int | str | None = None
    title: str = ""
    quantity: int = Field(1, ge=0)

    model_config = ConfigDict(frozen=True)


class OrderPayload(BaseModel):
    """An "orders/create" webhook body.

    Identity fields live in several places depending on how the order was
    placed, so every location is optional here and resolved later by the
    parser's fallback chain.
    """

    id: int | str
    created_at: datetime
    email: str | None = None
    contact_email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    customer: CustomerPayload | None = None
    billing_address: AddressPayload | None = None
    line_items: list[LineItemPayload] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("line_items", mode="before")
    @classmethod
    def default_line_items(cls, v):
        """Treat a null line-item array as empty."""
        return [] if v is None else v

    @property
    def non_pii_id(self) -> str:
        """Profile reference derived from the order, carrying no customer data."""
        return f"order_{self.id}"


# Every shape an identity field can be read from.
IdentitySource = Union[CustomerPayload, AddressPayload, OrderPayload]


class CustomerIdentity(BaseModel):
    """Resolved customer identity; empty strings when nothing was found."""

    email: str = ""
    first_name: str = ""
    last_name: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class EnrichedRecord(BaseModel):
    """Catalog data for one purchased unit of a line item.

    Attributes:
        line_item_title: Title of the originating line item
        details: Metaobject fields with the key prefix stripped
        ticket_title: Per-unit title, set when a scheduling link was minted
        scheduling_link: Single-use booking URL for this unit
    """

    line_item_title: str
    details: dict[str, str] = Field(default_factory=dict)
    ticket_title: str | None = None
    scheduling_link: str | None = None

    def get(self, key: str, default: str = "N/A") -> str:
        return self.details.get(key) or default

    def as_properties(self) -> dict[str, str]:
        """Flatten into the property dict sent with the tracked event."""
        properties = dict(self.details)
        properties["line_item_title"] = self.line_item_title
        if self.ticket_title:
            properties["ticket_title"] = self.ticket_title
        if self.scheduling_link:
            properties["scheduling_link"] = self.scheduling_link
        return properties


class WebhookResponse(BaseModel):
    """Flat response returned to the webhook sender."""

    status_code: int
    body: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def success(cls) -> "WebhookResponse":
        return cls(status_code=200, body="Success")

    @classmethod
    def unauthorized(cls) -> "WebhookResponse":
        return cls(status_code=401, body="Invalid request")

    @classmethod
    def server_error(cls) -> "WebhookResponse":
        return cls(status_code=500, body="Internal Server Error")
