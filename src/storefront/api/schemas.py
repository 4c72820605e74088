"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer) — separate from the
internal Protean commands and the ``ActionResult`` values actions return.
Field names follow the front-end's camelCase; Python code may populate them
by snake_case name.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Bag & checkout requests
# ---------------------------------------------------------------------------
class BagLineSchema(_Schema):
    product_id: str = Field(alias="productId", min_length=1)
    volume_id: int = Field(alias="volumeId")
    quantity: int = 1  # clamped server-side


class BagDetailsRequest(_Schema):
    items: list[BagLineSchema] = Field(default_factory=list)
    locale: str = "us"


class CheckoutAddressSchema(_Schema):
    recipient_name: str = Field(default="", alias="recipientName")
    recipient_phone: str = Field(default="", alias="recipientPhone")
    address_line1: str = Field(default="", alias="addressLine1")
    address_line2: str = Field(default="", alias="addressLine2")
    city: str = ""
    region: str = ""
    postal_code: str = Field(default="", alias="postalCode")
    country: str = ""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "recipientName": "Mei Lin",
                    "recipientPhone": "0912345678",
                    "addressLine1": "No. 7, Section 1, Roosevelt Rd",
                    "addressLine2": "",
                    "city": "Zhongzheng",
                    "region": "Taipei",
                    "postalCode": "100",
                    "country": "Taiwan",
                }
            ]
        },
    }


class CheckoutRequest(_Schema):
    items: list[BagLineSchema] = Field(default_factory=list)
    selected_sample: str | None = Field(default=None, alias="selectedSample")
    address: CheckoutAddressSchema
    locale: str = "us"


# ---------------------------------------------------------------------------
# Admin requests
# ---------------------------------------------------------------------------
class UpdateStatusRequest(_Schema):
    status: str


class UpdateTrackingRequest(_Schema):
    tracking_code: str = Field(alias="trackingCode")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class BagItemDetailsResponse(_Schema):
    product_id: str = Field(serialization_alias="productId")
    product_slug: str = Field(serialization_alias="productSlug")
    product_name: str = Field(serialization_alias="productName")
    product_subtitle: str = Field(serialization_alias="productSubtitle")
    product_image: str | None = Field(default=None, serialization_alias="productImage")
    volume_id: int = Field(serialization_alias="volumeId")
    volume_display: str = Field(serialization_alias="volumeDisplay")
    quantity: int
    price: float
    line_total: float = Field(serialization_alias="lineTotal")


class SampleOptionResponse(_Schema):
    value: str
    label: str


class BagDetailsResponse(_Schema):
    items: list[BagItemDetailsResponse]
    samples: list[SampleOptionResponse]
    subtotal: float


class OrderCreatedResponse(_Schema):
    success: bool = True
    order_id: str = Field(serialization_alias="orderId")
    order_number: str = Field(serialization_alias="orderNumber")
