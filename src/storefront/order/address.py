"""Shipping address validation and display.

Checkout and the admin address correction share one set of rules. Errors are
reported per form field as short codes (``cityRequired``,
``postalCodeTooLong``) that the front-end translates.
"""

from dataclasses import dataclass, field

import pydantic
from pydantic import BaseModel, ConfigDict, Field

# Form field name → ShippingAddress field name
_FORM_FIELDS = {
    "recipientName": "recipient_name",
    "recipientPhone": "recipient_phone",
    "addressLine1": "line1",
    "addressLine2": "line2",
    "city": "city",
    "region": "region",
    "postalCode": "postal_code",
    "country": "country",
}

_REQUIRED_ERROR_TYPES = {"missing", "string_too_short", "string_type"}


class AddressForm(BaseModel):
    """Address as entered at checkout or in the admin order editor."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    recipient_name: str = Field(min_length=1, max_length=100, alias="recipientName")
    recipient_phone: str | None = Field(default=None, max_length=20, alias="recipientPhone")
    address_line1: str = Field(min_length=1, max_length=200, alias="addressLine1")
    address_line2: str | None = Field(default=None, max_length=200, alias="addressLine2")
    city: str = Field(min_length=1, max_length=100)
    region: str | None = Field(default=None, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20, alias="postalCode")
    country: str = Field(min_length=1, max_length=100)


_SNAKE_TO_FORM = {name: info.alias or name for name, info in AddressForm.model_fields.items()}


@dataclass(frozen=True)
class AddressValidation:
    ok: bool
    value: dict | None = None  # ShippingAddress fields
    field_errors: dict[str, str] = field(default_factory=dict)


def _error_code(error) -> tuple[str, str]:
    loc = str(error["loc"][0]) if error.get("loc") else ""
    form_name = _SNAKE_TO_FORM.get(loc, loc)
    suffix = "Required" if error["type"] in _REQUIRED_ERROR_TYPES else "TooLong"
    return form_name, f"{form_name}{suffix}"


def validate_address(data) -> AddressValidation:
    """Validate a form mapping (camelCase or snake_case keys).

    Returns the normalized ``ShippingAddress`` field dict on success, with
    blank optional fields stored as ``None``.
    """
    if data is None:
        data = {}
    try:
        form = AddressForm.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        errors: dict[str, str] = {}
        for error in exc.errors():
            name, code = _error_code(error)
            errors.setdefault(name, code)
        return AddressValidation(ok=False, field_errors=errors)

    values = form.model_dump(by_alias=True)
    return AddressValidation(
        ok=True,
        value={target: (values.get(source) or None) for source, target in _FORM_FIELDS.items()},
    )


def _get(address, name):
    if isinstance(address, dict):
        return address.get(name)
    return getattr(address, name, None)


def format_shipping_address(address, currency) -> list[str]:
    """Render an order's address as display lines in the market's convention.

    Taiwanese orders read from the postal district inward, French ones put
    the postal code before the city, everything else follows the US layout.
    """
    name = _get(address, "recipient_name")
    phone = _get(address, "recipient_phone")
    line1 = _get(address, "line1")
    line2 = _get(address, "line2")
    city = _get(address, "city") or ""
    region = _get(address, "region")
    postal = _get(address, "postal_code") or ""
    country = _get(address, "country")

    lines = [name, phone]
    if currency == "TWD":
        lines += [" ".join(part for part in (postal, region, city) if part), line1, line2, country]
    elif currency == "EUR":
        lines += [line1, line2, " ".join(part for part in (postal, city) if part), region, country]
    else:
        locality = f"{city}, {region}" if region else city
        lines += [line1, line2, " ".join(part for part in (locality, postal) if part), country]
    return [line for line in lines if line]
