"""Structural validation of incoming request bodies.

Request bodies use the marketplace's camelCase field names. Validation
failures are reported as a list of ``{"field", "message"}`` pairs and never
reach the carrier.
"""

from dataclasses import dataclass
from typing import Literal

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shipping.errors import ValidationError
from shipping.shared.address import ShippingAddress
from shipping.shared.parcel import Parcel

LengthUnit = Literal["mm", "cm", "m", "in", "ft", "yd"]
WeightUnit = Literal["g", "kg", "oz", "lb"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ShippingAddressRequest(_RequestModel):
    name: str
    company: str | None = None
    street1: str
    street2: str | None = None
    city: str
    state_code: str
    zip: str
    country: str = Field(min_length=2, max_length=2)
    phone: str | None = None
    email: str | None = None

    def to_value(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class ParcelRequest(_RequestModel):
    length: float = Field(ge=0)
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    length_unit: LengthUnit
    weight: float = Field(ge=0)
    weight_unit: WeightUnit

    def to_value(self) -> Parcel:
        return Parcel(**self.model_dump())


class QuoteRequestBody(_RequestModel):
    shopping_cart_id: str
    origin_address: ShippingAddressRequest
    delivery_address: ShippingAddressRequest
    parcels: list[ParcelRequest] = Field(min_length=1)


class ShipmentRequestBody(_RequestModel):
    shopping_cart_id: str
    rate_id: str


@dataclass(frozen=True)
class QuoteRequest:
    shopping_cart_id: str
    origin_address: ShippingAddress
    delivery_address: ShippingAddress
    parcels: tuple[Parcel, ...]


@dataclass(frozen=True)
class ShipmentRequest:
    shopping_cart_id: str
    rate_token: str


# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------
def _message_for(error: dict) -> str:
    kind = error["type"]
    if kind == "missing":
        return "required"
    if kind == "extra_forbidden":
        return "not.allowed"
    if kind.endswith("_type") or kind.endswith("_parsing") or kind == "model_attributes_type":
        return "incorrect.type"
    return kind


def field_errors(exc: pydantic.ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]) or "body", "message": _message_for(error)}
        for error in exc.errors()
    ]


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------
def validate_address(payload) -> ShippingAddress:
    try:
        return ShippingAddressRequest.model_validate(payload).to_value()
    except pydantic.ValidationError as exc:
        raise ValidationError(
            {"message": "address.is.malformed", "detail": field_errors(exc)},
            kind=ValidationError.INVALID_ADDRESS,
        ) from exc


def validate_quote_request(payload) -> QuoteRequest:
    try:
        body = QuoteRequestBody.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Quote request body is invalid", {"errors": field_errors(exc)}) from exc

    return QuoteRequest(
        shopping_cart_id=body.shopping_cart_id,
        origin_address=body.origin_address.to_value(),
        delivery_address=body.delivery_address.to_value(),
        parcels=tuple(parcel.to_value() for parcel in body.parcels),
    )


def validate_shipment_request(payload) -> ShipmentRequest:
    try:
        body = ShipmentRequestBody.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Shipment request body is invalid", {"errors": field_errors(exc)}) from exc

    return ShipmentRequest(shopping_cart_id=body.shopping_cart_id, rate_token=body.rate_id)
