"""Pydantic API schemas for the shipping connector.

Response bodies use the marketplace's camelCase field names. Request bodies
are validated by ``shipping.validation`` so the same rules apply whether a
workflow is driven over HTTP or from code.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class AddressView(_ResponseModel):
    name: str | None = None
    company: str | None = None
    street1: str | None = None
    street2: str | None = None
    city: str | None = None
    state_code: str | None = None
    zip: str | None = None
    country: str | None = None
    phone: str | None = None
    email: str | None = None


class AddressValidationResponse(_ResponseModel):
    address: AddressView


class RateView(_ResponseModel):
    id: str
    carrier: str
    service_level: str
    price: str | None = None
    currency_code: str | None = None


class ShipmentView(_ResponseModel):
    shipment_id: str | None = None
    shipment_tracking_number: str | None = None
    shipment_status_url: str
    shipment_status: str
    shipment_status_text: str | None = None


class ErrorResponse(_ResponseModel):
    error_code: str
    error_detail: object = None
    tag: str | None = None
    context: dict | None = None
