"""Carrier service codes and rate translation."""

from collections.abc import Mapping
from dataclasses import dataclass, replace

CARRIER_NAME = "UPS"

# The carrier returns bare service codes, usually without a description
SERVICE_CODE_NAMES = {
    "01": "UPS Next Day Air",
    "02": "UPS 2nd Day Air",
    "03": "UPS Ground",
    "07": "UPS Worldwide Express",
    "08": "UPS Worldwide Expedited",
    "11": "UPS Standard",
    "12": "UPS 3 Day Select",
    "13": "UPS Next Day Air Saver",
    "14": "UPS Next Day Air Early A.M.",
    "54": "UPS Worldwide Express Plus",
    "59": "UPS 2nd Day Air A.M.",
    "65": "UPS Saver",
    "82": "UPS Today Standard",
    "83": "UPS Today Dedicated Courier",
    "84": "UPS Today Intercity",
    "85": "UPS Today Express",
    "86": "UPS Today Express Saver",
}

UNKNOWN_SERVICE = "unknown"


@dataclass(frozen=True)
class Rate:
    """A price quoted by the carrier for one service level.

    ``token`` and ``shipment_id`` are only set once the rate is persisted.
    Prices are kept as the carrier's decimal string.
    """

    code: str
    carrier: str
    service_level: str
    price: str
    currency_code: str
    token: str | None = None
    shipment_id: str | None = None

    def with_token(self, token: str, shipment_id: str) -> "Rate":
        return replace(self, token=token, shipment_id=shipment_id)


def describe_service_code(code: str | None) -> str:
    return SERVICE_CODE_NAMES.get(code, UNKNOWN_SERVICE)


def from_carrier_rate(rated_shipment: Mapping) -> Rate:
    """Build a Rate from one ``RatedShipment`` element."""
    service = rated_shipment.get("Service") or {}
    charges = rated_shipment.get("TotalCharges") or {}
    code = service.get("Code")
    return Rate(
        code=code,
        carrier=CARRIER_NAME,
        service_level=service.get("Description") or describe_service_code(code),
        price=charges.get("MonetaryValue"),
        currency_code=charges.get("CurrencyCode"),
    )


def to_persistable_record(rate: Rate, shipment_id: str) -> dict:
    """Field values for a SavedRate owned by ``shipment_id``."""
    return {
        "shipment_id": shipment_id,
        "code": rate.code,
        "carrier": rate.carrier,
        "service_level": rate.service_level,
        "price": rate.price,
        "currency_code": rate.currency_code,
    }


def from_saved_rate(record) -> Rate:
    return Rate(
        code=record.code,
        carrier=record.carrier,
        service_level=record.service_level,
        price=record.price,
        currency_code=record.currency_code,
        token=record.token,
        shipment_id=record.shipment_id,
    )


def to_response_view(rate: Rate) -> dict:
    return {
        "id": rate.token,
        "carrier": rate.carrier,
        "serviceLevel": rate.service_level,
        "price": rate.price,
        "currencyCode": rate.currency_code,
    }
