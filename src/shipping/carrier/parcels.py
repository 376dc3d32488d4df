"""Translate parcels into carrier package blocks, converting units on the way."""

from shipping.carrier.units import convert, format_measure, resolve_length_unit, resolve_weight_unit
from shipping.shared.parcel import Parcel

QUOTE = "quote"
SHIPMENT = "shipment"

# Customer-supplied packaging
PACKAGING_CODE = "02"

_PACKAGING_KEYS = {QUOTE: "PackagingType", SHIPMENT: "Packaging"}


def to_carrier_package(
    parcel: Parcel,
    origin_country: str | None,
    purpose: str = QUOTE,
    precision: int = 2,
) -> dict:
    """Build a ``Package`` block for a rate (``quote``) or ship (``shipment``) request."""
    if purpose not in _PACKAGING_KEYS:
        raise ValueError(f"Unknown package purpose: {purpose}")

    length_unit = resolve_length_unit(parcel.length_unit, origin_country)
    weight_unit = resolve_weight_unit(parcel.weight_unit, origin_country)

    def _length(value: float) -> str:
        return format_measure(convert(value, parcel.length_unit, length_unit.target_unit), precision)

    return {
        "Dimensions": {
            "UnitOfMeasurement": {
                "Code": length_unit.carrier_code,
                "Description": length_unit.description,
            },
            "Length": _length(parcel.length),
            "Width": _length(parcel.width),
            "Height": _length(parcel.height),
        },
        "PackageWeight": {
            "UnitOfMeasurement": {
                "Code": weight_unit.carrier_code,
                "Description": weight_unit.description,
            },
            "Weight": format_measure(convert(parcel.weight, parcel.weight_unit, weight_unit.target_unit), precision),
        },
        _PACKAGING_KEYS[purpose]: {"Code": PACKAGING_CODE},
    }
