"""Unit normalization between the generic vocabulary and the carrier's.

The carrier only understands inches/centimeters and pounds/kilograms. Every
generic unit resolves to one of those targets; shipments leaving an imperial
country are always measured in inches and pounds.
"""

from dataclasses import dataclass

from shipping.errors import UnsupportedUnitError

IMPERIAL_UNIT_COUNTRIES = frozenset({"US"})

IMPERIAL = "imperial"
METRIC = "metric"


@dataclass(frozen=True)
class UnitResolution:
    target_unit: str
    carrier_code: str
    description: str


_LENGTH_TARGETS = {
    IMPERIAL: UnitResolution("in", "IN", "Inches"),
    METRIC: UnitResolution("cm", "CM", "Centimeters"),
}

_WEIGHT_TARGETS = {
    IMPERIAL: UnitResolution("lb", "LBS", "Pounds"),
    METRIC: UnitResolution("kg", "KGS", "Kilograms"),
}

LENGTH_UNITS = {"in": IMPERIAL, "ft": IMPERIAL, "yd": IMPERIAL, "mm": METRIC, "cm": METRIC, "m": METRIC}
WEIGHT_UNITS = {"oz": IMPERIAL, "lb": IMPERIAL, "g": METRIC, "kg": METRIC}

# Factors to a base unit per dimension: millimeters and grams
_TO_BASE = {
    "mm": 1.0,
    "cm": 10.0,
    "m": 1000.0,
    "in": 25.4,
    "ft": 304.8,
    "yd": 914.4,
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.349523125,
    "lb": 453.59237,
}


def _resolve(unit: str, origin_country: str | None, systems: dict, targets: dict) -> UnitResolution:
    system = systems.get(unit)
    if system is None:
        raise UnsupportedUnitError(unit)
    if origin_country in IMPERIAL_UNIT_COUNTRIES:
        system = IMPERIAL
    return targets[system]


def resolve_length_unit(unit: str, origin_country: str | None) -> UnitResolution:
    """Pick the carrier length unit for a parcel measured in ``unit``."""
    return _resolve(unit, origin_country, LENGTH_UNITS, _LENGTH_TARGETS)


def resolve_weight_unit(unit: str, origin_country: str | None) -> UnitResolution:
    """Pick the carrier weight unit for a parcel weighed in ``unit``."""
    return _resolve(unit, origin_country, WEIGHT_UNITS, _WEIGHT_TARGETS)


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert ``value`` between two units of the same dimension."""
    if from_unit not in _TO_BASE:
        raise UnsupportedUnitError(from_unit)
    if to_unit not in _TO_BASE:
        raise UnsupportedUnitError(to_unit)
    if (from_unit in LENGTH_UNITS) != (to_unit in LENGTH_UNITS):
        raise UnsupportedUnitError(f"{from_unit}->{to_unit}")
    if from_unit == to_unit:
        return float(value)
    return value * _TO_BASE[from_unit] / _TO_BASE[to_unit]


def format_measure(value: float, precision: int = 2) -> str:
    """Render ``value`` rounded to ``precision`` places, without trailing zeros.

    >>> format_measure(3.937)
    '3.94'
    >>> format_measure(10.0)
    '10'
    """
    text = f"{round(value, precision):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
