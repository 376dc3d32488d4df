"""Parsing of carrier response bodies.

The carrier returns a bare object where a list holds a single element, so
every repeatable field goes through ``as_list`` before it is read. Anything
outside the supported shapes raises ``MalformedCarrierResponseError``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlencode

from shipping.carrier.addresses import from_carrier_address, to_response_view
from shipping.carrier.rates import Rate, from_carrier_rate
from shipping.errors import (
    CarrierClientFault,
    CarrierFault,
    CarrierServiceFault,
    MalformedCarrierResponseError,
    ValidationError,
)
from shipping.shared.address import ShippingAddress
from shipping.shared.status import ShipmentStatus

CANDIDATE_ADDRESS_LIMIT = 5

ACTIVITY_STATUS = {
    "M": ShipmentStatus.UNKNOWN,  # Manifest pickup pending
    "P": ShipmentStatus.PRE_TRANSIT,  # Picked up
    "I": ShipmentStatus.TRANSIT,
    "D": ShipmentStatus.DELIVERED,
    "X": ShipmentStatus.FAILURE,  # Exception
}


@dataclass(frozen=True)
class TrackingSnapshot:
    """Latest carrier activity for one package. Never persisted as-is."""

    tracking_number: str
    status: ShipmentStatus
    status_text: str | None
    observed_at: datetime


@dataclass(frozen=True)
class ShipmentConfirmation:
    charge_amount: str
    charge_currency: str
    weight_amount: str
    weight_units: str
    shipment_number: str
    tracking_number: str
    label_format: str | None = None
    label_data: str | None = None


def as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def tracking_url(base_url: str, tracking_number: str | None) -> str:
    """Browser URL where an end user can follow a package."""
    return f"{base_url}?{urlencode({'trackNums': tracking_number or '', 'track.x': 'track'})}"


def to_shipment_view(
    tracking_base_url: str,
    tracking_number: str | None,
    status: str | None,
    status_text: str | None = None,
    shipment_number: str | None = None,
) -> dict:
    return {
        "shipmentId": shipment_number or tracking_number,
        "shipmentTrackingNumber": tracking_number,
        "shipmentStatusUrl": tracking_url(tracking_base_url, tracking_number),
        "shipmentStatus": status or ShipmentStatus.UNKNOWN.value,
        "shipmentStatusText": status_text,
    }


# ---------------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------------
def classify_fault(body) -> CarrierFault | None:
    """Return the classified fault carried by ``body``, or None if there is none.

    ``faultcode == "Client"`` means the carrier rejected caller-supplied data;
    every other fault is attributed to the carrier.
    """
    if not isinstance(body, Mapping) or "Fault" not in body:
        return None

    fault = body.get("Fault") or {}
    details = as_list(((fault.get("detail") or {}).get("Errors") or {}).get("ErrorDetail"))
    primary = (details[0].get("PrimaryErrorCode") or {}) if details else {}
    code = primary.get("Code")
    description = primary.get("Description") or fault.get("faultstring")

    fault_class = CarrierClientFault if fault.get("faultcode") == "Client" else CarrierServiceFault
    return fault_class(description, code=code, description=description)


# ---------------------------------------------------------------------------
# Rating
# ---------------------------------------------------------------------------
def parse_rates(body: Mapping) -> list[Rate]:
    """Rates from a ``RateResponse`` in the carrier's order."""
    try:
        rated = body["RateResponse"].get("RatedShipment")
    except (KeyError, TypeError, AttributeError) as exc:
        raise MalformedCarrierResponseError("Rate response has no RateResponse", {"cause": str(exc)}) from exc

    rated = as_list(rated)
    if not all(isinstance(item, Mapping) for item in rated):
        raise MalformedCarrierResponseError("RatedShipment entries must be objects", {"cause": repr(rated)})
    return [from_carrier_rate(item) for item in rated]


# ---------------------------------------------------------------------------
# Shipping
# ---------------------------------------------------------------------------
def parse_shipment_results(body: Mapping) -> ShipmentConfirmation:
    try:
        results = body["ShipmentResponse"]["ShipmentResults"]
        charges = results["ShipmentCharges"]["TotalCharges"]
        billing_weight = results["BillingWeight"]
        package = as_list(results["PackageResults"])[0]
        label = package.get("ShippingLabel") or {}
        return ShipmentConfirmation(
            charge_amount=charges["MonetaryValue"],
            charge_currency=charges["CurrencyCode"],
            weight_amount=billing_weight["Weight"],
            weight_units=billing_weight["UnitOfMeasurement"]["Code"],
            shipment_number=results["ShipmentIdentificationNumber"],
            tracking_number=package["TrackingNumber"],
            label_format=(label.get("ImageFormat") or {}).get("Code"),
            label_data=label.get("GraphicImage"),
        )
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise MalformedCarrierResponseError(
            "Carrier returned an invalid ShipmentResponse", {"cause": repr(exc)}
        ) from exc


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------
def parse_activity_time(date: str, time: str) -> datetime:
    """Combine the carrier's ``YYYYMMDD`` date and ``HHMMSS`` time."""
    return datetime.strptime(f"{date}{time or '000000'}", "%Y%m%d%H%M%S").replace(tzinfo=UTC)


def parse_tracking(body: Mapping) -> TrackingSnapshot:
    """Reduce a ``TrackResponse`` to the latest activity of the inquired package.

    Only parcel shipments are supported: freight responses carry no
    ``Package`` and are rejected.
    """
    try:
        shipment = as_list(body["TrackResponse"]["Shipment"])[0]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedCarrierResponseError("Tracking response has no shipment", {"cause": repr(exc)}) from exc
    if not isinstance(shipment, Mapping):
        raise MalformedCarrierResponseError("Tracking shipment is not an object", {"cause": repr(shipment)})

    packages = as_list(shipment.get("Package"))
    if not packages:
        raise MalformedCarrierResponseError("Only parcel tracking is supported", {"cause": "missing Package"})
    if not all(isinstance(p, Mapping) for p in packages):
        raise MalformedCarrierResponseError("Tracking package is not an object")

    inquiry_number = (shipment.get("InquiryNumber") or {}).get("Value")
    if len(packages) == 1:
        package = packages[0]
    else:
        package = next((p for p in packages if p.get("TrackingNumber") == inquiry_number), None)
    if package is None:
        raise MalformedCarrierResponseError(
            "Tracking response does not contain the inquired package", {"inquiryNumber": inquiry_number}
        )

    try:
        activities = [(parse_activity_time(a["Date"], a.get("Time")), a) for a in as_list(package.get("Activity"))]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedCarrierResponseError("Unreadable package activity", {"cause": repr(exc)}) from exc
    if not activities:
        raise MalformedCarrierResponseError("Package info does not contain any activity")

    observed_at, latest = max(activities, key=lambda pair: pair[0])
    status = latest.get("Status")
    if not isinstance(status, Mapping):
        status = {}
    return TrackingSnapshot(
        tracking_number=package.get("TrackingNumber") or inquiry_number,
        status=ACTIVITY_STATUS.get(status.get("Type"), ShipmentStatus.UNKNOWN),
        status_text=status.get("Description"),
        observed_at=observed_at,
    )


# ---------------------------------------------------------------------------
# Address validation
# ---------------------------------------------------------------------------
def parse_address_validation(body: Mapping, address: ShippingAddress) -> ShippingAddress:
    """Return the validated candidate, or raise why the address is unusable.

    Indicators are either absent or present with an empty string value.
    """
    response = body.get("XAVResponse") if isinstance(body, Mapping) else None
    if not isinstance(response, Mapping):
        raise MalformedCarrierResponseError("Unexpected address validation response", {"body": body})

    contact = {"name": address.name, "company": address.company, "phone": address.phone, "email": address.email}
    candidates = as_list(response.get("Candidate"))

    if response.get("ValidAddressIndicator") == "" and candidates:
        return from_carrier_address(candidates[0].get("AddressKeyFormat") or {}, **contact)

    if response.get("AmbiguousAddressIndicator") == "":
        candidate_addresses = [
            to_response_view(from_carrier_address(c.get("AddressKeyFormat") or {}, **contact))
            for c in candidates[:CANDIDATE_ADDRESS_LIMIT]
        ]
        raise ValidationError(
            {"message": "ambiguous.address.multiple.results", "detail": []},
            {"candidateAddresses": candidate_addresses},
            kind=ValidationError.INVALID_ADDRESS,
        )

    if response.get("NoCandidatesIndicator") == "":
        raise ValidationError(
            {"message": "no.matching.addresses.found", "detail": []},
            kind=ValidationError.INVALID_ADDRESS,
        )

    raise MalformedCarrierResponseError("Unexpected address validation response", {"body": dict(response)})
