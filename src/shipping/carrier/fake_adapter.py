"""Fake carrier adapter: deterministic carrier for testing and development.

Answers with canned bodies shaped like the real carrier's, so the parsing
code runs unchanged. Configurable success/failure behavior for tests.
"""

import threading
from datetime import UTC, datetime
from uuid import uuid4

from shipping.carrier.port import CarrierPort
from shipping.errors import CarrierFault, CarrierServiceFault

DEFAULT_RATES = (
    ("03", "12.50"),
    ("02", "24.10"),
    ("01", "48.75"),
)


class FakeCarrier(CarrierPort):
    """Fake carrier that always succeeds by default."""

    def __init__(self):
        self._lock = threading.Lock()
        self.should_succeed = True
        self.failure: CarrierFault | None = None
        self.address_result = "valid"
        self.rates = DEFAULT_RATES
        self.calls: list[tuple[str, object]] = []
        self._tracking: dict[str, list[dict]] = {}
        self._failing_tracking_numbers: set[str] = set()

    def configure(
        self,
        should_succeed: bool = True,
        failure: CarrierFault | None = None,
        address_result: str = "valid",
        rates: tuple | None = None,
    ):
        """Configure the fake carrier behavior for testing.

        ``address_result`` is one of ``valid``, ``ambiguous`` or ``none``.
        """
        self.should_succeed = should_succeed
        self.failure = failure
        self.address_result = address_result
        if rates is not None:
            self.rates = rates

    def set_tracking(self, tracking_number: str, type_code: str, description: str, observed_at: datetime | None = None):
        """Append an activity for ``tracking_number``."""
        observed_at = observed_at or datetime.now(UTC)
        self._tracking.setdefault(tracking_number, []).append(
            {
                "Status": {"Type": type_code, "Description": description},
                "Date": observed_at.strftime("%Y%m%d"),
                "Time": observed_at.strftime("%H%M%S"),
            }
        )

    def fail_tracking(self, tracking_number: str) -> None:
        self._failing_tracking_numbers.add(tracking_number)

    def calls_to(self, method: str) -> list:
        return [payload for name, payload in self.calls if name == method]

    def _record(self, method: str, payload) -> None:
        with self._lock:
            self.calls.append((method, payload))
        if not self.should_succeed:
            raise self.failure or CarrierServiceFault("Carrier unavailable")

    def validate_address(self, address_key_format: dict) -> dict:
        self._record("validate_address", address_key_format)

        candidate = {
            "AddressKeyFormat": {
                "AddressLine": [line.strip() for line in address_key_format["AddressLine"].split(",")],
                "PoliticalDivision2": address_key_format["PoliticalDivision2"].upper(),
                "PoliticalDivision1": address_key_format["PoliticalDivision1"],
                "PostcodePrimaryLow": address_key_format["PostcodePrimaryLow"],
                "PostcodeExtendedLow": "0001",
                "CountryCode": address_key_format["CountryCode"],
            }
        }
        if self.address_result == "ambiguous":
            return {"XAVResponse": {"AmbiguousAddressIndicator": "", "Candidate": [candidate] * 7}}
        if self.address_result == "none":
            return {"XAVResponse": {"NoCandidatesIndicator": ""}}
        return {"XAVResponse": {"ValidAddressIndicator": "", "Candidate": candidate}}

    def shop_rates(self, shipment: dict) -> dict:
        self._record("shop_rates", shipment)

        rated = [
            {
                "Service": {"Code": code, "Description": ""},
                "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": price},
            }
            for code, price in self.rates
        ]
        return {"RateResponse": {"RatedShipment": rated[0] if len(rated) == 1 else rated}}

    def create_shipment(self, shipment: dict) -> dict:
        self._record("create_shipment", shipment)

        tracking_number = f"1Z{uuid4().hex[:16].upper()}"
        return {
            "ShipmentResponse": {
                "ShipmentResults": {
                    "ShipmentCharges": {"TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "12.50"}},
                    "BillingWeight": {"UnitOfMeasurement": {"Code": "LBS"}, "Weight": "45.0"},
                    "ShipmentIdentificationNumber": tracking_number,
                    "PackageResults": {
                        "TrackingNumber": tracking_number,
                        "ShippingLabel": {"ImageFormat": {"Code": "GIF"}, "GraphicImage": "R0lGODlhAQABAAAAACw="},
                    },
                }
            }
        }

    def track_shipment(self, tracking_number: str) -> dict:
        self._record("track_shipment", tracking_number)
        if tracking_number in self._failing_tracking_numbers:
            raise CarrierServiceFault("Tracking unavailable", context={"trackingNumber": tracking_number})

        activity = self._tracking.get(tracking_number)
        if activity is None:
            now = datetime.now(UTC)
            activity = [
                {
                    "Status": {"Type": "M", "Description": "Order Processed: Ready for UPS"},
                    "Date": now.strftime("%Y%m%d"),
                    "Time": now.strftime("%H%M%S"),
                }
            ]
        return {
            "TrackResponse": {
                "Shipment": {
                    "InquiryNumber": {"Value": tracking_number},
                    "Package": {
                        "TrackingNumber": tracking_number,
                        "Activity": activity[0] if len(activity) == 1 else list(activity),
                    },
                }
            }
        }
