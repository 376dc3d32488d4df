"""UPS adapter: JSON web services over HTTP.

Each call posts a request envelope carrying ``UPSSecurity`` credentials to
one of the ``/XAV``, ``/Rate``, ``/Ship`` or ``/Track`` endpoints. Faults are
classified into ``CarrierClientFault`` and ``CarrierServiceFault``; timeouts
and transport failures are always service faults.
"""

import httpx
import structlog

from shipping.carrier.port import CarrierPort
from shipping.carrier.responses import classify_fault
from shipping.config import CarrierSettings
from shipping.errors import CarrierServiceFault

logger = structlog.get_logger(__name__)


class UPSCarrier(CarrierPort):
    def __init__(self, settings: CarrierSettings, client: httpx.Client | None = None):
        self.settings = settings
        self.client = client or httpx.Client(timeout=settings.timeout)

    def close(self) -> None:
        self.client.close()

    def _security(self) -> dict:
        return {
            "UPSSecurity": {
                "UsernameToken": {
                    "Username": self.settings.username,
                    "Password": self.settings.password,
                },
                "ServiceAccessToken": {
                    "AccessLicenseNumber": self.settings.access_key,
                },
            }
        }

    def _post(self, endpoint: str, body: dict) -> dict:
        url = f"{self.settings.base_url.rstrip('/')}/{endpoint}"
        payload = {**self._security(), **body}

        try:
            response = self.client.post(url, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("carrier_timeout", endpoint=endpoint, error=str(exc))
            raise CarrierServiceFault(f"Carrier {endpoint} request timed out", context={"endpoint": endpoint}) from exc
        except httpx.HTTPError as exc:
            logger.warning("carrier_unreachable", endpoint=endpoint, error=str(exc))
            raise CarrierServiceFault(f"Carrier {endpoint} request failed", context={"endpoint": endpoint}) from exc
        except Exception as exc:
            # e.g. httpx.InvalidURL, which is not an HTTPError
            logger.error("carrier_request_crashed", endpoint=endpoint, error=str(exc), exc_info=True)
            raise CarrierServiceFault(f"Carrier {endpoint} request failed", context={"endpoint": endpoint}) from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("carrier_non_json_response", endpoint=endpoint, status=response.status_code)
            raise CarrierServiceFault(
                f"Carrier {endpoint} returned a non-JSON response",
                context={"endpoint": endpoint, "status": response.status_code},
            ) from exc

        fault = classify_fault(data)
        if fault is not None:
            logger.info(
                "carrier_fault",
                endpoint=endpoint,
                origin=fault.origin,
                code=fault.code,
                description=fault.description,
            )
            raise fault

        if response.status_code >= 400:
            raise CarrierServiceFault(
                f"Carrier {endpoint} returned HTTP {response.status_code}",
                context={"endpoint": endpoint, "status": response.status_code},
            )

        return data

    def validate_address(self, address_key_format: dict) -> dict:
        return self._post(
            "XAV",
            {
                "XAVRequest": {
                    "Request": {"RequestOption": "1"},
                    "AddressKeyFormat": address_key_format,
                }
            },
        )

    def shop_rates(self, shipment: dict) -> dict:
        return self._post(
            "Rate",
            {
                "RateRequest": {
                    "Request": {"RequestOption": "Shop"},
                    "Shipment": shipment,
                }
            },
        )

    def create_shipment(self, shipment: dict) -> dict:
        return self._post(
            "Ship",
            {
                "ShipmentRequest": {
                    "Request": {"RequestOption": "nonvalidate"},
                    "Shipment": shipment,
                    "LabelSpecification": {"LabelImageFormat": {"Code": self.settings.label_format}},
                }
            },
        )

    def track_shipment(self, tracking_number: str) -> dict:
        return self._post(
            "Track",
            {
                "TrackRequest": {
                    "Request": {"RequestAction": "Track", "RequestOption": "activity"},
                    "InquiryNumber": tracking_number,
                }
            },
        )
