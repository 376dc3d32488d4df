"""Shipment workflow: book a previously quoted rate with the carrier.

    Validated → RateResolved → PreconditionChecked → CarrierConfirmed → Persisted

A quote is consumed at most once. Before the carrier is called the shipment
is reserved for the rate token; a concurrent request for the same quote then
fails with ``ConflictError`` instead of booking a second shipment. Once the
carrier has confirmed, any local failure is fatal and the reservation is
kept, because retrying would book the parcel twice.
"""

import structlog

from shipping.carrier.addresses import to_shipment_format
from shipping.carrier.parcels import SHIPMENT, to_carrier_package
from shipping.carrier.port import CarrierPort
from shipping.carrier.rates import Rate
from shipping.carrier.responses import ShipmentConfirmation, parse_shipment_results, to_shipment_view
from shipping.config import ConnectorConfig
from shipping.errors import CarrierFault, NotFoundError, PreconditionFailedError, ShipmentRecordingError
from shipping.shared.address import ShippingAddress
from shipping.shared.parcel import Parcel
from shipping.shipment.persistence import PersistenceGateway
from shipping.shipment.quoting import build_shipper
from shipping.validation import validate_shipment_request

logger = structlog.get_logger(__name__)

SHIPMENT_DESCRIPTION = "Created by UPS Shipping Connector"

# Bill the shipping charges to the shipper's account
BILL_SHIPPER = "01"


class ShipmentWorkflow:
    def __init__(self, config: ConnectorConfig, carrier: CarrierPort, persistence: PersistenceGateway):
        self.config = config
        self.carrier = carrier
        self.persistence = persistence

    def build_shipment_payload(
        self,
        rate: Rate,
        origin: ShippingAddress,
        delivery: ShippingAddress,
        parcels: list[Parcel],
    ) -> dict:
        precision = self.config.carrier.dimension_precision
        return {
            "Description": SHIPMENT_DESCRIPTION,
            "Shipper": build_shipper(self.config, include_contact=True),
            "ShipTo": to_shipment_format(delivery),
            "ShipFrom": to_shipment_format(origin),
            "PaymentInformation": {
                "ShipmentCharge": {
                    "Type": BILL_SHIPPER,
                    "BillShipper": {"AccountNumber": self.config.carrier.account_number},
                }
            },
            "Service": {"Code": rate.code},
            "Package": [to_carrier_package(p, origin.country, SHIPMENT, precision) for p in parcels],
        }

    def create_shipment(self, payload) -> dict:
        request = validate_shipment_request(payload)

        rate = self.persistence.get_saved_rate_by_token(request.rate_token)
        if rate is None:
            raise NotFoundError("rate", request.rate_token)

        shipment = self.persistence.get_shipment_by_id(rate.shipment_id)
        if shipment.shopping_cart_id != request.shopping_cart_id:
            raise PreconditionFailedError(
                f"Provided shoppingCartId [{request.shopping_cart_id}] does not match "
                f"the saved value [{shipment.shopping_cart_id}]"
            )
        shipment.ensure_not_shipped()

        origin = self.persistence.get_address_by_id(shipment.origin_address_id)
        delivery = self.persistence.get_address_by_id(shipment.delivery_address_id)
        parcels = self.persistence.get_parcels_by_shipment_id(shipment.id)

        shipment_id = str(shipment.id)
        self.persistence.reserve_shipment(shipment_id, rate.token)

        try:
            body = self.carrier.create_shipment(self.build_shipment_payload(rate, origin, delivery, parcels))
        except CarrierFault:
            self.persistence.release_shipment(shipment_id)
            logger.warning("shipment_booking_rejected", shipment_id=shipment_id, rate_token=rate.token)
            raise

        try:
            confirmation = parse_shipment_results(body)
            shipment = self._record(shipment_id, confirmation)
        except Exception as exc:
            logger.critical(
                "shipment_not_recorded",
                shipment_id=shipment_id,
                rate_token=rate.token,
                error=str(exc),
                exc_info=True,
            )
            raise ShipmentRecordingError(
                "The carrier accepted the shipment but it could not be recorded",
                {"shipmentId": shipment_id, "cause": str(exc)},
            ) from exc

        logger.info(
            "shipment_booked",
            shipment_id=shipment_id,
            rate_token=rate.token,
            tracking_number=shipment.tracking_number,
        )
        return to_shipment_view(
            self.config.carrier.tracking_base_url,
            shipment.tracking_number,
            shipment.status,
            shipment.status_text,
            shipment.shipment_number,
        )

    def _record(self, shipment_id: str, confirmation: ShipmentConfirmation):
        # Reload so the write is based on the reserved version
        shipment = self.persistence.get_shipment_by_id(shipment_id)
        shipment.record_booking(confirmation)
        return self.persistence.update_shipment(shipment)
