"""Quote workflow: fetch carrier rates and record the quote for later booking.

    Validated → RatesFetched → Persisted → Returned

The carrier is only called with a structurally valid request. The quote's
addresses, shipment, parcels and rates are then written in one unit of work,
so a rate token is never issued for a partially recorded quote.
"""

import structlog
from protean.core.unit_of_work import UnitOfWork

from shipping.carrier.addresses import to_quote_format
from shipping.carrier.parcels import QUOTE, to_carrier_package
from shipping.carrier.port import CarrierPort
from shipping.carrier.rates import to_response_view
from shipping.carrier.responses import parse_rates
from shipping.config import ConnectorConfig
from shipping.shipment.persistence import PersistenceGateway
from shipping.shipment.shipment import Shipment
from shipping.validation import QuoteRequest, validate_quote_request

logger = structlog.get_logger(__name__)


def build_shipper(config: ConnectorConfig, include_contact: bool = False) -> dict:
    """The configured account holder in the carrier's ``Shipper`` format."""
    shipper = config.carrier.shipper
    payload = {
        "Name": shipper.name,
        "ShipperNumber": shipper.shipper_number,
        "Address": {
            "AddressLine": [line for line in (shipper.street1, shipper.street2) if line],
            "City": shipper.city,
            "StateProvinceCode": shipper.state_code,
            "PostalCode": shipper.zip,
            "CountryCode": shipper.country,
        },
    }
    if include_contact:
        payload["TaxIdentificationNumber"] = shipper.tax_identification_number
        payload["Phone"] = {"Number": shipper.phone}
    return payload


class QuoteWorkflow:
    def __init__(self, config: ConnectorConfig, carrier: CarrierPort, persistence: PersistenceGateway):
        self.config = config
        self.carrier = carrier
        self.persistence = persistence

    def build_quote_payload(self, request: QuoteRequest) -> dict:
        origin_country = request.origin_address.country
        payload = {
            "Shipper": build_shipper(self.config),
            "ShipTo": to_quote_format(request.delivery_address),
            "ShipFrom": to_quote_format(request.origin_address),
            "Package": [
                to_carrier_package(parcel, origin_country, QUOTE, self.config.carrier.dimension_precision)
                for parcel in request.parcels
            ],
        }
        if self.config.carrier.use_negotiated_rates:
            payload["ShipmentRatingOptions"] = {"NegotiatedRatesIndicator": ""}
        return payload

    def get_quotes(self, payload, partner_id: str | None = None) -> list[dict]:
        """Quote every service level for ``payload`` and return the rate views in carrier order."""
        request = validate_quote_request(payload)

        rates = parse_rates(self.carrier.shop_rates(self.build_quote_payload(request)))
        logger.info("rates_fetched", shopping_cart_id=request.shopping_cart_id, rate_count=len(rates))

        with UnitOfWork():
            origin = self.persistence.create_address(request.origin_address)
            delivery = self.persistence.create_address(request.delivery_address)
            shipment = self.persistence.create_shipment(
                Shipment.quote(
                    shopping_cart_id=request.shopping_cart_id,
                    origin_address_id=str(origin.id),
                    delivery_address_id=str(delivery.id),
                    partner_id=partner_id,
                )
            )
            for position, parcel in enumerate(request.parcels):
                self.persistence.create_parcel(parcel, str(shipment.id), position)
            saved_rates = [self.persistence.create_saved_rate(rate, str(shipment.id)) for rate in rates]

        logger.info(
            "quote_recorded",
            shipment_id=str(shipment.id),
            shopping_cart_id=request.shopping_cart_id,
            partner_id=partner_id,
        )
        return [to_response_view(rate) for rate in saved_rates]
