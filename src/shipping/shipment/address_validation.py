"""Address validation workflow.

The carrier normalizes addresses against the postal database rather than
checking fields one by one: an address is invalid when it matches no
address, or more than one. Only US addresses can be validated.
"""

import structlog

from shipping.carrier.addresses import to_response_view, to_validation_format
from shipping.carrier.port import CarrierPort
from shipping.carrier.responses import parse_address_validation
from shipping.errors import UnsupportedCountryError
from shipping.validation import validate_address

logger = structlog.get_logger(__name__)

SUPPORTED_VALIDATION_COUNTRIES = frozenset({"US"})


class AddressValidationWorkflow:
    def __init__(self, carrier: CarrierPort):
        self.carrier = carrier

    def validate(self, payload) -> dict:
        """Return ``{"address": candidate}`` for a deliverable address."""
        address = validate_address(payload)
        if address.country not in SUPPORTED_VALIDATION_COUNTRIES:
            raise UnsupportedCountryError(address.country)

        candidate = parse_address_validation(self.carrier.validate_address(to_validation_format(address)), address)
        logger.info("address_validated", country=address.country, zip=candidate.zip)
        return {"address": to_response_view(candidate)}
