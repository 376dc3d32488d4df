"""Carrier port: abstract interface for the carrier's web APIs.

Workflows program against the port; adapters are swapped via configuration.
Every method returns the parsed JSON body of a successful call, or raises a
classified ``CarrierFault``.
"""

from abc import ABC, abstractmethod


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    def validate_address(self, address_key_format: dict) -> dict:
        """Run street-level address validation.

        Returns:
            the ``XAVResponse`` body
        """
        ...

    @abstractmethod
    def shop_rates(self, shipment: dict) -> dict:
        """Request rates for every service level available for ``shipment``.

        Returns:
            the ``RateResponse`` body
        """
        ...

    @abstractmethod
    def create_shipment(self, shipment: dict) -> dict:
        """Book ``shipment`` with the carrier and obtain its label.

        Returns:
            the ``ShipmentResponse`` body
        """
        ...

    @abstractmethod
    def track_shipment(self, tracking_number: str) -> dict:
        """Fetch package activity for ``tracking_number``.

        Returns:
            the ``TrackResponse`` body
        """
        ...
