"""Marketplace port: abstract interface for shipment event notifications."""

from abc import ABC, abstractmethod


class MarketplaceNotifier(ABC):
    """Abstract interface for marketplace notification adapters."""

    @abstractmethod
    def notify_shipment_event(self, event: dict) -> None:
        """Tell the marketplace that a shipment changed.

        ``event`` carries ``partnerId``, ``shipmentNumber`` and
        ``trackingNumber``. Raises ``NotificationError`` when the marketplace
        did not accept the event.
        """
        ...
