"""Fake marketplace notifier: records events instead of sending them."""

from shipping.errors import NotificationError
from shipping.marketplace.port import MarketplaceNotifier


class FakeMarketplaceNotifier(MarketplaceNotifier):
    """Fake notifier that always accepts events by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Marketplace unavailable"
        self.events: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Marketplace unavailable"):
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify_shipment_event(self, event: dict) -> None:
        if not self.should_succeed:
            raise NotificationError(self.failure_reason, {"trackingNumber": event.get("trackingNumber")})
        self.events.append(dict(event))
