"""AppDirect notifier: posts shipment events to the partner's marketplace.

The channel is chosen by the event's ``partnerId``; requests authenticate
with the channel's key and secret.
"""

import httpx
import structlog

from shipping.config import ConnectorConfig
from shipping.errors import NotificationError
from shipping.marketplace.port import MarketplaceNotifier

logger = structlog.get_logger(__name__)

SHIPMENT_EVENTS_PATH = "/api/integration/v1/shipping/events"


class AppDirectNotifier(MarketplaceNotifier):
    def __init__(self, config: ConnectorConfig, client: httpx.Client | None = None):
        self.config = config
        self.client = client or httpx.Client(timeout=config.notification_timeout)

    def close(self) -> None:
        self.client.close()

    def notify_shipment_event(self, event: dict) -> None:
        partner = event.get("partnerId")
        channel = self.config.get_channel(partner)
        if channel is None:
            raise NotificationError(f"No channel configured for partner {partner!r}", {"partnerId": partner})

        url = f"{channel.base_url.rstrip('/')}{SHIPMENT_EVENTS_PATH}"
        try:
            response = self.client.post(url, json=event, auth=(channel.key, channel.secret))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationError(
                f"Marketplace rejected the shipment event with HTTP {exc.response.status_code}",
                {"partnerId": partner, "trackingNumber": event.get("trackingNumber")},
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationError(
                "Marketplace could not be reached",
                {"partnerId": partner, "trackingNumber": event.get("trackingNumber"), "cause": str(exc)},
            ) from exc

        logger.info("shipment_event_sent", partner_id=partner, tracking_number=event.get("trackingNumber"))
