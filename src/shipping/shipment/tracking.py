"""Tracking status lookup and the scheduled reconciliation pass.

A pass polls the carrier for every unfinished shipment, then applies the
results one shipment at a time. Carrier calls fan out over a thread pool;
everything that reads or writes a shipment stays on the calling thread.

A status change is persisted only after the marketplace has been notified,
so a failed notification leaves the shipment as it was and the next pass
retries it. A shipment whose status did not change is never notified.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

import structlog

from shipping.carrier.port import CarrierPort
from shipping.carrier.responses import TrackingSnapshot, parse_tracking, to_shipment_view
from shipping.config import ConnectorConfig
from shipping.errors import ShippingError
from shipping.marketplace.port import MarketplaceNotifier
from shipping.shipment.persistence import PersistenceGateway
from shipping.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)

_pass_lock = threading.Lock()


class TrackingStatusLookup:
    def __init__(self, config: ConnectorConfig, carrier: CarrierPort):
        self.config = config
        self.carrier = carrier

    def get_snapshot(self, tracking_number: str) -> TrackingSnapshot:
        return parse_tracking(self.carrier.track_shipment(tracking_number))

    def get_tracking_status(self, tracking_number: str) -> dict:
        """Current carrier status for ``tracking_number``. Nothing is persisted."""
        snapshot = self.get_snapshot(tracking_number)
        return to_shipment_view(
            self.config.carrier.tracking_base_url,
            snapshot.tracking_number,
            snapshot.status.value,
            snapshot.status_text,
        )


@dataclass(frozen=True)
class ReconciliationSummary:
    checked: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0


class TrackingReconciler:
    def __init__(
        self,
        config: ConnectorConfig,
        lookup: TrackingStatusLookup,
        persistence: PersistenceGateway,
        notifier: MarketplaceNotifier,
    ):
        self.config = config
        self.lookup = lookup
        self.persistence = persistence
        self.notifier = notifier

    def _fetch(self, tracking_number: str) -> TrackingSnapshot | None:
        try:
            return self.lookup.get_snapshot(tracking_number)
        except ShippingError as exc:
            logger.warning(
                "tracking_fetch_failed",
                tracking_number=tracking_number,
                error_code=exc.error_code,
                error=str(exc),
            )
        except Exception as exc:
            logger.error("tracking_fetch_crashed", tracking_number=tracking_number, error=str(exc), exc_info=True)
        return None

    def reconcile(self) -> ReconciliationSummary:
        """Run one reconciliation pass.

        Returns an empty summary without doing anything when another pass is
        already running.
        """
        if not _pass_lock.acquire(blocking=False):
            logger.info("tracking_pass_already_running")
            return ReconciliationSummary()
        try:
            return self._reconcile()
        finally:
            _pass_lock.release()

    def _reconcile(self) -> ReconciliationSummary:
        shipments = self.persistence.get_unfinished_shipments()
        if not shipments:
            return ReconciliationSummary()

        workers = max(1, min(self.config.tracking_concurrency, len(shipments)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tracking") as pool:
            snapshots = list(pool.map(self._fetch, [s.tracking_number for s in shipments]))

        updated = skipped = failed = 0
        for shipment, snapshot in zip(shipments, snapshots, strict=True):
            if snapshot is None:
                failed += 1
                continue
            try:
                changed = self._apply(str(shipment.id), snapshot)
            except ShippingError as exc:
                failed += 1
                logger.warning(
                    "tracking_update_failed",
                    shipment_id=str(shipment.id),
                    tracking_number=shipment.tracking_number,
                    error_code=exc.error_code,
                    error=str(exc),
                )
                continue
            except Exception as exc:
                failed += 1
                logger.error(
                    "tracking_update_crashed",
                    shipment_id=str(shipment.id),
                    tracking_number=shipment.tracking_number,
                    error=str(exc),
                    exc_info=True,
                )
                continue
            if changed:
                updated += 1
            else:
                skipped += 1

        summary = ReconciliationSummary(checked=len(shipments), updated=updated, skipped=skipped, failed=failed)
        logger.info("tracking_pass_completed", **asdict(summary))
        return summary

    def _apply(self, shipment_id: str, snapshot: TrackingSnapshot) -> bool:
        shipment: Shipment = self.persistence.get_shipment_by_id(shipment_id)
        if not shipment.apply_tracking(snapshot, now=datetime.now(UTC)):
            return False

        self.notifier.notify_shipment_event(
            {
                "partnerId": shipment.partner_id,
                "shipmentNumber": shipment.shipment_number,
                "trackingNumber": shipment.tracking_number,
            }
        )
        self.persistence.update_shipment(shipment)
        logger.info(
            "shipment_status_changed",
            shipment_id=shipment_id,
            tracking_number=shipment.tracking_number,
            status=shipment.status,
        )
        return True
