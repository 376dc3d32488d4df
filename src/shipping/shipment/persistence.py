"""Persistence gateway over the shipping repositories.

Workflows never touch repositories directly. Every write goes through this
gateway, which also owns the per-shipment locks that serialize rate
consumption.
"""

import threading

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipping.carrier.rates import Rate, from_saved_rate, to_persistable_record
from shipping.errors import NotFoundError
from shipping.shared.address import ShippingAddress
from shipping.shared.parcel import Parcel
from shipping.shared.status import UNFINISHED_STATUSES
from shipping.shipment.shipment import SavedAddress, SavedParcel, SavedRate, Shipment

logger = structlog.get_logger(__name__)

LOCK_STRIPES = 64

# Fixed set of lock stripes shared by all shipments
_shipment_locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))


def shipment_lock(shipment_id: str) -> threading.Lock:
    """The process-wide lock serializing writes to one shipment."""
    return _shipment_locks[hash(str(shipment_id)) % LOCK_STRIPES]


class PersistenceGateway:
    # -------------------------------------------------------------------
    # Inserts
    # -------------------------------------------------------------------
    def create_address(self, address: ShippingAddress) -> SavedAddress:
        record = SavedAddress(address=address)
        current_domain.repository_for(SavedAddress).add(record)
        return record

    def create_shipment(self, shipment: Shipment) -> Shipment:
        current_domain.repository_for(Shipment).add(shipment)
        return shipment

    def create_parcel(self, parcel: Parcel, shipment_id: str, position: int = 0) -> SavedParcel:
        record = SavedParcel(shipment_id=shipment_id, parcel=parcel, position=position)
        current_domain.repository_for(SavedParcel).add(record)
        return record

    def create_saved_rate(self, rate: Rate, shipment_id: str) -> Rate:
        """Persist ``rate`` and return it with its newly issued token."""
        record = SavedRate(**to_persistable_record(rate, shipment_id))
        current_domain.repository_for(SavedRate).add(record)
        return rate.with_token(record.token, str(shipment_id))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_saved_rate_by_token(self, token: str) -> Rate | None:
        records = current_domain.repository_for(SavedRate)._dao.query.filter(token=token).all().items
        return from_saved_rate(records[0]) if records else None

    def get_shipment_by_id(self, shipment_id: str) -> Shipment:
        try:
            return current_domain.repository_for(Shipment).get(shipment_id)
        except ObjectNotFoundError as exc:
            raise NotFoundError("shipment", shipment_id) from exc

    def get_address_by_id(self, address_id: str) -> ShippingAddress:
        try:
            return current_domain.repository_for(SavedAddress).get(address_id).address
        except ObjectNotFoundError as exc:
            raise NotFoundError("address", address_id) from exc

    def get_parcels_by_shipment_id(self, shipment_id: str) -> list[Parcel]:
        records = (
            current_domain.repository_for(SavedParcel)
            ._dao.query.filter(shipment_id=str(shipment_id))
            .order_by("position")
            .all()
            .items
        )
        return [record.parcel for record in records]

    def get_unfinished_shipments(self) -> list[Shipment]:
        """Shipments that have a tracking number and are not in a terminal status."""
        statuses = [status.value for status in UNFINISHED_STATUSES]
        shipments = current_domain.repository_for(Shipment)._dao.query.filter(status__in=statuses).all().items
        return [shipment for shipment in shipments if shipment.tracking_number]

    # -------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------
    def update_shipment(self, shipment: Shipment) -> Shipment:
        """Persist changes to an existing shipment. Never inserts."""
        repo = current_domain.repository_for(Shipment)
        with shipment_lock(shipment.id):
            try:
                repo.get(shipment.id)
            except ObjectNotFoundError as exc:
                raise NotFoundError("shipment", str(shipment.id)) from exc
            repo.add(shipment)
        return shipment

    def reserve_shipment(self, shipment_id: str, rate_token: str) -> Shipment:
        """Claim ``shipment_id`` for booking with ``rate_token``.

        The read and the conditional write happen under the shipment's lock, so
        exactly one of several concurrent claimants succeeds; the others get a
        ``ConflictError``.
        """
        repo = current_domain.repository_for(Shipment)
        with shipment_lock(shipment_id):
            shipment = self.get_shipment_by_id(shipment_id)
            shipment.reserve(rate_token)
            repo.add(shipment)
        logger.info("shipment_reserved", shipment_id=str(shipment_id), rate_token=rate_token)
        return shipment

    def release_shipment(self, shipment_id: str) -> None:
        repo = current_domain.repository_for(Shipment)
        with shipment_lock(shipment_id):
            shipment = self.get_shipment_by_id(shipment_id)
            if shipment.is_shipped:
                return
            shipment.release()
            repo.add(shipment)
        logger.info("shipment_released", shipment_id=str(shipment_id))
