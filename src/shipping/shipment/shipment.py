"""Shipment aggregate and the records created alongside it by a quote.

A quote creates two SavedAddress records, the Shipment, one SavedParcel per
package and one SavedRate per service level. Booking later consumes one of
the rates and the tracking pass moves the Shipment through its statuses.

State Machine:
    UNKNOWN → PRE_TRANSIT → TRANSIT → {DELIVERED, RETURNED, FAILURE}
    (the carrier may report any status; terminal statuses are never polled again)
"""

from datetime import UTC, datetime
from uuid import uuid4

from protean.fields import DateTime, Identifier, Integer, String, Text, ValueObject

from shipping.domain import shipping
from shipping.errors import ConflictError
from shipping.shared.address import ShippingAddress
from shipping.shared.parcel import Parcel
from shipping.shared.status import TERMINAL_STATUSES, ShipmentStatus
from shipping.shipment.events import ShipmentBooked, ShipmentQuoted, ShipmentStatusChanged


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@shipping.aggregate
class SavedAddress:
    """An origin or delivery address owned by a shipment."""

    address = ValueObject(ShippingAddress, required=True)
    created_at = DateTime(default=lambda: datetime.now(UTC))


@shipping.aggregate
class SavedParcel:
    """One package of a quote."""

    shipment_id = Identifier(required=True)
    position = Integer(default=0)
    parcel = ValueObject(Parcel, required=True)


@shipping.aggregate
class SavedRate:
    """A quoted rate. Its token is the handle callers book shipments with."""

    token = String(max_length=36, unique=True, default=lambda: str(uuid4()))
    shipment_id = Identifier(required=True)
    code = String(required=True, max_length=10)
    carrier = String(required=True, max_length=50)
    service_level = String(max_length=100)
    price = String(max_length=20)
    currency_code = String(max_length=3)
    created_at = DateTime(default=lambda: datetime.now(UTC))


@shipping.aggregate
class Shipment:
    shopping_cart_id = String(required=True, max_length=255)
    origin_address_id = Identifier(required=True)
    delivery_address_id = Identifier(required=True)
    partner_id = String(max_length=100)
    status = String(choices=ShipmentStatus, default=ShipmentStatus.UNKNOWN.value)
    status_text = String(max_length=500)
    shipment_number = String(max_length=50)
    tracking_number = String(max_length=50)
    reserved_rate_token = String(max_length=36)
    charge_amount = String(max_length=20)
    charge_currency = String(max_length=3)
    weight_amount = String(max_length=20)
    weight_units = String(max_length=10)
    label_format = String(max_length=10)
    label_data = Text()
    last_tracking_update = DateTime()
    last_activity_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def quote(
        cls,
        shopping_cart_id: str,
        origin_address_id: str,
        delivery_address_id: str,
        partner_id: str | None = None,
    ):
        """Record a new quote as an unbooked shipment."""
        now = datetime.now(UTC)
        shipment = cls(
            shopping_cart_id=shopping_cart_id,
            origin_address_id=origin_address_id,
            delivery_address_id=delivery_address_id,
            partner_id=partner_id,
            status=ShipmentStatus.UNKNOWN.value,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentQuoted(
                shipment_id=str(shipment.id),
                shopping_cart_id=shopping_cart_id,
                partner_id=partner_id,
                quoted_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Rate consumption
    # -------------------------------------------------------------------
    @property
    def is_shipped(self) -> bool:
        return bool(self.tracking_number)

    def ensure_not_shipped(self) -> None:
        if self.is_shipped:
            raise ConflictError(
                f"A shipment [{self.tracking_number}] already exists for this rate code.",
                {"shipmentId": str(self.id), "trackingNumber": self.tracking_number},
            )

    def reserve(self, rate_token: str) -> None:
        """Claim this shipment for booking with ``rate_token``.

        Only one rate of a quote can ever be booked, so a second claim fails
        whichever token it carries.
        """
        self.ensure_not_shipped()
        if self.reserved_rate_token:
            raise ConflictError(
                "A shipment is already being created for this quote.",
                {"shipmentId": str(self.id)},
                reason="reserved",
            )
        self.reserved_rate_token = rate_token
        self.updated_at = datetime.now(UTC)

    def release(self) -> None:
        self.reserved_rate_token = None
        self.updated_at = datetime.now(UTC)

    def record_booking(self, confirmation) -> None:
        """Store the carrier's confirmation. The tracking number is set only once."""
        self.ensure_not_shipped()
        now = datetime.now(UTC)
        self.shipment_number = confirmation.shipment_number
        self.tracking_number = confirmation.tracking_number
        self.charge_amount = confirmation.charge_amount
        self.charge_currency = confirmation.charge_currency
        self.weight_amount = confirmation.weight_amount
        self.weight_units = confirmation.weight_units
        self.label_format = confirmation.label_format
        self.label_data = confirmation.label_data
        self.updated_at = now
        self.raise_(
            ShipmentBooked(
                shipment_id=str(self.id),
                shipment_number=confirmation.shipment_number,
                tracking_number=confirmation.tracking_number,
                rate_token=self.reserved_rate_token,
                booked_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------
    @property
    def is_finished(self) -> bool:
        return ShipmentStatus(self.status) in TERMINAL_STATUSES

    def is_tracking_update(self, snapshot) -> bool:
        """True when ``snapshot`` is at least as recent as the last seen activity and changes the status."""
        last_activity = _as_utc(self.last_activity_at)
        if last_activity is not None and _as_utc(snapshot.observed_at) < last_activity:
            return False
        return snapshot.status.value != self.status

    def apply_tracking(self, snapshot, now: datetime | None = None) -> bool:
        """Move to the status reported by ``snapshot``. Returns False when nothing changed."""
        if not self.is_tracking_update(snapshot):
            return False

        now = now or datetime.now(UTC)
        previous = self.status
        self.status = snapshot.status.value
        self.status_text = snapshot.status_text
        self.last_activity_at = snapshot.observed_at
        self.last_tracking_update = now
        self.updated_at = now
        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                tracking_number=self.tracking_number,
                previous_status=previous,
                status=snapshot.status.value,
                status_text=snapshot.status_text,
                observed_at=snapshot.observed_at,
            )
        )
        return True
