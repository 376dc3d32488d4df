"""Shipment domain events: immutable facts about shipment state changes."""

from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping


@shipping.event(part_of="Shipment")
class ShipmentQuoted:
    """Rates were quoted and the quote was recorded as a new shipment."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    shopping_cart_id = String(required=True)
    partner_id = String()
    quoted_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentBooked:
    """The carrier confirmed the shipment and issued a tracking number."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    shipment_number = String(required=True)
    tracking_number = String(required=True)
    rate_token = String()
    booked_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentStatusChanged:
    """Carrier tracking moved the shipment to a new status."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    tracking_number = String(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    status_text = String()
    observed_at = DateTime(required=True)
