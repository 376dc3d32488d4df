"""Shipping bounded context: carrier quoting, shipment booking and tracking.

Translates the marketplace's carrier-agnostic shipping contract into the UPS
wire protocol. Uses CQRS (not event sourcing): quotes, bookings and tracking
updates mutate a single Shipment record whose tracking state is owned by the
carrier.
"""

from protean.domain import Domain

shipping = Domain(name="shipping")
