"""Shipment status vocabulary shared by carrier parsing and the Shipment aggregate."""

from enum import Enum


class ShipmentStatus(Enum):
    UNKNOWN = "UNKNOWN"
    PRE_TRANSIT = "PRE_TRANSIT"
    TRANSIT = "TRANSIT"
    DELIVERED = "DELIVERED"
    RETURNED = "RETURNED"
    FAILURE = "FAILURE"


TERMINAL_STATUSES = frozenset({ShipmentStatus.DELIVERED, ShipmentStatus.RETURNED, ShipmentStatus.FAILURE})
UNFINISHED_STATUSES = frozenset(set(ShipmentStatus) - TERMINAL_STATUSES)
