"""Tests for the per-shipment write locks."""

from uuid import uuid4

from shipping.shipment import persistence as persistence_module
from shipping.shipment.persistence import LOCK_STRIPES, shipment_lock


class TestShipmentLock:
    def test_same_shipment_gets_the_same_lock(self):
        shipment_id = str(uuid4())
        assert shipment_lock(shipment_id) is shipment_lock(shipment_id)

    def test_lock_pool_does_not_grow_with_shipments(self):
        locks = {id(shipment_lock(str(uuid4()))) for _ in range(1000)}

        assert len(locks) <= LOCK_STRIPES
        assert len(persistence_module._shipment_locks) == LOCK_STRIPES

    def test_booking_does_not_add_locks(self, book_shipment):
        for cart in range(5):
            book_shipment(f"cart-{cart:03d}")

        assert len(persistence_module._shipment_locks) == LOCK_STRIPES

    def test_lock_is_released_after_update(self, persistence, book_shipment):
        shipment_id, _ = book_shipment()
        shipment = persistence.get_shipment_by_id(shipment_id)

        persistence.update_shipment(shipment)

        assert not shipment_lock(shipment_id).locked()
