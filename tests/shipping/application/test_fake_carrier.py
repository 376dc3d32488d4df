"""Tests for the fake carrier and the carrier adapter factory."""

from datetime import UTC, datetime

import pytest

from shipping.carrier import get_carrier, reset_carrier, set_carrier
from shipping.carrier.fake_adapter import FakeCarrier
from shipping.carrier.responses import parse_rates, parse_shipment_results, parse_tracking
from shipping.carrier.ups_adapter import UPSCarrier
from shipping.errors import CarrierClientFault, CarrierServiceFault
from shipping.shared.status import ShipmentStatus


class TestFakeCarrier:
    def test_rates_parse_like_carrier_rates(self):
        rates = parse_rates(FakeCarrier().shop_rates({}))
        assert [rate.code for rate in rates] == ["03", "02", "01"]

    def test_shipments_get_distinct_tracking_numbers(self):
        carrier = FakeCarrier()
        first = parse_shipment_results(carrier.create_shipment({}))
        second = parse_shipment_results(carrier.create_shipment({}))
        assert first.tracking_number.startswith("1Z")
        assert len(first.tracking_number) == 18
        assert first.tracking_number != second.tracking_number

    def test_default_tracking_is_manifested(self):
        snapshot = parse_tracking(FakeCarrier().track_shipment("1Z0001"))
        assert snapshot.status == ShipmentStatus.UNKNOWN

    def test_configured_tracking_uses_latest_activity(self):
        carrier = FakeCarrier()
        carrier.set_tracking("1Z0001", "I", "Departure Scan", datetime(2024, 1, 1, 8, tzinfo=UTC))
        carrier.set_tracking("1Z0001", "D", "Delivered", datetime(2024, 1, 2, 8, tzinfo=UTC))
        snapshot = parse_tracking(carrier.track_shipment("1Z0001"))
        assert snapshot.status == ShipmentStatus.DELIVERED

    def test_configured_failure(self):
        carrier = FakeCarrier()
        carrier.configure(should_succeed=False, failure=CarrierClientFault(code="1", description="bad"))
        with pytest.raises(CarrierClientFault):
            carrier.shop_rates({})

    def test_default_failure_is_a_service_fault(self):
        carrier = FakeCarrier()
        carrier.configure(should_succeed=False)
        with pytest.raises(CarrierServiceFault):
            carrier.track_shipment("1Z0001")

    def test_call_logging(self):
        carrier = FakeCarrier()
        carrier.shop_rates({"Package": []})
        carrier.track_shipment("1Z0001")
        assert carrier.calls_to("shop_rates") == [{"Package": []}]
        assert carrier.calls_to("track_shipment") == ["1Z0001"]


class TestCarrierFactory:
    def test_fake_by_default(self, monkeypatch):
        monkeypatch.delenv("CARRIER_ADAPTER", raising=False)
        reset_carrier()
        assert isinstance(get_carrier(), FakeCarrier)

    def test_ups_adapter_uses_carrier_settings(self, monkeypatch, config):
        monkeypatch.setenv("CARRIER_ADAPTER", "ups")
        reset_carrier()
        carrier = get_carrier()
        assert isinstance(carrier, UPSCarrier)
        assert carrier.settings is config.carrier
        carrier.close()

    def test_set_carrier(self):
        custom = FakeCarrier()
        set_carrier(custom)
        assert get_carrier() is custom

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("CARRIER_ADAPTER", "pony-express")
        reset_carrier()
        with pytest.raises(ValueError):
            get_carrier()
