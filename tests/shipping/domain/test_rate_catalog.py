"""Tests for service code descriptions and rate translation."""

from types import SimpleNamespace

import pytest

from shipping.carrier.rates import (
    Rate,
    describe_service_code,
    from_carrier_rate,
    from_saved_rate,
    to_persistable_record,
    to_response_view,
)


class TestDescribeServiceCode:
    @pytest.mark.parametrize(
        "code,name",
        [
            ("01", "UPS Next Day Air"),
            ("03", "UPS Ground"),
            ("14", "UPS Next Day Air Early A.M."),
            ("65", "UPS Saver"),
            ("86", "UPS Today Express Saver"),
        ],
    )
    def test_known_codes(self, code, name):
        assert describe_service_code(code) == name

    def test_unknown_code(self):
        assert describe_service_code("99") == "unknown"
        assert describe_service_code(None) == "unknown"


class TestFromCarrierRate:
    def test_falls_back_to_code_table_without_description(self):
        rate = from_carrier_rate(
            {"Service": {"Code": "03"}, "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "12.50"}}
        )
        assert rate == Rate(code="03", carrier="UPS", service_level="UPS Ground", price="12.50", currency_code="USD")

    def test_prefers_carrier_description(self):
        rate = from_carrier_rate(
            {
                "Service": {"Code": "03", "Description": "Ground Saver"},
                "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "9.00"},
            }
        )
        assert rate.service_level == "Ground Saver"


class TestRecordsAndViews:
    def test_persistable_record_has_saved_rate_fields(self):
        rate = Rate(code="02", carrier="UPS", service_level="UPS 2nd Day Air", price="24.10", currency_code="USD")
        assert to_persistable_record(rate, "ship-1") == {
            "shipment_id": "ship-1",
            "code": "02",
            "carrier": "UPS",
            "service_level": "UPS 2nd Day Air",
            "price": "24.10",
            "currency_code": "USD",
        }

    def test_from_saved_rate_keeps_token_and_shipment(self):
        record = SimpleNamespace(
            token="tok-1",
            shipment_id="ship-1",
            code="02",
            carrier="UPS",
            service_level="UPS 2nd Day Air",
            price="24.10",
            currency_code="USD",
        )
        rate = from_saved_rate(record)
        assert rate.token == "tok-1"
        assert rate.shipment_id == "ship-1"

    def test_response_view_exposes_token_as_id(self):
        rate = Rate(code="02", carrier="UPS", service_level="UPS 2nd Day Air", price="24.10", currency_code="USD")
        view = to_response_view(rate.with_token("tok-1", "ship-1"))
        assert view == {
            "id": "tok-1",
            "carrier": "UPS",
            "serviceLevel": "UPS 2nd Day Air",
            "price": "24.10",
            "currencyCode": "USD",
        }
