"""Tests for structural validation of request bodies."""

import pytest

from shipping.errors import ValidationError
from shipping.validation import validate_address, validate_quote_request, validate_shipment_request


def _fields(exc):
    return {(e["field"], e["message"]) for e in exc.value.context["errors"]}


class TestValidateQuoteRequest:
    def test_valid_request_builds_domain_values(self, quote_payload):
        request = validate_quote_request(quote_payload())

        assert request.shopping_cart_id == "cart-001"
        assert request.origin_address.state_code == "GA"
        assert request.delivery_address.street2 == "Building 4"
        assert request.parcels[0].length_unit == "cm"
        assert request.parcels[0].weight == 20.0

    def test_missing_field_is_required(self, quote_payload):
        payload = quote_payload()
        del payload["shoppingCartId"]
        with pytest.raises(ValidationError) as exc:
            validate_quote_request(payload)
        assert exc.value.status_code == 400
        assert exc.value.kind == ValidationError.MALFORMED_REQUEST
        assert ("shoppingCartId", "required") in _fields(exc)

    def test_unknown_field_is_not_allowed(self, quote_payload):
        with pytest.raises(ValidationError) as exc:
            validate_quote_request(quote_payload(giftWrap=True))
        assert ("giftWrap", "not.allowed") in _fields(exc)

    def test_unsupported_unit_is_reported(self, quote_payload):
        payload = quote_payload()
        payload["parcels"][0]["lengthUnit"] = "furlong"
        with pytest.raises(ValidationError) as exc:
            validate_quote_request(payload)
        assert any(field == "parcels.0.lengthUnit" for field, _ in _fields(exc))

    def test_negative_weight_is_rejected(self, quote_payload):
        payload = quote_payload()
        payload["parcels"][0]["weight"] = -1
        with pytest.raises(ValidationError):
            validate_quote_request(payload)

    def test_at_least_one_parcel(self, quote_payload):
        with pytest.raises(ValidationError):
            validate_quote_request(quote_payload(parcels=[]))

    def test_wrong_type_is_reported(self, quote_payload):
        with pytest.raises(ValidationError) as exc:
            validate_quote_request(quote_payload(originAddress="55 Glenlake"))
        assert ("originAddress", "incorrect.type") in _fields(exc)


class TestValidateShipmentRequest:
    def test_valid_request(self):
        request = validate_shipment_request({"shoppingCartId": "cart-001", "rateId": "tok-1"})
        assert request.rate_token == "tok-1"

    def test_missing_rate_id(self):
        with pytest.raises(ValidationError) as exc:
            validate_shipment_request({"shoppingCartId": "cart-001"})
        assert ("rateId", "required") in _fields(exc)


class TestValidateAddress:
    def test_malformed_address_is_invalid_address(self):
        with pytest.raises(ValidationError) as exc:
            validate_address({"name": "Jane", "city": "Atlanta"})

        assert exc.value.status_code == 422
        assert exc.value.error_code == "invalid.address"
        assert exc.value.detail["message"] == "address.is.malformed"
        fields = {e["field"] for e in exc.value.detail["detail"]}
        assert {"street1", "stateCode", "zip", "country"} <= fields
