"""Tests for the address validation workflow."""

import pytest

from shipping.errors import CarrierServiceFault, UnsupportedCountryError, ValidationError
from shipping.shipment.address_validation import AddressValidationWorkflow

ADDRESS = {
    "name": "Jane Sender",
    "company": "Acme Widgets",
    "street1": "55 Glenlake Pkwy NE",
    "city": "Atlanta",
    "stateCode": "GA",
    "zip": "30328",
    "country": "US",
    "phone": "4045551234",
}


@pytest.fixture()
def workflow(carrier):
    return AddressValidationWorkflow(carrier)


class TestValidate:
    def test_returns_the_normalized_candidate(self, workflow, carrier):
        result = workflow.validate(dict(ADDRESS))

        assert result["address"]["city"] == "ATLANTA"
        assert result["address"]["street1"] == "55 Glenlake Pkwy NE"
        assert result["address"]["name"] == "Jane Sender"
        assert result["address"]["phone"] == "4045551234"

        request = carrier.calls_to("validate_address")[0]
        assert request["ConsigneeName"] == "Jane Sender, Acme Widgets"
        assert request["PostcodePrimaryLow"] == "30328"

    def test_ambiguous_address(self, workflow, carrier):
        carrier.configure(address_result="ambiguous")
        with pytest.raises(ValidationError) as exc:
            workflow.validate(dict(ADDRESS))
        assert exc.value.status_code == 422
        assert len(exc.value.context["candidateAddresses"]) == 5

    def test_unknown_address(self, workflow, carrier):
        carrier.configure(address_result="none")
        with pytest.raises(ValidationError) as exc:
            workflow.validate(dict(ADDRESS))
        assert exc.value.detail["message"] == "no.matching.addresses.found"

    def test_non_us_address_is_not_supported(self, workflow, carrier):
        with pytest.raises(UnsupportedCountryError) as exc:
            workflow.validate({**ADDRESS, "country": "CA"})
        assert exc.value.status_code == 501
        assert carrier.calls_to("validate_address") == []

    def test_malformed_address_never_reaches_the_carrier(self, workflow, carrier):
        with pytest.raises(ValidationError) as exc:
            workflow.validate({"name": "Jane"})
        assert exc.value.error_code == "invalid.address"
        assert carrier.calls_to("validate_address") == []

    def test_carrier_failure_propagates(self, workflow, carrier):
        carrier.configure(should_succeed=False)
        with pytest.raises(CarrierServiceFault):
            workflow.validate(dict(ADDRESS))
