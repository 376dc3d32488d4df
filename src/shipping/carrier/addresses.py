"""Translate shipping addresses to and from the carrier's address formats."""

from collections.abc import Mapping

from shipping.shared.address import ShippingAddress


def to_validation_format(address: ShippingAddress) -> dict:
    """Build an ``AddressKeyFormat`` block for the address-validation API."""
    return {
        "ConsigneeName": address.display_name(),
        "AddressLine": ", ".join(address.address_lines()),
        "PoliticalDivision2": address.city,
        "PoliticalDivision1": address.state_code,
        "PostcodePrimaryLow": address.zip,
        "CountryCode": address.country,
    }


def to_quote_format(address: ShippingAddress) -> dict:
    return {
        "Name": address.display_name(),
        "Address": {
            "AddressLine": address.address_lines(),
            "City": address.city,
            "StateProvinceCode": address.state_code,
            "PostalCode": address.zip,
            "CountryCode": address.country,
        },
    }


def to_shipment_format(address: ShippingAddress) -> dict:
    payload = to_quote_format(address)
    payload["Phone"] = {"Number": address.phone}
    return payload


def from_carrier_address(
    carrier_address: Mapping,
    name: str | None = None,
    company: str | None = None,
    phone: str | None = None,
    email: str | None = None,
) -> ShippingAddress:
    """Build a ShippingAddress from a carrier address block.

    Accepts both ``AddressKeyFormat`` (validation candidates) and the
    ``Address`` block used by rating and shipping. Carrier addresses carry no
    contact details, so name, company, phone and email come from the caller.
    """
    lines = carrier_address.get("AddressLine") or []
    if isinstance(lines, str):
        lines = [lines]
    street1 = lines[0] if len(lines) > 0 else None
    street2 = lines[1] if len(lines) > 1 else None

    return ShippingAddress(
        name=name,
        company=company,
        street1=street1,
        street2=street2,
        city=carrier_address.get("PoliticalDivision2", carrier_address.get("City")),
        state_code=carrier_address.get("PoliticalDivision1", carrier_address.get("StateProvinceCode")),
        zip=carrier_address.get("PostcodePrimaryLow", carrier_address.get("PostalCode")),
        country=carrier_address.get("CountryCode"),
        phone=phone,
        email=email,
    )


def to_response_view(address: ShippingAddress) -> dict:
    """Render an address with the API's camelCase field names."""
    return {
        "name": address.name,
        "company": address.company,
        "street1": address.street1,
        "street2": address.street2,
        "city": address.city,
        "stateCode": address.state_code,
        "zip": address.zip,
        "country": address.country,
        "phone": address.phone,
        "email": address.email,
    }
