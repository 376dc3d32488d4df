import pytest
from protean.integrations.pytest import DomainFixture

from shipping.carrier import set_carrier
from shipping.carrier.fake_adapter import FakeCarrier
from shipping.config import CarrierSettings, ChannelConfig, ConnectorConfig, ShipperInfo, set_config
from shipping.marketplace import set_notifier
from shipping.marketplace.fake_adapter import FakeMarketplaceNotifier
from shipping.shipment.persistence import PersistenceGateway

SHARED_SECRET = "s3cr3t"

ORIGIN_ADDRESS = {
    "name": "Jane Sender",
    "company": "Acme Widgets",
    "street1": "55 Glenlake Pkwy NE",
    "city": "Atlanta",
    "stateCode": "GA",
    "zip": "30328",
    "country": "US",
    "phone": "4045551234",
    "email": "jane@acme.example.com",
}

DELIVERY_ADDRESS = {
    "name": "John Receiver",
    "street1": "1600 Amphitheatre Pkwy",
    "street2": "Building 4",
    "city": "Mountain View",
    "stateCode": "CA",
    "zip": "94043",
    "country": "US",
    "phone": "6505550000",
}

PARCEL = {
    "length": 10,
    "width": 10,
    "height": 10,
    "lengthUnit": "cm",
    "weight": 20,
    "weightUnit": "kg",
}


def _quote_payload(**overrides) -> dict:
    payload = {
        "shoppingCartId": "cart-001",
        "originAddress": dict(ORIGIN_ADDRESS),
        "deliveryAddress": dict(DELIVERY_ADDRESS),
        "parcels": [dict(PARCEL)],
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope="session")
def shipping_bed():
    from shipping.domain import shipping

    bed = DomainFixture(shipping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shipping_bed):
    with shipping_bed.domain_context():
        yield


@pytest.fixture()
def config():
    config = ConnectorConfig(
        shared_auth_secret=SHARED_SECRET,
        carrier=CarrierSettings(
            access_key="access-key",
            username="ups-user",
            password="ups-pass",
            account_number="A1B2C3",
            shipper=ShipperInfo(
                name="Acme Widgets",
                shipper_number="A1B2C3",
                tax_identification_number="123456789",
                street1="55 Glenlake Pkwy NE",
                city="Atlanta",
                state_code="GA",
                zip="30328",
                country="US",
                phone="4045551234",
            ),
        ),
        channels=(
            ChannelConfig(partner="APPDIRECT", base_url="https://marketplace.example.com", key="k", secret="s"),
        ),
        tracking_concurrency=4,
    )
    set_config(config)
    return config


@pytest.fixture()
def carrier():
    fake = FakeCarrier()
    set_carrier(fake)
    return fake


@pytest.fixture()
def notifier():
    fake = FakeMarketplaceNotifier()
    set_notifier(fake)
    return fake


@pytest.fixture()
def persistence():
    return PersistenceGateway()


@pytest.fixture()
def quote_payload():
    """Factory for a valid quote request body."""
    return _quote_payload


@pytest.fixture()
def book_shipment(config, carrier, persistence):
    """Factory that quotes and books a shipment, returning ``(shipment_id, tracking_number)``."""
    from shipping.shipment.booking import ShipmentWorkflow
    from shipping.shipment.quoting import QuoteWorkflow

    def _book(shopping_cart_id="cart-001", partner_id="APPDIRECT"):
        rates = QuoteWorkflow(config, carrier, persistence).get_quotes(
            _quote_payload(shoppingCartId=shopping_cart_id), partner_id=partner_id
        )
        token = rates[0]["id"]
        view = ShipmentWorkflow(config, carrier, persistence).create_shipment(
            {"shoppingCartId": shopping_cart_id, "rateId": token}
        )
        shipment_id = persistence.get_saved_rate_by_token(token).shipment_id
        return str(shipment_id), view["shipmentTrackingNumber"]

    return _book
