"""Session-wide test setup: the shipping domain, layer markers and cleanup."""

import os
from pathlib import Path

import pytest

LAYERS = ("domain", "application", "integration")


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Protean config overlay the shipping domain is initialized with",
    )


def pytest_sessionstart(session):
    """Initialize the shipping domain and keep its context active for the whole run.

    Adapters default to their fakes so no test reaches UPS or a marketplace.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("CARRIER_ADAPTER", "fake")
    os.environ.setdefault("MARKETPLACE_ADAPTER", "fake")

    from shipping.domain import shipping

    shipping.init()
    shipping.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Mark each test with the layer its directory belongs to."""
    for item in items:
        layer = Path(item.fspath).parent.name
        if layer not in LAYERS:
            continue
        item.add_marker(getattr(pytest.mark, layer))
        if layer == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def reset_shipping_state():
    """Drop adapter singletons, configuration and stored records after every test."""
    yield

    from protean import current_domain

    from shipping.carrier import reset_carrier
    from shipping.config import reset_config
    from shipping.marketplace import reset_notifier

    reset_carrier()
    reset_notifier()
    reset_config()

    for _, provider in current_domain.providers.items():
        provider._data_reset()
