"""Marketplace notifier abstraction: pluggable shipment event delivery."""

import os

_notifier_instance = None


def get_notifier():
    """Return the configured marketplace notifier (singleton).

    Uses FakeMarketplaceNotifier by default. In production, configure via
    MARKETPLACE_ADAPTER environment variable (``appdirect``).
    """
    global _notifier_instance
    if _notifier_instance is None:
        adapter = os.environ.get("MARKETPLACE_ADAPTER", "fake")
        if adapter == "fake":
            from shipping.marketplace.fake_adapter import FakeMarketplaceNotifier

            _notifier_instance = FakeMarketplaceNotifier()
        elif adapter == "appdirect":
            from shipping.config import get_config
            from shipping.marketplace.appdirect_adapter import AppDirectNotifier

            _notifier_instance = AppDirectNotifier(get_config())
        else:
            raise ValueError(f"Unknown marketplace adapter: {adapter}")
    return _notifier_instance


def set_notifier(notifier) -> None:
    """Install a specific notifier (useful for tests)."""
    global _notifier_instance
    _notifier_instance = notifier


def reset_notifier():
    """Reset the notifier singleton (useful for testing)."""
    global _notifier_instance
    _notifier_instance = None
