"""Tests for marketplace notifier adapters."""

import base64
import json

import httpx
import pytest

from shipping.errors import NotificationError
from shipping.marketplace import get_notifier, reset_notifier, set_notifier
from shipping.marketplace.appdirect_adapter import SHIPMENT_EVENTS_PATH, AppDirectNotifier
from shipping.marketplace.fake_adapter import FakeMarketplaceNotifier

EVENT = {"partnerId": "APPDIRECT", "shipmentNumber": "1Z0001", "trackingNumber": "1Z0001"}


def _notifier(config, handler):
    return AppDirectNotifier(config, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestAppDirectNotifier:
    def test_posts_event_to_the_partner_channel(self, config):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(202)

        _notifier(config, handler).notify_shipment_event(dict(EVENT))

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"https://marketplace.example.com{SHIPMENT_EVENTS_PATH}"
        assert json.loads(request.content) == EVENT
        expected = base64.b64encode(b"k:s").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    def test_rejected_event(self, config):
        notifier = _notifier(config, lambda request: httpx.Response(500))
        with pytest.raises(NotificationError) as exc:
            notifier.notify_shipment_event(dict(EVENT))
        assert "500" in exc.value.detail
        assert exc.value.status_code == 502

    def test_unreachable_marketplace(self, config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NotificationError):
            _notifier(config, handler).notify_shipment_event(dict(EVENT))

    def test_unknown_partner(self, config):
        calls = []
        notifier = _notifier(config, lambda request: calls.append(request) or httpx.Response(200))
        with pytest.raises(NotificationError) as exc:
            notifier.notify_shipment_event({**EVENT, "partnerId": "ELSEWHERE"})
        assert exc.value.context == {"partnerId": "ELSEWHERE"}
        assert calls == []


class TestFakeNotifier:
    def test_records_events(self):
        notifier = FakeMarketplaceNotifier()
        notifier.notify_shipment_event(dict(EVENT))
        assert notifier.events == [EVENT]

    def test_configured_failure(self):
        notifier = FakeMarketplaceNotifier()
        notifier.configure(should_succeed=False, failure_reason="Down for maintenance")
        with pytest.raises(NotificationError, match="Down for maintenance"):
            notifier.notify_shipment_event(dict(EVENT))
        assert notifier.events == []


class TestNotifierFactory:
    def test_fake_by_default(self, monkeypatch):
        monkeypatch.delenv("MARKETPLACE_ADAPTER", raising=False)
        reset_notifier()
        assert isinstance(get_notifier(), FakeMarketplaceNotifier)

    def test_appdirect_adapter(self, monkeypatch, config):
        monkeypatch.setenv("MARKETPLACE_ADAPTER", "appdirect")
        reset_notifier()
        notifier = get_notifier()
        assert isinstance(notifier, AppDirectNotifier)
        assert notifier.config is config
        notifier.close()

    def test_singleton(self):
        reset_notifier()
        assert get_notifier() is get_notifier()

    def test_set_notifier(self):
        custom = FakeMarketplaceNotifier()
        set_notifier(custom)
        assert get_notifier() is custom

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("MARKETPLACE_ADAPTER", "carrier-pigeon")
        reset_notifier()
        with pytest.raises(ValueError):
            get_notifier()
