import json

import httpx
import pytest

from signoff.client.cache import NOTIFICATIONS_KEY, LocalCache, MemoryStorage
from signoff.client.domain import AssetStatus
from signoff.client.notifications import (
    NotificationSettings,
    Notifier,
    is_likely_slack_webhook,
    should_notify_for_status,
    should_notify_on_new,
)

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


def _enabled(**overrides):
    return NotificationSettings(enabled=True, slack_webhook_url=WEBHOOK, **overrides)


class TestNotificationSettings:
    def test_defaults(self):
        settings = NotificationSettings()
        assert settings.enabled is False
        assert settings.notify_on_new is True
        assert settings.notify_on_hold is False

    def test_round_trip_through_cache(self):
        cache = LocalCache(MemoryStorage())
        _enabled(notify_on_hold=True).save(cache)
        assert cache.read(NOTIFICATIONS_KEY)["slackWebhookUrl"] == WEBHOOK
        assert NotificationSettings.load(cache) == _enabled(notify_on_hold=True)

    def test_bad_values_fall_back_to_defaults(self):
        settings = NotificationSettings.from_dict({"enabled": "yes", "notifyOnHold": True})
        assert settings.enabled is False
        assert settings.notify_on_hold is True
        assert NotificationSettings.from_dict(None) == NotificationSettings()


class TestGates:
    def test_status_gate(self):
        settings = _enabled()
        assert should_notify_for_status(settings, AssetStatus.APPROVED)
        assert should_notify_for_status(settings, AssetStatus.REJECTED)
        assert not should_notify_for_status(settings, AssetStatus.HOLD)
        assert not should_notify_for_status(settings, AssetStatus.TO_REVIEW)

    def test_disabled_or_missing_webhook(self):
        assert not should_notify_for_status(NotificationSettings(), AssetStatus.APPROVED)
        assert not should_notify_on_new(NotificationSettings(enabled=True))
        assert should_notify_on_new(_enabled())

    def test_webhook_shape(self):
        assert is_likely_slack_webhook(WEBHOOK)
        assert is_likely_slack_webhook("https://hooks.slack-gov.com/services/x")
        assert not is_likely_slack_webhook("https://example.com/services/x")
        assert not is_likely_slack_webhook("http://hooks.slack.com/services/x")


class TestNotifier:
    @pytest.mark.asyncio
    async def test_send_posts_text(self):
        sent = []

        async def handler(request: httpx.Request) -> httpx.Response:
            sent.append((str(request.url), json.loads(request.content)))
            return httpx.Response(200, text="ok")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            result = await Notifier(http, _enabled()).send("hello")

        assert result.ok
        assert sent == [(WEBHOOK, {"text": "hello"})]

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="nope")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            result = await Notifier(http, _enabled()).send("hello")

        assert not result.ok
        assert result.error == "Slack request failed."

    @pytest.mark.asyncio
    async def test_transport_error(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            result = await Notifier(http, _enabled()).send_test()

        assert not result.ok
        assert result.error == "Unable to reach Slack. Please try again."

    @pytest.mark.asyncio
    async def test_guards(self):
        async with httpx.AsyncClient() as http:
            notifier = Notifier(http)
            assert (await notifier.send("x")).error == "Notifications are disabled."
            notifier.configure(enabled=True)
            assert (await notifier.send("x")).error == "Missing Slack webhook URL."
            notifier.configure(slack_webhook_url="https://example.com/hook")
            assert (await notifier.send("x")).error.startswith("Use an Incoming Webhook URL")
