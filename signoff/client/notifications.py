"""Slack-style incoming webhook notifications.

Sending is fire-and-forget from the mutation pipeline's point of view: a
failed delivery is logged and reported in the returned result, never raised.
"""

import logging
import re
from dataclasses import asdict, dataclass, replace
from datetime import datetime

import httpx

from signoff.client.cache import NOTIFICATIONS_KEY, LocalCache
from signoff.client.domain import AssetStatus

logger = logging.getLogger(__name__)

_WEBHOOK_PATTERN = re.compile(r"^https://hooks\.slack(?:-gov)?\.com/services/.+", re.I)

_FIELDS = {
    "enabled": "enabled",
    "slackWebhookUrl": "slack_webhook_url",
    "notifyOnNew": "notify_on_new",
    "notifyOnApproved": "notify_on_approved",
    "notifyOnHold": "notify_on_hold",
    "notifyOnRejected": "notify_on_rejected",
}


def is_likely_slack_webhook(value: str) -> bool:
    return bool(_WEBHOOK_PATTERN.match(value.strip()))


@dataclass(frozen=True)
class NotificationSettings:
    enabled: bool = False
    slack_webhook_url: str = ""
    notify_on_new: bool = True
    notify_on_approved: bool = True
    notify_on_hold: bool = False
    notify_on_rejected: bool = True

    @classmethod
    def from_dict(cls, data) -> "NotificationSettings":
        if not isinstance(data, dict):
            return cls()
        defaults = asdict(cls())
        values = {}
        for key, attr in _FIELDS.items():
            value = data.get(key, defaults[attr])
            expected = type(defaults[attr])
            values[attr] = value if isinstance(value, expected) else defaults[attr]
        return cls(**values)

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for key, attr in _FIELDS.items()}

    @classmethod
    def load(cls, cache: LocalCache) -> "NotificationSettings":
        return cls.from_dict(cache.read(NOTIFICATIONS_KEY))

    def save(self, cache: LocalCache) -> bool:
        return cache.write(NOTIFICATIONS_KEY, self.to_dict())

    @property
    def has_webhook(self) -> bool:
        return bool(self.slack_webhook_url.strip())


def should_notify_for_status(settings: NotificationSettings, status: AssetStatus) -> bool:
    if not settings.enabled or not settings.has_webhook:
        return False
    if status == AssetStatus.APPROVED:
        return settings.notify_on_approved
    if status == AssetStatus.HOLD:
        return settings.notify_on_hold
    if status == AssetStatus.REJECTED:
        return settings.notify_on_rejected
    return False


def should_notify_on_new(settings: NotificationSettings) -> bool:
    return settings.enabled and settings.has_webhook and settings.notify_on_new


@dataclass(frozen=True)
class NotifyResult:
    ok: bool
    error: str = ""


class Notifier:
    def __init__(
        self,
        http: httpx.AsyncClient,
        settings: NotificationSettings | None = None,
    ):
        self.http = http
        self.settings = settings or NotificationSettings()

    def configure(self, **changes) -> NotificationSettings:
        self.settings = replace(self.settings, **changes)
        return self.settings

    async def send(self, message: str) -> NotifyResult:
        if not self.settings.enabled:
            return NotifyResult(False, "Notifications are disabled.")
        webhook = self.settings.slack_webhook_url.strip()
        if not webhook:
            return NotifyResult(False, "Missing Slack webhook URL.")
        if not is_likely_slack_webhook(webhook):
            return NotifyResult(
                False, "Use an Incoming Webhook URL (https://hooks.slack.com/services/...)"
            )
        try:
            response = await self.http.post(webhook, json={"text": message})
        except httpx.HTTPError as exc:
            logger.warning("Slack notification failed: %s", exc)
            return NotifyResult(False, "Unable to reach Slack. Please try again.")
        if not response.is_success:
            logger.warning(
                "Slack notification failed: HTTP %s %s",
                response.status_code,
                response.text[:200],
            )
            return NotifyResult(False, "Slack request failed.")
        return NotifyResult(True)

    async def send_test(self) -> NotifyResult:
        timestamp = datetime.now().strftime("%m/%d/%Y, %I:%M:%S %p")
        return await self.send(f"Test notification from Gif You Signoff ({timestamp}).")
