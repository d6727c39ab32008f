"""Read-only projections used by the dashboard screens."""

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from signoff.client.domain import (
    Asset,
    AssetStatus,
    Event,
    SkinTone,
    TextGroup,
    TextItem,
)

UNASSIGNED_GROUP_ID = "unassigned"
UNASSIGNED_SECTION_ID = "unassigned-section"
OVERALL_GOAL = 5000
DEFAULT_EVENT_WINDOW_DAYS = 30
UPCOMING_WINDOW_DAYS = 90

_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StatusStats:
    to_review: int = 0
    approved: int = 0
    hold: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.to_review + self.approved + self.hold + self.rejected


def status_stats(records) -> StatusStats:
    counts = Counter(record.status for record in records)
    return StatusStats(
        to_review=counts[AssetStatus.TO_REVIEW],
        approved=counts[AssetStatus.APPROVED],
        hold=counts[AssetStatus.HOLD],
        rejected=counts[AssetStatus.REJECTED],
    )


def stats_by(records, key) -> dict[str, StatusStats]:
    """Status counts per non-empty ``key(record)``, e.g. group or section id."""
    buckets: dict[str, list] = {}
    for record in records:
        bucket = key(record)
        if bucket:
            buckets.setdefault(bucket, []).append(record)
    return {bucket: status_stats(items) for bucket, items in buckets.items()}


def overall_progress(assets: list[Asset], goal: int = OVERALL_GOAL) -> float:
    return status_stats(assets).approved / goal * 100


def parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _created_key(record) -> datetime:
    return parse_date(record.created_at) or datetime.min.replace(tzinfo=timezone.utc)


def filter_assets(
    assets: list[Asset],
    *,
    status: AssetStatus | None = None,
    event_id: str | None = None,
    skin_tone: SkinTone | None = None,
) -> list[Asset]:
    """Newest first. A tone filter also keeps assets tagged for all tones."""
    matches = [
        asset
        for asset in assets
        if (not status or asset.status == status)
        and (not event_id or asset.event_id == event_id)
        and (
            not skin_tone
            or asset.skin_tone == skin_tone
            or asset.skin_tone == SkinTone.ALL
        )
    ]
    return sorted(matches, key=_created_key, reverse=True)


def _matches_ref(value: str | None, wanted: str | None, unassigned: str) -> bool:
    if not wanted:
        return True
    if wanted == unassigned:
        return not value
    return value == wanted


def filter_text_items(
    items: list[TextItem],
    groups: list[TextGroup],
    *,
    status: AssetStatus | None = None,
    category: str | None = None,
    group_id: str | None = None,
    section_id: str | None = None,
    event_id: str | None = None,
    query: str = "",
) -> list[TextItem]:
    group_events = {group.id: group.event_id for group in groups}
    needle = query.strip().lower()

    def keep(item: TextItem) -> bool:
        if status and item.status != status:
            return False
        if category and item.category != category:
            return False
        if not _matches_ref(item.group_id, group_id, UNASSIGNED_GROUP_ID):
            return False
        if not _matches_ref(item.section_id, section_id, UNASSIGNED_SECTION_ID):
            return False
        if event_id and (not item.group_id or group_events.get(item.group_id) != event_id):
            return False
        if not needle:
            return True
        haystack = " ".join((item.title, item.body, item.category, " ".join(item.tags)))
        return needle in haystack.lower()

    return sorted(filter(keep, items), key=_created_key, reverse=True)


@dataclass(frozen=True)
class EventTiming:
    days_until: float
    is_ongoing: bool


def event_timing(event: Event, now: datetime | None = None) -> EventTiming:
    now = now or datetime.now(timezone.utc)
    start = parse_date(event.start_date)
    if start is None:
        return EventTiming(math.inf, False)
    end = parse_date(event.end_date)

    days_until = math.ceil((start - now) / _DAY)
    if end is not None:
        return EventTiming(days_until, start <= now <= end)
    days_since_start = math.floor((now - start) / _DAY)
    return EventTiming(days_until, 0 <= days_since_start <= DEFAULT_EVENT_WINDOW_DAYS)


@dataclass(frozen=True)
class UpcomingEvent:
    event: Event
    timing: EventTiming
    approved: int = 0

    @property
    def progress(self) -> float:
        return self.approved / self.event.total_target * 100 if self.event.total_target else 0.0


def _soonest_first(entry: UpcomingEvent):
    return (not entry.timing.is_ongoing, entry.timing.days_until)


def upcoming_event_choices(
    events: list[Event], now: datetime | None = None, limit: int = 5
) -> list[UpcomingEvent]:
    """Events worth picking for an upload: ongoing first, then soonest."""
    entries = [UpcomingEvent(event, event_timing(event, now)) for event in events]
    entries = [e for e in entries if e.timing.is_ongoing or e.timing.days_until >= 0]
    return sorted(entries, key=_soonest_first)[:limit]


def upcoming_events(
    events: list[Event],
    assets: list[Asset],
    now: datetime | None = None,
    limit: int = 6,
) -> list[UpcomingEvent]:
    approved = Counter(
        asset.event_id for asset in assets if asset.status == AssetStatus.APPROVED
    )
    entries = [
        UpcomingEvent(event, event_timing(event, now), approved[event.id])
        for event in events
    ]
    entries = [
        e
        for e in entries
        if e.timing.is_ongoing or 0 < e.timing.days_until <= UPCOMING_WINDOW_DAYS
    ]
    return sorted(entries, key=_soonest_first)[:limit]
