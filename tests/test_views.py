import math
from datetime import datetime, timezone

import pytest

from signoff.client.domain import (
    Asset,
    AssetStatus,
    Event,
    SkinTone,
    TextGroup,
    TextItem,
)
from signoff.client.views import (
    UNASSIGNED_GROUP_ID,
    UNASSIGNED_SECTION_ID,
    StatusStats,
    event_timing,
    filter_assets,
    filter_text_items,
    overall_progress,
    parse_date,
    stats_by,
    status_stats,
    upcoming_event_choices,
    upcoming_events,
)

NOW = datetime(2026, 12, 1, 12, 0, tzinfo=timezone.utc)


def _asset(
    asset_id,
    status=AssetStatus.TO_REVIEW,
    tone=SkinTone.FAIR,
    event_id="christmas",
    created_at="2026-11-01T00:00:00+00:00",
):
    return Asset(
        id=asset_id,
        title=asset_id,
        event_id=event_id,
        skin_tone=tone,
        status=status,
        uploader="creator@example.com",
        created_at=created_at,
    )


def _item(
    item_id,
    group_id=None,
    section_id=None,
    status=AssetStatus.TO_REVIEW,
    created_at="2026-11-01T00:00:00+00:00",
    **fields,
):
    values = dict(
        title=f"Title {item_id}",
        body="Body",
        category="Idea",
        author="creator@example.com",
    )
    values.update(fields)
    return TextItem(
        id=item_id,
        status=status,
        created_at=created_at,
        group_id=group_id,
        section_id=section_id,
        **values,
    )


def _event(event_id, start_date, end_date=None, total_target=100):
    return Event(
        id=event_id,
        name=event_id.title(),
        start_date=start_date,
        end_date=end_date,
        total_target=total_target,
        tier=1,
    )


class TestStats:
    def test_status_stats(self):
        assets = [
            _asset("a1"),
            _asset("a2", AssetStatus.APPROVED),
            _asset("a3", AssetStatus.APPROVED),
            _asset("a4", AssetStatus.REJECTED),
        ]
        stats = status_stats(assets)
        assert stats == StatusStats(to_review=1, approved=2, hold=0, rejected=1)
        assert stats.total == 4

    def test_stats_by_skips_empty_keys(self):
        items = [_item("t1", "g1"), _item("t2", "g1", status=AssetStatus.HOLD), _item("t3")]
        grouped = stats_by(items, lambda item: item.group_id)
        assert list(grouped) == ["g1"]
        assert grouped["g1"].hold == 1
        assert grouped["g1"].total == 2

    def test_overall_progress(self):
        assets = [_asset(f"a{i}", AssetStatus.APPROVED) for i in range(50)]
        assert overall_progress(assets) == pytest.approx(1.0)
        assert overall_progress(assets, goal=100) == pytest.approx(50.0)


class TestParseDate:
    def test_naive_values_are_utc(self):
        assert parse_date("2026-12-25") == datetime(2026, 12, 25, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        assert parse_date("2026-12-25T10:00:00Z").hour == 10

    @pytest.mark.parametrize("value", [None, "", "soon"])
    def test_invalid(self, value):
        assert parse_date(value) is None


class TestFilterAssets:
    def test_tone_filter_keeps_all_tones(self):
        assets = [
            _asset("fair", tone=SkinTone.FAIR),
            _asset("deep", tone=SkinTone.DEEP),
            _asset("all", tone=SkinTone.ALL),
        ]
        matches = filter_assets(assets, skin_tone=SkinTone.DEEP)
        assert {asset.id for asset in matches} == {"deep", "all"}

    def test_newest_first_with_status_and_event(self):
        assets = [
            _asset("old", AssetStatus.APPROVED, created_at="2026-01-01T00:00:00Z"),
            _asset("new", AssetStatus.APPROVED, created_at="2026-06-01T00:00:00Z"),
            _asset("other-event", AssetStatus.APPROVED, event_id="easter"),
            _asset("pending"),
        ]
        matches = filter_assets(assets, status=AssetStatus.APPROVED, event_id="christmas")
        assert [asset.id for asset in matches] == ["new", "old"]


class TestFilterTextItems:
    groups = [
        TextGroup(id="g1", name="Holiday", created_at="", event_id="christmas"),
        TextGroup(id="g2", name="Evergreen", created_at=""),
    ]

    def test_unassigned_group_and_section(self):
        items = [_item("t1", "g1", "s1"), _item("t2", "g1"), _item("t3")]
        unassigned = filter_text_items(items, self.groups, group_id=UNASSIGNED_GROUP_ID)
        assert [item.id for item in unassigned] == ["t3"]
        no_section = filter_text_items(
            items, self.groups, group_id="g1", section_id=UNASSIGNED_SECTION_ID
        )
        assert [item.id for item in no_section] == ["t2"]

    def test_event_filter_goes_through_group(self):
        items = [_item("t1", "g1"), _item("t2", "g2"), _item("t3")]
        matches = filter_text_items(items, self.groups, event_id="christmas")
        assert [item.id for item in matches] == ["t1"]

    def test_query_searches_text_and_tags(self):
        items = [
            _item("t1", body="Cozy SNOW globe"),
            _item("t2", tags=("winter",)),
            _item("t3", category="Caption"),
        ]
        assert [i.id for i in filter_text_items(items, [], query=" snow ")] == ["t1"]
        assert [i.id for i in filter_text_items(items, [], query="Winter")] == ["t2"]
        assert [i.id for i in filter_text_items(items, [], query="caption")] == ["t3"]

    def test_status_and_category(self):
        items = [
            _item("t1", status=AssetStatus.APPROVED, category="Copy"),
            _item("t2", status=AssetStatus.APPROVED),
            _item("t3", category="Copy"),
        ]
        matches = filter_text_items(
            items, [], status=AssetStatus.APPROVED, category="Copy"
        )
        assert [item.id for item in matches] == ["t1"]


class TestEventTiming:
    def test_future_event(self):
        timing = event_timing(_event("christmas", "2026-12-25"), NOW)
        assert timing.days_until == 24
        assert not timing.is_ongoing

    def test_explicit_end_date(self):
        timing = event_timing(_event("market", "2026-11-28", "2026-12-05"), NOW)
        assert timing.is_ongoing
        assert timing.days_until < 0

    def test_default_window_without_end(self):
        assert event_timing(_event("recent", "2026-11-21"), NOW).is_ongoing
        assert not event_timing(_event("stale", "2026-10-01"), NOW).is_ongoing

    def test_missing_start(self):
        timing = event_timing(_event("tbd", "soon"), NOW)
        assert timing.days_until == math.inf
        assert not timing.is_ongoing


class TestUpcoming:
    events = [
        _event("christmas", "2026-12-25", total_target=200),
        _event("market", "2026-11-28", "2026-12-05"),
        _event("stale", "2026-10-01"),
        _event("summer", "2027-07-04"),
        _event("new-year", "2027-01-01"),
    ]

    def test_upcoming_events_window_and_progress(self):
        assets = [
            _asset("a1", AssetStatus.APPROVED),
            _asset("a2", AssetStatus.APPROVED),
            _asset("a3"),
        ]
        upcoming = upcoming_events(self.events, assets, NOW)
        assert [entry.event.id for entry in upcoming] == ["market", "christmas", "new-year"]
        christmas = upcoming[1]
        assert christmas.approved == 2
        assert christmas.progress == pytest.approx(1.0)

    def test_choices_include_far_future(self):
        choices = upcoming_event_choices(self.events, NOW)
        assert [entry.event.id for entry in choices] == [
            "market",
            "christmas",
            "new-year",
            "summer",
        ]

    def test_choices_limit(self):
        assert len(upcoming_event_choices(self.events, NOW, limit=2)) == 2
