"""Default datasets used when a collection has nothing to show yet."""

from datetime import datetime, timedelta, timezone

from signoff.client.domain import (
    DEFAULT_AUTHOR,
    SKIN_TONES,
    Asset,
    AssetStatus,
    Event,
    TextGroup,
    TextItem,
    TextSection,
)

REVIEWER_LABEL = "Lead Reviewer"

# (id, name, start date, total target, per-tone target, tier)
INITIAL_EVENTS = (
    ("christmas", "Christmas", "2026-12-25", 200, 34, 1),
    ("new-year", "New Year", "2026-01-01", 180, 30, 1),
    ("halloween", "Halloween", "2026-10-31", 170, 29, 1),
    ("valentines", "Valentine's Day", "2026-02-14", 160, 27, 1),
    ("thanksgiving", "Thanksgiving", "2026-11-26", 150, 25, 1),
    ("summer", "Summer Holiday", "2026-07-04", 130, 22, 2),
    ("mothers-day", "Mother's Day", "2026-05-10", 120, 20, 2),
    ("fathers-day", "Father's Day", "2026-06-21", 120, 20, 2),
    ("easter", "Easter", "2026-04-05", 110, 19, 2),
    ("diwali", "Diwali", "2026-11-08", 110, 19, 2),
    ("graduation", "Graduation Season", "2026-05-15", 110, 19, 2),
    ("back-to-school", "Back to School", "2026-08-15", 100, 17, 2),
    ("bhm", "Black History Month", "2026-02-01", 90, 15, 3),
    ("lunar-new-year", "Lunar New Year", "2026-02-17", 85, 15, 3),
    ("ramadan", "Ramadan", "2026-02-18", 80, 14, 3),
    ("eid-fitr", "Eid al Fitr", "2026-03-20", 80, 14, 3),
    ("hanukkah", "Hanukkah", "2026-12-04", 75, 13, 3),
    ("hispanic-heritage", "Hispanic Heritage Month", "2026-09-15", 75, 13, 3),
    ("aapi-heritage", "AAPI Heritage Month", "2026-05-01", 70, 12, 3),
    ("womens-day", "International Women's Day", "2026-03-08", 70, 12, 3),
    ("juneteenth", "Juneteenth", "2026-06-19", 65, 11, 3),
    ("kwanzaa", "Kwanzaa", "2026-12-26", 65, 11, 3),
    ("july4", "Independence Day USA", "2026-07-04", 55, 10, 4),
    ("st-patrick", "St. Patrick's Day", "2026-03-17", 50, 9, 4),
    ("carnival", "Carnival", "2026-02-14", 50, 9, 4),
    ("notting-hill", "Notting Hill Carnival", "2026-08-30", 50, 9, 4),
    ("caribbean-heritage", "Caribbean Heritage Month", "2026-06-01", 45, 8, 4),
    ("india-independence", "Indian Independence Day", "2026-08-15", 45, 8, 4),
    ("black-friday", "Black Friday", "2026-11-27", 45, 8, 4),
    ("rosh-hashanah", "Rosh Hashanah/YK", "2026-09-12", 40, 7, 4),
    ("earth-day", "Earth Day", "2026-04-22", 40, 7, 4),
    ("emancipation", "Emancipation Day", "2026-04-16", 40, 7, 4),
    ("bhm-uk", "Black History Month UK", "2026-10-01", 40, 7, 4),
)

_STATUS_CYCLE = (
    AssetStatus.TO_REVIEW,
    AssetStatus.APPROVED,
    AssetStatus.HOLD,
    AssetStatus.REJECTED,
)


def _iso(moment: datetime) -> str:
    return moment.isoformat()


def build_seed_events() -> list[Event]:
    return [
        Event(
            id=event_id,
            name=name,
            start_date=start_date,
            total_target=total_target,
            per_tone_target=per_tone_target,
            tier=tier,
        )
        for event_id, name, start_date, total_target, per_tone_target, tier in INITIAL_EVENTS
    ]


def generate_mock_assets(now: datetime | None = None) -> list[Asset]:
    """Two to four variations per tone for the first twelve events."""
    now = now or datetime.now(timezone.utc)
    assets = []
    counter = 0
    for event_index, (event_id, event_name, *_rest) in enumerate(INITIAL_EVENTS[:12]):
        for tone_index, tone in enumerate(SKIN_TONES):
            count = 2 + (event_index + tone_index) % 3
            for variation in range(count):
                status = _STATUS_CYCLE[counter % len(_STATUS_CYCLE)]
                assets.append(
                    Asset(
                        id=f"{event_id}-{tone.id.value}-{variation}",
                        title=f"{event_name} - {tone.name} - Variation {variation + 1}",
                        event_id=event_id,
                        skin_tone=tone.id,
                        status=status,
                        uploader=DEFAULT_AUTHOR,
                        reviewer=None if status is AssetStatus.TO_REVIEW else REVIEWER_LABEL,
                        created_at=_iso(now - timedelta(hours=counter % (7 * 24))),
                        notes_refinement=(
                            "Adjust timing on the bounce animation"
                            if status is AssetStatus.HOLD
                            else ""
                        ),
                        preview_color=tone.color,
                    )
                )
                counter += 1
    return assets


_SEED_GROUPS = (
    ("Christmas Prompts", "Prompt ideation for the Christmas collection.", "christmas"),
    ("Halloween Concepts", "Text ideas for spooky season.", "halloween"),
    ("General Idea Bank", "Loose ideas not tied to any event yet.", None),
)

_SEED_SECTIONS = (
    (
        "Christmas Prompts",
        "Christmas Countdown Ideas",
        "Short daily prompt ideas leading up to Christmas.",
    ),
    (
        "Christmas Prompts",
        "Christmas Eve Ideas",
        "Last-minute Christmas Eve prompts and captions.",
    ),
    (
        "Halloween Concepts",
        "Costume Prompts",
        "Ideas focused on costume swaps and reveals.",
    ),
)

# (title, body, category, status, review notes, group name, section name)
_SEED_ITEMS = (
    (
        "Holiday campaign punchlines",
        "Short, snappy punchlines for the holiday GIF collection. "
        "Keep it warm and upbeat.",
        "Copy",
        AssetStatus.TO_REVIEW,
        "",
        "Christmas Prompts",
        "Christmas Countdown Ideas",
    ),
    (
        "Prompt ideas: celebrations",
        "Create 100 prompt ideas centered on community celebrations, "
        "with inclusive language and a clear action.",
        "Prompt",
        AssetStatus.TO_REVIEW,
        "",
        "General Idea Bank",
        None,
    ),
    (
        "Eid greeting concepts",
        "List greeting ideas that feel modern and minimalist. "
        "Focus on light, geometry, and gentle motion.",
        "Idea",
        AssetStatus.HOLD,
        "Need more variety in tone: friendly, formal, playful.",
        "General Idea Bank",
        None,
    ),
    (
        "Back-to-school headline options",
        "Collect headline options for the back-to-school collection. "
        "Use energetic language and short lines.",
        "Copy",
        AssetStatus.APPROVED,
        "",
        "General Idea Bank",
        None,
    ),
    (
        "Onboarding welcome text",
        "Welcome line for new creators. Keep it short and friendly, "
        "highlight the workflow in one sentence.",
        "Script",
        AssetStatus.TO_REVIEW,
        "",
        "General Idea Bank",
        None,
    ),
    (
        "Black History Month visual notes",
        "Notes on visual symbolism, color palettes, and respectful phrasing "
        "for BHM content ideas.",
        "Notes",
        AssetStatus.TO_REVIEW,
        "",
        "General Idea Bank",
        None,
    ),
)


def generate_mock_text_groups(now: datetime | None = None) -> list[TextGroup]:
    now = now or datetime.now(timezone.utc)
    return [
        TextGroup(
            id=f"seed-group-{index}",
            name=name,
            description=description,
            event_id=event_id,
            created_at=_iso(now - timedelta(days=index * 5)),
            updated_at=_iso(now),
        )
        for index, (name, description, event_id) in enumerate(_SEED_GROUPS)
    ]


def generate_mock_text_sections(
    groups: list[TextGroup], now: datetime | None = None
) -> list[TextSection]:
    """Sections for whichever seed groups are present; others are skipped."""
    now = now or datetime.now(timezone.utc)
    group_ids = {group.name: group.id for group in groups}
    sections = []
    for index, (group_name, name, description) in enumerate(_SEED_SECTIONS):
        group_id = group_ids.get(group_name)
        if group_id is None:
            continue
        sections.append(
            TextSection(
                id=f"seed-section-{index}",
                group_id=group_id,
                name=name,
                description=description,
                created_at=_iso(now - timedelta(days=index * 3)),
                updated_at=_iso(now),
            )
        )
    return sections


def generate_mock_text_items(
    groups: list[TextGroup],
    sections: list[TextSection],
    now: datetime | None = None,
) -> list[TextItem]:
    now = now or datetime.now(timezone.utc)
    group_ids = {group.name: group.id for group in groups}
    section_ids = {(section.group_id, section.name): section.id for section in sections}
    items = []
    for index, (title, body, category, status, notes, group_name, section_name) in enumerate(
        _SEED_ITEMS
    ):
        group_id = group_ids.get(group_name)
        section_id = section_ids.get((group_id, section_name)) if group_id else None
        reviewed = status is not AssetStatus.TO_REVIEW
        items.append(
            TextItem(
                id=f"seed-text-{index}",
                title=title,
                body=body,
                category=category,
                status=status,
                author=DEFAULT_AUTHOR,
                reviewer=REVIEWER_LABEL if reviewed else None,
                created_at=_iso(now - timedelta(days=index * 2)),
                updated_at=_iso(now) if reviewed else None,
                review_notes=notes,
                group_id=group_id,
                section_id=section_id,
            )
        )
    return items
