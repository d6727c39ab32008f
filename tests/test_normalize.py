from signoff.client.domain import ActivityAction, AssetStatus, SkinTone, SubjectType
from signoff.client.normalize import (
    fallback_title,
    normalize_activity,
    normalize_assets,
    normalize_events,
    normalize_text_groups,
    normalize_text_items,
    normalize_text_sections,
    parse_int,
    parse_tags,
)
from signoff.client.seed import (
    build_seed_events,
    generate_mock_assets,
    generate_mock_text_groups,
    generate_mock_text_items,
    generate_mock_text_sections,
)


def _dicts(records):
    return [record.to_dict() for record in records]


class TestNormalizeAssets:
    def test_non_list_input(self):
        assert normalize_assets(None) == []
        assert normalize_assets({"assets": []}) == []
        assert normalize_assets("[]") == []

    def test_discards_invalid_records(self):
        raw = [
            "not a dict",
            {"id": "a", "eventId": "evt", "skinTone": "FAIR"},
            {"id": "b", "eventId": "evt", "status": "APPROVED", "skinTone": "purple"},
            {"id": "c", "status": "APPROVED", "skinTone": "FAIR"},
            {"id": "d", "eventId": "evt", "status": "APPROVED", "skinTone": "FAIR"},
        ]
        assert [asset.id for asset in normalize_assets(raw)] == ["d"]

    def test_legacy_values(self):
        [asset] = normalize_assets(
            [
                {
                    "id": "legacy",
                    "event_id": "evt",
                    "status": "To Review",
                    "skin_tone": "medium-brown",
                    "created_at": "2024-05-01T00:00:00+00:00",
                }
            ]
        )
        assert asset.status is AssetStatus.TO_REVIEW
        assert asset.skin_tone is SkinTone.MEDIUM_BROWN
        assert asset.event_id == "evt"
        assert asset.created_at == "2024-05-01T00:00:00+00:00"

    def test_legacy_record_matches_canonical_form(self):
        canonical = {
            "id": "a1",
            "title": "Snow Globe",
            "eventId": "christmas",
            "skinTone": "DARK_BROWN",
            "status": "APPROVED",
            "uploader": "creator@example.com",
            "createdAt": "2025-01-01T00:00:00+00:00",
            "notesRefinement": "Tighter loop",
        }
        legacy = {
            "id": "a1",
            "title": "Snow Globe",
            "event_id": "christmas",
            "skin_tone": "dark-brown",
            "status": "Approved",
            "uploader": "creator@example.com",
            "created_at": "2025-01-01T00:00:00+00:00",
            "notes_refinement": "Tighter loop",
        }
        assert _dicts(normalize_assets([legacy])) == _dicts(normalize_assets([canonical]))

    def test_defaults(self):
        [asset] = normalize_assets(
            [{"id": "x", "eventId": "evt", "status": "HOLD", "skinTone": "neutral"}]
        )
        assert asset.title == "Untitled Asset"
        assert asset.uploader == "Creator Team"
        assert asset.version == 1
        assert asset.skin_tone is SkinTone.ALL
        assert asset.preview_color == "#94a3b8"
        assert asset.created_at

    def test_blob_urls_are_dropped_for_object_storage(self):
        [asset] = normalize_assets(
            [
                {
                    "id": "x",
                    "eventId": "evt",
                    "status": "APPROVED",
                    "skinTone": "DEEP",
                    "mediaUrl": "blob:http://localhost/123",
                    "mediaStorage": "object",
                }
            ]
        )
        assert asset.media_url is None

    def test_data_urls_are_inline(self):
        [asset] = normalize_assets(
            [
                {
                    "id": "x",
                    "eventId": "evt",
                    "status": "APPROVED",
                    "skinTone": "DEEP",
                    "mediaUrl": "data:image/gif;base64,R0lG",
                }
            ]
        )
        assert asset.media_storage == "inline"

    def test_missing_id_is_generated(self):
        [asset] = normalize_assets(
            [{"eventId": "evt", "status": "APPROVED", "skinTone": "DEEP"}]
        )
        assert asset.id.startswith("asset-")

    def test_idempotent_on_seed(self):
        once = normalize_assets(_dicts(generate_mock_assets()))
        twice = normalize_assets(_dicts(once))
        assert once == twice


class TestNormalizeText:
    def test_item_needs_title_or_body(self):
        raw = [
            {"id": "a", "status": "APPROVED", "title": "  ", "body": ""},
            {"id": "b", "status": "APPROVED", "body": "First line\nsecond"},
        ]
        [item] = normalize_text_items(raw)
        assert item.id == "b"
        assert item.title == "First line"
        assert item.category == "Idea"

    def test_item_legacy_content_and_tags(self):
        [item] = normalize_text_items(
            [{"id": "a", "status": "Hold", "content": "Body", "tags": "funny, general,"}]
        )
        assert item.body == "Body"
        assert item.status is AssetStatus.HOLD
        assert item.tags == ("funny", "general")

    def test_empty_group_reference_is_unassigned(self):
        [item] = normalize_text_items(
            [{"id": "a", "status": "APPROVED", "title": "T", "groupId": "", "sectionId": ""}]
        )
        assert item.group_id is None
        assert item.section_id is None

    def test_section_requires_group(self):
        raw = [{"id": "s1", "name": "Hooks"}, {"id": "s2", "name": "Hooks", "group_id": "g"}]
        assert [section.id for section in normalize_text_sections(raw)] == ["s2"]

    def test_group_requires_name(self):
        assert normalize_text_groups([{"id": "g", "name": " "}]) == []

    def test_idempotent_on_seed(self):
        groups = generate_mock_text_groups()
        sections = generate_mock_text_sections(groups)
        items = generate_mock_text_items(groups, sections)
        assert normalize_text_groups(_dicts(groups)) == groups
        assert normalize_text_sections(_dicts(sections)) == sections
        assert normalize_text_items(_dicts(items)) == items


class TestNormalizeEvents:
    def test_numeric_strings(self):
        [event] = normalize_events(
            [{"id": "e", "name": "Pride", "startDate": "2025-06-01", "totalTarget": "90", "tier": "2"}]
        )
        assert event.total_target == 90
        assert event.tier == 2
        assert event.per_tone_target == 0

    def test_discards_unparseable_targets(self):
        raw = [{"id": "e", "name": "Pride", "startDate": "2025-06-01", "totalTarget": "lots", "tier": 1}]
        assert normalize_events(raw) == []

    def test_oversized_digit_strings_are_dropped(self):
        raw = [
            {
                "id": "e",
                "name": "Pride",
                "startDate": "2025-06-01",
                "totalTarget": "9" * 5000,
                "tier": 1,
            }
        ]
        assert normalize_events(raw) == []

    def test_snake_case_rows(self):
        [event] = normalize_events(
            [
                {
                    "id": "e",
                    "name": "Pride",
                    "start_date": "2025-06-01",
                    "end_date": "2025-06-30",
                    "total_target": 90,
                    "per_tone_target": 15,
                    "tier": 1,
                }
            ]
        )
        assert event.end_date == "2025-06-30"
        assert event.per_tone_target == 15

    def test_idempotent_on_seed(self):
        events = build_seed_events()
        assert normalize_events(_dicts(events)) == events


class TestNormalizeActivity:
    def test_valid_entry(self):
        [entry] = normalize_activity(
            [
                {
                    "id": "act",
                    "subject_type": "asset",
                    "subject_id": "a1",
                    "action": "STATUS_CHANGED",
                    "actor": "lead@example.com",
                    "timestamp": "2025-01-01T00:00:00Z",
                    "from_status": "TO_REVIEW",
                    "to_status": "APPROVED",
                }
            ]
        )
        assert entry.subject_type is SubjectType.ASSET
        assert entry.action is ActivityAction.STATUS_CHANGED
        assert entry.from_status is AssetStatus.TO_REVIEW
        assert entry.to_status is AssetStatus.APPROVED

    def test_discards_unknown_subject_or_action(self):
        base = {"subjectId": "a1", "actor": "x", "timestamp": "2025-01-01T00:00:00Z"}
        raw = [
            {**base, "subjectType": "video", "action": "CREATED"},
            {**base, "subjectType": "text", "action": "LIKED"},
            {**base, "subjectType": "text", "action": "COMMENT", "actor": ""},
        ]
        assert normalize_activity(raw) == []

    def test_non_string_action_is_dropped(self):
        base = {
            "subjectType": "asset",
            "subjectId": "a1",
            "actor": "x",
            "timestamp": "2025-01-01T00:00:00Z",
        }
        raw = [
            {**base, "id": "bad-list", "action": ["COMMENT"]},
            {**base, "id": "bad-dict", "action": {"x": 1}},
            {**base, "id": "good", "action": "COMMENT", "comment": "hi"},
        ]
        assert [entry.id for entry in normalize_activity(raw)] == ["good"]


class TestHelpers:
    def test_parse_int_matches_leading_digits(self):
        assert parse_int("42px") == 42
        assert parse_int(" -3") == -3
        assert parse_int(7.9) == 7
        assert parse_int("abc") is None
        assert parse_int(True) is None
        assert parse_int("9" * 5000) is None

    def test_parse_tags(self):
        assert parse_tags(["a", 1, "b"]) == ("a", "b")
        assert parse_tags(None) == ()

    def test_fallback_title(self):
        assert fallback_title("") == "Untitled idea"
        assert fallback_title("x" * 80) == "x" * 60
