"""Coerce untrusted JSON from the local cache or the collection API into records.

Every normalizer takes ``Any`` and returns a list: non-list input yields ``[]``,
non-dict elements and records missing a required field are dropped silently,
and input order is preserved. Keys are resolved camelCase first, then the
legacy snake_case alias, then a default.
"""

import re
from typing import Any

from signoff.client.domain import (
    DEFAULT_AUTHOR,
    DEFAULT_CATEGORY,
    ActivityAction,
    ActivityEntry,
    Asset,
    AssetStatus,
    Event,
    SkinTone,
    SubjectType,
    TextGroup,
    TextItem,
    TextSection,
    build_id,
    now_iso,
    tone_meta,
)

LEGACY_STATUS_MAP = {
    "To Review": AssetStatus.TO_REVIEW,
    "Approved": AssetStatus.APPROVED,
    "Hold": AssetStatus.HOLD,
    "Rejected": AssetStatus.REJECTED,
    **{status.value: status for status in AssetStatus},
}

LEGACY_TONE_MAP = {
    "fair": SkinTone.FAIR,
    "light": SkinTone.LIGHT,
    "olive": SkinTone.OLIVE,
    "medium-brown": SkinTone.MEDIUM_BROWN,
    "dark-brown": SkinTone.DARK_BROWN,
    "deep": SkinTone.DEEP,
    "all": SkinTone.ALL,
    "all-tones": SkinTone.ALL,
    "neutral": SkinTone.ALL,
    "tone-neutral": SkinTone.ALL,
    **{tone.value: tone for tone in SkinTone},
}

# Longer digit runs are junk, and int() refuses them past its digit limit.
_LEADING_INT = re.compile(r"^\s*([+-]?\d{1,64})(?!\d)")
_ACTIONS = frozenset(member.value for member in ActivityAction)


def normalize_status(value: Any) -> AssetStatus | None:
    if not isinstance(value, str):
        return None
    return LEGACY_STATUS_MAP.get(value)


def normalize_tone(value: Any) -> SkinTone | None:
    if not isinstance(value, str):
        return None
    return LEGACY_TONE_MAP.get(value)


def _str(data: dict, *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return None


def _int(data: dict, *keys: str) -> int | None:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        return parse_int(value)
    return None


def _whole(data: dict, *keys: str) -> int | None:
    """First value that is already an int (bools excluded)."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _records(raw: Any) -> list[dict]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def fallback_title(body: str) -> str:
    first_line = body.split("\n")[0] if body else ""
    return first_line[:60].strip() or "Untitled idea"


def parse_tags(value: Any) -> tuple[str, ...]:
    if isinstance(value, list):
        return tuple(tag for tag in value if isinstance(tag, str))
    if isinstance(value, str):
        return tuple(tag.strip() for tag in value.split(",") if tag.strip())
    return ()


def normalize_assets(raw: Any) -> list[Asset]:
    assets = []
    for data in _records(raw):
        status = normalize_status(data.get("status"))
        skin_tone = normalize_tone(_str(data, "skinTone", "skin_tone"))
        event_id = _str(data, "eventId", "event_id") or ""
        if not status or not skin_tone or not event_id:
            continue

        title = (_str(data, "title") or "").strip()
        preview_color = _str(data, "previewColor", "preview_color")
        if preview_color is None:
            preview_color = tone_meta(skin_tone).color

        raw_media_url = _str(data, "mediaUrl", "media_url")
        media_storage = _str(data, "mediaStorage", "media_storage")
        if media_storage not in ("inline", "object"):
            media_storage = (
                "inline" if raw_media_url and raw_media_url.startswith("data:") else None
            )
        # blob: URLs only live as long as the page that minted them.
        media_url = raw_media_url
        if media_storage == "object" and raw_media_url and raw_media_url.startswith("blob:"):
            media_url = None

        file_size = _whole(data, "fileSize", "file_size")
        version = _whole(data, "version")

        assets.append(
            Asset(
                id=_str(data, "id") or build_id("asset"),
                title=title or "Untitled Asset",
                event_id=event_id,
                skin_tone=skin_tone,
                status=status,
                uploader=_str(data, "uploader") or DEFAULT_AUTHOR,
                reviewer=_str(data, "reviewer"),
                created_at=_str(data, "createdAt", "created_at") or now_iso(),
                updated_at=_str(data, "updatedAt", "updated_at"),
                version=version if version is not None else 1,
                notes_refinement=_str(data, "notesRefinement", "notes_refinement") or "",
                notes_ideas=_str(data, "notesIdeas", "notes_ideas") or "",
                preview_color=preview_color,
                media_url=media_url,
                media_type=_str(data, "mediaType", "media_type"),
                media_storage=media_storage,
                file_name=_str(data, "fileName", "file_name"),
                file_size=file_size,
            )
        )
    return assets


def normalize_text_items(raw: Any) -> list[TextItem]:
    items = []
    for data in _records(raw):
        status = normalize_status(data.get("status"))
        if not status:
            continue
        title = (_str(data, "title") or "").strip()
        body = _str(data, "body", "content") or ""
        if not title and not body:
            continue

        category = (_str(data, "category") or "").strip() or DEFAULT_CATEGORY
        items.append(
            TextItem(
                id=_str(data, "id") or build_id("text"),
                title=title or fallback_title(body),
                body=body,
                category=category,
                status=status,
                author=_str(data, "author") or DEFAULT_AUTHOR,
                reviewer=_str(data, "reviewer"),
                created_at=_str(data, "createdAt", "created_at") or now_iso(),
                updated_at=_str(data, "updatedAt", "updated_at"),
                tags=parse_tags(data.get("tags")),
                review_notes=_str(data, "reviewNotes", "review_notes") or "",
                group_id=_str(data, "groupId", "group_id") or None,
                section_id=_str(data, "sectionId", "section_id") or None,
            )
        )
    return items


def normalize_text_groups(raw: Any) -> list[TextGroup]:
    groups = []
    for data in _records(raw):
        name = (_str(data, "name") or "").strip()
        if not name:
            continue
        groups.append(
            TextGroup(
                id=_str(data, "id") or build_id("group"),
                name=name,
                description=_str(data, "description") or "",
                event_id=_str(data, "eventId", "event_id") or None,
                created_at=_str(data, "createdAt", "created_at") or now_iso(),
                updated_at=_str(data, "updatedAt", "updated_at"),
            )
        )
    return groups


def normalize_text_sections(raw: Any) -> list[TextSection]:
    sections = []
    for data in _records(raw):
        name = (_str(data, "name") or "").strip()
        group_id = _str(data, "groupId", "group_id") or ""
        if not name or not group_id:
            continue
        sections.append(
            TextSection(
                id=_str(data, "id") or build_id("section"),
                group_id=group_id,
                name=name,
                description=_str(data, "description") or "",
                created_at=_str(data, "createdAt", "created_at") or now_iso(),
                updated_at=_str(data, "updatedAt", "updated_at"),
            )
        )
    return sections


def normalize_events(raw: Any) -> list[Event]:
    events = []
    for data in _records(raw):
        name = (_str(data, "name") or "").strip()
        start_date = _str(data, "startDate", "start_date") or ""
        if not name or not start_date:
            continue
        total_target = _int(data, "totalTarget", "total_target")
        tier = _int(data, "tier")
        if total_target is None or tier is None:
            continue
        per_tone_target = _int(data, "perToneTarget", "per_tone_target")

        events.append(
            Event(
                id=_str(data, "id") or build_id("event"),
                name=name,
                start_date=start_date,
                end_date=_str(data, "endDate", "end_date"),
                total_target=total_target,
                per_tone_target=per_tone_target if per_tone_target is not None else 0,
                tier=tier,
                description=_str(data, "description"),
            )
        )
    return events


def normalize_activity(raw: Any) -> list[ActivityEntry]:
    entries = []
    for data in _records(raw):
        subject_type = _str(data, "subjectType", "subject_type")
        action = _str(data, "action")
        if subject_type not in ("asset", "text"):
            continue
        if action not in _ACTIONS:
            continue

        subject_id = _str(data, "subjectId", "subject_id") or ""
        actor = _str(data, "actor") or ""
        timestamp = _str(data, "timestamp", "created_at") or ""
        if not subject_id or not actor or not timestamp:
            continue

        from_status = data.get("fromStatus")
        if from_status is None:
            from_status = data.get("from_status")
        to_status = data.get("toStatus")
        if to_status is None:
            to_status = data.get("to_status")

        entries.append(
            ActivityEntry(
                id=_str(data, "id") or build_id("activity"),
                subject_type=SubjectType(subject_type),
                subject_id=subject_id,
                action=ActivityAction(action),
                actor=actor,
                timestamp=timestamp,
                from_status=normalize_status(from_status),
                to_status=normalize_status(to_status),
                comment=_str(data, "comment") or "",
            )
        )
    return entries
