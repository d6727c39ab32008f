"""Canonical in-memory records.

Records are frozen dataclasses; edits go through :func:`dataclasses.replace`.
``to_dict()`` yields the camelCase shape shared by the local cache and the
collection API request bodies.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class AssetStatus(str, Enum):
    TO_REVIEW = "TO_REVIEW"
    APPROVED = "APPROVED"
    HOLD = "HOLD"
    REJECTED = "REJECTED"


class SkinTone(str, Enum):
    FAIR = "FAIR"
    LIGHT = "LIGHT"
    OLIVE = "OLIVE"
    MEDIUM_BROWN = "MEDIUM_BROWN"
    DARK_BROWN = "DARK_BROWN"
    DEEP = "DEEP"
    ALL = "ALL"


class ActivityAction(str, Enum):
    CREATED = "CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    COMMENT = "COMMENT"


class SubjectType(str, Enum):
    ASSET = "asset"
    TEXT = "text"


STATUS_LABELS = {
    AssetStatus.TO_REVIEW: "To Review",
    AssetStatus.APPROVED: "Approved",
    AssetStatus.HOLD: "Hold",
    AssetStatus.REJECTED: "Rejected",
}

# Statuses that must carry reviewer notes.
NOTES_REQUIRED = frozenset({AssetStatus.HOLD, AssetStatus.REJECTED})


@dataclass(frozen=True)
class ToneInfo:
    id: SkinTone
    name: str
    color: str


SKIN_TONES = (
    ToneInfo(SkinTone.FAIR, "Fair", "#FFDFC4"),
    ToneInfo(SkinTone.LIGHT, "Light", "#F0D5BE"),
    ToneInfo(SkinTone.OLIVE, "Olive", "#D1A38F"),
    ToneInfo(SkinTone.MEDIUM_BROWN, "Medium Brown", "#A1665E"),
    ToneInfo(SkinTone.DARK_BROWN, "Dark Brown", "#6A4B3C"),
    ToneInfo(SkinTone.DEEP, "Deep", "#3B2A1A"),
)
ALL_TONES = ToneInfo(SkinTone.ALL, "All tones", "#94a3b8")
_TONE_LOOKUP = {tone.id: tone for tone in SKIN_TONES}

TEXT_CATEGORIES = ("Idea", "Prompt", "Copy", "Script", "Caption", "Notes")
DEFAULT_CATEGORY = "Idea"
DEFAULT_AUTHOR = "Creator Team"


def tone_meta(tone: SkinTone) -> ToneInfo:
    return _TONE_LOOKUP.get(tone, ALL_TONES)


def build_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Asset:
    id: str
    title: str
    event_id: str
    skin_tone: SkinTone
    status: AssetStatus
    uploader: str
    created_at: str
    reviewer: str | None = None
    updated_at: str | None = None
    version: int = 1
    notes_refinement: str = ""
    notes_ideas: str = ""
    preview_color: str = ""
    media_url: str | None = None
    media_type: str | None = None
    media_storage: str | None = None
    file_name: str | None = None
    file_size: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "eventId": self.event_id,
            "skinTone": self.skin_tone.value,
            "status": self.status.value,
            "uploader": self.uploader,
            "reviewer": self.reviewer,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
            "notesRefinement": self.notes_refinement,
            "notesIdeas": self.notes_ideas,
            "previewColor": self.preview_color,
            "mediaUrl": self.media_url,
            "mediaType": self.media_type,
            "mediaStorage": self.media_storage,
            "fileName": self.file_name,
            "fileSize": self.file_size,
        }


@dataclass(frozen=True)
class TextItem:
    id: str
    title: str
    body: str
    category: str
    status: AssetStatus
    author: str
    created_at: str
    reviewer: str | None = None
    updated_at: str | None = None
    tags: tuple[str, ...] = ()
    review_notes: str = ""
    group_id: str | None = None
    section_id: str | None = None

    def has_tag(self, tag: str) -> bool:
        wanted = tag.strip().lower()
        return any(existing.strip().lower() == wanted for existing in self.tags)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "category": self.category,
            "status": self.status.value,
            "author": self.author,
            "reviewer": self.reviewer,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
            "reviewNotes": self.review_notes,
            "groupId": self.group_id,
            "sectionId": self.section_id,
        }


@dataclass(frozen=True)
class TextGroup:
    id: str
    name: str
    created_at: str
    description: str = ""
    event_id: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "eventId": self.event_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class TextSection:
    id: str
    group_id: str
    name: str
    created_at: str
    description: str = ""
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "groupId": self.group_id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    start_date: str
    total_target: int
    tier: int
    per_tone_target: int = 0
    end_date: str | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "totalTarget": self.total_target,
            "perToneTarget": self.per_tone_target,
            "tier": self.tier,
            "description": self.description,
        }


@dataclass(frozen=True)
class ActivityEntry:
    id: str
    subject_type: SubjectType
    subject_id: str
    action: ActivityAction
    actor: str
    timestamp: str
    from_status: AssetStatus | None = None
    to_status: AssetStatus | None = None
    comment: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subjectType": self.subject_type.value,
            "subjectId": self.subject_id,
            "action": self.action.value,
            "actor": self.actor,
            "timestamp": self.timestamp,
            "fromStatus": self.from_status.value if self.from_status else None,
            "toStatus": self.to_status.value if self.to_status else None,
            "comment": self.comment,
        }


def build_activity(
    subject_type: SubjectType,
    subject_id: str,
    action: ActivityAction,
    actor: str,
    *,
    from_status: AssetStatus | None = None,
    to_status: AssetStatus | None = None,
    comment: str = "",
) -> ActivityEntry:
    return ActivityEntry(
        id=build_id("activity"),
        subject_type=subject_type,
        subject_id=subject_id,
        action=action,
        actor=actor,
        timestamp=now_iso(),
        from_status=from_status,
        to_status=to_status,
        comment=comment,
    )
