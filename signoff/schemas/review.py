from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ReviewStatus = Literal["TO_REVIEW", "APPROVED", "HOLD", "REJECTED"]
SkinTone = Literal["FAIR", "LIGHT", "OLIVE", "MEDIUM_BROWN", "DARK_BROWN", "DEEP", "ALL"]


class CamelModel(BaseModel):
    """Incoming payloads use the dashboard's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------


class AssetIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=500)
    event_id: str = Field(min_length=1, max_length=200)
    skin_tone: SkinTone
    status: ReviewStatus
    uploader: str = Field(min_length=1, max_length=255)
    reviewer: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1
    notes_refinement: str | None = None
    notes_ideas: str | None = None
    preview_color: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    media_storage: Literal["inline", "object"] | None = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)


class AssetBatch(BaseModel):
    assets: list[AssetIn] = Field(default_factory=list)


class AssetUpdate(CamelModel):
    status: ReviewStatus | None = None
    reviewer: str | None = None
    notes_refinement: str | None = None
    notes_ideas: str | None = None
    updated_at: datetime | None = None
    media_url: str | None = None
    media_type: str | None = None
    media_storage: Literal["inline", "object"] | None = None


class AssetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    event_id: str
    skin_tone: str
    status: str
    uploader: str
    reviewer: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    version: int
    notes_refinement: str | None = None
    notes_ideas: str | None = None
    preview_color: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    media_storage: str | None = None
    file_name: str | None = None
    file_size: int | None = None


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


class EventIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=255)
    start_date: str = Field(min_length=1, max_length=40)
    end_date: str | None = None
    total_target: int = Field(gt=0)
    per_tone_target: int = Field(default=0, ge=0)
    tier: int = Field(gt=0)
    description: str | None = None
    updated_at: datetime | None = None


class EventBatch(BaseModel):
    events: list[EventIn] = Field(default_factory=list)


class EventUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    start_date: str | None = Field(default=None, max_length=40)
    end_date: str | None = None
    total_target: int | None = Field(default=None, gt=0)
    per_tone_target: int | None = Field(default=None, ge=0)
    tier: int | None = Field(default=None, gt=0)
    description: str | None = None
    updated_at: datetime | None = None


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    start_date: str
    end_date: str | None = None
    total_target: int
    per_tone_target: int
    tier: int
    description: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Text items
# ---------------------------------------------------------------------------


class TextItemIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=500)
    body: str
    category: str = Field(min_length=1, max_length=120)
    status: ReviewStatus
    author: str = Field(min_length=1, max_length=255)
    reviewer: str | None = None
    tags: list[str] = Field(default_factory=list)
    review_notes: str | None = None
    group_id: str | None = None
    section_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TextItemBatch(BaseModel):
    items: list[TextItemIn] = Field(default_factory=list)


class TextItemUpdate(CamelModel):
    title: str | None = Field(default=None, max_length=500)
    body: str | None = None
    category: str | None = Field(default=None, max_length=120)
    status: ReviewStatus | None = None
    reviewer: str | None = None
    tags: list[str] | None = None
    review_notes: str | None = None
    group_id: str | None = None
    section_id: str | None = None
    updated_at: datetime | None = None


class TextItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: str
    category: str
    status: str
    author: str
    reviewer: str | None = None
    tags: list[str]
    review_notes: str | None = None
    group_id: str | None = None
    section_id: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Text groups / sections
# ---------------------------------------------------------------------------


class TextGroupIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    event_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TextGroupBatch(BaseModel):
    groups: list[TextGroupIn] = Field(default_factory=list)


class TextGroupUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    event_id: str | None = None
    updated_at: datetime | None = None


class TextGroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    event_id: str | None = None
    created_at: datetime
    updated_at: datetime


class TextSectionIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    group_id: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TextSectionBatch(BaseModel):
    sections: list[TextSectionIn] = Field(default_factory=list)


class TextSectionUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    group_id: str | None = None
    updated_at: datetime | None = None


class TextSectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    group_id: str
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------


class ActivityIn(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    subject_type: Literal["asset", "text"]
    subject_id: str = Field(min_length=1, max_length=200)
    action: Literal["CREATED", "STATUS_CHANGED", "COMMENT"]
    actor: str = Field(min_length=1, max_length=255)
    timestamp: datetime
    from_status: ReviewStatus | None = None
    to_status: ReviewStatus | None = None
    comment: str | None = None


class ActivityBatch(BaseModel):
    activity: list[ActivityIn] = Field(default_factory=list)


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    subject_type: str
    subject_id: str
    action: str
    actor: str
    timestamp: datetime
    from_status: str | None = None
    to_status: str | None = None
    comment: str | None = None


# ---------------------------------------------------------------------------
# Role
# ---------------------------------------------------------------------------


class RoleRead(BaseModel):
    role: Literal["creator", "reviewer"]
    locked: bool


# ---------------------------------------------------------------------------
# Collection envelopes
# ---------------------------------------------------------------------------


class AssetList(BaseModel):
    assets: list[AssetRead]


class EventList(BaseModel):
    events: list[EventRead]


class TextItemList(BaseModel):
    items: list[TextItemRead]


class TextGroupList(BaseModel):
    groups: list[TextGroupRead]


class TextSectionList(BaseModel):
    sections: list[TextSectionRead]


class ActivityList(BaseModel):
    activity: list[ActivityRead]