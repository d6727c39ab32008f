"""User-initiated mutations.

Every operation follows the same order: validate, build the new records,
apply them to :class:`DashboardState`, prepend activity entries, then push
to the collection API and finally schedule notifications in the
background (see :meth:`MutationPipeline.wait_idle`). Local state is never
rolled back; a failed push only adds a warning to the result, and a
missing token turns into a blocking sign-in reminder.
"""

import asyncio
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

import httpx

from signoff.client.domain import (
    DEFAULT_CATEGORY,
    NOTES_REQUIRED,
    STATUS_LABELS,
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
    build_activity,
    build_id,
    now_iso,
    tone_meta,
)
from signoff.client.bulk_import import split_bulk_import_entries
from signoff.client.errors import UploadError, ValidationError
from signoff.client.identity import IdentityProvider, actor_label
from signoff.client.normalize import fallback_title, parse_int, parse_tags
from signoff.client.notifications import (
    Notifier,
    should_notify_for_status,
    should_notify_on_new,
)
from signoff.client.remote import RemoteCollection
from signoff.client.state import (
    ACTIVITY,
    ASSETS,
    EVENTS,
    TEXT_GROUPS,
    TEXT_ITEMS,
    TEXT_SECTIONS,
    DashboardState,
)
from signoff.client.sync import DESCRIPTORS
from signoff.client.uploads import ObjectStoreUploader

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = ("image/gif", "video/mp4")

SAVE_WARNING = "Update saved locally but could not sync to the team feed."
UPLOAD_SAVE_WARNING = "Assets saved locally but could not sync to the team feed."
ITEMS_SAVE_WARNING = "Item updates saved locally but could not sync to the team feed."
DELETE_WARNING = "Delete saved locally but could not sync to the team feed."
ASSET_DELETE_WARNING = "Deleted locally but could not sync to the team feed."
BULK_DELETE_WARNING = "Some assets were removed locally but failed to sync to the team feed."

SIGN_IN_REMINDER = "Sign in to sync changes to the team feed."
SIGN_IN_APPROVALS = "Sign in to sync approvals to the team feed."
SIGN_IN_TONES = "Sign in to sync tone updates to the team feed."
SIGN_IN_DELETE_ASSETS = "Sign in to delete assets from the team feed."

NOTES_MESSAGE = "Add review notes for Hold or Rejected."
_REVIEW_NOTES_MESSAGES = {
    AssetStatus.HOLD: "Please provide refinement notes for Hold status",
    AssetStatus.REJECTED: "Please provide a reason for rejection",
}

_EXTENSION = re.compile(r"\.[^/.]+$")


@dataclass
class MutationResult:
    changed_ids: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    blocking: str = ""
    skipped: bool = False

    @property
    def synced(self) -> bool:
        return not self.warnings and not self.blocking and not self.skipped


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UploadFile:
    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadRequest:
    event_id: str
    files: Sequence[UploadFile]
    tones: Sequence[SkinTone] = ()
    title: str = ""
    batch_mode: bool = False
    single_mode: bool = False


@dataclass(frozen=True)
class TextDraft:
    title: str = ""
    body: str = ""
    category: str = ""
    tags: str = ""
    status: AssetStatus = AssetStatus.TO_REVIEW
    review_notes: str = ""
    group_id: str = ""
    section_id: str = ""


@dataclass(frozen=True)
class BulkImportDraft:
    text: str
    category: str = ""
    tags: str = ""
    status: AssetStatus = AssetStatus.TO_REVIEW
    review_notes: str = ""
    group_id: str = ""
    section_id: str = ""


@dataclass(frozen=True)
class GroupDraft:
    name: str
    description: str = ""
    event_id: str = ""


@dataclass(frozen=True)
class SectionDraft:
    name: str
    group_id: str
    description: str = ""


@dataclass(frozen=True)
class EventDraft:
    name: str
    start_date: str
    total_target: str | int
    tier: str | int
    end_date: str = ""
    per_tone_target: str | int = ""
    description: str = ""


def _asset_title(request: UploadRequest, file: UploadFile, index: int, total: int, tone) -> str:
    tone_label = (
        f" - {tone.name}"
        if len(request.tones) > 1 and tone.id != SkinTone.ALL
        else ""
    )
    base = request.title.strip()
    if base:
        suffix = f"#{index + 1}" if total > 1 else ""
        return f"{base} {suffix}".strip() + tone_label
    return (_EXTENSION.sub("", file.name) or "New Asset") + tone_label


class MutationPipeline:
    def __init__(
        self,
        state: DashboardState,
        http: httpx.AsyncClient,
        identity: IdentityProvider,
        uploader: ObjectStoreUploader | None = None,
        notifier: Notifier | None = None,
    ):
        self.state = state
        self.http = http
        self.identity = identity
        self.uploader = uploader or ObjectStoreUploader(http)
        self.notifier = notifier
        self.remotes = {
            name: RemoteCollection(http, descriptor)
            for name, descriptor in DESCRIPTORS.items()
        }
        self._uploading = False
        self._saving_text = False
        self._tasks: set[asyncio.Task] = set()

    # -- helpers -----------------------------------------------------------

    @property
    def is_reviewer(self) -> bool:
        return self.state.role == "reviewer"

    def _actor(self) -> str:
        return actor_label(self.state.session, self.state.role)

    async def _token(self) -> str:
        session = await self.identity.get_current_session()
        if session is None:
            return ""
        return await self.identity.get_token(session)

    def _upsert(self, name: str, records: Iterable, *, prepend: bool = False) -> None:
        records = list(records)
        by_id = {record.id: record for record in records}
        current = self.state.get(name)
        updated = [by_id.pop(record.id, record) for record in current]
        fresh = [record for record in records if record.id in by_id]
        self.state.set(name, fresh + updated if prepend else updated + fresh)

    def _remove(self, name: str, ids: Iterable[str]) -> None:
        ids = set(ids)
        self.state.set(name, [record for record in self.state.get(name) if record.id not in ids])
        self.state.forget(name, ids)

    def _prune_activity(self, subject_type: SubjectType, ids: Iterable[str]) -> None:
        ids = set(ids)
        self.state.set(
            ACTIVITY,
            [
                entry
                for entry in self.state.activity
                if not (entry.subject_type == subject_type and entry.subject_id in ids)
            ],
        )

    def _add_activity(self, entries: list[ActivityEntry]) -> None:
        if entries:
            self.state.set(ACTIVITY, entries + self.state.activity)

    async def _push(
        self, name: str, records: list, token: str, result: MutationResult, warning: str
    ) -> bool:
        if not records:
            return True
        revisions = self.state.mark_pending(name, [record.id for record in records])
        if not token:
            return False
        if await self.remotes[name].save(records, token):
            self.state.mark_synced(name, revisions)
            return True
        result.warnings.append(warning)
        return False

    async def _push_activity(self, entries: list[ActivityEntry], token: str) -> None:
        if not entries:
            return
        revisions = self.state.mark_pending(ACTIVITY, [entry.id for entry in entries])
        if not token:
            return
        if await self.remotes[ACTIVITY].save(entries, token):
            self.state.mark_synced(ACTIVITY, revisions)
        else:
            logger.warning("Activity sync failed for %d entries", len(entries))

    def _notify(self, message: str) -> None:
        if self.notifier is None:
            return
        task = asyncio.get_running_loop().create_task(self._deliver(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, message: str) -> None:
        result = await self.notifier.send(message)
        if not result.ok:
            logger.warning("Notification not delivered: %s", result.error)

    async def wait_idle(self) -> None:
        """Wait for notifications still being delivered."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _wants_status_notice(self, status: AssetStatus) -> bool:
        return self.notifier is not None and should_notify_for_status(
            self.notifier.settings, status
        )

    def _wants_new_notice(self) -> bool:
        return self.notifier is not None and should_notify_on_new(self.notifier.settings)

    def _event_name(self, event_id: str | None) -> str:
        event = self.state.get_event(event_id)
        return event.name if event else "event"

    def _group_name(self, group_id: str | None) -> str:
        if not group_id:
            return "Unassigned"
        group = self.state.get_text_group(group_id)
        return group.name if group else "group"

    def _resolve_section(self, group_id: str | None, section_id: str) -> str | None:
        section = self.state.get_text_section(section_id)
        if group_id and section and section.group_id == group_id:
            return section.id
        return None

    # -- assets ------------------------------------------------------------

    async def upload_assets(self, request: UploadRequest) -> MutationResult:
        if self._uploading:
            return MutationResult(skipped=True)
        if not request.event_id or not request.files:
            raise ValidationError("Choose an event and at least one file to upload.")

        tones = list(request.tones) or ([SkinTone.ALL] if request.batch_mode else [])
        if not tones:
            raise ValidationError("Select at least one skin tone.")
        request = replace(request, tones=tones)

        allowed = [f for f in request.files if f.content_type in ALLOWED_MEDIA_TYPES]
        if request.single_mode:
            allowed = allowed[:1]
        if not allowed:
            raise ValidationError("Please upload GIF or MP4 files only.")

        result = MutationResult()
        skipped = len(request.files) - len(allowed)
        if skipped:
            result.warnings.append(f"Skipped {skipped} file(s) that were not GIF or MP4.")

        self._uploading = True
        try:
            token = await self._token()
            if not token or not self.uploader.public_base_url:
                raise ValidationError(
                    "Cloud storage is required for team uploads. "
                    "Please sign in and configure R2 before uploading."
                )

            actor = self._actor()
            created_at = now_iso()
            new_assets: list[Asset] = []
            failures = 0
            for index, file in enumerate(allowed):
                try:
                    media_url = await self.uploader.upload(
                        file.name, file.content_type, file.data, request.event_id, token
                    )
                except UploadError as exc:
                    failures += 1
                    logger.warning("Upload of %s failed, skipping: %s", file.name, exc)
                    continue
                for tone_id in tones:
                    tone = tone_meta(tone_id)
                    new_assets.append(
                        Asset(
                            id=build_id("asset"),
                            title=_asset_title(request, file, index, len(allowed), tone),
                            event_id=request.event_id,
                            skin_tone=tone_id,
                            status=AssetStatus.TO_REVIEW,
                            uploader=actor,
                            created_at=created_at,
                            preview_color=tone.color,
                            media_url=media_url,
                            media_type=file.content_type,
                            media_storage="object",
                            file_name=file.name,
                            file_size=file.size,
                        )
                    )

            if not new_assets:
                result.blocking = "Upload failed. No files were saved to cloud storage."
                return result
            if failures:
                result.warnings.append(
                    f"Uploaded {len(new_assets)} assets. "
                    f"{failures} file(s) failed to upload to cloud storage."
                )

            self._upsert(ASSETS, new_assets, prepend=True)
            entries = [
                build_activity(
                    SubjectType.ASSET,
                    asset.id,
                    ActivityAction.CREATED,
                    actor,
                    to_status=AssetStatus.TO_REVIEW,
                )
                for asset in new_assets
            ]
            self._add_activity(entries)
            result.changed_ids = [asset.id for asset in new_assets]
            logger.info("Created %d assets for %s", len(new_assets), request.event_id)

            await self._push(ASSETS, new_assets, token, result, UPLOAD_SAVE_WARNING)
            await self._push_activity(entries, token)
            if self._wants_new_notice():
                self._notify(
                    f"{actor} uploaded {len(new_assets)} new asset(s) for "
                    f"{self._event_name(request.event_id)}. "
                    f"Status: {STATUS_LABELS[AssetStatus.TO_REVIEW]}."
                )
            return result
        finally:
            self._uploading = False

    async def create_asset(
        self,
        event_id: str,
        media_url: str,
        media_type: str,
        *,
        title: str = "",
        skin_tone: SkinTone = SkinTone.ALL,
        media_storage: str = "object",
        file_name: str | None = None,
        file_size: int | None = None,
    ) -> MutationResult:
        """Register media that is already hosted (or inline) as a new asset."""
        if not event_id or not media_url:
            raise ValidationError("An event and a media URL are required.")
        if media_type not in ALLOWED_MEDIA_TYPES:
            raise ValidationError("Please upload GIF or MP4 files only.")

        actor = self._actor()
        tone = tone_meta(skin_tone)
        asset = Asset(
            id=build_id("asset"),
            title=title.strip() or (_EXTENSION.sub("", file_name or "") or "New Asset"),
            event_id=event_id,
            skin_tone=skin_tone,
            status=AssetStatus.TO_REVIEW,
            uploader=actor,
            created_at=now_iso(),
            preview_color=tone.color,
            media_url=media_url,
            media_type=media_type,
            media_storage=media_storage,
            file_name=file_name,
            file_size=file_size,
        )
        self._upsert(ASSETS, [asset], prepend=True)
        entry = build_activity(
            SubjectType.ASSET, asset.id, ActivityAction.CREATED, actor,
            to_status=AssetStatus.TO_REVIEW,
        )
        self._add_activity([entry])

        result = MutationResult(changed_ids=[asset.id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(ASSETS, [asset], token, result, UPLOAD_SAVE_WARNING)
        await self._push_activity([entry], token)
        if self._wants_new_notice():
            self._notify(
                f"{actor} uploaded 1 new asset(s) for {self._event_name(event_id)}. "
                f"Status: {STATUS_LABELS[AssetStatus.TO_REVIEW]}."
            )
        return result

    async def review_asset(
        self, asset_id: str, status: AssetStatus, notes: str = ""
    ) -> MutationResult:
        cleaned = notes.strip()
        if status in NOTES_REQUIRED and not cleaned:
            raise ValidationError(_REVIEW_NOTES_MESSAGES[status])
        current = self.state.get_asset(asset_id)
        if current is None:
            raise ValidationError("Asset not found.")

        actor = self._actor()
        updated = replace(
            current,
            status=status,
            reviewer=actor,
            notes_refinement=cleaned if status == AssetStatus.HOLD else current.notes_refinement,
            updated_at=now_iso(),
        )
        self._upsert(ASSETS, [updated])
        entry = build_activity(
            SubjectType.ASSET,
            asset_id,
            ActivityAction.STATUS_CHANGED,
            actor,
            from_status=current.status,
            to_status=status,
            comment=cleaned,
        )
        self._add_activity([entry])
        logger.info("Asset %s set to %s by %s", asset_id, status.value, actor)

        result = MutationResult(changed_ids=[asset_id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_APPROVALS
        await self._push(ASSETS, [updated], token, result, SAVE_WARNING)
        await self._push_activity([entry], token)
        if self._wants_status_notice(status):
            self._notify(
                f"{actor} set {current.title} ({self._event_name(current.event_id)}) "
                f"to {STATUS_LABELS[status]}."
            )
        return result

    async def update_asset_tone(self, asset_id: str, tone: SkinTone) -> MutationResult:
        current = self.state.get_asset(asset_id)
        if current is None:
            raise ValidationError("Asset not found.")

        updated = replace(
            current,
            skin_tone=tone,
            preview_color=tone_meta(tone).color or current.preview_color,
            updated_at=now_iso(),
        )
        self._upsert(ASSETS, [updated])

        result = MutationResult(changed_ids=[asset_id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_TONES
        await self._push(ASSETS, [updated], token, result, SAVE_WARNING)
        return result

    async def delete_asset(self, asset_id: str) -> MutationResult:
        if self.state.get_asset(asset_id) is None:
            raise ValidationError("Asset not found.")

        self._remove(ASSETS, [asset_id])
        self._prune_activity(SubjectType.ASSET, [asset_id])
        logger.info("Deleted asset %s locally", asset_id)

        result = MutationResult(changed_ids=[asset_id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_DELETE_ASSETS
        elif not await self.remotes[ASSETS].delete_one(asset_id, token):
            result.warnings.append(ASSET_DELETE_WARNING)
        return result

    async def delete_assets(self, asset_ids: Sequence[str]) -> MutationResult:
        ids = list(dict.fromkeys(asset_ids))
        if not ids:
            raise ValidationError("Select at least one asset to delete.")

        self._remove(ASSETS, ids)
        self._prune_activity(SubjectType.ASSET, ids)
        logger.info("Deleted %d assets locally", len(ids))

        result = MutationResult(changed_ids=ids)
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_DELETE_ASSETS
            return result
        outcomes = await asyncio.gather(
            *(self.remotes[ASSETS].delete_one(asset_id, token) for asset_id in ids)
        )
        if not all(outcomes):
            result.warnings.append(BULK_DELETE_WARNING)
        return result

    # -- text items --------------------------------------------------------

    def _text_status(self, status: AssetStatus, notes: str) -> tuple[AssetStatus, str]:
        """Creators always submit for review; only reviewers pick a status."""
        if not self.is_reviewer:
            return AssetStatus.TO_REVIEW, ""
        cleaned = notes.strip()
        if status in NOTES_REQUIRED and not cleaned:
            raise ValidationError(NOTES_MESSAGE)
        return status, cleaned if status in NOTES_REQUIRED else ""

    async def save_text_item(
        self, draft: TextDraft, editing_id: str | None = None
    ) -> MutationResult:
        if self._saving_text:
            return MutationResult(skipped=True)
        title = draft.title.strip()
        body = draft.body.strip()
        if not title and not body:
            raise ValidationError("Add a title or body before saving.")
        status, review_notes = self._text_status(draft.status, draft.review_notes)
        existing = self.state.get_text_item(editing_id) if editing_id else None
        if editing_id and existing is None:
            raise ValidationError("Text item not found.")

        self._saving_text = True
        try:
            actor = self._actor()
            now = now_iso()
            group_id = draft.group_id or None
            fields = dict(
                title=title or fallback_title(body),
                body=body,
                category=draft.category.strip() or DEFAULT_CATEGORY,
                tags=parse_tags(draft.tags),
                group_id=group_id,
                section_id=self._resolve_section(group_id, draft.section_id),
                status=status,
                reviewer=None if status == AssetStatus.TO_REVIEW else actor,
                review_notes=review_notes,
                updated_at=now,
            )

            entries: list[ActivityEntry] = []
            message = ""
            if existing is not None:
                item = replace(existing, **fields)
                self._upsert(TEXT_ITEMS, [item])
                if existing.status != status:
                    entries.append(
                        build_activity(
                            SubjectType.TEXT,
                            item.id,
                            ActivityAction.STATUS_CHANGED,
                            actor,
                            from_status=existing.status,
                            to_status=status,
                            comment=review_notes,
                        )
                    )
                    if self._wants_status_notice(status):
                        message = f"{actor} updated {existing.title} to {STATUS_LABELS[status]}."
            else:
                item = TextItem(id=build_id("text"), author=actor, created_at=now, **fields)
                self._upsert(TEXT_ITEMS, [item], prepend=True)
                entries.append(
                    build_activity(
                        SubjectType.TEXT, item.id, ActivityAction.CREATED, actor,
                        to_status=status,
                    )
                )
                if self._wants_new_notice():
                    message = (
                        f"{actor} added a new text item to {self._group_name(group_id)}. "
                        f"Status: {STATUS_LABELS[status]}."
                    )
            self._add_activity(entries)

            result = MutationResult(changed_ids=[item.id])
            token = await self._token()
            if not token:
                result.blocking = SIGN_IN_REMINDER
            await self._push(TEXT_ITEMS, [item], token, result, SAVE_WARNING)
            await self._push_activity(entries, token)
            if message:
                self._notify(message)
            return result
        finally:
            self._saving_text = False

    async def apply_text_status(
        self, item_ids: Sequence[str], status: AssetStatus, notes: str = ""
    ) -> MutationResult:
        if not self.is_reviewer:
            raise ValidationError("Only reviewers can change text status.")
        cleaned = notes.strip()
        if status in NOTES_REQUIRED and not cleaned:
            raise ValidationError(NOTES_MESSAGE)
        targets = [item for item in self.state.text_items if item.id in set(item_ids)]
        if not targets:
            raise ValidationError("Unable to update text status. Please refresh and try again.")

        actor = self._actor()
        now = now_iso()
        updated = [
            replace(
                item,
                status=status,
                reviewer=None if status == AssetStatus.TO_REVIEW else actor,
                review_notes=cleaned if status in NOTES_REQUIRED else "",
                updated_at=now,
            )
            for item in targets
        ]
        self._upsert(TEXT_ITEMS, updated)
        entries = [
            build_activity(
                SubjectType.TEXT,
                item.id,
                ActivityAction.STATUS_CHANGED,
                actor,
                from_status=item.status,
                to_status=status,
                comment=cleaned,
            )
            for item in targets
        ]
        self._add_activity(entries)

        result = MutationResult(changed_ids=[item.id for item in updated])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(TEXT_ITEMS, updated, token, result, SAVE_WARNING)
        await self._push_activity(entries, token)
        if self._wants_status_notice(status):
            self._notify(
                f"{actor} updated {len(updated)} text item(s) to {STATUS_LABELS[status]}."
            )
        return result

    async def bulk_import_text(self, draft: BulkImportDraft) -> MutationResult:
        entries_in = split_bulk_import_entries(draft.text)
        if not entries_in:
            raise ValidationError("Paste at least one line or block to import.")
        status, review_notes = self._text_status(draft.status, draft.review_notes)

        actor = self._actor()
        now = now_iso()
        group_id = draft.group_id or None
        section_id = self._resolve_section(group_id, draft.section_id)
        category = draft.category.strip() or DEFAULT_CATEGORY
        tags = parse_tags(draft.tags)
        items = []
        for entry in entries_in:
            title = entry.title.strip()
            body = entry.body.strip()
            items.append(
                TextItem(
                    id=build_id("text"),
                    title=title or fallback_title(body),
                    body=body or title,
                    category=category,
                    status=status,
                    author=actor,
                    created_at=now,
                    reviewer=None if status == AssetStatus.TO_REVIEW else actor,
                    updated_at=now,
                    tags=tags,
                    review_notes=review_notes,
                    group_id=group_id,
                    section_id=section_id,
                )
            )
        self._upsert(TEXT_ITEMS, items, prepend=True)
        activity = [
            build_activity(
                SubjectType.TEXT, item.id, ActivityAction.CREATED, actor, to_status=status
            )
            for item in items
        ]
        self._add_activity(activity)
        logger.info("Imported %d text items into %s", len(items), group_id or "unassigned")

        result = MutationResult(changed_ids=[item.id for item in items])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(TEXT_ITEMS, items, token, result, SAVE_WARNING)
        await self._push_activity(activity, token)
        if self._wants_new_notice():
            self._notify(
                f"{actor} imported {len(items)} text item(s) into "
                f"{self._group_name(group_id)}. Status: {STATUS_LABELS[status]}."
            )
        return result

    async def delete_text_item(self, item_id: str) -> MutationResult:
        if self.state.get_text_item(item_id) is None:
            raise ValidationError("Text item not found.")

        self._remove(TEXT_ITEMS, [item_id])
        self._prune_activity(SubjectType.TEXT, [item_id])
        return await self._push_delete(TEXT_ITEMS, item_id)

    async def _push_delete(self, name: str, record_id: str) -> MutationResult:
        result = MutationResult(changed_ids=[record_id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        elif not await self.remotes[name].delete_one(record_id, token):
            result.warnings.append(DELETE_WARNING)
        return result

    # -- groups and sections -----------------------------------------------

    async def save_text_group(
        self, draft: GroupDraft, editing_id: str | None = None
    ) -> MutationResult:
        name = draft.name.strip()
        if not name:
            raise ValidationError("Group name is required.")
        existing = self.state.get_text_group(editing_id) if editing_id else None
        if editing_id and existing is None:
            raise ValidationError("Text group not found.")

        now = now_iso()
        fields = dict(
            name=name,
            description=draft.description.strip(),
            event_id=draft.event_id or None,
            updated_at=now,
        )
        if existing is not None:
            group = replace(existing, **fields)
            self._upsert(TEXT_GROUPS, [group])
        else:
            group = TextGroup(id=build_id("group"), created_at=now, **fields)
            self._upsert(TEXT_GROUPS, [group], prepend=True)

        result = MutationResult(changed_ids=[group.id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(TEXT_GROUPS, [group], token, result, SAVE_WARNING)
        return result

    async def delete_text_group(self, group_id: str) -> MutationResult:
        if self.state.get_text_group(group_id) is None:
            raise ValidationError("Text group not found.")

        now = now_iso()
        section_ids = [s.id for s in self.state.text_sections if s.group_id == group_id]
        self._remove(TEXT_GROUPS, [group_id])
        self._remove(TEXT_SECTIONS, section_ids)
        self.state.set(
            TEXT_ITEMS,
            [
                replace(item, group_id=None, section_id=None, updated_at=now)
                if item.group_id == group_id
                else item
                for item in self.state.text_items
            ],
        )
        logger.info("Deleted text group %s and %d sections", group_id, len(section_ids))
        # The server applies the same cascade on DELETE.
        return await self._push_delete(TEXT_GROUPS, group_id)

    async def save_text_section(
        self, draft: SectionDraft, editing_id: str | None = None
    ) -> MutationResult:
        name = draft.name.strip()
        if not name:
            raise ValidationError("Section name is required.")
        if not draft.group_id:
            raise ValidationError("Section needs a text group.")
        existing = self.state.get_text_section(editing_id) if editing_id else None
        if editing_id and existing is None:
            raise ValidationError("Text section not found.")

        now = now_iso()
        fields = dict(
            name=name,
            description=draft.description.strip(),
            group_id=draft.group_id,
            updated_at=now,
        )
        moved: list[TextItem] = []
        if existing is not None:
            section = replace(existing, **fields)
            self._upsert(TEXT_SECTIONS, [section])
            moved = [
                replace(item, group_id=draft.group_id, updated_at=now)
                for item in self.state.text_items
                if item.section_id == section.id
            ]
            self._upsert(TEXT_ITEMS, moved)
        else:
            section = TextSection(id=build_id("section"), created_at=now, **fields)
            self._upsert(TEXT_SECTIONS, [section], prepend=True)

        result = MutationResult(changed_ids=[section.id] + [item.id for item in moved])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(TEXT_SECTIONS, [section], token, result, SAVE_WARNING)
        await self._push(TEXT_ITEMS, moved, token, result, ITEMS_SAVE_WARNING)
        return result

    async def delete_text_section(self, section_id: str) -> MutationResult:
        if self.state.get_text_section(section_id) is None:
            raise ValidationError("Text section not found.")

        now = now_iso()
        self._remove(TEXT_SECTIONS, [section_id])
        self.state.set(
            TEXT_ITEMS,
            [
                replace(item, section_id=None, updated_at=now)
                if item.section_id == section_id
                else item
                for item in self.state.text_items
            ],
        )
        return await self._push_delete(TEXT_SECTIONS, section_id)

    # -- events ------------------------------------------------------------

    async def save_event(
        self, draft: EventDraft, editing_id: str | None = None
    ) -> MutationResult:
        name = draft.name.strip()
        start_date = draft.start_date.strip()
        if not name or not start_date:
            raise ValidationError("Event name and start date are required.")
        total_target = parse_int(draft.total_target)
        if total_target is None or total_target <= 0:
            raise ValidationError("Total goal must be a positive number.")
        tier = parse_int(draft.tier)
        if tier is None or tier <= 0:
            raise ValidationError("Tier must be a positive number.")
        existing = self.state.get_event(editing_id) if editing_id else None
        if editing_id and existing is None:
            raise ValidationError("Event not found.")

        fields = dict(
            name=name,
            start_date=start_date,
            end_date=draft.end_date.strip() or None,
            total_target=total_target,
            per_tone_target=parse_int(draft.per_tone_target) or 0,
            tier=tier,
            description=draft.description.strip(),
        )
        if existing is not None:
            event = replace(existing, **fields)
            self._upsert(EVENTS, [event])
        else:
            event = Event(id=build_id("event"), **fields)
            self._upsert(EVENTS, [event], prepend=True)

        result = MutationResult(changed_ids=[event.id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push(EVENTS, [event], token, result, SAVE_WARNING)
        return result

    # -- comments ----------------------------------------------------------

    async def add_comment(
        self, subject_type: SubjectType, subject_id: str, comment: str
    ) -> MutationResult:
        trimmed = comment.strip()
        if not trimmed:
            return MutationResult()

        actor = self._actor()
        entry = build_activity(
            SubjectType(subject_type), subject_id, ActivityAction.COMMENT, actor,
            comment=trimmed,
        )
        self._add_activity([entry])
        result = MutationResult(changed_ids=[entry.id])
        token = await self._token()
        if not token:
            result.blocking = SIGN_IN_REMINDER
        await self._push_activity([entry], token)
        return result
