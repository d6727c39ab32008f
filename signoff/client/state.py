"""Application state container owning every collection the dashboard shows."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from signoff.client.domain import (
    ActivityEntry,
    Asset,
    Event,
    TextGroup,
    TextItem,
    TextSection,
)
from signoff.client.identity import Session

logger = logging.getLogger(__name__)

ASSETS = "assets"
EVENTS = "events"
TEXT_ITEMS = "text_items"
TEXT_GROUPS = "text_groups"
TEXT_SECTIONS = "text_sections"
ACTIVITY = "activity"

COLLECTIONS = (ASSETS, EVENTS, TEXT_ITEMS, TEXT_GROUPS, TEXT_SECTIONS, ACTIVITY)

Observer = Callable[[list], None]


@dataclass(frozen=True)
class SyncMeta:
    revision: int
    pending_sync: bool


class DashboardState:
    """Holds the collections plus per-record sync bookkeeping.

    Collections are replaced wholesale through :meth:`set`, which notifies the
    observers registered for that collection. Lookups by id return ``None``
    when the record is absent; a dangling reference is a valid unassigned
    state.
    """

    def __init__(self):
        self._collections: dict[str, list] = {name: [] for name in COLLECTIONS}
        self._observers: dict[str, list[Observer]] = {name: [] for name in COLLECTIONS}
        self.sync_errors: dict[str, str] = {}
        self.sync_meta: dict[tuple[str, str], SyncMeta] = {}
        self.role: str = "creator"
        self.role_locked: bool = False
        # Session resolved by the last load; mutations label actors from it.
        self.session: Session | None = None
        self._revision = 0

    # -- collections -------------------------------------------------------

    def get(self, name: str) -> list:
        return list(self._collections[name])

    def set(self, name: str, records: Iterable[Any]) -> None:
        self._collections[name] = list(records)
        for observer in self._observers[name]:
            observer(list(self._collections[name]))

    def subscribe(self, name: str, observer: Observer) -> None:
        self._observers[name].append(observer)

    @property
    def assets(self) -> list[Asset]:
        return self.get(ASSETS)

    @property
    def events(self) -> list[Event]:
        return self.get(EVENTS)

    @property
    def text_items(self) -> list[TextItem]:
        return self.get(TEXT_ITEMS)

    @property
    def text_groups(self) -> list[TextGroup]:
        return self.get(TEXT_GROUPS)

    @property
    def text_sections(self) -> list[TextSection]:
        return self.get(TEXT_SECTIONS)

    @property
    def activity(self) -> list[ActivityEntry]:
        return self.get(ACTIVITY)

    # -- lookups -----------------------------------------------------------

    def find(self, name: str, record_id: str | None):
        if not record_id:
            return None
        for record in self._collections[name]:
            if record.id == record_id:
                return record
        return None

    def get_asset(self, asset_id: str | None) -> Asset | None:
        return self.find(ASSETS, asset_id)

    def get_event(self, event_id: str | None) -> Event | None:
        return self.find(EVENTS, event_id)

    def get_text_item(self, item_id: str | None) -> TextItem | None:
        return self.find(TEXT_ITEMS, item_id)

    def get_text_group(self, group_id: str | None) -> TextGroup | None:
        return self.find(TEXT_GROUPS, group_id)

    def get_text_section(self, section_id: str | None) -> TextSection | None:
        return self.find(TEXT_SECTIONS, section_id)

    def activity_for(self, subject_type: str, subject_id: str) -> list[ActivityEntry]:
        return [
            entry
            for entry in self._collections[ACTIVITY]
            if entry.subject_type.value == subject_type and entry.subject_id == subject_id
        ]

    # -- sync bookkeeping --------------------------------------------------

    def mark_pending(self, name: str, record_ids: Iterable[str]) -> dict[str, int]:
        """Bump the local revision of each record and flag it as unsynced."""
        revisions = {}
        for record_id in record_ids:
            self._revision += 1
            self.sync_meta[(name, record_id)] = SyncMeta(self._revision, True)
            revisions[record_id] = self._revision
        return revisions

    def mark_synced(self, name: str, revisions: dict[str, int]) -> list[str]:
        """Clear the pending flag for records still at the pushed revision.

        Returns the ids whose acknowledgement arrived after a newer local
        edit; those stay pending.
        """
        stale = []
        for record_id, revision in revisions.items():
            meta = self.sync_meta.get((name, record_id))
            if meta is None:
                continue
            if meta.revision == revision:
                self.sync_meta[(name, record_id)] = SyncMeta(revision, False)
            else:
                stale.append(record_id)
        if stale:
            logger.info("Stale acknowledgement for %s: %s", name, ", ".join(stale))
        return stale

    def is_pending(self, name: str, record_id: str) -> bool:
        meta = self.sync_meta.get((name, record_id))
        return bool(meta and meta.pending_sync)

    def forget(self, name: str, record_ids: Iterable[str]) -> None:
        for record_id in record_ids:
            self.sync_meta.pop((name, record_id), None)

    def clear(self) -> None:
        for name in COLLECTIONS:
            self.set(name, [])
        self.sync_meta.clear()
        self.sync_errors.clear()
