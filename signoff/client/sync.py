"""Load-time reconciliation between the local cache and the collection API.

Each collection is described once by a :class:`CollectionDescriptor`; the
orchestrator runs the same fallback ladder for all of them:

* local demo: cache, else seed (seed is written back to the cache);
* authenticated and reachable: adopt the remote list as-is, except that an
  empty events list is seeded remotely and the seed adopted;
* authenticated but unreachable: record a sync error, then the local ladder;
* signed out: every collection is cleared.

Units load independently. Text groups, sections and items form one unit:
if any of the three fetches fails, all three fall back together.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from signoff.client import cache as cache_keys
from signoff.client import normalize, seed
from signoff.client.cache import LocalCache
from signoff.client.identity import IdentityProvider, Session
from signoff.client.remote import RemoteCollection, fetch_role
from signoff.client.state import (
    ACTIVITY,
    ASSETS,
    EVENTS,
    TEXT_GROUPS,
    TEXT_ITEMS,
    TEXT_SECTIONS,
    DashboardState,
)

logger = logging.getLogger(__name__)


class SyncMode(str, Enum):
    LOCAL_DEMO = "local_demo"
    AUTHENTICATED = "authenticated"
    SIGNED_OUT = "signed_out"


Seeder = Callable[[dict[str, list]], list]


@dataclass(frozen=True)
class CollectionDescriptor:
    name: str
    cache_key: str
    endpoint: str
    envelope: str
    normalizer: Callable[[object], list]
    # Receives the collections already resolved earlier in the same unit.
    seed: Seeder | None = None
    seed_remote_on_empty: bool = False


ASSETS_DESCRIPTOR = CollectionDescriptor(
    name=ASSETS,
    cache_key=cache_keys.ASSETS_KEY,
    endpoint="/api/assets",
    envelope="assets",
    normalizer=normalize.normalize_assets,
    seed=lambda resolved: seed.generate_mock_assets(),
)
EVENTS_DESCRIPTOR = CollectionDescriptor(
    name=EVENTS,
    cache_key=cache_keys.EVENTS_KEY,
    endpoint="/api/events",
    envelope="events",
    normalizer=normalize.normalize_events,
    seed=lambda resolved: seed.build_seed_events(),
    seed_remote_on_empty=True,
)
TEXT_GROUPS_DESCRIPTOR = CollectionDescriptor(
    name=TEXT_GROUPS,
    cache_key=cache_keys.TEXT_GROUPS_KEY,
    endpoint="/api/text-groups",
    envelope="groups",
    normalizer=normalize.normalize_text_groups,
    seed=lambda resolved: seed.generate_mock_text_groups(),
)
TEXT_SECTIONS_DESCRIPTOR = CollectionDescriptor(
    name=TEXT_SECTIONS,
    cache_key=cache_keys.TEXT_SECTIONS_KEY,
    endpoint="/api/text-sections",
    envelope="sections",
    normalizer=normalize.normalize_text_sections,
    seed=lambda resolved: seed.generate_mock_text_sections(resolved[TEXT_GROUPS]),
)
TEXT_ITEMS_DESCRIPTOR = CollectionDescriptor(
    name=TEXT_ITEMS,
    cache_key=cache_keys.TEXT_ITEMS_KEY,
    endpoint="/api/text-items",
    envelope="items",
    normalizer=normalize.normalize_text_items,
    seed=lambda resolved: seed.generate_mock_text_items(
        resolved[TEXT_GROUPS], resolved[TEXT_SECTIONS]
    ),
)
ACTIVITY_DESCRIPTOR = CollectionDescriptor(
    name=ACTIVITY,
    cache_key=cache_keys.ACTIVITY_KEY,
    endpoint="/api/activity",
    envelope="activity",
    normalizer=normalize.normalize_activity,
)

DESCRIPTORS = {
    descriptor.name: descriptor
    for descriptor in (
        ASSETS_DESCRIPTOR,
        EVENTS_DESCRIPTOR,
        TEXT_GROUPS_DESCRIPTOR,
        TEXT_SECTIONS_DESCRIPTOR,
        TEXT_ITEMS_DESCRIPTOR,
        ACTIVITY_DESCRIPTOR,
    )
}

# unit key -> descriptors, in seeding order
UNITS = {
    "assets": (ASSETS_DESCRIPTOR,),
    "events": (EVENTS_DESCRIPTOR,),
    "text": (TEXT_GROUPS_DESCRIPTOR, TEXT_SECTIONS_DESCRIPTOR, TEXT_ITEMS_DESCRIPTOR),
    "activity": (ACTIVITY_DESCRIPTOR,),
}

SYNC_ERROR_MESSAGES = {
    "assets": "Unable to load team assets. Showing local cache.",
    "events": "Unable to load team events. Showing local cache.",
    "text": "Unable to load team text items. Showing local cache.",
    "activity": "Unable to load team activity. Showing local cache.",
}


def cache_key_map() -> dict[str, str]:
    return {name: descriptor.cache_key for name, descriptor in DESCRIPTORS.items()}


class SyncOrchestrator:
    def __init__(
        self,
        state: DashboardState,
        cache: LocalCache,
        http: httpx.AsyncClient,
        identity: IdentityProvider,
    ):
        self.state = state
        self.cache = cache
        self.http = http
        self.identity = identity
        self.remotes = {
            name: RemoteCollection(http, descriptor)
            for name, descriptor in DESCRIPTORS.items()
        }
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None

    # -- mode --------------------------------------------------------------

    async def resolve_mode(self) -> tuple[SyncMode, Session | None, str]:
        session = await self.identity.get_current_session()
        if session is None:
            return SyncMode.SIGNED_OUT, None, ""
        if session.local_demo:
            return SyncMode.LOCAL_DEMO, session, ""
        token = await self.identity.get_token(session)
        if not token:
            return SyncMode.SIGNED_OUT, session, ""
        return SyncMode.AUTHENTICATED, session, token

    # -- loading -----------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def load(self) -> SyncMode:
        """Populate every collection; a newer ``load()`` supersedes this one."""
        self._generation += 1
        generation = self._generation
        mode, session, token = await self.resolve_mode()
        if not self._is_current(generation):
            return mode
        self.state.session = session if mode is not SyncMode.SIGNED_OUT else None

        if mode is SyncMode.SIGNED_OUT:
            self.state.clear()
            self.state.role_locked = False
            logger.info("Signed out; cleared dashboard state")
            return mode

        await asyncio.gather(
            self._load_role(mode, token, generation),
            *(
                self._load_unit(unit, descriptors, mode, token, generation)
                for unit, descriptors in UNITS.items()
            ),
        )
        return mode

    async def _load_role(self, mode: SyncMode, token: str, generation: int) -> None:
        role = await fetch_role(self.http, token) if mode is SyncMode.AUTHENTICATED else None
        if not self._is_current(generation):
            return
        self.state.role_locked = bool(role and role.locked)
        if role and role.locked:
            self.state.role = role.role

    async def _load_unit(
        self,
        unit: str,
        descriptors: tuple[CollectionDescriptor, ...],
        mode: SyncMode,
        token: str,
        generation: int,
    ) -> None:
        error = ""
        if mode is SyncMode.AUTHENTICATED:
            resolved = await self._from_remote(descriptors, token)
            if resolved is not None:
                if not self._is_current(generation):
                    return
                self.state.sync_errors.pop(unit, None)
                self._adopt(resolved)
                return
            error = SYNC_ERROR_MESSAGES[unit]
            logger.warning("Remote load of %s failed; falling back to cache", unit)

        resolved = self._from_cache(descriptors)
        if not self._is_current(generation):
            return
        if error:
            self.state.sync_errors[unit] = error
        else:
            self.state.sync_errors.pop(unit, None)
        self._adopt(resolved)

    async def _from_remote(
        self, descriptors: tuple[CollectionDescriptor, ...], token: str
    ) -> dict[str, list] | None:
        fetched = await asyncio.gather(
            *(self.remotes[descriptor.name].fetch(token) for descriptor in descriptors)
        )
        if any(records is None for records in fetched):
            return None

        resolved: dict[str, list] = {}
        for descriptor, records in zip(descriptors, fetched):
            if not records and descriptor.seed_remote_on_empty and descriptor.seed:
                records = descriptor.seed(resolved)
                saved = await self.remotes[descriptor.name].save(records, token)
                if not saved:
                    logger.warning("Seeding remote %s failed", descriptor.name)
                logger.info("Seeded %d %s remotely", len(records), descriptor.name)
            resolved[descriptor.name] = records
        return resolved

    def _from_cache(
        self, descriptors: tuple[CollectionDescriptor, ...]
    ) -> dict[str, list]:
        resolved: dict[str, list] = {}
        for descriptor in descriptors:
            records = descriptor.normalizer(self.cache.read(descriptor.cache_key))
            if not records and descriptor.seed:
                records = descriptor.seed(resolved)
                self.cache.write(descriptor.cache_key, records)
            resolved[descriptor.name] = records
        return resolved

    def _adopt(self, resolved: dict[str, list]) -> None:
        for name, records in resolved.items():
            self.state.set(name, records)

    # -- auth wiring -------------------------------------------------------

    def attach(self) -> None:
        """Reload whenever the identity provider reports an auth change."""
        if self._unsubscribe is None:
            self._unsubscribe = self.identity.on_auth_state_change(self._on_auth_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_auth_change(self, event: str, session: Session | None) -> None:
        logger.info("Auth state changed (%s); reloading", event)
        task = asyncio.get_running_loop().create_task(self.load())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait for reloads triggered by auth changes to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
