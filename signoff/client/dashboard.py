"""Wiring for a complete dashboard client session."""

import logging

import httpx

from signoff.client.cache import FileStorage, LocalCache, MemoryStorage
from signoff.client.config import ClientSettings
from signoff.client.identity import IdentityProvider
from signoff.client.mutations import MutationPipeline
from signoff.client.notifications import NotificationSettings, Notifier
from signoff.client.state import DashboardState
from signoff.client.sync import SyncOrchestrator, cache_key_map
from signoff.client.uploads import ObjectStoreUploader

logger = logging.getLogger(__name__)


class Dashboard:
    """State, cache, sync and mutations sharing one HTTP client.

    Use as an async context manager so the HTTP client is closed on exit.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        settings: ClientSettings | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        cache: LocalCache | None = None,
    ):
        self.settings = settings or ClientSettings.from_env()
        self.identity = identity
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.settings.api_base_url, timeout=self.settings.http_timeout
        )
        if cache is None:
            storage = (
                FileStorage(self.settings.cache_dir)
                if self.settings.cache_dir
                else MemoryStorage()
            )
            cache = LocalCache(storage)
        self.cache = cache

        self.state = DashboardState()
        self.cache.bind(self.state, cache_key_map())
        self.notifier = Notifier(self.http, NotificationSettings.load(self.cache))
        self.sync = SyncOrchestrator(self.state, self.cache, self.http, identity)
        self.mutations = MutationPipeline(
            self.state,
            self.http,
            identity,
            uploader=ObjectStoreUploader(
                self.http,
                self.settings.r2_public_base_url,
                presign_url=self.settings.presign_url,
            ),
            notifier=self.notifier,
        )

    async def __aenter__(self) -> "Dashboard":
        self.sync.attach()
        await self.sync.load()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.sync.detach()
        await self.sync.wait_idle()
        await self.mutations.wait_idle()
        if self._owns_http:
            await self.http.aclose()

    def save_notification_settings(self, **changes) -> NotificationSettings:
        updated = self.notifier.configure(**changes)
        if not updated.save(self.cache):
            logger.warning("Notification settings were not persisted")
        return updated
