import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

ASSETS_KEY = "gif-you-assets"
TEXT_ITEMS_KEY = "gif-you-texts"
TEXT_GROUPS_KEY = "gif-you-text-groups"
TEXT_SECTIONS_KEY = "gif-you-text-sections"
EVENTS_KEY = "gif-you-events"
ACTIVITY_KEY = "gif-you-activity"
NOTIFICATIONS_KEY = "gif-you-notifications"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """One JSON document per key inside ``directory``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = self._path(key).with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(self._path(key))


def _jsonable(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class LocalCache:
    """Snapshot store keyed per collection.

    Reads never raise: a missing or corrupt entry is ``None``. Writes never
    raise either; the in-memory state stays authoritative when persistence
    fails.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def read(self, key: str) -> Any | None:
        try:
            raw = self.storage.get_item(key)
        except (OSError, ValueError):
            logger.warning("Cache read failed for %s", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.info("Ignoring unparseable cache entry %s", key)
            return None

    def write(self, key: str, value: Any) -> bool:
        try:
            self.storage.set_item(key, json.dumps(_jsonable(value)))
        except (OSError, TypeError, ValueError):
            logger.warning("Cache write failed for %s", key, exc_info=True)
            return False
        return True

    def bind(self, state, cache_keys: dict[str, str]) -> None:
        """Persist each collection in ``cache_keys`` whenever it changes.

        Empty collections are not written, so clearing the last record keeps
        the previous snapshot until a non-empty set replaces it.
        """
        for collection, key in cache_keys.items():

            def persist(records, key=key):
                if records:
                    self.write(key, records)

            state.subscribe(collection, persist)
