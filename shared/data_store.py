"""
Persistence for the notification engine.

The engine persists a bounded snapshot of its state (recent notifications and
the settings) into a key-value byte store. The host decides when: typically
``load()`` at startup and ``save()`` at shutdown or after user actions.

Design decisions:
- The byte store is a small port with an in-memory and a file-backed version
- The snapshot is JSON produced by Pydantic
- Only the first ``limit`` notifications by position are kept, read or not
- The panel visibility flag is never persisted
- An unreadable snapshot is logged and ignored, the engine starts from defaults
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from pydantic import BaseModel, Field, ValidationError

from shared.models import Notification, NotificationSettings

logger = logging.getLogger("notification_persistence")


class KeyValueStore(Protocol):
    """Minimal key-value byte store."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """Dict-backed store, for tests and throwaway sessions."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore:
    """
    One file per key inside a data directory.

    Writes go to a temporary file first and are then moved into place, so a
    crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the snapshot files.
                     Defaults to ./data relative to project root.
        """
        if data_dir is None:
            data_dir = Path(__file__).parent.parent / "data"
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(value)
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class PersistedState(BaseModel):
    """The persisted snapshot."""
    notifications: list[Notification] = Field(default_factory=list)
    settings: NotificationSettings = Field(default_factory=NotificationSettings)


class PersistenceAdapter:
    """
    Serializes engine state to a key-value store and restores it.

    Example:
        adapter = PersistenceAdapter(FileKeyValueStore(Path("data")))
        adapter.save(store.notifications, settings_manager.settings)
        ...
        state = adapter.load()
    """

    def __init__(
        self,
        kv_store: Optional[KeyValueStore] = None,
        key: str = "notification-store",
        limit: int = 50,
    ):
        """
        Initialize the adapter.

        Args:
            kv_store: Byte store to use (defaults to an in-memory store)
            key: Key the snapshot is stored under
            limit: Number of most recent notifications kept
        """
        self.kv_store = kv_store if kv_store is not None else MemoryKeyValueStore()
        self.key = key
        self.limit = limit

    def save(
        self,
        notifications: Sequence[Notification],
        settings: NotificationSettings,
    ) -> PersistedState:
        """Write a snapshot and return what was written."""
        state = PersistedState(
            notifications=list(notifications[: self.limit]),
            settings=settings,
        )
        self.kv_store.set(self.key, state.model_dump_json().encode("utf-8"))
        logger.info(
            f"Saved snapshot '{self.key}': {len(state.notifications)} notifications"
        )
        return state

    def load(self) -> Optional[PersistedState]:
        """
        Read the snapshot.

        Returns None when nothing was saved yet or the snapshot is unreadable.
        """
        raw = self.kv_store.get(self.key)
        if raw is None:
            logger.debug(f"No snapshot under '{self.key}'")
            return None
        try:
            state = PersistedState.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Ignoring unreadable snapshot '{self.key}': {e}")
            return None
        logger.info(
            f"Loaded snapshot '{self.key}': {len(state.notifications)} notifications"
        )
        return state

    def clear(self) -> None:
        self.kv_store.delete(self.key)
