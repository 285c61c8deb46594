"""
Shared pytest fixtures for the notification engine tests.

Every fixture builds fresh instances so tests never share state. Timers run on
a ManualScheduler so auto-hide and the retention sweep are deterministic.
"""

import pytest

from engine.delivery import BrowserNotificationBridge, DeliveryFanout
from engine.factories import DomainEventFactories
from engine.scheduler import ManualScheduler
from engine.service import NotificationEngine
from engine.settings_manager import SettingsManager
from engine.store import NotificationStore
from shared.channels import MemoryNotificationSink, PermissionState, RecordingSoundPlayer
from shared.data_store import MemoryKeyValueStore, PersistenceAdapter
from shared.host import RecordingHost


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at 0ms."""
    return ManualScheduler()


@pytest.fixture
def sink() -> MemoryNotificationSink:
    """Platform sink that already has permission."""
    return MemoryNotificationSink(permission=PermissionState.GRANTED)


@pytest.fixture
def sound_player() -> RecordingSoundPlayer:
    return RecordingSoundPlayer()


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def settings_manager() -> SettingsManager:
    return SettingsManager()


@pytest.fixture
def bridge(sink, host, scheduler) -> BrowserNotificationBridge:
    return BrowserNotificationBridge(sink=sink, host=host, scheduler=scheduler)


@pytest.fixture
def store(settings_manager, bridge, sound_player, scheduler) -> NotificationStore:
    """
    Store wired to in-memory channels.

    Desktop delivery is off by default (as in the real settings); tests that
    need it turn it on through update_settings.
    """
    return NotificationStore(
        settings_manager=settings_manager,
        delivery=DeliveryFanout(bridge=bridge, sound_player=sound_player),
        scheduler=scheduler,
    )


@pytest.fixture
def factories(store, host) -> DomainEventFactories:
    return DomainEventFactories(store, host=host)


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def engine(scheduler, sink, sound_player, host, kv_store) -> NotificationEngine:
    """Fully wired engine on the virtual clock with in-memory persistence."""
    return NotificationEngine(
        scheduler=scheduler,
        sink=sink,
        sound_player=sound_player,
        host=host,
        persistence=PersistenceAdapter(kv_store),
    )

