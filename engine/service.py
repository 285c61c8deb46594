"""
The notification engine service.

Wires the store, settings, scheduler, delivery channels, persistence and the
domain factories together, and owns their lifecycle. Nothing runs on import:
the host application creates the engine, calls ``load()`` and ``start()`` at
startup and ``save()`` and ``stop()`` at shutdown.

Example:
    engine = NotificationEngine(config=EngineConfig(data_dir=Path("data")))
    engine.load()
    engine.start()           # needs a running event loop with AsyncioScheduler
    engine.notify_order_update("ord-001", "shipped", "Your order is on its way")
    ...
    engine.save()
    engine.stop()
"""

import logging
from typing import Optional

from engine.delivery import BrowserNotificationBridge, DeliveryFanout
from engine.factories import DomainEventFactories
from engine.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from engine.settings_manager import SettingsManager
from engine.store import NotificationStore
from shared.channels import NotificationSink, SoundPlayer
from shared.config import EngineConfig
from shared.data_store import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    PersistedState,
    PersistenceAdapter,
)
from shared.host import HostBridge, LoggingHost
from shared.models import Notification

logger = logging.getLogger("notification_engine")


class NotificationEngine:
    """
    Service object owning the notification engine.

    All collaborators are injectable; anything not given gets a default that
    is safe in a headless process (no-op sink, no sound, logging host,
    in-memory persistence unless ``config.data_dir`` is set).
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        scheduler: Optional[Scheduler] = None,
        sink: Optional[NotificationSink] = None,
        sound_player: Optional[SoundPlayer] = None,
        host: Optional[HostBridge] = None,
        persistence: Optional[PersistenceAdapter] = None,
    ):
        self.config = config or EngineConfig()
        self.scheduler = scheduler or AsyncioScheduler()
        self.host = host or LoggingHost()

        self.settings_manager = SettingsManager()
        self.bridge = BrowserNotificationBridge(
            sink=sink,
            host=self.host,
            scheduler=self.scheduler,
        )
        self.delivery = DeliveryFanout(bridge=self.bridge, sound_player=sound_player)
        self.store = NotificationStore(
            settings_manager=self.settings_manager,
            delivery=self.delivery,
            scheduler=self.scheduler,
            config=self.config,
        )
        self.factories = DomainEventFactories(self.store, host=self.host)
        self.persistence = persistence or self._default_persistence()

        self._sweep_handle: Optional[TimerHandle] = None
        self._started = False

    def _default_persistence(self) -> PersistenceAdapter:
        if self.config.data_dir is not None:
            kv_store = FileKeyValueStore(self.config.data_dir)
        else:
            kv_store = MemoryKeyValueStore()
        return PersistenceAdapter(
            kv_store,
            key=self.config.storage_key,
            limit=self.config.persist_limit,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> bool:
        """
        Start the periodic retention sweep.

        Returns False when the scheduler could not register the sweep (for
        example no running event loop); the engine stays stopped and
        ``start()`` may be called again later.
        """
        if self._started:
            logger.warning("NotificationEngine already started")
            return True

        handle = self.scheduler.call_every(
            self.config.sweep_interval_ms,
            self.sweep,
        )
        if handle is None:
            logger.warning("NotificationEngine not started - retention sweep could not be scheduled")
            return False

        self._sweep_handle = handle
        self._started = True
        logger.info(
            f"NotificationEngine started - sweeping every {self.config.sweep_interval_ms}ms "
            f"to {self.config.max_notifications} notifications"
        )
        return True

    def stop(self) -> None:
        """Cancel the sweep and every pending timer, started or not."""
        if self._sweep_handle is not None:
            self._sweep_handle.cancel()
            self._sweep_handle = None
        cancelled = self.scheduler.cancel_all()

        self._started = False
        logger.info(f"NotificationEngine stopped - cancelled {cancelled} pending timers")

    def sweep(self) -> int:
        """One retention sweep tick. Returns how many notifications were discarded."""
        return self.store.enforce_retention(self.config.max_notifications)

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self) -> PersistedState:
        """Persist recent notifications and the settings."""
        return self.persistence.save(self.store.notifications, self.store.settings)

    def load(self) -> bool:
        """
        Restore the last snapshot.

        Returns False (and keeps the current state) when there is nothing to
        restore.
        """
        state = self.persistence.load()
        if state is None:
            return False
        self.settings_manager.replace(state.settings)
        self.store.restore(state.notifications)
        return True

    # =========================================================================
    # Platform Notifications
    # =========================================================================

    async def request_permission(self) -> bool:
        return await self.bridge.request_permission()

    async def enable_desktop_notifications(self) -> bool:
        """Ask for permission and switch desktop delivery on if granted."""
        granted = await self.bridge.request_permission()
        if granted:
            self.store.update_settings(desktop=True)
        return granted

    def show_browser_notification(self, notification: Notification) -> bool:
        return self.bridge.show_browser_notification(notification, on_read=self.store.mark_as_read)

    # =========================================================================
    # Domain Events
    # =========================================================================

    def notify_order_update(self, order_id: str, status: str, message: str) -> str:
        return self.factories.notify_order_update(order_id, status, message)

    def notify_promotion(self, title: str, message: str, code: Optional[str] = None) -> str:
        return self.factories.notify_promotion(title, message, code)

    def notify_stock_alert(self, product_name: str, current_stock: int) -> str:
        return self.factories.notify_stock_alert(product_name, current_stock)

    def notify_payment_update(self, order_id: str, status: str) -> str:
        return self.factories.notify_payment_update(order_id, status)
