"""
The notification store.

Holds the ordered list of notifications (newest first), the unread counter and
the panel visibility flag, and exposes every mutation the UI and domain code
may perform.

Invariant: ``unread_count`` always equals the number of unread notifications
in the list. Every mutation computes the new list and counter together and
publishes them in one step under the store lock, so no reader ever sees one
without the other.

Design decisions:
- Missing targets (unknown id or category) are silent no-ops
- Suppressed notifications still get an id (fire-and-forget contract)
- Side effects (desktop, sound, listeners) run after the state change and
  cannot undo it
- Auto-hide timers are not cancelled on manual removal; the timer callback
  checks presence before acting
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from engine.delivery import DeliveryFanout
from engine.scheduler import AsyncioScheduler, Scheduler
from engine.settings_manager import SettingsManager
from shared.config import EngineConfig
from shared.models import (
    Notification,
    NotificationAction,
    NotificationCategory,
    NotificationPayload,
    NotificationPriority,
    NotificationSettings,
    NotificationType,
)

logger = logging.getLogger("notification_store")

StoreListener = Callable[["NotificationStore"], None]


def generate_notification_id() -> str:
    return f"notification_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


@dataclass(frozen=True)
class StoreSnapshot:
    """A consistent view of the store at one instant."""
    notifications: tuple[Notification, ...]
    unread_count: int
    is_open: bool


class NotificationStore:
    """
    In-memory notification state and its mutations.

    Example:
        store = NotificationStore(scheduler=ManualScheduler())
        notification_id = store.add_notification(
            type="info", title="Hello", message="World", category="system",
        )
        store.mark_as_read(notification_id)
    """

    def __init__(
        self,
        settings_manager: Optional[SettingsManager] = None,
        delivery: Optional[DeliveryFanout] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[EngineConfig] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the store.

        Args:
            settings_manager: Settings consulted on every insert
            delivery: Fan-out for desktop/sound channels (defaults to no-op channels)
            scheduler: Timer facility for auto-hide (defaults to asyncio)
            config: Engine configuration
            id_factory: Generates notification ids
        """
        self.settings_manager = settings_manager or SettingsManager()
        self.delivery = delivery or DeliveryFanout()
        self.scheduler = scheduler or AsyncioScheduler()
        self.config = config or EngineConfig()
        self._id_factory = id_factory or generate_notification_id

        self._notifications: list[Notification] = []
        self._unread_count = 0
        self._is_open = False

        self._lock = threading.RLock()
        self._listeners: list[StoreListener] = []

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def notifications(self) -> list[Notification]:
        """Notifications, newest first. The list is a copy."""
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def settings(self) -> NotificationSettings:
        return self.settings_manager.settings

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                notifications=tuple(self._notifications),
                unread_count=self._unread_count,
                is_open=self._is_open,
            )

    def get(self, notification_id: str) -> Optional[Notification]:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def get_by_category(self, category: Union[NotificationCategory, str]) -> list[Notification]:
        return [n for n in self._notifications if n.category == category]

    def get_unread(self) -> list[Notification]:
        return [n for n in self._notifications if not n.read]

    def category_counts(self) -> dict[str, int]:
        """Number of notifications per category, for the panel filter tabs."""
        counts = {category.value: 0 for category in NotificationCategory}
        for notification in self._notifications:
            counts[notification.category] = counts.get(notification.category, 0) + 1
        return counts

    # =========================================================================
    # Core Mutations
    # =========================================================================

    def add_notification(
        self,
        data: Union[NotificationPayload, dict[str, Any], None] = None,
        **fields,
    ) -> str:
        """
        Create a notification and return its id.

        The id is returned even when settings suppress the notification; in
        that case nothing is inserted and the counter is unchanged.

        Raises:
            pydantic.ValidationError: If the payload is malformed
        """
        payload = _coerce_payload(data, fields)
        notification_id = self._id_factory()
        settings = self.settings

        if not settings.allows(payload.category):
            logger.debug(
                f"Suppressed {notification_id} ({payload.category}): "
                f"enabled={settings.enabled}"
            )
            return notification_id

        notification = Notification(
            id=notification_id,
            **{name: getattr(payload, name) for name in NotificationPayload.model_fields},
        )

        with self._lock:
            self._notifications = [notification, *self._notifications]
            self._unread_count += 1

        logger.debug(f"Added {notification_id}: {notification.title}")
        self._emit()

        self.delivery.dispatch(notification, settings, on_read=self.mark_as_read)

        if notification.auto_hide:
            self._schedule_auto_hide(notification)

        return notification_id

    def remove_notification(self, notification_id: str) -> bool:
        """Remove a notification. Returns False if it was not present."""
        with self._lock:
            target = self.get(notification_id)
            if target is None:
                return False
            self._notifications = [n for n in self._notifications if n.id != notification_id]
            if not target.read:
                self._unread_count -= 1

        logger.debug(f"Removed {notification_id}")
        self._emit()
        return True

    def mark_as_read(self, notification_id: str) -> bool:
        """
        Mark a notification read.

        Returns True only when an unread notification changed state.
        """
        with self._lock:
            target = self.get(notification_id)
            if target is None or target.read:
                return False
            self._notifications = [
                n.as_read() if n.id == notification_id else n
                for n in self._notifications
            ]
            self._unread_count -= 1

        self._emit()
        return True

    def mark_all_as_read(self) -> None:
        with self._lock:
            self._notifications = [n if n.read else n.as_read() for n in self._notifications]
            self._unread_count = 0
        self._emit()

    def clear_notifications(self) -> None:
        with self._lock:
            self._notifications = []
            self._unread_count = 0
        logger.debug("Cleared all notifications")
        self._emit()

    def clear_by_category(self, category: Union[NotificationCategory, str]) -> int:
        """Remove every notification in ``category``. Returns how many were removed."""
        with self._lock:
            removed = [n for n in self._notifications if n.category == category]
            if not removed:
                return 0
            removed_unread = sum(1 for n in removed if not n.read)
            self._notifications = [n for n in self._notifications if n.category != category]
            self._unread_count -= removed_unread

        logger.debug(f"Cleared {len(removed)} notifications in {category}")
        self._emit()
        return len(removed)

    def enforce_retention(self, max_size: Optional[int] = None) -> int:
        """
        Trim the list to the ``max_size`` most recent notifications.

        Returns how many were discarded.
        """
        max_size = max_size if max_size is not None else self.config.max_notifications
        with self._lock:
            if len(self._notifications) <= max_size:
                return 0
            discarded = self._notifications[max_size:]
            discarded_unread = sum(1 for n in discarded if not n.read)
            self._notifications = self._notifications[:max_size]
            self._unread_count -= discarded_unread

        logger.info(
            f"Retention sweep discarded {len(discarded)} notifications "
            f"({discarded_unread} unread)"
        )
        self._emit()
        return len(discarded)

    def restore(self, notifications: list[Notification]) -> None:
        """Replace the list with restored notifications, recounting unread."""
        with self._lock:
            self._notifications = list(notifications)
            self._unread_count = sum(1 for n in self._notifications if not n.read)
        self._emit()

    # =========================================================================
    # Panel & Settings
    # =========================================================================

    def toggle_panel(self) -> bool:
        with self._lock:
            self._is_open = not self._is_open
            is_open = self._is_open
        self._emit()
        return is_open

    def close_panel(self) -> None:
        with self._lock:
            self._is_open = False
        self._emit()

    def update_settings(self, partial: Optional[dict[str, Any]] = None, **changes) -> NotificationSettings:
        settings = self.settings_manager.update_settings(partial, **changes)
        self._emit()
        return settings

    # =========================================================================
    # Actions
    # =========================================================================

    def run_action(self, notification_id: str, index: int) -> bool:
        """
        Run one of a notification's actions, then mark it read.

        Returns True if the action callback ran successfully.
        """
        notification = self.get(notification_id)
        if notification is None or not 0 <= index < len(notification.actions):
            return False
        succeeded = notification.actions[index].invoke()
        self.mark_as_read(notification_id)
        return succeeded

    # =========================================================================
    # Quick Notifications
    # =========================================================================

    def show_success(self, title: str, message: str,
                     actions: Optional[list[NotificationAction]] = None) -> str:
        return self.add_notification(
            type=NotificationType.SUCCESS,
            title=title,
            message=message,
            actions=actions or [],
            category=NotificationCategory.SYSTEM,
            priority=NotificationPriority.MEDIUM,
            auto_hide=True,
            duration=4000,
        )

    def show_error(self, title: str, message: str,
                   actions: Optional[list[NotificationAction]] = None) -> str:
        return self.add_notification(
            type=NotificationType.ERROR,
            title=title,
            message=message,
            actions=actions or [],
            category=NotificationCategory.SYSTEM,
            priority=NotificationPriority.HIGH,
            auto_hide=False,
        )

    def show_warning(self, title: str, message: str,
                     actions: Optional[list[NotificationAction]] = None) -> str:
        return self.add_notification(
            type=NotificationType.WARNING,
            title=title,
            message=message,
            actions=actions or [],
            category=NotificationCategory.SYSTEM,
            priority=NotificationPriority.MEDIUM,
            auto_hide=True,
            duration=6000,
        )

    def show_info(self, title: str, message: str,
                  actions: Optional[list[NotificationAction]] = None) -> str:
        return self.add_notification(
            type=NotificationType.INFO,
            title=title,
            message=message,
            actions=actions or [],
            category=NotificationCategory.SYSTEM,
            priority=NotificationPriority.LOW,
            auto_hide=True,
            duration=5000,
        )

    # =========================================================================
    # Listeners
    # =========================================================================

    def subscribe(self, listener: StoreListener) -> None:
        """Call ``listener(store)`` after every state change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> bool:
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Store listener raised: {e}")

    # =========================================================================
    # Auto-hide
    # =========================================================================

    def _schedule_auto_hide(self, notification: Notification) -> None:
        delay_ms = notification.duration or self.config.default_duration_ms
        notification_id = notification.id

        def expire() -> None:
            # May fire after a manual removal; remove_notification is a no-op then
            if self.remove_notification(notification_id):
                logger.debug(f"Auto-hid {notification_id} after {delay_ms}ms")

        try:
            self.scheduler.call_later(delay_ms, expire)
        except Exception as e:
            logger.warning(f"Could not schedule auto-hide for {notification_id}: {e}")


def _coerce_payload(
    data: Union[NotificationPayload, dict[str, Any], None],
    fields: dict[str, Any],
) -> NotificationPayload:
    if isinstance(data, NotificationPayload) and not fields:
        return data
    if isinstance(data, NotificationPayload):
        merged = {name: getattr(data, name) for name in NotificationPayload.model_fields}
    else:
        merged = dict(data or {})
    merged.update(fields)
    return NotificationPayload(**merged)
