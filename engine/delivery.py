"""
Delivery fan-out for newly created notifications.

When the store accepts a notification it hands it to the DeliveryFanout, which
decides which extra channels fire:
- Desktop: a platform notification through the BrowserNotificationBridge,
  when ``settings.desktop`` is on
- Sound: an audio cue, when ``settings.sound`` is on and the notification is
  high priority

Every channel is fire-and-forget. A failing channel is logged and never
affects the other channel or the store mutation that triggered it.
"""

import logging
from typing import Callable, Optional

from engine.scheduler import Scheduler
from shared.channels import (
    NotificationSink,
    NullNotificationSink,
    NullSoundPlayer,
    PermissionState,
    PlatformNotification,
    SoundCue,
    SoundPlayer,
)
from shared.host import HostBridge, LoggingHost
from shared.models import (
    Notification,
    NotificationCategory,
    NotificationPriority,
    NotificationSettings,
)

logger = logging.getLogger("notification_delivery")

ReadCallback = Callable[[str], None]


class BrowserNotificationBridge:
    """
    Adapter between the engine and the platform notification sink.

    Handles permission and click behaviour; the sink only displays.
    """

    def __init__(
        self,
        sink: Optional[NotificationSink] = None,
        host: Optional[HostBridge] = None,
        scheduler: Optional[Scheduler] = None,
        icon: str = "/favicon.ico",
        badge: str = "/notification-badge.png",
    ):
        """
        Initialize the bridge.

        Args:
            sink: Platform notification sink (defaults to a no-op sink)
            host: Host application port for focus/navigation
            scheduler: Used to close auto-hide platform notifications
            icon: Icon shown with platform notifications
            badge: Badge shown with platform notifications
        """
        self.sink = sink or NullNotificationSink()
        self.host = host or LoggingHost()
        self.scheduler = scheduler
        self.icon = icon
        self.badge = badge

    @property
    def supported(self) -> bool:
        return bool(self.sink.supported)

    @property
    def permission_granted(self) -> bool:
        return self.supported and self.sink.permission == PermissionState.GRANTED

    async def request_permission(self) -> bool:
        """
        Ask for permission to show platform notifications.

        Returns False without prompting when the platform has no notification
        capability or the user already denied it.
        """
        if not self.supported:
            return False
        if self.sink.permission == PermissionState.GRANTED:
            return True
        if self.sink.permission == PermissionState.DENIED:
            return False

        state = await self.sink.request_permission()
        logger.info(f"Platform notification permission: {PermissionState(state).value}")
        return state == PermissionState.GRANTED

    def show_browser_notification(
        self,
        notification: Notification,
        on_read: Optional[ReadCallback] = None,
    ) -> bool:
        """
        Show ``notification`` on the platform.

        Returns True if it was handed to the sink, False when skipped because
        capability or permission is missing.
        """
        if not self.permission_granted:
            return False

        platform_notification = PlatformNotification(
            tag=notification.id,
            title=notification.title,
            body=notification.message,
            require_interaction=notification.priority == NotificationPriority.HIGH,
            icon=self.icon,
            badge=self.badge,
            on_click=lambda: self._handle_click(notification, on_read),
        )
        self.sink.show(platform_notification)

        if notification.auto_hide and notification.duration and self.scheduler is not None:
            self.scheduler.call_later(
                notification.duration,
                lambda: self.sink.close(notification.id),
            )
        return True

    def _handle_click(self, notification: Notification, on_read: Optional[ReadCallback]) -> None:
        try:
            self.host.focus()
            if on_read is not None:
                on_read(notification.id)
            self.sink.close(notification.id)

            order_id = notification.metadata.get("order_id")
            if notification.category == NotificationCategory.ORDER and order_id:
                self.host.navigate(f"/orders/{order_id}")
        except Exception as e:
            logger.warning(f"Platform notification click handling failed for {notification.id}: {e}")


class DeliveryFanout:
    """Fires the optional delivery channels for a newly accepted notification."""

    def __init__(
        self,
        bridge: Optional[BrowserNotificationBridge] = None,
        sound_player: Optional[SoundPlayer] = None,
        cue: Optional[SoundCue] = None,
    ):
        self.bridge = bridge or BrowserNotificationBridge()
        self.sound_player = sound_player or NullSoundPlayer()
        self.cue = cue or SoundCue()

    def dispatch(
        self,
        notification: Notification,
        settings: NotificationSettings,
        on_read: Optional[ReadCallback] = None,
    ) -> list[str]:
        """
        Deliver through every enabled channel.

        Returns the names of the channels that delivered successfully.
        """
        delivered = []

        if settings.desktop:
            try:
                if self.bridge.show_browser_notification(notification, on_read=on_read):
                    delivered.append("desktop")
            except Exception as e:
                logger.warning(f"[DESKTOP FAILED] {notification.id}: {e}")

        if settings.sound and notification.priority == NotificationPriority.HIGH:
            try:
                self.sound_player.play(self.cue)
                delivered.append("sound")
            except Exception as e:
                # No audio device or no user gesture yet
                logger.debug(f"[SOUND FAILED] {notification.id}: {e}")

        return delivered
