"""
Delivery channels for the notification engine.

Two kinds of channel sit behind the engine:
- Platform notification sinks (the desktop "toast" shown outside the app)
- Sound players (the audio cue for high priority notifications)

Both are ports. The engine depends on the protocols below and gets concrete
implementations injected, so a headless process can run with no-op channels
and tests can use the in-memory ones.

Design decisions:
- Capability is feature-detected through ``supported``, never assumed
- In-memory channels track what they delivered for test assertions
- Channel failures can be simulated for testing error isolation
"""

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Protocol, TextIO

from plyer.utils import platform as plyer_platform

logger = logging.getLogger("notification_channels")


class PermissionState(str, Enum):
    """Platform notification permission, as browsers report it."""
    DEFAULT = "default"   # Not asked yet
    GRANTED = "granted"
    DENIED = "denied"


@dataclass
class PlatformNotification:
    """
    A notification handed to the platform.

    ``tag`` is the source notification id, so the platform entry can be
    closed later.
    """
    tag: str
    title: str
    body: str
    require_interaction: bool = False
    icon: Optional[str] = None
    badge: Optional[str] = None
    on_click: Optional[Callable[[], None]] = None
    shown_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed: bool = False

    def __str__(self) -> str:
        sticky = " (sticky)" if self.require_interaction else ""
        return f"DESKTOP {self.title}: {self.body[:50]}{sticky}"


# =============================================================================
# Platform Notification Sinks
# =============================================================================

class NotificationSink(Protocol):
    """Port over the host platform's notification permission/display API."""

    @property
    def supported(self) -> bool:
        ...

    @property
    def permission(self) -> PermissionState:
        ...

    async def request_permission(self) -> PermissionState:
        ...

    def show(self, notification: PlatformNotification) -> None:
        ...

    def close(self, tag: str) -> None:
        ...


class NullNotificationSink:
    """Sink for environments without platform notifications."""

    supported = False
    permission = PermissionState.DENIED

    async def request_permission(self) -> PermissionState:
        return self.permission

    def show(self, notification: PlatformNotification) -> None:
        logger.debug(f"[DESKTOP SKIPPED] {notification.title}")

    def close(self, tag: str) -> None:
        pass


class MemoryNotificationSink:
    """
    In-memory sink.

    Records shown notifications, answers permission prompts with a fixed
    answer and lets tests simulate a user clicking a notification.
    """

    def __init__(
        self,
        supported: bool = True,
        permission: PermissionState = PermissionState.DEFAULT,
        grant_on_request: bool = True,
        fail_on_show: bool = False,
    ):
        """
        Initialize the sink.

        Args:
            supported: Whether the "platform" has notification capability
            permission: Initial permission state
            grant_on_request: Answer given when the user is prompted
            fail_on_show: Raise from show(), for testing error isolation
        """
        self.supported = supported
        self.permission = permission
        self.grant_on_request = grant_on_request
        self.fail_on_show = fail_on_show
        self.prompt_count = 0
        self.shown: list[PlatformNotification] = []

    async def request_permission(self) -> PermissionState:
        self.prompt_count += 1
        self.permission = (
            PermissionState.GRANTED if self.grant_on_request else PermissionState.DENIED
        )
        return self.permission

    def show(self, notification: PlatformNotification) -> None:
        if self.fail_on_show:
            raise RuntimeError("Simulated platform notification failure")
        self.shown.append(notification)
        logger.info(f"[DESKTOP] {notification.title}")

    def close(self, tag: str) -> None:
        for notification in self.shown:
            if notification.tag == tag:
                notification.closed = True

    def find(self, tag: str) -> Optional[PlatformNotification]:
        """Find a shown notification by tag."""
        for notification in self.shown:
            if notification.tag == tag:
                return notification
        return None

    def click(self, tag: str) -> bool:
        """
        Simulate the user clicking a shown notification.

        Returns True if a click handler ran.
        """
        notification = self.find(tag)
        if notification is None or notification.on_click is None:
            return False
        notification.on_click()
        return True

    def get_shown_count(self) -> int:
        return len(self.shown)

    def clear_history(self):
        self.shown.clear()


class PlyerNotificationSink:
    """
    Desktop notifications through plyer.

    Desktop platforms do not gate notifications behind a permission prompt,
    so requesting permission grants it whenever the platform is supported.
    plyer does not report clicks or support closing a shown notification;
    ``close`` is a logged no-op and click handlers never fire.
    """

    SUPPORTED_PLATFORMS = {"win", "macosx", "linux", "android"}

    # Seconds a notification stays up; "require interaction" uses the long one
    TIMEOUT = 10
    STICKY_TIMEOUT = 3600

    def __init__(self, app_name: str = "Storefront", icon: Optional[str] = None):
        self.app_name = app_name
        self.icon = icon
        self.supported = str(plyer_platform) in self.SUPPORTED_PLATFORMS
        self.permission = PermissionState.DEFAULT if self.supported else PermissionState.DENIED

    async def request_permission(self) -> PermissionState:
        if self.supported:
            self.permission = PermissionState.GRANTED
        return self.permission

    def show(self, notification: PlatformNotification) -> None:
        from plyer import notification as plyer_notification

        plyer_notification.notify(
            title=notification.title,
            message=notification.body,
            app_name=self.app_name,
            app_icon=notification.icon or self.icon or "",
            timeout=self.STICKY_TIMEOUT if notification.require_interaction else self.TIMEOUT,
        )
        logger.info(f"[DESKTOP] {notification.title}")

    def close(self, tag: str) -> None:
        logger.debug(f"[DESKTOP] close not supported by plyer, ignoring {tag}")


# =============================================================================
# Sound Players
# =============================================================================

@dataclass(frozen=True)
class SoundCue:
    """The audio cue played for high priority notifications."""
    path: str = "notification-sound.mp3"
    volume: float = 0.3


class SoundPlayer(Protocol):
    def play(self, cue: SoundCue) -> None:
        ...


class NullSoundPlayer:
    """Player for environments without audio."""

    def play(self, cue: SoundCue) -> None:
        logger.debug(f"[SOUND SKIPPED] {cue.path}")


class TerminalBellSoundPlayer:
    """Rings the terminal bell; the cue's file and volume are ignored."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def play(self, cue: SoundCue) -> None:
        self.stream.write("\a")
        self.stream.flush()
        logger.debug(f"[SOUND] bell for {cue.path}")


class RecordingSoundPlayer:
    """Records played cues. Can simulate playback failures."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.played: list[SoundCue] = []

    def play(self, cue: SoundCue) -> None:
        if self.fail:
            raise RuntimeError("Simulated audio playback failure")
        self.played.append(cue)
        logger.info(f"[SOUND] {cue.path} at volume {cue.volume}")

    def get_played_count(self) -> int:
        return len(self.played)
