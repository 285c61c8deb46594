"""
Shared building blocks for the storefront notification engine.

This package contains the pieces the engine is assembled from:
- Domain models (Notification, NotificationSettings, enums)
- Predefined notification templates
- Delivery channels (platform notification sinks, sound players)
- Host application port (focus, navigation, clipboard)
- Persistence (key-value stores and the snapshot adapter)
- Engine configuration
"""

from shared.models import (
    Notification,
    NotificationAction,
    NotificationPayload,
    NotificationSettings,
    NotificationType,
    NotificationCategory,
    NotificationPriority,
    ActionVariant,
)
from shared.config import EngineConfig
from shared.channels import (
    NotificationSink,
    NullNotificationSink,
    MemoryNotificationSink,
    PlyerNotificationSink,
    PermissionState,
    SoundPlayer,
    SoundCue,
)
from shared.data_store import PersistenceAdapter, MemoryKeyValueStore, FileKeyValueStore
from shared.host import HostBridge, LoggingHost, RecordingHost

__all__ = [
    "Notification",
    "NotificationAction",
    "NotificationPayload",
    "NotificationSettings",
    "NotificationType",
    "NotificationCategory",
    "NotificationPriority",
    "ActionVariant",
    "EngineConfig",
    "NotificationSink",
    "NullNotificationSink",
    "MemoryNotificationSink",
    "PlyerNotificationSink",
    "PermissionState",
    "SoundPlayer",
    "SoundCue",
    "PersistenceAdapter",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "HostBridge",
    "LoggingHost",
    "RecordingHost",
]
