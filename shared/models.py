"""
Domain models for the storefront notification engine.

These models describe a single user-facing notification and the settings that
decide whether it is shown and how it is delivered.

Design decisions:
- Using Pydantic for validation and serialization
- Notifications are frozen; the store swaps in a copy when marking one read
- Action callbacks are excluded from serialization (they cannot be persisted)
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("notification_models")


# =============================================================================
# Enums
# =============================================================================

class NotificationType(str, Enum):
    """Visual type of a notification."""
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    ORDER = "order"
    PROMOTION = "promotion"


class NotificationCategory(str, Enum):
    """
    Coarse grouping used for settings-based suppression and panel filtering.
    """
    SYSTEM = "system"
    ORDER = "order"
    PROMOTION = "promotion"
    ACCOUNT = "account"
    SECURITY = "security"


class NotificationPriority(str, Enum):
    """Priority drives the sound cue and the platform "require interaction" hint."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActionVariant(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DANGER = "danger"


DEFAULT_DURATION_MS = 5000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Notification
# =============================================================================

class NotificationAction(BaseModel):
    """
    A button attached to a notification.

    The callback lives only in memory. A notification restored from a snapshot
    keeps its action labels but the callbacks are gone.
    """
    label: str = Field(..., description="Button label")
    callback: Optional[Callable[[], None]] = Field(default=None, exclude=True)
    variant: ActionVariant = Field(default=ActionVariant.PRIMARY)

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    def invoke(self) -> bool:
        """
        Run the callback.

        Returns True if the callback ran without raising. Failures are logged
        and never propagate to the caller.
        """
        if self.callback is None:
            return False
        try:
            self.callback()
            return True
        except Exception as e:
            logger.warning(f"Action '{self.label}' failed: {e}")
            return False


class NotificationPayload(BaseModel):
    """
    Everything a caller supplies when creating a notification.

    The store adds ``id``, ``timestamp`` and ``read``.
    """
    type: NotificationType
    title: str
    message: str
    category: NotificationCategory
    priority: NotificationPriority = Field(default=NotificationPriority.MEDIUM)
    auto_hide: bool = Field(default=False)
    duration: Optional[int] = Field(
        default=None,
        ge=0,
        description="Auto-hide delay in milliseconds (default 5000)",
    )
    actions: list[NotificationAction] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(use_enum_values=True)


class Notification(NotificationPayload):
    """
    A single notification as held by the store.

    Only ``read`` ever changes, and only from False to True. The store does
    that by replacing the entry with a copy.
    """
    id: str
    timestamp: datetime = Field(default_factory=utc_now)
    read: bool = Field(default=False)

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    def as_read(self) -> "Notification":
        return self.model_copy(update={"read": True})

    def age_formatted(self, now: Optional[datetime] = None) -> str:
        """
        Human friendly age for the notification panel.

        "Just now" under a minute, then minutes, hours and days up to a week,
        after which the calendar date is shown.
        """
        now = now or utc_now()
        diff_seconds = (now - self.timestamp).total_seconds()
        minutes = int(diff_seconds // 60)
        hours = int(diff_seconds // 3600)
        days = int(diff_seconds // 86400)

        if minutes < 1:
            return "Just now"
        if minutes < 60:
            return f"{minutes}m ago"
        if hours < 24:
            return f"{hours}h ago"
        if days < 7:
            return f"{days}d ago"
        return self.timestamp.date().isoformat()


# =============================================================================
# Settings
# =============================================================================

def _default_categories() -> dict[str, bool]:
    return {category.value: True for category in NotificationCategory}


class NotificationSettings(BaseModel):
    """
    User notification settings.

    ``enabled`` is the master switch. ``categories`` is checked independently,
    so a notification is shown only when both allow it.
    """
    enabled: bool = Field(default=True, description="Master switch")
    sound: bool = Field(default=True, description="Audio cue for high priority")
    desktop: bool = Field(default=False, description="Platform notifications")
    email: bool = Field(default=True, description="Email digests")
    categories: dict[str, bool] = Field(default_factory=_default_categories)

    def is_category_enabled(self, category: str) -> bool:
        # Unknown categories are treated as disabled
        return self.categories.get(category, False)

    def allows(self, category: str) -> bool:
        return self.enabled and self.is_category_enabled(category)
