"""
Settings manager.

Holds the single NotificationSettings value and applies partial updates.
A partial update is a shallow merge, except for ``categories`` which is merged
key by key so that toggling one category never resets the others.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any, Optional

from shared.models import NotificationCategory, NotificationSettings

logger = logging.getLogger("notification_settings")


class SettingsManager:
    """Accessor/mutator over the notification settings."""

    def __init__(self, settings: Optional[NotificationSettings] = None):
        self._settings = settings or NotificationSettings()
        self._lock = threading.RLock()

    @property
    def settings(self) -> NotificationSettings:
        return self._settings

    def update_settings(self, partial: Optional[dict[str, Any]] = None, **changes) -> NotificationSettings:
        """
        Merge a partial update into the current settings.

        Accepts a dict, keyword arguments or both:
            manager.update_settings({"sound": False})
            manager.update_settings(categories={"order": False})

        Raises:
            pydantic.ValidationError: If a value has the wrong type
        """
        changes = {**(partial or {}), **changes}
        with self._lock:
            current = self._settings.model_dump()
            categories = changes.pop("categories", None)
            current.update(changes)
            if isinstance(categories, Mapping):
                current["categories"] = {
                    **current["categories"],
                    **{_category_key(k): v for k, v in categories.items()},
                }
            elif categories is not None:
                # Not a mapping; let validation reject it
                current["categories"] = categories
            self._settings = NotificationSettings.model_validate(current)
        logger.debug(f"Settings updated: {self._settings.model_dump()}")
        return self._settings

    def replace(self, settings: NotificationSettings) -> None:
        """Swap in a whole settings value (used when restoring a snapshot)."""
        with self._lock:
            self._settings = settings

    def reset(self) -> NotificationSettings:
        with self._lock:
            self._settings = NotificationSettings()
        return self._settings

    def allows(self, category: str) -> bool:
        return self._settings.allows(category)


def _category_key(category: Any) -> str:
    if isinstance(category, NotificationCategory):
        return category.value
    return str(category)
