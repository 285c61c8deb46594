"""
Engine configuration.

All tunables of the notification engine in one place. Defaults match the
storefront's behaviour; each value can be overridden from a ``NOTIFY_*``
environment variable via ``EngineConfig.from_env()``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import DEFAULT_DURATION_MS

logger = logging.getLogger("notification_config")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


class EngineConfig(BaseModel):
    """Tunables for the notification engine."""
    sweep_interval_ms: int = Field(default=60_000, gt=0, description="Retention sweep period")
    max_notifications: int = Field(default=100, gt=0, description="Retention bound enforced by the sweep")
    persist_limit: int = Field(default=50, ge=0, description="Most recent notifications kept in a snapshot")
    default_duration_ms: int = Field(default=DEFAULT_DURATION_MS, gt=0, description="Auto-hide delay when none is given")
    storage_key: str = Field(default="notification-store", description="Key of the persisted snapshot")
    data_dir: Optional[Path] = Field(default=None, description="Directory for file-backed persistence")
    app_name: str = Field(default="Storefront", description="Shown as the platform notification source")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Build a config from environment variables.

        Recognised variables: NOTIFY_SWEEP_INTERVAL_MS, NOTIFY_MAX_NOTIFICATIONS,
        NOTIFY_PERSIST_LIMIT, NOTIFY_DEFAULT_DURATION_MS, NOTIFY_STORAGE_KEY,
        NOTIFY_DATA_DIR, NOTIFY_APP_NAME.
        """
        defaults = cls()
        data_dir = _env_str("NOTIFY_DATA_DIR", None)
        return cls(
            sweep_interval_ms=_env_int("NOTIFY_SWEEP_INTERVAL_MS", defaults.sweep_interval_ms),
            max_notifications=_env_int("NOTIFY_MAX_NOTIFICATIONS", defaults.max_notifications),
            persist_limit=_env_int("NOTIFY_PERSIST_LIMIT", defaults.persist_limit),
            default_duration_ms=_env_int("NOTIFY_DEFAULT_DURATION_MS", defaults.default_duration_ms),
            storage_key=_env_str("NOTIFY_STORAGE_KEY", defaults.storage_key),
            data_dir=Path(data_dir) if data_dir else None,
            app_name=_env_str("NOTIFY_APP_NAME", defaults.app_name),
        )
