"""
Storefront notification engine.

This package implements the notification lifecycle:
- NotificationStore holds notifications and enforces the unread invariant
- Schedulers drive auto-hide timers and the retention sweep
- DeliveryFanout and BrowserNotificationBridge handle desktop and sound delivery
- DomainEventFactories turn order/payment/stock/promotion events into notifications
- NotificationEngine wires everything and owns start/stop/save/load
"""

from engine.delivery import BrowserNotificationBridge, DeliveryFanout
from engine.factories import DomainEventFactories
from engine.scheduler import AsyncioScheduler, ManualScheduler
from engine.service import NotificationEngine
from engine.settings_manager import SettingsManager
from engine.store import NotificationStore, StoreSnapshot

__all__ = [
    "BrowserNotificationBridge",
    "DeliveryFanout",
    "DomainEventFactories",
    "AsyncioScheduler",
    "ManualScheduler",
    "NotificationEngine",
    "SettingsManager",
    "NotificationStore",
    "StoreSnapshot",
]
