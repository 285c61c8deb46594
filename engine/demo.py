"""
Demonstration scripts for the notification engine.

These functions show the engine in action on a virtual clock, so timers and
the retention sweep can be watched without waiting in real time.
"""

import logging

from engine.scheduler import ManualScheduler
from engine.service import NotificationEngine
from shared.channels import MemoryNotificationSink, PermissionState, RecordingSoundPlayer
from shared.config import EngineConfig
from shared.data_store import MemoryKeyValueStore, PersistenceAdapter
from shared.host import LoggingHost

# Configure logging to see what's happening
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70 + "\n")


def _show_state(engine: NotificationEngine) -> None:
    snapshot = engine.store.snapshot()
    print(f"\nUnread: {snapshot.unread_count} / {len(snapshot.notifications)} notifications")
    for notification in snapshot.notifications[:10]:
        marker = " " if notification.read else "*"
        print(f"  {marker} [{notification.category:<9}] {notification.title}: {notification.message}")
    if len(snapshot.notifications) > 10:
        print(f"  ... {len(snapshot.notifications) - 10} more")


def _build_engine(scheduler: ManualScheduler, **kwargs) -> NotificationEngine:
    return NotificationEngine(
        scheduler=scheduler,
        sink=MemoryNotificationSink(permission=PermissionState.GRANTED),
        sound_player=RecordingSoundPlayer(),
        host=LoggingHost(),
        **kwargs,
    )


def run_order_lifecycle_demo():
    """
    Walk one order through its statuses.

    Shows status -> type/priority mapping, the desktop and sound channels,
    and the payment-completed notification hiding itself after 4 seconds.
    """
    _banner("DEMO: Order Lifecycle")

    scheduler = ManualScheduler()
    engine = _build_engine(scheduler)
    engine.store.update_settings(desktop=True)
    engine.start()

    engine.notify_order_update("ord-001", "confirmed", "We received your order.")
    engine.notify_payment_update("ord-001", "completed")
    engine.notify_order_update("ord-001", "shipped", "Your order is on its way.")
    _show_state(engine)

    print("\n" + "-" * 70)
    print("ACTION: 5 seconds pass (payment notification auto-hides)")
    print("-" * 70)
    scheduler.advance(5000)
    _show_state(engine)

    print("\n" + "-" * 70)
    print("ACTION: User clicks 'View Order' on the newest notification")
    print("-" * 70)
    newest = engine.store.notifications[0]
    engine.store.run_action(newest.id, 0)
    _show_state(engine)

    engine.stop()


def run_promotion_demo():
    """Show the promo code action and category suppression."""
    _banner("DEMO: Promotions")

    scheduler = ManualScheduler()
    engine = _build_engine(scheduler)
    engine.start()

    promo_id = engine.notify_promotion("Summer Sale", "20% off everything", code="SUMMER20")
    engine.store.run_action(promo_id, 0)
    _show_state(engine)

    print("\n" + "-" * 70)
    print("ACTION: User turns promotions off, another promotion arrives")
    print("-" * 70)
    engine.store.update_settings(categories={"promotion": False})
    suppressed_id = engine.notify_promotion("Flash Sale", "Ends in 1 hour")
    print(f"\nReturned id {suppressed_id} but nothing was shown")
    _show_state(engine)

    engine.stop()


def run_retention_demo():
    """Insert more than the retention bound and let the sweep trim the list."""
    _banner("DEMO: Retention Sweep")

    scheduler = ManualScheduler()
    engine = _build_engine(scheduler)
    engine.start()

    for i in range(105):
        engine.notify_stock_alert(f"Product {i}", current_stock=3)
        engine.store.add_notification(
            type="info",
            title=f"Notice {i}",
            message="Sticky system notice",
            category="system",
        )
    print(f"Before sweep: {len(engine.store.notifications)} notifications")

    scheduler.advance(engine.config.sweep_interval_ms)
    print(f"After sweep: {len(engine.store.notifications)} notifications")
    _show_state(engine)

    engine.stop()


def run_persistence_demo():
    """Save a session and restore it into a fresh engine."""
    _banner("DEMO: Persistence")

    kv_store = MemoryKeyValueStore()
    config = EngineConfig()

    first = _build_engine(
        ManualScheduler(),
        config=config,
        persistence=PersistenceAdapter(kv_store, key=config.storage_key, limit=config.persist_limit),
    )
    first.notify_order_update("ord-002", "delivered", "Enjoy your purchase!")
    first.store.update_settings(sound=False)
    first.save()

    second = _build_engine(
        ManualScheduler(),
        config=config,
        persistence=PersistenceAdapter(kv_store, key=config.storage_key, limit=config.persist_limit),
    )
    second.load()
    print(f"Restored settings: sound={second.store.settings.sound}")
    _show_state(second)


DEMOS = {
    "order-lifecycle": run_order_lifecycle_demo,
    "promotion": run_promotion_demo,
    "retention": run_retention_demo,
    "persistence": run_persistence_demo,
}


def run_all_demos():
    for demo in DEMOS.values():
        demo()


if __name__ == "__main__":
    run_all_demos()
