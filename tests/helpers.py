"""Helpers shared by the test modules."""

from engine.store import NotificationStore


def make_payload(**overrides) -> dict:
    """A valid, sticky, medium priority system notification payload."""
    payload = {
        "type": "info",
        "title": "Heads up",
        "message": "Something happened",
        "category": "system",
        "priority": "medium",
    }
    payload.update(overrides)
    return payload


def assert_unread_invariant(store: NotificationStore) -> None:
    snapshot = store.snapshot()
    assert snapshot.unread_count == sum(1 for n in snapshot.notifications if not n.read)
