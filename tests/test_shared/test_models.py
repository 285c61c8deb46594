"""
Tests for the domain models.

These tests verify validation of notification payloads, immutability of
stored notifications, and the settings suppression rule.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from shared.models import (
    Notification,
    NotificationAction,
    NotificationCategory,
    NotificationPayload,
    NotificationPriority,
    NotificationSettings,
    NotificationType,
)


def _notification(**overrides) -> Notification:
    fields = {
        "id": "notification_1_abc",
        "type": "info",
        "title": "Title",
        "message": "Message",
        "category": "system",
    }
    fields.update(overrides)
    return Notification(**fields)


class TestNotificationPayload:
    """Tests for payload validation."""

    def test_defaults(self):
        """Test that optional fields get their defaults."""
        payload = NotificationPayload(type="info", title="t", message="m", category="order")

        assert payload.priority == NotificationPriority.MEDIUM
        assert payload.auto_hide is False
        assert payload.duration is None
        assert payload.actions == []
        assert payload.metadata == {}

    def test_enum_values_are_stored(self):
        """Test that enums are stored as their string values."""
        payload = NotificationPayload(
            type=NotificationType.ORDER,
            title="t",
            message="m",
            category=NotificationCategory.ORDER,
            priority=NotificationPriority.HIGH,
        )

        assert payload.type == "order"
        assert payload.category == "order"
        assert payload.priority == "high"

    def test_invalid_type_rejected(self):
        """Test that an unknown notification type fails validation."""
        with pytest.raises(ValidationError):
            NotificationPayload(type="urgent", title="t", message="m", category="system")

    def test_invalid_category_rejected(self):
        with pytest.raises(ValidationError):
            NotificationPayload(type="info", title="t", message="m", category="newsletter")

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            NotificationPayload(type="info", message="m", category="system")

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            NotificationPayload(type="info", title="t", message="m", category="system", duration=-1)


class TestNotification:
    """Tests for stored notifications."""

    def test_new_notification_is_unread(self):
        notification = _notification()

        assert notification.read is False
        assert notification.timestamp.tzinfo is not None

    def test_frozen(self):
        """Test that a stored notification cannot be mutated in place."""
        notification = _notification()

        with pytest.raises(ValidationError):
            notification.read = True

    def test_as_read_returns_copy(self):
        notification = _notification(metadata={"order_id": "ord-1"})

        read = notification.as_read()

        assert read.read is True
        assert notification.read is False
        assert read.id == notification.id
        assert read.timestamp == notification.timestamp
        assert read.metadata == {"order_id": "ord-1"}

    def test_serialization_drops_callbacks(self):
        """Test that action callbacks never reach the JSON form."""
        notification = _notification(
            actions=[NotificationAction(label="Open", callback=lambda: None)]
        )

        data = notification.model_dump(mode="json")

        assert data["actions"] == [{"label": "Open", "variant": "primary"}]


class TestAgeFormatted:
    """Tests for the relative timestamp shown in the panel."""

    @pytest.mark.parametrize(
        "age,expected",
        [
            (timedelta(seconds=30), "Just now"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(minutes=59, seconds=59), "59m ago"),
            (timedelta(hours=3), "3h ago"),
            (timedelta(days=2), "2d ago"),
        ],
    )
    def test_relative(self, age, expected):
        now = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
        notification = _notification(timestamp=now - age)

        assert notification.age_formatted(now) == expected

    def test_older_than_a_week_shows_date(self):
        now = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
        notification = _notification(timestamp=now - timedelta(days=10))

        assert notification.age_formatted(now) == "2024-06-05"


class TestNotificationAction:
    """Tests for action callbacks."""

    def test_invoke(self):
        calls = []
        action = NotificationAction(label="Go", callback=lambda: calls.append(1))

        assert action.invoke() is True
        assert calls == [1]

    def test_invoke_without_callback(self):
        assert NotificationAction(label="Go").invoke() is False

    def test_failing_callback_is_contained(self):
        def boom():
            raise RuntimeError("nope")

        assert NotificationAction(label="Go", callback=boom).invoke() is False


class TestNotificationSettings:
    """Tests for the settings suppression rule."""

    def test_defaults(self):
        settings = NotificationSettings()

        assert settings.enabled is True
        assert settings.sound is True
        assert settings.desktop is False
        assert settings.email is True
        assert set(settings.categories) == {c.value for c in NotificationCategory}

    def test_allows_requires_both_switches(self):
        """Test that master switch and category are checked independently."""
        settings = NotificationSettings(enabled=False)
        assert settings.allows("order") is False

        settings = NotificationSettings(categories={"order": False, "system": True})
        assert settings.allows("order") is False
        assert settings.allows("system") is True

    def test_unknown_category_disabled(self):
        settings = NotificationSettings(categories={"order": True})

        assert settings.is_category_enabled("promotion") is False
        assert settings.allows("promotion") is False
