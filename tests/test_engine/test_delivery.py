"""
Tests for delivery fan-out and the browser notification bridge.

These tests verify that desktop and sound delivery follow the settings, that
permission is feature-detected, and that channel failures never undo the
store mutation that triggered them.
"""

import asyncio
import logging

from engine.delivery import BrowserNotificationBridge
from shared.channels import (
    MemoryNotificationSink,
    NullNotificationSink,
    PermissionState,
)
from shared.host import RecordingHost

from helpers import make_payload


class TestDesktopDelivery:
    """Tests for the desktop channel through the store."""

    def test_desktop_off_by_default(self, store, sink):
        store.add_notification(make_payload())
        assert sink.get_shown_count() == 0

    def test_desktop_on_shows_platform_notification(self, store, sink):
        store.update_settings(desktop=True)

        notification_id = store.add_notification(make_payload(title="Hello", message="World"))

        shown = sink.find(notification_id)
        assert shown is not None
        assert shown.title == "Hello"
        assert shown.body == "World"
        assert shown.require_interaction is False

    def test_high_priority_requires_interaction(self, store, sink):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(make_payload(priority="high"))
        assert sink.find(notification_id).require_interaction is True

    def test_suppressed_notification_is_not_delivered(self, store, sink, sound_player):
        store.update_settings(desktop=True, categories={"system": False})
        store.add_notification(make_payload(priority="high"))
        assert sink.get_shown_count() == 0
        assert sound_player.get_played_count() == 0

    def test_without_permission_nothing_is_shown(self, store, sink):
        sink.permission = PermissionState.DEFAULT
        store.update_settings(desktop=True)

        notification_id = store.add_notification(make_payload())

        assert sink.get_shown_count() == 0
        assert store.get(notification_id) is not None

    def test_failing_sink_does_not_abort_insert(self, store, sink, caplog):
        sink.fail_on_show = True
        store.update_settings(desktop=True)

        with caplog.at_level(logging.WARNING):
            notification_id = store.add_notification(make_payload())

        assert store.get(notification_id) is not None
        assert store.unread_count == 1
        assert any("DESKTOP FAILED" in record.message for record in caplog.records)

    def test_platform_notification_closes_with_auto_hide(self, store, sink, scheduler):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(make_payload(auto_hide=True, duration=3000))

        scheduler.advance(2999)
        assert sink.find(notification_id).closed is False
        scheduler.advance(1)
        assert sink.find(notification_id).closed is True


class TestPlatformClick:
    """Tests for what happens when the user clicks a platform notification."""

    def test_click_marks_read_and_focuses(self, store, sink, host):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(make_payload())

        assert sink.click(notification_id) is True

        assert store.get(notification_id).read is True
        assert store.unread_count == 0
        assert host.focus_count == 1
        assert sink.find(notification_id).closed is True
        assert host.navigations == []

    def test_click_on_order_navigates(self, store, sink, host):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(
            make_payload(category="order", metadata={"order_id": "ord-042"})
        )

        sink.click(notification_id)

        assert host.last_navigation == "/orders/ord-042"

    def test_click_on_order_without_id_does_not_navigate(self, store, sink, host):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(make_payload(category="order"))

        sink.click(notification_id)

        assert host.navigations == []

    def test_click_after_removal_is_harmless(self, store, sink):
        store.update_settings(desktop=True)
        notification_id = store.add_notification(make_payload())
        store.remove_notification(notification_id)

        sink.click(notification_id)

        assert store.unread_count == 0


class TestSoundDelivery:
    """Tests for the audio cue."""

    def test_sound_only_for_high_priority(self, store, sound_player):
        store.add_notification(make_payload(priority="low"))
        store.add_notification(make_payload(priority="medium"))
        store.add_notification(make_payload(priority="high"))

        assert sound_player.get_played_count() == 1
        assert sound_player.played[0].volume == 0.3

    def test_sound_disabled(self, store, sound_player):
        store.update_settings(sound=False)
        store.add_notification(make_payload(priority="high"))
        assert sound_player.get_played_count() == 0

    def test_failing_audio_is_swallowed(self, store, sound_player):
        sound_player.fail = True
        notification_id = store.add_notification(make_payload(priority="high"))
        assert store.get(notification_id) is not None
        assert store.unread_count == 1


class TestRequestPermission:
    """Tests for permission negotiation."""

    def test_unsupported_platform_returns_false_without_prompt(self):
        sink = MemoryNotificationSink(supported=False)
        bridge = BrowserNotificationBridge(sink=sink)

        assert asyncio.run(bridge.request_permission()) is False
        assert sink.prompt_count == 0

    def test_null_sink(self):
        bridge = BrowserNotificationBridge(sink=NullNotificationSink())
        assert asyncio.run(bridge.request_permission()) is False

    def test_already_granted(self):
        sink = MemoryNotificationSink(permission=PermissionState.GRANTED)
        bridge = BrowserNotificationBridge(sink=sink)

        assert asyncio.run(bridge.request_permission()) is True
        assert sink.prompt_count == 0

    def test_already_denied(self):
        sink = MemoryNotificationSink(permission=PermissionState.DENIED)
        bridge = BrowserNotificationBridge(sink=sink)

        assert asyncio.run(bridge.request_permission()) is False
        assert sink.prompt_count == 0

    def test_prompt_granted(self):
        sink = MemoryNotificationSink(grant_on_request=True)
        bridge = BrowserNotificationBridge(sink=sink)

        assert asyncio.run(bridge.request_permission()) is True
        assert sink.prompt_count == 1
        assert bridge.permission_granted is True

    def test_prompt_denied(self):
        sink = MemoryNotificationSink(grant_on_request=False)
        bridge = BrowserNotificationBridge(sink=sink)

        assert asyncio.run(bridge.request_permission()) is False
        assert sink.permission == PermissionState.DENIED


class TestBridgeDirect:
    """Tests for calling the bridge without the store."""

    def test_show_without_read_callback(self, store):
        sink = MemoryNotificationSink(permission=PermissionState.GRANTED)
        host = RecordingHost()
        bridge = BrowserNotificationBridge(sink=sink, host=host)
        notification = store.get(store.add_notification(make_payload()))

        assert bridge.show_browser_notification(notification) is True
        sink.click(notification.id)

        assert host.focus_count == 1
        # No read callback was given, so the store is untouched
        assert store.get(notification.id).read is False

    def test_show_skipped_when_unsupported(self, store):
        bridge = BrowserNotificationBridge(sink=MemoryNotificationSink(supported=False,
                                                                      permission=PermissionState.GRANTED))
        notification = store.get(store.add_notification(make_payload()))
        assert bridge.show_browser_notification(notification) is False
