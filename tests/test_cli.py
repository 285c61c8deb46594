"""
Tests for the command-line interface.

The send command is run against the in-memory engine from conftest, so no
desktop session is needed.
"""

import argparse
import asyncio

import pytest

from cli import _send
from shared.channels import PermissionState


def _send_args(**overrides) -> argparse.Namespace:
    fields = {
        "title": "Hello",
        "message": "World",
        "type": "info",
        "category": "system",
        "priority": "medium",
    }
    fields.update(overrides)
    return argparse.Namespace(**fields)


class TestSendCommand:
    """Tests for `cli.py send`."""

    def test_send_shows_without_enabling_desktop(self, engine, sink):
        """Test that sending one notification leaves the saved desktop setting off."""
        notification_id = asyncio.run(_send(_send_args(), engine=engine))

        assert sink.find(notification_id) is not None
        assert engine.store.settings.desktop is False
        assert engine.persistence.load().settings.desktop is False

    def test_send_with_desktop_already_on_shows_once(self, engine, sink):
        engine.store.update_settings(desktop=True)

        asyncio.run(_send(_send_args(), engine=engine))

        assert sink.get_shown_count() == 1

    def test_send_is_persisted(self, engine):
        notification_id = asyncio.run(_send(_send_args(title="Saved"), engine=engine))

        state = engine.persistence.load()
        assert [n.id for n in state.notifications] == [notification_id]

    def test_send_without_permission(self, engine, sink, capsys):
        sink.permission = PermissionState.DENIED

        notification_id = asyncio.run(_send(_send_args(), engine=engine))

        assert sink.get_shown_count() == 0
        assert engine.store.get(notification_id) is not None
        assert "not available" in capsys.readouterr().out

    @pytest.mark.parametrize("priority", ["low", "high"])
    def test_send_priority(self, engine, priority):
        notification_id = asyncio.run(_send(_send_args(priority=priority), engine=engine))
        assert engine.store.get(notification_id).priority == priority
