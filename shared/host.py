"""
Host application port.

The engine never navigates, focuses windows or touches the clipboard itself.
It asks the host application through this small interface.

Implementations:
- LoggingHost: logs every request (default for headless use and demos)
- RecordingHost: records requests for test assertions
"""

import logging
from typing import Protocol

logger = logging.getLogger("notification_host")


class HostBridge(Protocol):
    """What the engine may ask of the host application."""

    def focus(self) -> None:
        """Bring the application to the foreground."""
        ...

    def navigate(self, path: str) -> None:
        """Open an in-app route such as ``/orders/ord-001``."""
        ...

    def copy_to_clipboard(self, text: str) -> None:
        """Place ``text`` on the clipboard. May raise on failure."""
        ...


class LoggingHost:
    """Host that only logs what it was asked to do."""

    def focus(self) -> None:
        logger.info("[HOST] focus")

    def navigate(self, path: str) -> None:
        logger.info(f"[HOST] navigate to {path}")

    def copy_to_clipboard(self, text: str) -> None:
        logger.info(f"[HOST] copy to clipboard: {text}")


class RecordingHost:
    """
    Host that records requests.

    Can simulate clipboard failures for testing error isolation.
    """

    def __init__(self, fail_clipboard: bool = False):
        self.fail_clipboard = fail_clipboard
        self.focus_count = 0
        self.navigations: list[str] = []
        self.clipboard: list[str] = []

    def focus(self) -> None:
        self.focus_count += 1

    def navigate(self, path: str) -> None:
        self.navigations.append(path)

    def copy_to_clipboard(self, text: str) -> None:
        if self.fail_clipboard:
            raise RuntimeError("Simulated clipboard failure")
        self.clipboard.append(text)

    @property
    def last_navigation(self):
        return self.navigations[-1] if self.navigations else None
