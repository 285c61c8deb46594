#!/usr/bin/env python3
"""
Command-line interface for the storefront notification engine.

Usage:
    uv run python cli.py [command] [options]

Commands:
    demo        Run demo scenarios
    send        Raise one notification on this desktop
    test        Run the test suite

Examples:
    uv run python cli.py demo order-lifecycle
    uv run python cli.py demo retention
    uv run python cli.py demo all
    uv run python cli.py send "Order Shipped" "Your order is on its way" --category order
    uv run python cli.py test -v
"""

import argparse
import asyncio
import subprocess
import sys

from shared.models import NotificationCategory, NotificationPriority, NotificationType

SCENARIOS = ["order-lifecycle", "promotion", "retention", "persistence", "all"]


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from engine.demo import DEMOS, run_all_demos

    if scenario == "all":
        run_all_demos()
    elif scenario in DEMOS:
        DEMOS[scenario]()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


async def _send(args: argparse.Namespace, engine=None) -> str:
    """
    Raise one notification and show it on the desktop.

    Permission is requested for this notification only; the saved
    ``desktop`` setting is left as the user chose it.
    """
    from engine.service import NotificationEngine
    from shared.channels import PlyerNotificationSink, TerminalBellSoundPlayer
    from shared.config import EngineConfig

    if engine is None:
        config = EngineConfig.from_env()
        engine = NotificationEngine(
            config=config,
            sink=PlyerNotificationSink(app_name=config.app_name),
            sound_player=TerminalBellSoundPlayer(),
        )
    engine.load()
    granted = await engine.request_permission()
    if not granted:
        print("Desktop notifications are not available on this platform")

    notification_id = engine.store.add_notification(
        type=args.type,
        title=args.title,
        message=args.message,
        category=args.category,
        priority=args.priority,
    )
    notification = engine.store.get(notification_id)
    # With desktop delivery on, the store already showed it
    if granted and notification is not None and not engine.store.settings.desktop:
        engine.show_browser_notification(notification)

    engine.save()
    return notification_id


def run_send(args: argparse.Namespace) -> None:
    """Raise one notification through the desktop and sound channels."""
    notification_id = asyncio.run(_send(args))
    print(f"Sent {notification_id}")


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront Notification Engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo order-lifecycle
  %(prog)s demo promotion
  %(prog)s demo all
  %(prog)s send "Hello" "World" --priority high
  %(prog)s test -v
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=SCENARIOS,
        help="Which scenario to run",
    )

    # Send command
    send_parser = subparsers.add_parser(
        "send",
        help="Raise one notification on this desktop (does not change the saved desktop setting)",
    )
    send_parser.add_argument("title", help="Notification title")
    send_parser.add_argument("message", help="Notification body")
    send_parser.add_argument(
        "--type",
        default="info",
        choices=[t.value for t in NotificationType],
    )
    send_parser.add_argument(
        "--category",
        default="system",
        choices=[c.value for c in NotificationCategory],
    )
    send_parser.add_argument(
        "--priority",
        default="medium",
        choices=[p.value for p in NotificationPriority],
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "send":
        run_send(args)
    elif args.command == "test":
        run_tests(args.pytest_args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
