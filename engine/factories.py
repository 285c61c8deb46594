"""
Domain event factories.

Small constructors used by order, payment, stock and promotion code. Each maps
a domain status to a notification shape and hands it to the store. All the
"what does a cancelled order look like" knowledge lives here, so domain code
only says what happened.
"""

import logging
from typing import Any, Optional

from engine.store import NotificationStore
from shared.host import HostBridge, LoggingHost
from shared.models import (
    ActionVariant,
    NotificationAction,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)
from shared.templates import render_template

logger = logging.getLogger("notification_factories")


# Order status -> (type, priority)
ORDER_STATUS_CONFIG: dict[str, tuple[NotificationType, NotificationPriority]] = {
    "confirmed": (NotificationType.SUCCESS, NotificationPriority.HIGH),
    "processing": (NotificationType.INFO, NotificationPriority.MEDIUM),
    "shipped": (NotificationType.INFO, NotificationPriority.MEDIUM),
    "delivered": (NotificationType.SUCCESS, NotificationPriority.HIGH),
    "cancelled": (NotificationType.WARNING, NotificationPriority.HIGH),
    "refunded": (NotificationType.INFO, NotificationPriority.MEDIUM),
}
DEFAULT_ORDER_CONFIG = (NotificationType.INFO, NotificationPriority.MEDIUM)

# Payment status -> (type, message)
PAYMENT_STATUS_CONFIG: dict[str, tuple[NotificationType, str]] = {
    "processing": (NotificationType.INFO, "Your payment is being processed."),
    "completed": (NotificationType.SUCCESS, "Payment completed successfully!"),
    "failed": (
        NotificationType.ERROR,
        "Payment failed. Please try again or use a different payment method.",
    ),
    "refunded": (NotificationType.INFO, "Your payment has been refunded."),
    "cancelled": (NotificationType.WARNING, "Payment was cancelled."),
}
DEFAULT_PAYMENT_CONFIG = (NotificationType.INFO, "Payment status updated.")

PROMOTION_DURATION_MS = 10000
STOCK_ALERT_DURATION_MS = 8000
PAYMENT_COMPLETED_DURATION_MS = 4000


def _title_case_first(status: str) -> str:
    return status[:1].upper() + status[1:]


class DomainEventFactories:
    """
    Storefront-specific notification constructors.

    Example:
        factories = DomainEventFactories(store, host)
        factories.notify_order_update("ord-001", "shipped", "Your order is on its way")
    """

    def __init__(self, store: NotificationStore, host: Optional[HostBridge] = None):
        self.store = store
        self.host = host or LoggingHost()

    def notify_order_update(self, order_id: str, status: str, message: str) -> str:
        """Order status changed. Sticky, with a "View Order" action."""
        notification_type, priority = ORDER_STATUS_CONFIG.get(status, DEFAULT_ORDER_CONFIG)

        return self.store.add_notification(
            type=notification_type,
            title=f"Order {_title_case_first(status)}",
            message=message,
            category=NotificationCategory.ORDER,
            priority=priority,
            auto_hide=False,
            actions=[
                NotificationAction(
                    label="View Order",
                    callback=lambda: self.host.navigate(f"/orders/{order_id}"),
                    variant=ActionVariant.PRIMARY,
                )
            ],
            metadata={"order_id": order_id, "status": status},
        )

    def notify_promotion(self, title: str, message: str, code: Optional[str] = None) -> str:
        """
        A promotion is available.

        With a promo code, a "Copy Code" action copies it to the clipboard and
        confirms with a short-lived success notification.
        """
        actions = []
        if code:
            actions.append(
                NotificationAction(
                    label="Copy Code",
                    callback=lambda: self._copy_promo_code(code),
                    variant=ActionVariant.PRIMARY,
                )
            )

        return self.store.add_notification(
            type=NotificationType.PROMOTION,
            title=title,
            message=message,
            category=NotificationCategory.PROMOTION,
            priority=NotificationPriority.LOW,
            auto_hide=True,
            duration=PROMOTION_DURATION_MS,
            actions=actions,
            metadata={"promo_code": code},
        )

    def notify_stock_alert(self, product_name: str, current_stock: int) -> str:
        return self.store.add_notification(
            type=NotificationType.WARNING,
            title="Low Stock Alert",
            message=f"{product_name} is running low ({current_stock} left). Order soon!",
            category=NotificationCategory.SYSTEM,
            priority=NotificationPriority.MEDIUM,
            auto_hide=True,
            duration=STOCK_ALERT_DURATION_MS,
            metadata={"product_name": product_name, "current_stock": current_stock},
        )

    def notify_payment_update(self, order_id: str, status: str) -> str:
        """
        Payment status changed.

        Completed payments auto-hide after 4s; failed payments are high
        priority and carry a "Retry Payment" action.
        """
        notification_type, message = PAYMENT_STATUS_CONFIG.get(status, DEFAULT_PAYMENT_CONFIG)
        failed = status == "failed"
        completed = status == "completed"

        actions = []
        if failed:
            actions.append(
                NotificationAction(
                    label="Retry Payment",
                    callback=lambda: self.host.navigate(f"/orders/{order_id}/payment"),
                    variant=ActionVariant.PRIMARY,
                )
            )

        return self.store.add_notification(
            type=notification_type,
            title="Payment Update",
            message=message,
            category=NotificationCategory.ORDER,
            priority=NotificationPriority.HIGH if failed else NotificationPriority.MEDIUM,
            auto_hide=completed,
            duration=PAYMENT_COMPLETED_DURATION_MS if completed else None,
            actions=actions,
            metadata={"order_id": order_id, "status": status},
        )

    def notify_from_template(
        self,
        template_id: str,
        context: Optional[dict[str, Any]] = None,
        **overrides,
    ) -> str:
        """
        Raise a predefined notification.

        Raises:
            ValueError: If no template has this id
        """
        return self.store.add_notification(render_template(template_id, context, **overrides))

    def _copy_promo_code(self, code: str) -> None:
        self.host.copy_to_clipboard(code)
        self.store.show_success("Copied!", "Promo code copied to clipboard")
