"""
Predefined notification templates.

Templates capture the recurring storefront notifications (order confirmed,
payment failed, low stock...) so callers can raise them by id and only
override what differs.

Design decisions:
- Templates are plain dataclasses keyed by a string id
- Title and message support {variable} placeholders filled at render time
- Rendering produces a NotificationPayload ready for the store
"""

from dataclasses import dataclass
from typing import Any, Optional

from shared.models import (
    NotificationCategory,
    NotificationPayload,
    NotificationPriority,
    NotificationType,
)


@dataclass
class NotificationTemplate:
    """
    A reusable notification shape.

    ``title`` and ``message`` may contain {placeholders}; any context passed to
    ``render`` is substituted into both.
    """
    id: str
    name: str
    type: NotificationType
    title: str
    message: str
    category: NotificationCategory
    priority: NotificationPriority
    auto_hide: bool
    duration: Optional[int] = None

    def render(self, context: Optional[dict[str, Any]] = None, **overrides) -> NotificationPayload:
        """
        Build a payload from this template.

        Args:
            context: Values substituted into title/message placeholders
            **overrides: Payload fields replacing the template defaults

        Returns:
            NotificationPayload
        """
        context = context or {}
        fields: dict[str, Any] = {
            "type": self.type,
            "title": self.title.format(**context),
            "message": self.message.format(**context),
            "category": self.category,
            "priority": self.priority,
            "auto_hide": self.auto_hide,
            "duration": self.duration,
        }
        fields.update(overrides)
        return NotificationPayload(**fields)


# =============================================================================
# Template Definitions
# =============================================================================

TEMPLATES: dict[str, NotificationTemplate] = {

    # -------------------------------------------------------------------------
    # Order Lifecycle
    # -------------------------------------------------------------------------

    "order_confirmed": NotificationTemplate(
        id="order_confirmed",
        name="Order Confirmed",
        type=NotificationType.SUCCESS,
        title="Order Confirmed!",
        message="Your order has been confirmed and is being processed.",
        category=NotificationCategory.ORDER,
        priority=NotificationPriority.HIGH,
        auto_hide=False,
    ),

    "order_shipped": NotificationTemplate(
        id="order_shipped",
        name="Order Shipped",
        type=NotificationType.INFO,
        title="Order Shipped",
        message="Your order is on its way! Track your package with the provided tracking number.",
        category=NotificationCategory.ORDER,
        priority=NotificationPriority.MEDIUM,
        auto_hide=False,
    ),

    # -------------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------------

    "payment_failed": NotificationTemplate(
        id="payment_failed",
        name="Payment Failed",
        type=NotificationType.ERROR,
        title="Payment Failed",
        message="There was an issue processing your payment. Please try again.",
        category=NotificationCategory.ORDER,
        priority=NotificationPriority.HIGH,
        auto_hide=False,
    ),

    # -------------------------------------------------------------------------
    # Inventory & Promotions
    # -------------------------------------------------------------------------

    "low_stock": NotificationTemplate(
        id="low_stock",
        name="Low Stock Alert",
        type=NotificationType.WARNING,
        title="Low Stock Alert",
        message="Some items in your cart are running low on stock.",
        category=NotificationCategory.SYSTEM,
        priority=NotificationPriority.MEDIUM,
        auto_hide=True,
        duration=8000,
    ),

    "promotion_available": NotificationTemplate(
        id="promotion_available",
        name="Promotion Available",
        type=NotificationType.PROMOTION,
        title="Special Offer!",
        message="Don't miss out on this limited-time promotion.",
        category=NotificationCategory.PROMOTION,
        priority=NotificationPriority.LOW,
        auto_hide=True,
        duration=10000,
    ),
}


# =============================================================================
# Template Access Functions
# =============================================================================

def get_template(template_id: str) -> Optional[NotificationTemplate]:
    """Get a template by id."""
    return TEMPLATES.get(template_id)


def render_template(
    template_id: str,
    context: Optional[dict[str, Any]] = None,
    **overrides,
) -> NotificationPayload:
    """
    Render a template into a notification payload.

    Raises:
        ValueError: If no template has this id
    """
    template = get_template(template_id)
    if not template:
        raise ValueError(f"No template found for id: {template_id}")
    return template.render(context, **overrides)
