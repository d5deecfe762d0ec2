"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine.  Repeating ``paid`` or ``cancelled`` is an idempotent
replay handled by the service, not a transition.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    CREATED = "created", "Created"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.CREATED: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),
}

ORDERS_TOPIC = "orders"
