"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems + history + outbox rows) is
persisted atomically.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.models import OutboxEvent
from modules.orders.constants import ORDERS_TOPIC, OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository, NewOrderItem

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, user_id: UUID, items: Sequence[NewOrderItem], total: int) -> Order:
        order = Order(user_id=user_id, status=OrderStatus.CREATED, total=total)
        order.save()

        for position, line in enumerate(items):
            OrderItem(
                order=order,
                product_id=line.product_id,
                position=position,
                quantity=line.quantity,
                unit_price=line.unit_price,
            ).save()

        self.add_history(order.id, OrderStatus.CREATED, notes="Order created")
        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must run inside a transaction.  Items are prefetched so the caller
        can iterate over them while the row is locked.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders newest first with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "paid"}
            {"user_id": user.id, "created_at__date__gte": date(2024, 1, 1)}
        """
        queryset = Order.objects.prefetch_related("items")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("-created_at", "-id"))

    def list_for_owner(
        self, user_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        return self.list({**(filters or {}), "user_id": user_id})

    def list_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self.list(filters)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_status(self, id: UUID, status: str, notes: str = "") -> Optional[Order]:
        order = Order.objects.select_for_update().filter(id=id).first()
        if order is None:
            return None

        old_status = order.status
        order.status = status
        order.save(update_fields=["status"])
        self.add_history(order.id, status, notes=notes, old_status=old_status)

        logger.info(
            "order.status_set",
            order_id=str(id),
            old_status=old_status,
            new_status=status,
        )
        return self.get_by_id(str(id))

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        return OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )

    @transaction.atomic
    def publish_events(self, order: Order) -> int:
        events = order.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=ORDERS_TOPIC,
            )
        order.clear_domain_events()

        if events:
            logger.info(
                "order.events_stored",
                order_id=str(order.id),
                event_count=len(events),
            )
        return len(events)
