"""Event handlers for Orders domain events.

Run by the outbox relay, after the originating transaction committed.
"""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderCreated, OrderPaid
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            user_id=str(event.user_id),
            total=event.total,
        )


class OrderPaidHandler(IEventHandler[OrderPaid]):
    def handle(self, event: OrderPaid) -> None:
        logger.info("order.event.paid", order_id=str(event.aggregate_id))


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        log = logger.bind(order_id=str(event.aggregate_id))
        if event.refund_required:
            log.warning("order.event.refund_required")
        log.info("order.event.cancelled", refund_required=event.refund_required)


order_created_handler = OrderCreatedHandler()
order_paid_handler = OrderPaidHandler()
order_cancelled_handler = OrderCancelledHandler()
