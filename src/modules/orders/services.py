"""Order service layer: the order lifecycle engine.

Orchestrates order creation (price snapshot + stock reservation across
every line), payment and cancellation.  The service owns the business
rules; the order store and the product ledger are injected and passive.

Atomicity:
- ``create_order`` reserves stock line by line; each decrement commits on
  its own and the ``StockReservation`` saga gives it back if any later
  step fails.
- ``pay_order`` and ``cancel_order`` run in one transaction with the
  order row locked, so a replay or a concurrent transition sees the
  committed status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated, OrderPaid
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.policies import can_access, order_scope
from modules.orders.repositories.interfaces import NewOrderItem
from modules.orders.reservations import StockReservation

if TYPE_CHECKING:
    from modules.accounts.dtos import Principal
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order, reserving stock for every line.

        Steps:
        1. Batch fetch the distinct products; fail if any is missing.
        2. For each line in request order: check the remaining stock
           (minus what earlier lines already took), reserve it through
           the ledger and snapshot the current price.
        3. Persist order + items + ``OrderCreated`` outbox row.

        Either every line is reserved and the order exists, or the
        reservations already made are compensated and nothing remains.

        Raises:
            ProductNotFound: one or more products do not exist.
            InsufficientStock: a line cannot be covered, or a concurrent
                request took the stock between check and decrement.
        """
        log = logger.bind(user_id=str(dto.user_id), line_count=len(dto.items))
        log.info("order.creation_started")

        requested_ids = list(dict.fromkeys(item.product_id for item in dto.items))
        products = {p.id: p for p in self._product_repo.find_by_ids(requested_ids)}
        missing = [pid for pid in requested_ids if pid not in products]
        if missing:
            log.warning("order.products_missing", missing_ids=[str(m) for m in missing])
            raise ProductNotFound(missing)

        available = {pid: product.stock for pid, product in products.items()}
        lines: List[NewOrderItem] = []
        total = 0

        with StockReservation(self._product_repo) as reservation:
            for item in dto.items:
                product = products[item.product_id]
                if available[product.id] < item.quantity:
                    log.warning(
                        "order.insufficient_stock",
                        product_id=str(product.id),
                        available=available[product.id],
                        requested=item.quantity,
                    )
                    raise InsufficientStock(
                        f"Insufficient stock for product {product.name}. "
                        f"Available: {available[product.id]}, "
                        f"Requested: {item.quantity}"
                    )

                reservation.reserve(product, item.quantity)
                available[product.id] -= item.quantity
                lines.append(
                    NewOrderItem(
                        product_id=product.id,
                        quantity=item.quantity,
                        unit_price=product.price,
                    )
                )
                total += product.price * item.quantity

            with transaction.atomic():
                order = self._order_repo.create(dto.user_id, lines, total)
                order.add_domain_event(
                    OrderCreated(aggregate_id=order.id, user_id=dto.user_id, total=total)
                )
                self._order_repo.publish_events(order)

        log.info("order.created", order_id=str(order.id), total=total)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def pay_order(self, order_id: UUID, principal: Optional[Principal] = None) -> Order:
        """Mark an order as paid.

        Paying a paid order returns it unchanged.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: a customer tried to pay someone else's order.
            InvalidOrderStatus: the order is cancelled.
        """
        order = self._get_locked(order_id, principal)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if order.status == OrderStatus.PAID:
            log.info("order.pay_replayed")
            return order

        if not order.can_transition_to(OrderStatus.PAID):
            log.warning("order.invalid_transition", requested=OrderStatus.PAID)
            raise InvalidOrderStatus(
                f"Cannot pay a {OrderStatus(order.status).label.lower()} order."
            )

        updated = self._order_repo.set_status(order.id, OrderStatus.PAID, notes="Order paid")
        updated.add_domain_event(OrderPaid(aggregate_id=updated.id))
        self._order_repo.publish_events(updated)

        log.info("order.paid")
        return updated

    @transaction.atomic
    def cancel_order(
        self, order_id: UUID, principal: Optional[Principal] = None
    ) -> Order:
        """Cancel an order and give its stock back to the ledger.

        Cancelling a cancelled order returns it unchanged and restores
        nothing.  Cancelling a paid order is allowed; it is flagged with
        ``refund_required`` for the payment side to act on.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: a customer tried to cancel someone else's order.
        """
        order = self._get_locked(order_id, principal)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if order.status == OrderStatus.CANCELLED:
            log.info("order.cancel_replayed")
            return order

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.invalid_transition", requested=OrderStatus.CANCELLED)
            raise InvalidOrderStatus(
                f"Cannot cancel a {OrderStatus(order.status).label.lower()} order."
            )

        refund_required = order.status == OrderStatus.PAID
        if refund_required:
            log.warning("order.cancel_refund_required", total=order.total)

        # Product rows are touched in a fixed order to avoid deadlocks.
        for item in sorted(order.items.all(), key=lambda i: i.product_id):
            self._product_repo.increase_stock(item.product_id, item.quantity)
            log.info(
                "order.stock_restored",
                product_id=str(item.product_id),
                quantity=item.quantity,
            )

        updated = self._order_repo.set_status(
            order.id,
            OrderStatus.CANCELLED,
            notes="Cancelled after payment" if refund_required else "Order cancelled",
        )
        updated.add_domain_event(
            OrderCancelled(aggregate_id=updated.id, refund_required=refund_required)
        )
        self._order_repo.publish_events(updated)

        log.info("order.cancelled", refund_required=refund_required)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_orders(
        self, principal: Principal, filters: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        """Orders visible to *principal*, newest first."""
        owner_id = order_scope(principal)
        if owner_id is None:
            return self._order_repo.list_all(filters)
        return self._order_repo.list_for_owner(owner_id, filters)

    def get_order(self, order_id: UUID, principal: Principal) -> Order:
        """Retrieve a single order visible to *principal*.

        Raises:
            OrderNotFound: the order does not exist or belongs to
                another customer.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if order is None or not can_access(principal, order.user_id):
            raise OrderNotFound()
        return order

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_locked(self, order_id: UUID, principal: Optional[Principal]) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if order is None:
            raise OrderNotFound()
        if principal is not None and not can_access(principal, order.user_id):
            logger.warning(
                "order.access_denied",
                order_id=str(order_id),
                principal_id=str(principal.id),
            )
            raise OrderAccessDenied()
        return order
