"""Order repository interface.

Extends ``IRepository[Order]`` with the operations of the order store:
atomic creation with items, owner-scoped listing, locked reads and
status transitions with history tracking.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


@dataclass(frozen=True)
class NewOrderItem:
    """A line ready to be stored: price already captured."""

    product_id: UUID
    quantity: int
    unit_price: int


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, user_id: UUID, items: Sequence[NewOrderItem], total: int) -> Order:
        """Create an order in status ``created`` with its items atomically."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list_for_owner(
        self, user_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        """Orders placed by *user_id*, newest first."""

    @abstractmethod
    def list_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Every order, newest first."""

    @abstractmethod
    def set_status(self, id: UUID, status: str, notes: str = "") -> Optional[Order]:
        """Overwrite the status and record the change in the history.

        Legality of the transition is the caller's concern.
        """

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def publish_events(self, order: Order) -> int:
        """Move the aggregate's pending domain events to the outbox."""
