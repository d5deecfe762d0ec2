"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created and its stock reserved."""

    user_id: UUID | None = None
    total: int = 0

    _uuid_fields: ClassVar[tuple[str, ...]] = ("aggregate_id", "event_id", "user_id")


@dataclass(frozen=True)
class OrderPaid(DomainEvent):
    """Raised when an order moves from ``created`` to ``paid``."""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled and its stock restored.

    ``refund_required`` is set when the order had already been paid; the
    refund itself belongs to the payment side.
    """

    refund_required: bool = False
