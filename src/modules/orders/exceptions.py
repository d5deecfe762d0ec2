"""Order domain exceptions.

Raised by the Service Layer when business rules are violated and
rendered by the API exception handler.
"""

from __future__ import annotations

from typing import Iterable

from modules.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


class OrderNotFound(NotFoundError):
    default_code = "order_not_found"
    default_detail = "Order not found"


class ProductNotFound(NotFoundError):
    """One or more products referenced by the order do not exist."""

    default_code = "product_not_found"

    def __init__(self, missing_ids: Iterable[object]) -> None:
        self.missing_ids = [str(pid) for pid in missing_ids]
        super().__init__(f"Products not found: {', '.join(self.missing_ids)}")


class InsufficientStock(ValidationError):
    default_code = "insufficient_stock"
    default_detail = "Insufficient stock."


class InvalidOrderStatus(ConflictError):
    """An illegal status transition was attempted."""

    default_code = "invalid_order_status"


class OrderAccessDenied(ForbiddenError):
    default_code = "order_access_denied"
    default_detail = "You can only manage your own orders."
