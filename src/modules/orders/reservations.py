"""Stock reservation saga used while creating an order.

Each ``decrease_stock`` call commits on its own, so a multi-item order is
not covered by one transaction.  ``StockReservation`` records every
committed decrement and, if the block fails, gives the stock back in
reverse order before the original exception propagates::

    with StockReservation(product_repo) as reservation:
        for line in lines:
            reservation.reserve(line.product, line.quantity)
        order_repo.create(...)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, List, Optional, Type
from uuid import UUID

import structlog

from modules.orders.exceptions import InsufficientStock

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Reservation:
    product_id: UUID
    quantity: int


class StockReservation:
    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository
        self._reservations: List[Reservation] = []

    @property
    def reservations(self) -> List[Reservation]:
        return list(self._reservations)

    def reserve(self, product: Product, quantity: int) -> Product:
        """Take *quantity* of *product* from the ledger.

        Raises:
            InsufficientStock: the conditional decrement matched no row,
                i.e. another request took the stock first.
        """
        updated = self._product_repo.decrease_stock(product.id, quantity)
        if updated is None:
            raise InsufficientStock(
                f"Failed to reserve stock for product {product.name}. "
                "Please try again."
            )
        self._reservations.append(Reservation(product.id, quantity))
        logger.info(
            "order.stock_reserved",
            product_id=str(product.id),
            quantity=quantity,
            remaining=updated.stock,
        )
        return updated

    def compensate(self) -> None:
        """Return every recorded reservation, newest first.

        A failed restore is logged and skipped so the remaining ones still
        run; the caller's original error is what surfaces.
        """
        while self._reservations:
            reservation = self._reservations.pop()
            try:
                self._product_repo.increase_stock(
                    reservation.product_id, reservation.quantity
                )
            except Exception:
                logger.exception(
                    "order.reservation_compensation_failed",
                    product_id=str(reservation.product_id),
                    quantity=reservation.quantity,
                )
                continue
            logger.info(
                "order.reservation_compensated",
                product_id=str(reservation.product_id),
                quantity=reservation.quantity,
            )

    def __enter__(self) -> StockReservation:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        if exc_type is not None and self._reservations:
            logger.warning(
                "order.reservation_rolled_back",
                reserved_lines=len(self._reservations),
                error_class=exc_type.__name__,
            )
            self.compensate()
        else:
            self._reservations.clear()
        return False
