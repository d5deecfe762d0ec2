"""Product repository interface (the stock ledger).

Extends ``IRepository[Product]`` with the atomic stock operations the
order engine reserves and restores inventory through.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with its row locked until the transaction ends."""

    @abstractmethod
    def save(
        self, entity: Product, update_fields: Optional[Sequence[str]] = None
    ) -> Product:
        """Persist *entity*; with *update_fields* only those columns are written."""

    @abstractmethod
    def find_by_ids(self, ids: Iterable[UUID]) -> List[Product]:
        """Batch fetch; unknown ids are simply absent from the result."""

    @abstractmethod
    def decrease_stock(self, id: UUID, quantity: int) -> Optional[Product]:
        """Subtract *quantity* only if current stock covers it.

        Returns the updated product, or ``None`` when the product is missing
        or stock is insufficient (nothing is changed in that case).
        """

    @abstractmethod
    def increase_stock(self, id: UUID, quantity: int) -> Optional[Product]:
        """Add *quantity* back; ``None`` when the product does not exist."""
