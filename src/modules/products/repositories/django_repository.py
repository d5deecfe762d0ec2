"""Django ORM implementation of the Product repository.

Stock mutations are single ``UPDATE`` statements built from ``F()``
expressions, so the database arbitrates concurrent writers; nothing is
read-modified-written in Python.  Missing rows yield ``None`` and the
Service Layer decides how to translate that.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Product]:
        """Like ``get_by_id`` but locks the row (SELECT FOR UPDATE).

        Must run inside a transaction.
        """
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def find_by_ids(self, ids: Iterable[UUID]) -> List[Product]:
        return list(Product.objects.filter(id__in=list(ids)))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products newest first, with optional Django ORM look-ups."""
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(
        self, entity: Product, update_fields: Optional[Sequence[str]] = None
    ) -> Product:
        """Persist (create or update) a product.

        ``stock`` belongs to the ledger operations below; updates pass
        *update_fields* so a stock value read earlier is never written back.
        """
        entity.full_clean()
        entity.save(update_fields=update_fields)
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    def decrease_stock(self, id: UUID, quantity: int) -> Optional[Product]:
        updated = Product.objects.filter(id=id, stock__gte=quantity).update(
            stock=F("stock") - quantity
        )
        if updated != 1:
            logger.info("product.stock_decrease_rejected", product_id=str(id), quantity=quantity)
            return None
        return Product.objects.get(id=id)

    def increase_stock(self, id: UUID, quantity: int) -> Optional[Product]:
        updated = Product.objects.filter(id=id).update(stock=F("stock") + quantity)
        if updated != 1:
            logger.warning("product.stock_increase_missing", product_id=str(id), quantity=quantity)
            return None
        return Product.objects.get(id=id)
