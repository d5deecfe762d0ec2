"""Product model: catalog entry and stock ledger row.

Prices are integers in minor currency units (cents) so totals are exact.
``stock`` never goes below zero: decrements are conditional UPDATEs and the
database enforces the floor with a CHECK constraint.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel


class Product(BaseModel):
    name = models.CharField(max_length=255)
    price = models.PositiveBigIntegerField()
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({"name": "Product name is required."})

    def __str__(self) -> str:
        return f"{self.name} ({self.stock} in stock)"
