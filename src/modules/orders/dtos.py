"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateOrderItemDTO(BaseModel):
    """One requested line.  ``unit_price`` is resolved by the service."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int = Field(ge=1)


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.

    The same product may appear on several lines; each line is reserved
    on its own.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    items: List[CreateOrderItemDTO] = Field(min_length=1)
