"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``); integers are strict so ``"10"`` or
``9.5`` never reach the ledger.

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is non-empty once trimmed.
    - ``price`` (cents) and ``stock`` are non-negative integers.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: int = Field(ge=0, strict=True)
    stock: int = Field(ge=0, strict=True)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product name is required.")
        return v.strip()


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional but at least one must be supplied.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: int | None = Field(default=None, ge=0, strict=True)
    stock: int | None = Field(default=None, ge=0, strict=True)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Product name must not be empty.")
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def at_least_one_field(self) -> Self:
        if self.name is None and self.price is None and self.stock is None:
            raise ValueError("At least one field must be provided.")
        return self
