"""Unit tests for product DTO validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO

pytestmark = pytest.mark.unit


class TestCreateProductDTO:
    def test_name_is_trimmed(self):
        assert CreateProductDTO(name="  Lamp  ", price=0, stock=0).name == "Lamp"

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "   ", "price": 100, "stock": 1},
            {"name": "Lamp", "price": -1, "stock": 1},
            {"name": "Lamp", "price": 100, "stock": -5},
            {"name": "Lamp", "price": 9.99, "stock": 1},
            {"name": "Lamp", "price": "100", "stock": 1},
            {"name": "Lamp", "price": 100},
        ],
    )
    def test_rejects_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            CreateProductDTO(**payload)


class TestUpdateProductDTO:
    def test_partial_update(self):
        dto = UpdateProductDTO(stock=7)
        assert dto.stock == 7
        assert dto.name is None

    def test_requires_at_least_one_field(self):
        with pytest.raises(ValidationError, match="At least one field"):
            UpdateProductDTO()

    def test_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO(name="  ")
