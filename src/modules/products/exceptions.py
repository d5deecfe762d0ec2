"""Product domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFoundError


class ProductNotFound(NotFoundError):
    """The requested product does not exist."""

    default_code = "product_not_found"
    default_detail = "Product not found"
