"""SQLite storage for the hardware product inventory."""

from .products import (
    PRODUCT_STATUSES,
    Product,
    ProductCreate,
    ProductDB,
    add_months,
    products_from_result,
    warranty_expiry,
)
from .schema import ensure_schema

__all__ = [
    "PRODUCT_STATUSES",
    "Product",
    "ProductCreate",
    "ProductDB",
    "add_months",
    "ensure_schema",
    "products_from_result",
    "warranty_expiry",
]
