"""Receipt line parsing: strategies, product types and dates."""

from .aggregator import STRATEGIES, Strategy, deduplicate, parse_products
from .classifier import classify_product_type
from .dates import (
    extract_purchase_date,
    find_date_text,
    find_receipt_date,
    parse_date_text,
)
from .pattern import find_pattern_products
from .same_line import find_same_line_products
from .table import find_table_products

__all__ = [
    "STRATEGIES",
    "Strategy",
    "classify_product_type",
    "deduplicate",
    "extract_purchase_date",
    "find_date_text",
    "find_receipt_date",
    "find_pattern_products",
    "find_same_line_products",
    "find_table_products",
    "parse_date_text",
    "parse_products",
]
