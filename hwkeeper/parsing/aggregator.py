"""Merge strategy candidates into the final product list."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from ..models import ExtractedProductInfo, ReceiptText
from .dates import extract_purchase_date
from .pattern import find_pattern_products
from .same_line import find_same_line_products
from .table import find_table_products

logger = logging.getLogger(__name__)

Strategy = Callable[[Sequence[str]], list[ExtractedProductInfo]]

# Run order matters: on duplicates the earlier strategy's candidate is kept.
STRATEGIES: tuple[Strategy, ...] = (
    find_same_line_products,
    find_table_products,
    find_pattern_products,
)


def deduplicate(products: Iterable[ExtractedProductInfo]) -> list[ExtractedProductInfo]:
    """Keep the first product for each ``(name, price)`` pair."""
    seen: set[tuple[str, float | None]] = set()
    unique: list[ExtractedProductInfo] = []
    for product in products:
        key = (product.name, product.price)
        if key in seen:
            continue
        seen.add(key)
        unique.append(product)
    return unique


def parse_products(
    receipt_text: ReceiptText,
    strategies: Sequence[Strategy] = STRATEGIES,
) -> list[ExtractedProductInfo]:
    """Run every strategy over the receipt lines and reconcile the results."""
    lines = receipt_text.lines
    candidates: list[ExtractedProductInfo] = []
    for strategy in strategies:
        found = strategy(lines)
        logger.debug("%s: %d candidates", strategy.__name__, len(found))
        candidates.extend(found)

    products = deduplicate(candidates)

    purchase_date = extract_purchase_date(receipt_text.raw_text)
    for product in products:
        product.purchase_date = purchase_date

    logger.info(
        "Parsed %d products (%d candidates) from %d lines",
        len(products),
        len(candidates),
        len(lines),
    )
    return products
