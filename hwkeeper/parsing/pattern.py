"""Products laid out as four lines each: name, quantity, unit price, total."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models import ExtractedProductInfo
from .common import PRICE_RE, make_candidate, parse_price, price_in_bounds

logger = logging.getLogger(__name__)

STRATEGY_NAME = "pattern_4line"
CONFIDENCE = 0.95
GROUP_SIZE = 4

# One keyword group per header line, in order
_HEADER_GROUPS: tuple[tuple[str, ...], ...] = (
    ("description", "item"),
    ("quantity", "qty"),
    ("price", "unit"),
    ("total", "amount"),
)

_END_OF_ITEMS_WORDS = ("discount", "total", "subtotal", "tax", "payment", "thank you")


def find_pattern_start(lines: Sequence[str]) -> int | None:
    """Index of the first data line after a four-line header, or None."""
    for i in range(len(lines) - (GROUP_SIZE - 1)):
        window = [lines[i + k].strip().lower() for k in range(GROUP_SIZE)]
        if all(
            any(word in text for word in group)
            for text, group in zip(window, _HEADER_GROUPS)
        ):
            return i + GROUP_SIZE
    return None


def find_pattern_products(lines: Sequence[str]) -> list[ExtractedProductInfo]:
    start = find_pattern_start(lines)
    if start is None:
        logger.debug("no four-line header found")
        return []

    products: list[ExtractedProductInfo] = []
    index = start
    while index + GROUP_SIZE <= len(lines):
        name, quantity, unit_price, total = (
            lines[index + k].strip() for k in range(GROUP_SIZE)
        )

        if any(word in name.lower() for word in _END_OF_ITEMS_WORDS):
            logger.debug("line %d: end of items at %r", index, name)
            break

        match = PRICE_RE.search(unit_price)
        if len(name) > 2 and match:
            price = parse_price(match.group())
            if price_in_bounds(price):
                products.append(
                    make_candidate(
                        name,
                        price,
                        CONFIDENCE,
                        {
                            "strategy": STRATEGY_NAME,
                            "line_index": index,
                            "product_name": name,
                            "quantity": quantity,
                            "unit_price": unit_price,
                            "total_price": total,
                        },
                    )
                )
            else:
                logger.debug("line %d: price out of range %r", index, match.group())
        else:
            logger.debug("line %d: group rejected (%r, %r)", index, name, unit_price)

        index += GROUP_SIZE

    return products
