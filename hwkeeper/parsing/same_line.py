"""Products whose name and price share one receipt line."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models import ExtractedProductInfo
from .common import PRICE_RE, make_candidate, parse_price, price_in_bounds

logger = logging.getLogger(__name__)

STRATEGY_NAME = "same_line"
CONFIDENCE = 0.9

# Lines containing any of these (case-insensitive) are never products
_NON_PRODUCT_KEYWORDS: list[str] = [
    "subtotal", "total", "tax", "discount", "change", "payment",
    "cash", "card", "receipt", "store", "cashier", "thank you",
    "return policy", "warranty info", "date:", "time:", "address",
    "phone", "email", "website", "description", "quantity",
    "unit price", "total amount",
]

_QUANTITY_PREFIX_RE = re.compile(r"^\d+\s*[x*]\s*", re.IGNORECASE)
_METADATA_LABEL_RE = re.compile(
    r"^(qty|quantity|item|sku|upc|code|id)\s*:?\s*\d*$", re.IGNORECASE
)


def _is_non_product_line(line: str) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in _NON_PRODUCT_KEYWORDS)


def clean_product_name(text: str) -> str:
    """Drop a leading quantity marker (``2x``, ``1 *``) and squeeze spaces."""
    name = _QUANTITY_PREFIX_RE.sub("", text.strip())
    return re.sub(r"\s+", " ", name).strip()


def is_valid_product_name(name: str) -> bool:
    if len(name) < 3:
        return False
    if name.isdigit():
        return False
    return not _METADATA_LABEL_RE.match(name)


def find_same_line_products(lines: Sequence[str]) -> list[ExtractedProductInfo]:
    """Pick ``NAME ... $PRICE`` lines, using the rightmost price on the line."""
    products: list[ExtractedProductInfo] = []

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if len(line) < 3 or _is_non_product_line(line):
            continue

        matches = list(PRICE_RE.finditer(line))
        if not matches:
            continue

        price_match = matches[-1]
        price = parse_price(price_match.group())
        name = clean_product_name(line[: price_match.start()])

        if not is_valid_product_name(name):
            logger.debug("line %d: invalid product name %r", index, name)
            continue
        if not price_in_bounds(price):
            logger.debug("line %d: price out of range %r", index, price_match.group())
            continue

        logger.debug("line %d: %r at %.2f", index, name, price)
        products.append(
            make_candidate(
                name,
                price,
                CONFIDENCE,
                {
                    "strategy": STRATEGY_NAME,
                    "line": line,
                    "line_index": index,
                    "price_found": price_match.group(),
                },
            )
        )

    return products
