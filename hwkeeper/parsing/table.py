"""Products inside a header-delimited item table."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models import ExtractedProductInfo
from .common import PRICE_RE, make_candidate, parse_price, price_in_bounds

logger = logging.getLogger(__name__)

STRATEGY_NAME = "table"
NEARBY_STRATEGY_NAME = "table_nearby"
COLUMN_CONFIDENCE = 0.8
NEARBY_CONFIDENCE = 0.7

_HEADER_NAME_WORDS = ("description", "item", "product")
_HEADER_PRICE_WORDS = ("price", "amount", "cost")
_TABLE_END_WORDS = ("subtotal", "total due", "payment method", "transaction id")
_SKIP_ROW_WORDS = ("discount", "promo")

_COLUMN_SPLIT_RE = re.compile(r"\s{2,}|\t")
_HARDWARE_RE = re.compile(
    r"gaming|laptop|computer|mouse|keyboard|software|hardware|monitor|camera"
    r"|phone|tablet|watch",
    re.IGNORECASE,
)

# How many lines below a product name to look for its price
_NEARBY_WINDOW = 3


def find_table_bounds(lines: Sequence[str]) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the first item table, or None.

    ``start`` is the line after the header; ``end`` is the first end marker
    after the header (exclusive), or ``len(lines)``.
    """
    header_index = None
    for i, line in enumerate(lines):
        lowered = line.lower()
        if any(w in lowered for w in _HEADER_NAME_WORDS) and any(
            w in lowered for w in _HEADER_PRICE_WORDS
        ):
            header_index = i
            break

    if header_index is None:
        return None

    end = len(lines)
    for i in range(header_index + 1, len(lines)):
        lowered = lines[i].lower()
        if any(w in lowered for w in _TABLE_END_WORDS):
            end = i
            break

    return header_index + 1, end


def _select_price_field(price_fields: list[str]) -> str:
    """Prefer a unit price: under 1000 and no thousands separator."""
    for field in price_fields:
        match = PRICE_RE.search(field)
        value = parse_price(match.group()) if match else None
        if "," not in field and value is not None and value < 1000:
            return field
    return price_fields[0]


def _parse_columns(line: str, index: int) -> ExtractedProductInfo | None:
    fields = [f.strip() for f in _COLUMN_SPLIT_RE.split(line) if f.strip()]
    if len(fields) < 2:
        return None

    name = fields[0]
    price_fields = [f for f in fields if PRICE_RE.search(f)]
    if not price_fields or len(name) <= 2:
        return None

    selected = _select_price_field(price_fields)
    price_text = PRICE_RE.search(selected).group()
    price = parse_price(price_text)
    if not price_in_bounds(price):
        return None

    logger.debug("table row %d: %r at %.2f", index, name, price)
    return make_candidate(
        name,
        price,
        COLUMN_CONFIDENCE,
        {
            "strategy": STRATEGY_NAME,
            "line": line,
            "line_index": index,
            "table_parts": fields,
            "price_found": price_text,
        },
    )


def _parse_nearby_price(
    lines: Sequence[str], line: str, index: int
) -> ExtractedProductInfo | None:
    if not _HARDWARE_RE.search(line) or "$" in line:
        return None

    last = min(index + _NEARBY_WINDOW, len(lines) - 1)
    for j in range(index + 1, last + 1):
        match = PRICE_RE.search(lines[j].strip())
        if not match:
            continue
        price = parse_price(match.group())
        if not price_in_bounds(price):
            continue

        logger.debug("table row %d: %r priced on line %d", index, line, j)
        return make_candidate(
            line,
            price,
            NEARBY_CONFIDENCE,
            {
                "strategy": NEARBY_STRATEGY_NAME,
                "line": line,
                "line_index": index,
                "price_line_index": j,
                "price_found": match.group(),
            },
        )
    return None


def find_table_products(lines: Sequence[str]) -> list[ExtractedProductInfo]:
    """Parse rows between a table header and its end marker."""
    bounds = find_table_bounds(lines)
    if bounds is None:
        logger.debug("no table header found")
        return []

    start, end = bounds
    logger.debug("table rows %d..%d", start, end)
    products: list[ExtractedProductInfo] = []

    for index in range(start, end):
        line = lines[index].strip()
        if len(line) < 3:
            continue
        lowered = line.lower()
        if any(w in lowered for w in _SKIP_ROW_WORDS):
            continue

        product = _parse_columns(line, index)
        if product is None:
            product = _parse_nearby_price(lines, line, index)
        if product is not None:
            products.append(product)

    return products
