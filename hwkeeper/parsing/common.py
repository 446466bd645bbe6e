"""Price patterns and candidate construction shared by the line strategies."""

from __future__ import annotations

import re
from typing import Any

from ..models import ExtractedProductInfo
from .classifier import classify_product_type

PRICE_RE = re.compile(r"\$[\d,]+\.?\d*")

MIN_PRICE = 0.01
MAX_PRICE = 50000.0

DEFAULT_WARRANTY_MONTHS = 12


def parse_price(text: str) -> float | None:
    """Convert a currency string like ``$2,499.99`` into a float.

    Returns None when no digits remain after stripping ``$`` and commas.
    """
    cleaned = text.replace("$", "").replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def price_in_bounds(price: float | None) -> bool:
    return price is not None and MIN_PRICE <= price <= MAX_PRICE


def make_candidate(
    name: str,
    price: float,
    confidence: float,
    raw_data: dict[str, Any],
) -> ExtractedProductInfo:
    return ExtractedProductInfo(
        name=name,
        price=price,
        product_type=classify_product_type(name),
        warranty_months=DEFAULT_WARRANTY_MONTHS,
        confidence=confidence,
        raw_data=raw_data,
    )
