"""Purchase date detection in receipt text."""

from __future__ import annotations

import re
from datetime import date, datetime

_LABELLED_RE = re.compile(r"\bdate[:\s]+([^\n]+)", re.IGNORECASE)
_US_SLASH_RE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{2,4})(?!\d)")
_US_DASH_RE = re.compile(r"(?<!\d)(\d{1,2})-(\d{1,2})-(\d{2,4})(?!\d)")
_ISO_RE = re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")

_MONTH_NAME_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y", "%d %B %Y", "%d %b %Y")


def _expand_year(year: str) -> int:
    value = int(year)
    if len(year) == 2:
        # Same pivot as strptime's %y
        return 2000 + value if value < 69 else 1900 + value
    return value


def _build_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_us(match: re.Match[str]) -> date | None:
    month, day, year = match.groups()
    if len(year) == 3:
        return None
    return _build_date(_expand_year(year), int(month), int(day))


def _parse_iso(match: re.Match[str]) -> date | None:
    year, month, day = match.groups()
    return _build_date(int(year), int(month), int(day))


def parse_date_text(text: str) -> date | None:
    """Interpret a free-form date string such as a labelled receipt value.

    Numeric forms are tried first (ISO, then US slash/dash), then month
    names like "March 15, 2024".  Returns None when nothing parses.
    """
    text = text.strip()
    for regex, parse in ((_ISO_RE, _parse_iso), (_US_SLASH_RE, _parse_us), (_US_DASH_RE, _parse_us)):
        match = regex.search(text)
        if match:
            parsed = parse(match)
            if parsed is not None:
                return parsed

    candidate = re.sub(r"\s+", " ", text.replace(".", ""))
    for fmt in _MONTH_NAME_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None


def _date_candidates(raw_text: str):
    """Yield ``(raw_string, parsed_or_None)`` in cascade order."""
    match = _LABELLED_RE.search(raw_text)
    if match:
        value = match.group(1).strip()
        yield value, parse_date_text(value)

    for regex, parse in ((_US_SLASH_RE, _parse_us), (_US_DASH_RE, _parse_us), (_ISO_RE, _parse_iso)):
        match = regex.search(raw_text)
        if match:
            yield match.group(0), parse(match)


def find_receipt_date(raw_text: str) -> tuple[str | None, date | None]:
    """Pick the receipt date as ``(text as printed, parsed date)``.

    The first candidate that parses wins.  When none parses, the first raw
    match is still returned with a None date.
    """
    first_raw = None
    for raw, parsed in _date_candidates(raw_text):
        if parsed is not None:
            return raw, parsed
        if first_raw is None:
            first_raw = raw
    return first_raw, None


def extract_purchase_date(raw_text: str) -> str | None:
    """Return the first parseable receipt date as ``YYYY-MM-DD``."""
    _, parsed = find_receipt_date(raw_text)
    return parsed.isoformat() if parsed is not None else None


def find_date_text(raw_text: str) -> str | None:
    """Return the receipt date as printed on the receipt."""
    raw, _ = find_receipt_date(raw_text)
    return raw
