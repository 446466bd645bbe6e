"""Receipt processing: OCR, product parsing and metadata extraction."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .models import ProcessingStatus, ReceiptProcessingResult, ReceiptText
from .ocr import OcrProvider, create_provider
from .ocr.mock import MockOcrProvider
from .parsing import STRATEGIES, Strategy, parse_products
from .parsing.common import parse_price
from .parsing.dates import find_receipt_date

if TYPE_CHECKING:
    from .config import KeeperConfig

logger = logging.getLogger(__name__)

StatusCallback = Callable[[ProcessingStatus, str], None]

# Word boundary so "Subtotal:" never matches
_TOTAL_RE = re.compile(r"\bTotal:\s*\$?([\d,]+\.?\d*)", re.IGNORECASE)


def extract_store(raw_text: str) -> str | None:
    """The first non-empty line is usually the store name."""
    for line in raw_text.split("\n"):
        if line.strip():
            return line.strip()
    return None


def extract_total(raw_text: str) -> float | None:
    match = _TOTAL_RE.search(raw_text)
    if not match:
        return None
    return parse_price(match.group(1))


class ReceiptProcessor:
    """Turn one receipt image into a ReceiptProcessingResult.

    Holds configuration only, so one instance can serve any number of
    independent ``process`` calls.
    """

    def __init__(
        self,
        provider: OcrProvider,
        *,
        fallback: OcrProvider | None = None,
        processing_delay: float = 1.5,
        strategies: Sequence[Strategy] = STRATEGIES,
    ) -> None:
        self._provider = provider
        self._fallback = fallback
        self._processing_delay = processing_delay
        self._strategies = tuple(strategies)

    async def _recognize(self, image: str | Path) -> tuple[ReceiptText, bool]:
        try:
            return await self._provider.extract_text(image), False
        except Exception as e:
            if self._fallback is None:
                raise
            logger.warning(
                "%s OCR failed, falling back to %s: %s",
                self._provider.name,
                self._fallback.name,
                e,
            )
        return await self._fallback.extract_text(image), True

    async def process(
        self,
        image: str | Path,
        on_status: StatusCallback | None = None,
    ) -> ReceiptProcessingResult:
        """Run OCR and parsing; never raises."""

        def report(status: ProcessingStatus, message: str) -> None:
            if on_status is None:
                return
            try:
                on_status(status, message)
            except Exception:
                logger.exception("Status callback failed for %s", status.value)

        report(ProcessingStatus.PROCESSING, "Processing receipt...")
        try:
            receipt_text, used_fallback = await self._recognize(image)
            logger.info("OCR completed, confidence: %.2f", receipt_text.confidence)

            # Stand-in for a model inference call
            if self._processing_delay > 0:
                await asyncio.sleep(self._processing_delay)

            products = parse_products(receipt_text, self._strategies)
            raw_text = receipt_text.raw_text
            date_text, receipt_date = find_receipt_date(raw_text)
            result = ReceiptProcessingResult(
                text=receipt_text,
                products=products,
                store=extract_store(raw_text),
                total=extract_total(raw_text),
                date=date_text,
                receipt_date=receipt_date.isoformat() if receipt_date else None,
                used_fallback=used_fallback,
            )
        except Exception as e:
            logger.exception("Receipt processing error: %s", e)
            result = ReceiptProcessingResult.failure(str(e))
            report(ProcessingStatus.ERROR, result.error)
            return result

        report(ProcessingStatus.COMPLETED, f"Found {len(result.products)} products!")
        return result


def create_processor(config: KeeperConfig) -> ReceiptProcessor:
    """Build a processor wired to the configured OCR backend."""
    provider = create_provider(config)
    fallback = None
    if config.ocr.fallback_to_mock and not isinstance(provider, MockOcrProvider):
        fallback = MockOcrProvider(delay=config.ocr.mock_delay)
    return ReceiptProcessor(
        provider,
        fallback=fallback,
        processing_delay=config.processing.simulated_delay,
    )


async def process_receipt(
    image: str | Path,
    config: KeeperConfig | None = None,
) -> ReceiptProcessingResult:
    """Process one receipt image with the given (or default) configuration."""
    if config is None:
        from .config import load_config

        config = load_config()
    try:
        processor = create_processor(config)
    except ValueError as e:
        return ReceiptProcessingResult.failure(str(e))
    return await processor.process(image)
