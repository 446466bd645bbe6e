"""Sample-receipt OCR provider used when no OCR service is configured."""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path

from ..models import ReceiptText
from . import OcrProvider

MOCK_CONFIDENCE = 0.95

_SAMPLE_RECEIPT = """\
Best Buy
Store #1234 - Electronics Store
123 Main Street, City, State 12345
Tel: (555) 123-4567

Receipt #: REC-2024-001234
Date: {date}
Cashier: John D.

ITEMS PURCHASED:
Apple MacBook Pro 16-inch M3 Pro     $2,499.99
- Model: MacBook Pro 16" M3 Pro
- SKU: MBP16-M3P-1TB-SG
- Warranty: 1 Year Limited Warranty

Apple Magic Mouse                      $79.99
- Model: Magic Mouse (3rd Gen)
- SKU: MM-3G-WHITE

USB-C Charging Cable                   $29.99
- Model: USB-C to USB-C Cable 2m
- Brand: Apple

Subtotal:                           $2,609.97
Tax (8.5%):                          $221.85
Total:                              $2,831.82

Payment Method: Credit Card ****1234
Thank you for shopping with us!

Return Policy: 30 days with receipt
Warranty Information: Products include manufacturer warranty
For warranty claims, visit support.apple.com"""


def sample_receipt_text(receipt_date: date | None = None) -> str:
    receipt_date = receipt_date or date.today()
    return _SAMPLE_RECEIPT.format(date=receipt_date.strftime("%m/%d/%Y"))


class MockOcrProvider(OcrProvider):
    """Return a fixed electronics-store receipt regardless of the image."""

    name = "mock"

    def __init__(self, delay: float = 2.0, receipt_date: date | None = None) -> None:
        self._delay = delay
        self._receipt_date = receipt_date

    async def extract_text(self, image: str | Path) -> ReceiptText:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        return ReceiptText.from_raw(
            sample_receipt_text(self._receipt_date), MOCK_CONFIDENCE
        )
