"""Data models for OCR output, extracted products and processing results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class ReceiptText:
    """Text recognized on a receipt image."""

    raw_text: str
    confidence: float  # OCR engine's own estimate, 0.0 to 1.0
    lines: tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw_text: str, confidence: float) -> ReceiptText:
        """Build from full text, dropping whitespace-only lines."""
        lines = tuple(line for line in raw_text.split("\n") if line.strip())
        return cls(raw_text=raw_text, confidence=confidence, lines=lines)

    @classmethod
    def empty(cls) -> ReceiptText:
        return cls(raw_text="", confidence=0.0, lines=())


@dataclass
class ExtractedProductInfo:
    """A product proposed by a parsing strategy."""

    name: str
    price: float | None = None
    product_type: str | None = None
    warranty_months: int | None = None
    purchase_date: str | None = None  # YYYY-MM-DD
    confidence: float = 0.0  # strategy trust score, not OCR confidence
    raw_data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class ReceiptProcessingResult:
    """Outcome of one receipt processing run.

    ``success`` is False exactly when ``error`` is set, in which case
    ``products`` is empty.  A successful run may still find no products.
    """

    text: ReceiptText
    products: list[ExtractedProductInfo] = field(default_factory=list)
    store: str | None = None
    total: float | None = None
    date: str | None = None
    receipt_date: str | None = None
    success: bool = True
    error: str | None = None
    used_fallback: bool = False

    @classmethod
    def failure(cls, message: str) -> ReceiptProcessingResult:
        return cls(
            text=ReceiptText.empty(),
            products=[],
            success=False,
            error=message or "Processing failed",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": {
                "raw_text": self.text.raw_text,
                "confidence": self.text.confidence,
                "lines": list(self.text.lines),
            },
            "products": [p.to_dict() for p in self.products],
            "store": self.store,
            "total": self.total,
            "date": self.date,
            "receipt_date": self.receipt_date,
            "success": self.success,
            "error": self.error,
            "used_fallback": self.used_fallback,
        }
