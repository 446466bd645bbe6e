"""OCR provider base class, errors, and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import ReceiptText

if TYPE_CHECKING:
    from ..config import KeeperConfig


class OcrError(RuntimeError):
    """Raised when an OCR backend cannot turn an image into text."""


class OcrProvider(ABC):
    """Abstract base for receipt text recognition."""

    name: str = "ocr"

    @abstractmethod
    async def extract_text(self, image: str | Path) -> ReceiptText:
        """Recognize the text on a receipt image.

        ``image`` is a local file path or an ``http(s)://`` URL.
        """
        ...


def is_url(image: str | Path) -> bool:
    return isinstance(image, str) and image.startswith(("http://", "https://"))


def create_provider(config: KeeperConfig) -> OcrProvider:
    """Create an OCR provider based on configuration.

    ``auto`` picks Google Vision when an API key is configured and the
    bundled sample receipt otherwise.
    """
    backend_name = config.ocr.backend

    if backend_name == "auto":
        backend_name = "google_vision" if config.ocr.google_vision.api_key else "mock"

    match backend_name:
        case "google_vision":
            from .google_vision import GoogleVisionOcrProvider

            return GoogleVisionOcrProvider(api_key=config.ocr.google_vision.api_key)
        case "claude":
            from .claude import ClaudeOcrProvider

            return ClaudeOcrProvider(
                api_key=config.ocr.claude.api_key,
                model=config.ocr.claude.model,
            )
        case "gemini":
            from .gemini import GeminiOcrProvider

            return GeminiOcrProvider(
                api_key=config.ocr.gemini.api_key,
                model=config.ocr.gemini.model,
            )
        case "mock":
            from .mock import MockOcrProvider

            return MockOcrProvider(delay=config.ocr.mock_delay)
        case _:
            raise ValueError(
                f"Unknown OCR backend: {backend_name!r} "
                "(choose auto / google_vision / claude / gemini / mock)"
            )


__all__ = ["OcrError", "OcrProvider", "create_provider", "is_url"]
