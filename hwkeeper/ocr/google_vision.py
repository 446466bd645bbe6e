"""Google Cloud Vision text detection backend."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..models import ReceiptText
from . import OcrError, OcrProvider, is_url

logger = logging.getLogger(__name__)

# Vision rarely reports a confidence for the full-text annotation
DEFAULT_CONFIDENCE = 0.8


class GoogleVisionOcrProvider(OcrProvider):
    """Recognize receipt text with the Cloud Vision TEXT_DETECTION feature."""

    name = "google_vision"

    def __init__(self, api_key: str = "") -> None:
        self._api_key = api_key

    async def extract_text(self, image: str | Path) -> ReceiptText:
        if not self._api_key:
            raise ValueError(
                "Google Vision API key is not configured. "
                "Check the config file or the GOOGLE_VISION_API_KEY environment variable."
            )

        try:
            from google.api_core.exceptions import GoogleAPIError
            from google.cloud import vision
        except ImportError:
            raise ImportError(
                "google-cloud-vision is required: pip install 'hardware-keeper[google]'"
            ) from None

        if is_url(image):
            vision_image = vision.Image(source=vision.ImageSource(image_uri=str(image)))
        else:
            vision_image = vision.Image(content=Path(image).read_bytes())

        with vision.ImageAnnotatorClient(
            client_options={"api_key": self._api_key}
        ) as client:
            try:
                response = await asyncio.to_thread(
                    client.text_detection, image=vision_image
                )
            except GoogleAPIError as e:
                raise OcrError(f"OCR failed: {e}") from e

        if response.error.message:
            raise OcrError(f"Google Vision API error: {response.error.message}")

        return _to_receipt_text(response.text_annotations)


def _to_receipt_text(annotations) -> ReceiptText:
    """Build ReceiptText from Vision text annotations.

    The first annotation holds the whole detected text.
    """
    if not annotations:
        return ReceiptText.empty()

    full_text = annotations[0].description or ""
    confidence = annotations[0].confidence or DEFAULT_CONFIDENCE
    logger.info("Google Vision returned %d characters", len(full_text))
    return ReceiptText.from_raw(full_text, confidence)
