"""Gemini API backend that transcribes receipt photos."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from ..models import ReceiptText
from . import OcrError, OcrProvider, is_url
from .claude import TRANSCRIBE_PROMPT, TRANSCRIPTION_CONFIDENCE, strip_code_fences


class GeminiOcrProvider(OcrProvider):
    """Read receipt text using Google Gemini's vision capability."""

    name = "gemini"

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def extract_text(self, image: str | Path) -> ReceiptText:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not configured. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )
        if is_url(image):
            raise OcrError("Gemini backend only reads local image files")

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install 'hardware-keeper[gemini]'"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        data = Path(image).read_bytes()
        mime_type = mimetypes.guess_type(str(image))[0] or "image/jpeg"
        parts = [{"mime_type": mime_type, "data": data}, TRANSCRIBE_PROMPT]

        response = await model.generate_content_async(parts)
        return ReceiptText.from_raw(
            strip_code_fences(response.text), TRANSCRIPTION_CONFIDENCE
        )
