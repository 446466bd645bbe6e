"""Claude API backend that transcribes receipt photos."""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path

from ..models import ReceiptText
from . import OcrProvider, is_url

TRANSCRIPTION_CONFIDENCE = 0.9

TRANSCRIBE_PROMPT = """\
This image is a photo of a purchase receipt.
Transcribe all of the text on the receipt exactly as printed, one receipt
line per output line, keeping prices and the spacing between item names and
prices on the same line. Do not summarize, translate or add anything else.
"""


class ClaudeOcrProvider(OcrProvider):
    """Read receipt text using Claude's vision capability."""

    name = "claude"

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def extract_text(self, image: str | Path) -> ReceiptText:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not configured. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install 'hardware-keeper[claude]'"
            ) from None

        if is_url(image):
            source = {"type": "url", "url": str(image)}
        else:
            data = Path(image).read_bytes()
            media_type = mimetypes.guess_type(str(image))[0] or "image/jpeg"
            source = {
                "type": "base64",
                "media_type": media_type,
                "data": base64.standard_b64encode(data).decode(),
            }

        content = [
            {"type": "image", "source": source},
            {"type": "text", "text": TRANSCRIBE_PROMPT},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=4096,
            messages=[{"role": "user", "content": content}],
        )

        text = strip_code_fences(response.content[0].text)
        return ReceiptText.from_raw(text, TRANSCRIPTION_CONFIDENCE)


def strip_code_fences(text: str) -> str:
    """Remove surrounding markdown fences from a model response."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        # Remove first and last fence lines
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned
