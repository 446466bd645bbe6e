"""Tests for OCR backends (mocked API calls)."""

import sys
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hwkeeper.config import load_config
from hwkeeper.models import ReceiptText
from hwkeeper.ocr import OcrError, create_provider, is_url
from hwkeeper.ocr.claude import ClaudeOcrProvider, strip_code_fences
from hwkeeper.ocr.gemini import GeminiOcrProvider
from hwkeeper.ocr.google_vision import GoogleVisionOcrProvider, _to_receipt_text
from hwkeeper.ocr.mock import MockOcrProvider, sample_receipt_text


class TestReceiptText:
    def test_from_raw_drops_blank_lines(self):
        text = ReceiptText.from_raw("Shop\n\n   \nMouse $5.00\n", 0.7)
        assert text.lines == ("Shop", "Mouse $5.00")
        assert text.raw_text == "Shop\n\n   \nMouse $5.00\n"
        assert text.confidence == 0.7

    def test_empty(self):
        text = ReceiptText.empty()
        assert text.raw_text == ""
        assert text.lines == ()
        assert text.confidence == 0.0


class TestCreateProvider:
    def test_auto_without_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_VISION_API_KEY", raising=False)
        assert isinstance(create_provider(load_config()), MockOcrProvider)

    def test_auto_with_key(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_VISION_API_KEY", "test-key")
        assert isinstance(create_provider(load_config()), GoogleVisionOcrProvider)

    @pytest.mark.parametrize(
        "backend, cls",
        [
            ("google_vision", GoogleVisionOcrProvider),
            ("claude", ClaudeOcrProvider),
            ("gemini", GeminiOcrProvider),
            ("mock", MockOcrProvider),
        ],
    )
    def test_explicit_backend(self, backend, cls):
        config = load_config()
        config.ocr.backend = backend
        provider = create_provider(config)
        assert isinstance(provider, cls)
        assert provider.name == backend

    def test_unknown_backend(self):
        config = load_config()
        config.ocr.backend = "unknown"
        with pytest.raises(ValueError, match="Unknown OCR backend"):
            create_provider(config)


def test_is_url():
    assert is_url("https://example.com/r.jpg")
    assert is_url("http://example.com/r.jpg")
    assert not is_url("/tmp/r.jpg")


class TestMockOcr:
    def test_sample_receipt_date(self):
        text = sample_receipt_text(date(2025, 2, 3))
        assert "Date: 02/03/2025" in text
        assert text.splitlines()[0] == "Best Buy"

    @pytest.mark.asyncio
    async def test_extract_text(self):
        provider = MockOcrProvider(delay=0, receipt_date=date(2025, 2, 3))
        text = await provider.extract_text("anything.png")
        assert text.confidence == 0.95
        assert "Apple Magic Mouse" in text.raw_text
        assert "" not in text.lines


class TestGoogleVision:
    def test_to_receipt_text(self):
        annotation = MagicMock(description="Shop\nMouse  $5.00", confidence=0.0)
        text = _to_receipt_text([annotation, MagicMock()])
        assert text.lines == ("Shop", "Mouse  $5.00")
        assert text.confidence == 0.8

    def test_to_receipt_text_no_annotations(self):
        assert _to_receipt_text([]) == ReceiptText.empty()

    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        provider = GoogleVisionOcrProvider(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await provider.extract_text("/tmp/test.jpg")

    @staticmethod
    def _sdk_modules(response=None, error=None):
        google_api_error = type("GoogleAPIError", (Exception,), {})

        mock_client = MagicMock()
        mock_client.__enter__.return_value = mock_client
        if error is not None:
            mock_client.text_detection.side_effect = google_api_error(error)
        else:
            mock_client.text_detection.return_value = response

        mock_vision = MagicMock()
        mock_vision.ImageAnnotatorClient.return_value = mock_client

        mock_exceptions = MagicMock()
        mock_exceptions.GoogleAPIError = google_api_error

        mock_google = MagicMock()
        mock_google.cloud.vision = mock_vision
        mock_google.api_core.exceptions = mock_exceptions

        modules = {
            "google": mock_google,
            "google.cloud": mock_google.cloud,
            "google.cloud.vision": mock_vision,
            "google.api_core": mock_google.api_core,
            "google.api_core.exceptions": mock_exceptions,
        }
        return modules, mock_vision, mock_client

    @pytest.mark.asyncio
    async def test_extract_text_mocked(self, tmp_path):
        img = tmp_path / "receipt.jpg"
        img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")

        response = MagicMock()
        response.error.message = ""
        response.text_annotations = [
            MagicMock(description="Best Buy\nApple Magic Mouse   $79.99", confidence=0.0)
        ]
        modules, mock_vision, mock_client = self._sdk_modules(response=response)

        with patch.dict(sys.modules, modules):
            provider = GoogleVisionOcrProvider(api_key="test-key")
            text = await provider.extract_text(str(img))

        assert text.lines == ("Best Buy", "Apple Magic Mouse   $79.99")
        mock_vision.ImageAnnotatorClient.assert_called_once_with(
            client_options={"api_key": "test-key"}
        )
        mock_vision.Image.assert_called_once_with(content=b"\xff\xd8\xff\xe0fake-jpeg")
        mock_client.text_detection.assert_called_once()
        mock_client.__exit__.assert_called_once()

    @pytest.mark.asyncio
    async def test_extract_text_from_url(self):
        response = MagicMock()
        response.error.message = ""
        response.text_annotations = []
        modules, mock_vision, _ = self._sdk_modules(response=response)

        with patch.dict(sys.modules, modules):
            provider = GoogleVisionOcrProvider(api_key="test-key")
            text = await provider.extract_text("https://example.com/r.jpg")

        mock_vision.ImageSource.assert_called_once_with(
            image_uri="https://example.com/r.jpg"
        )
        assert text == ReceiptText.empty()

    @pytest.mark.asyncio
    async def test_api_error_response(self, tmp_path):
        img = tmp_path / "receipt.jpg"
        img.write_bytes(b"fake")

        response = MagicMock()
        response.error.message = "Bad image data"
        modules, _, _ = self._sdk_modules(response=response)

        with patch.dict(sys.modules, modules):
            provider = GoogleVisionOcrProvider(api_key="test-key")
            with pytest.raises(OcrError, match="Bad image data"):
                await provider.extract_text(str(img))

    @pytest.mark.asyncio
    async def test_api_exception_wrapped(self, tmp_path):
        img = tmp_path / "receipt.jpg"
        img.write_bytes(b"fake")
        modules, _, _ = self._sdk_modules(error="quota exceeded")

        with patch.dict(sys.modules, modules):
            provider = GoogleVisionOcrProvider(api_key="test-key")
            with pytest.raises(OcrError, match="quota exceeded"):
                await provider.extract_text(str(img))


class TestStripCodeFences:
    def test_plain_text(self):
        assert strip_code_fences("  Shop\nMouse $5.00  ") == "Shop\nMouse $5.00"

    def test_fenced(self):
        assert strip_code_fences("```text\nShop\nMouse $5.00\n```") == "Shop\nMouse $5.00"


class TestClaudeOcr:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        provider = ClaudeOcrProvider(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await provider.extract_text("/tmp/test.jpg")

    @pytest.mark.asyncio
    async def test_extract_text_mocked(self, tmp_path):
        img = tmp_path / "receipt.png"
        img.write_bytes(b"\x89PNGfake-png")

        mock_response = MagicMock()
        mock_response.content = [
            MagicMock(text="```\nMicro Center\nLogitech MX Master 3    $99.99\n```")
        ]

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            provider = ClaudeOcrProvider(api_key="test-key", model="claude-test")
            text = await provider.extract_text(str(img))

        assert text.lines == ("Micro Center", "Logitech MX Master 3    $99.99")
        assert text.confidence == 0.9

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        source = kwargs["messages"][0]["content"][0]["source"]
        assert source["type"] == "base64"
        assert source["media_type"] == "image/png"

    @pytest.mark.asyncio
    async def test_url_image_source(self):
        mock_response = MagicMock()
        mock_response.content = [MagicMock(text="Shop")]
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)
        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            provider = ClaudeOcrProvider(api_key="test-key")
            await provider.extract_text("https://example.com/r.jpg")

        kwargs = mock_client.messages.create.call_args.kwargs
        source = kwargs["messages"][0]["content"][0]["source"]
        assert source == {"type": "url", "url": "https://example.com/r.jpg"}


class TestGeminiOcr:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        provider = GeminiOcrProvider(api_key="")
        with pytest.raises(ValueError, match="API key"):
            await provider.extract_text("/tmp/test.jpg")

    @pytest.mark.asyncio
    async def test_rejects_url(self):
        provider = GeminiOcrProvider(api_key="test-key")
        with pytest.raises(OcrError, match="local image files"):
            await provider.extract_text("https://example.com/r.jpg")

    @pytest.mark.asyncio
    async def test_extract_text_mocked(self, tmp_path):
        img = tmp_path / "receipt.jpg"
        img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")

        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            return_value=MagicMock(text="Shop\nWebcam  $49.00")
        )
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock()
        mock_google.generativeai = mock_genai

        with patch.dict(
            sys.modules, {"google": mock_google, "google.generativeai": mock_genai}
        ):
            provider = GeminiOcrProvider(api_key="test-key", model="gemini-test")
            text = await provider.extract_text(str(img))

        assert text.lines == ("Shop", "Webcam  $49.00")
        mock_genai.configure.assert_called_once_with(api_key="test-key")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-test")
        parts = mock_model.generate_content_async.call_args.args[0]
        assert parts[0] == {"mime_type": "image/jpeg", "data": b"\xff\xd8\xff\xe0fake-jpeg"}
