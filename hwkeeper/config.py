"""TOML configuration loader for Hardware Keeper."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GoogleVisionConfig:
    api_key: str = ""


@dataclass
class ClaudeOcrConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiOcrConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class OcrConfig:
    backend: str = "auto"
    fallback_to_mock: bool = True
    mock_delay: float = 2.0
    google_vision: GoogleVisionConfig = field(default_factory=GoogleVisionConfig)
    claude: ClaudeOcrConfig = field(default_factory=ClaudeOcrConfig)
    gemini: GeminiOcrConfig = field(default_factory=GeminiOcrConfig)


@dataclass
class ProcessingConfig:
    simulated_delay: float = 1.5


@dataclass
class DatabaseConfig:
    path: str = "~/.config/hwkeeper/products.db"


@dataclass
class KeeperConfig:
    ocr: OcrConfig = field(default_factory=OcrConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def load_config(path: str | Path | None = None) -> KeeperConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ocr = raw.get("ocr", {})
    prc = raw.get("processing", {})
    dbs = raw.get("database", {})

    vision_cfg = ocr.get("google_vision", {})
    claude_cfg = ocr.get("claude", {})
    gemini_cfg = ocr.get("gemini", {})

    # Resolve API keys: config file → environment variable
    vision_api_key = vision_cfg.get("api_key", "") or os.environ.get(
        "GOOGLE_VISION_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    return KeeperConfig(
        ocr=OcrConfig(
            backend=ocr.get("backend", "auto"),
            fallback_to_mock=ocr.get("fallback_to_mock", True),
            mock_delay=float(ocr.get("mock_delay", 2.0)),
            google_vision=GoogleVisionConfig(api_key=vision_api_key),
            claude=ClaudeOcrConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiOcrConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        processing=ProcessingConfig(
            simulated_delay=float(prc.get("simulated_delay", 1.5)),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/hwkeeper/products.db"),
        ),
    )
