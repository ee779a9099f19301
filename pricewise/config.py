"""TOML configuration loader for PriceWise."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import Scale

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class CameraConfig:
    indices: list[int] = field(default_factory=lambda: [0])
    save_dir: str = "/tmp/pricewise"
    jpeg_quality: int = 80
    warmup_frames: int = 3


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class VisionConfig:
    backend: str = "gemini"
    max_concurrency: int = 4  # 0 = unbounded
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)


@dataclass
class CompareConfig:
    scale: Scale = Scale.SMALL
    currency: str = "$"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class PriceWiseConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    compare: CompareConfig = field(default_factory=CompareConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_scale(value: str | Scale) -> Scale:
    try:
        return Scale(str(getattr(value, "value", value)).lower())
    except ValueError:
        raise ValueError(
            f"Unknown comparison scale: {value!r} (choose small or large)"
        ) from None


def load_config(path: str | Path | None = None) -> PriceWiseConfig:
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

    cam = raw.get("camera", {})
    vis = raw.get("vision", {})
    cmp_ = raw.get("compare", {})
    log = raw.get("logging", {})

    gemini_cfg = vis.get("gemini", {})
    claude_cfg = vis.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return PriceWiseConfig(
        camera=CameraConfig(
            indices=cam.get("indices", [0]),
            save_dir=cam.get("save_dir", "/tmp/pricewise"),
            jpeg_quality=cam.get("jpeg_quality", 80),
            warmup_frames=cam.get("warmup_frames", 3),
        ),
        vision=VisionConfig(
            backend=vis.get("backend", "gemini"),
            max_concurrency=vis.get("max_concurrency", 4),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        compare=CompareConfig(
            scale=parse_scale(cmp_.get("scale", "small")),
            currency=cmp_.get("currency", "$"),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "WARNING")).upper(),
        ),
    )
