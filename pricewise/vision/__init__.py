"""Vision backend base class, response parsing, and factory."""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..models import ProductInfo, UnitCategory

if TYPE_CHECKING:
    from ..config import PriceWiseConfig

PROMPT = """\
Analyze this grocery item or price tag.
Extract the product name, brand, total price, quantity, and unit.
Be accurate with weights and currency.
Categorize it as "weight", "volume", or "count".

Return only a JSON object of this form (no other text):
{"name": "...", "brand": "...", "price": 0.0, "quantity": 0.0,
 "unit": "g | kg | ml | l | oz | lb | fl oz | unit", "category": "weight | volume | count"}
"""

_REQUIRED_FIELDS = ("name", "price", "quantity", "unit")


class AnalysisError(Exception):
    """The vision service returned nothing usable for a price tag."""


class VisionBackend(ABC):
    """Abstract base for reading price tags from images."""

    @abstractmethod
    async def analyze_tag(self, image_path: str) -> ProductInfo:
        """Read one price-tag image.

        Raises:
            AnalysisError: If the response lacks a usable price or unit.
        """
        ...


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _number(data: dict, key: str) -> float:
    value = data[key]
    if isinstance(value, bool):
        raise AnalysisError(f"{key} is not a number: {value!r}")
    if isinstance(value, str):
        value = value.strip().lstrip("$€£¥")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise AnalysisError(f"{key} is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise AnalysisError(f"{key} is not finite: {value!r}")
    return number


def parse_product_response(text: str | None) -> ProductInfo:
    """Parse the JSON object returned by a vision model.

    Markdown fences are stripped and a single-element array is unwrapped.

    Raises:
        AnalysisError: On empty, malformed, or incomplete responses.
    """
    if not text or not text.strip():
        raise AnalysisError("empty response")

    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"response is not JSON: {e}") from e

    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise AnalysisError("response is not a JSON object")

    missing = [k for k in _REQUIRED_FIELDS if data.get(k) in (None, "")]
    if missing:
        raise AnalysisError(f"missing fields: {', '.join(missing)}")

    name = str(data["name"]).strip()
    unit = str(data["unit"]).strip()
    if not name or not unit:
        raise AnalysisError("name and unit must not be blank")

    price = _number(data, "price")
    quantity = _number(data, "quantity")
    if price < 0:
        raise AnalysisError(f"negative price: {price}")
    if quantity <= 0:
        raise AnalysisError(f"non-positive quantity: {quantity}")

    try:
        category = UnitCategory(str(data.get("category", "")).lower())
    except ValueError:
        category = None

    brand = str(data.get("brand") or "").strip() or None

    return ProductInfo(
        name=name,
        brand=brand,
        price=price,
        quantity=quantity,
        unit=unit,
        category=category,
    )


def create_backend(config: PriceWiseConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case _:
            raise ValueError(
                f"Unknown vision backend: {backend_name!r} "
                f"(choose gemini or claude)"
            )
