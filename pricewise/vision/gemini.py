"""Gemini API vision backend for price-tag reading."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from ..models import ProductInfo
from . import PROMPT, VisionBackend, parse_product_response


class GeminiVisionBackend(VisionBackend):
    """Read price tags using Google Gemini's vision capability."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def analyze_tag(self, image_path: str) -> ProductInfo:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        data = Path(image_path).read_bytes()
        mime_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"
        parts = [{"mime_type": mime_type, "data": data}, PROMPT]

        response = await model.generate_content_async(
            parts,
            generation_config={"response_mime_type": "application/json"},
        )
        return parse_product_response(response.text)
