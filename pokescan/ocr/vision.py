"""Google Cloud Vision OCR collaborator."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from ..core.constants import API_TIMEOUT_S, GOOGLE_VISION_URL, RETRYABLE_STATUS
from ..core.types import CardInfo
from ..utils.error_handler import NetworkError, OCRError
from ..utils.log import LoggerMixin, get_logger
from ..utils.retry import retry
from ..utils.validation import clean_base64_image
from .parser import parse_card_info

logger = get_logger(__name__)


class GoogleVisionOCR(LoggerMixin):
    """Extracts card text with the Vision API TEXT_DETECTION feature."""

    def __init__(self, api_key: str, timeout: float = API_TIMEOUT_S,
                 url: str = GOOGLE_VISION_URL):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    @staticmethod
    def build_request(base64_image: str) -> Dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64_image},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }

    @retry(
        max_attempts=3,
        base_delay=0.5,
        exceptions=(NetworkError, aiohttp.ClientConnectionError, asyncio.TimeoutError),
        logger=logger,
    )
    async def _annotate(self, body: Dict[str, Any]) -> Dict[str, Any]:
        await self._ensure_session()
        async with self.session.post(self.url, params={"key": self.api_key}, json=body) as response:
            if response.status in RETRYABLE_STATUS:
                raise NetworkError(
                    "Vision API temporarily unavailable",
                    details={"status": response.status},
                )
            if response.status >= 400:
                payload = await response.json(content_type=None)
                message = (payload or {}).get("error", {}).get("message", "request rejected")
                raise OCRError(f"Vision API error: {message}", details={"status": response.status})
            return await response.json()

    @staticmethod
    def extract_description(payload: Dict[str, Any]) -> Optional[str]:
        """Pull the full-text annotation out of an annotate response."""
        responses = payload.get("responses") or []
        if not responses:
            return None
        first = responses[0]
        if "error" in first:
            raise OCRError(f"Vision API error: {first['error'].get('message', first['error'])}")
        annotations = first.get("textAnnotations") or []
        if not annotations:
            return None
        return annotations[0].get("description") or None

    async def extract_text(self, base64_image: str) -> Optional[CardInfo]:
        """Run OCR on a base64 image; None when the image holds no text."""
        cleaned = clean_base64_image(base64_image)
        context = self.log_start("vision_ocr", payload_length=len(cleaned))

        try:
            payload = await self._annotate(self.build_request(cleaned))
            text = self.extract_description(payload)
        except Exception as e:
            self.log_error(context, e)
            raise

        if text is None:
            self.logger.warning("No text found in image")
            self.log_success(context, text_found=False)
            return None

        card_info = parse_card_info(text)
        self.log_success(context, text_found=True, name=card_info.name)
        return card_info

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None
