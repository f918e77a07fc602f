"""Offline OCR collaborator backed by a local Tesseract install."""

import asyncio
from typing import Optional

import cv2
import numpy as np
import pytesseract

from ..core.types import CardInfo
from ..utils.config import Settings, ensure_tesseract
from ..utils.error_handler import ImageError
from ..utils.log import LoggerMixin
from ..utils.validation import decode_base64_image
from .parser import parse_card_info


class TesseractOCR(LoggerMixin):
    """Runs Tesseract over the whole card image and parses the result."""

    def __init__(self, config: Optional[Settings] = None):
        self.tesseract_path = ensure_tesseract(config)
        pytesseract.pytesseract.tesseract_cmd = self.tesseract_path

        self.logger.info("Tesseract OCR initialized", tesseract_path=self.tesseract_path)

    @staticmethod
    def decode_image(base64_image: str) -> np.ndarray:
        raw = np.frombuffer(decode_base64_image(base64_image), dtype=np.uint8)
        image = cv2.imdecode(raw, cv2.IMREAD_COLOR)
        if image is None:
            raise ImageError("Invalid image data provided", details={"reason": "undecodable image"})
        return image

    def preprocess(self, image: np.ndarray) -> np.ndarray:
        """Grayscale, light denoising and adaptive threshold for text contrast."""
        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image

        filtered = cv2.bilateralFilter(gray, 9, 75, 75)

        return cv2.adaptiveThreshold(
            filtered, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
        )

    def _recognize(self, base64_image: str) -> str:
        image = self.decode_image(base64_image)
        # Block of text: the card is read top to bottom
        return pytesseract.image_to_string(self.preprocess(image), config="--psm 4")

    async def extract_text(self, base64_image: str) -> Optional[CardInfo]:
        context = self.log_start("tesseract_ocr")
        try:
            text = await asyncio.to_thread(self._recognize, base64_image)
        except Exception as e:
            self.log_error(context, e)
            raise

        if not text.strip():
            self.log_success(context, text_found=False)
            return None

        card_info = parse_card_info(text)
        self.log_success(context, text_found=True, name=card_info.name)
        return card_info
