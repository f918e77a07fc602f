"""OCR package: card-text parsing and OCR collaborators."""

from .mock import MockOCRService, generate_mock_card_info
from .parser import parse_card_info
from .regexes import SET_NUMBER_PATTERN, TYPE_PATTERN, parse_set_number
from .vision import GoogleVisionOCR

__all__ = [
    "parse_card_info",
    "parse_set_number",
    "SET_NUMBER_PATTERN",
    "TYPE_PATTERN",
    "GoogleVisionOCR",
    "MockOCRService",
    "generate_mock_card_info",
]
