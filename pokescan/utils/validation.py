"""
Input validation and sanitization utilities.

These helpers keep malformed image payloads and price values from reaching
the OCR collaborators and the price normalizer.
"""

import base64
import binascii
import math
import re
from typing import Any, Optional

from .error_handler import ImageError

DATA_URL_PREFIX = re.compile(r'^data:image/[a-z]+;base64,', re.IGNORECASE)


def clean_base64_image(payload: Optional[str]) -> str:
    """
    Strip any data-URL prefix from a base64 image payload and check it decodes.

    Args:
        payload: Base64 text, optionally prefixed with ``data:image/...;base64,``

    Returns:
        The bare base64 text

    Raises:
        ImageError: If the payload is empty or not valid base64
    """
    if not payload or not isinstance(payload, str):
        raise ImageError("Invalid image data provided", details={"reason": "empty payload"})

    cleaned = DATA_URL_PREFIX.sub('', payload.strip())
    if not cleaned:
        raise ImageError("Invalid image data provided", details={"reason": "empty payload"})

    try:
        base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageError(
            "Invalid image data provided",
            details={"reason": "not base64", "error": str(e)}
        )

    return cleaned


def decode_base64_image(payload: Optional[str]) -> bytes:
    """Decode a (possibly data-URL prefixed) base64 image payload to bytes."""
    return base64.b64decode(clean_base64_image(payload))


def coerce_price(value: Any) -> Optional[float]:
    """
    Convert a quoted price to float.

    Returns None for missing, boolean, non-numeric, NaN or infinite values so
    callers can treat "absent" uniformly. Zero and negative numbers are
    returned as-is; whether they count is the caller's decision.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number

