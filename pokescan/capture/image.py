"""Load card photos from disk as the pipeline's image input."""

import base64
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..core.types import ImageData
from ..utils.error_handler import ImageError
from ..utils.log import get_logger

logger = get_logger(__name__)


def load_image(path: Union[str, Path]) -> ImageData:
    """Read an image file and return it base64-encoded with its dimensions."""
    path = Path(path)
    if not path.is_file():
        raise ImageError("Image file not found", details={"path": str(path)})

    raw = path.read_bytes()
    frame = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise ImageError("Could not decode image", details={"path": str(path)})

    height, width = frame.shape[:2]
    logger.debug("Image loaded", path=str(path), width=width, height=height)
    return ImageData(
        uri=path.resolve().as_uri(),
        base64=base64.b64encode(raw).decode("ascii"),
        width=width,
        height=height,
    )
