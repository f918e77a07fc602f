"""Pokemon Card Scanner - Read, verify and price Pokemon cards from a photo."""

__version__ = "1.0.0"
__description__ = "OCR card parsing, authenticity scoring and multi-marketplace pricing"

from .authenticity import score_authenticity
from .core.types import CardInfo, CardPrices, ImageData, ScanResult, ScanStage
from .ocr import parse_card_info
from .pipeline import ScanPipeline, build_pipeline
from .pricing import best_market_price, summarize_prices
from .utils.config import settings
from .utils.log import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__description__",
    # Core components
    "configure_logging",
    "get_logger",
    "settings",
    "parse_card_info",
    "score_authenticity",
    "best_market_price",
    "summarize_prices",
    "ScanPipeline",
    "build_pipeline",
    "CardInfo",
    "CardPrices",
    "ImageData",
    "ScanResult",
    "ScanStage",
]
