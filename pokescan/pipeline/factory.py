"""Composition root: picks real or mock collaborators from settings."""

from typing import List, Optional

from ..ocr import GoogleVisionOCR, MockOCRService
from ..pricing import (
    MockPriceProvider,
    PokemonPriceTrackerClient,
    PriceAggregator,
    TCGPlayerClient,
)
from ..resolve import PokemonTCGResolver
from ..utils.config import Settings, settings as default_settings
from ..utils.error_handler import ConfigurationError
from ..utils.log import get_logger
from .protocols import OCRService, PriceProvider
from .scanner import ProgressCallback, ScanPipeline

logger = get_logger(__name__)


def build_ocr_service(config: Settings) -> OCRService:
    backend = config.OCR_BACKEND
    if backend == "auto":
        backend = "vision" if config.vision_configured else "mock"

    if backend == "vision":
        if not config.vision_configured:
            raise ConfigurationError("OCR_BACKEND=vision requires GOOGLE_VISION_API_KEY")
        return GoogleVisionOCR(config.GOOGLE_VISION_API_KEY, timeout=config.API_TIMEOUT_SECONDS)
    if backend == "tesseract":
        # Imported lazily so cv2/pytesseract load only when selected
        from ..ocr.tesseract import TesseractOCR
        try:
            return TesseractOCR(config)
        except FileNotFoundError as e:
            raise ConfigurationError(str(e), details={"backend": "tesseract"}) from e

    logger.info("Using mock OCR service")
    return MockOCRService()


def build_validator(config: Settings) -> PokemonTCGResolver:
    return PokemonTCGResolver(config.POKEMON_TCG_API_KEY, timeout=config.API_TIMEOUT_SECONDS)


def build_price_providers(config: Settings) -> List[PriceProvider]:
    if config.mock_prices_enabled:
        logger.info("Using mock price providers")
        return [MockPriceProvider()]

    providers: List[PriceProvider] = []
    if config.tcgplayer_configured:
        providers.append(TCGPlayerClient(config.TCGPLAYER_API_KEY, timeout=config.API_TIMEOUT_SECONDS))
    if config.price_tracker_configured:
        providers.append(PokemonPriceTrackerClient(
            config.POKEMON_PRICE_TRACKER_API_KEY, timeout=config.API_TIMEOUT_SECONDS
        ))
    if not providers:
        logger.warning("Mock prices disabled but no pricing API key is configured")
    return providers


def build_pricing_service(config: Settings) -> PriceAggregator:
    return PriceAggregator(build_price_providers(config))


def build_pipeline(config: Optional[Settings] = None,
                   on_progress: Optional[ProgressCallback] = None) -> ScanPipeline:
    config = config or default_settings
    return ScanPipeline(
        ocr=build_ocr_service(config),
        validator=build_validator(config),
        pricing=build_pricing_service(config),
        on_progress=on_progress,
        timeout=config.API_TIMEOUT_SECONDS,
    )
