"""Collaborator interfaces the scan pipeline depends on."""

from typing import List, Optional, Protocol, runtime_checkable

from ..core.types import CardInfo, CardPrices, PriceSource, ValidatedCard


@runtime_checkable
class OCRService(Protocol):
    async def extract_text(self, base64_image: str) -> Optional[CardInfo]:
        """Structured card text, or None when the image holds no text."""
        ...


@runtime_checkable
class CardValidator(Protocol):
    async def validate(self, name: str, set_number: Optional[str] = None) -> Optional[ValidatedCard]:
        """Official database record, or None on a miss."""
        ...


@runtime_checkable
class PricingService(Protocol):
    async def get_prices(self, card_info: CardInfo) -> Optional[CardPrices]:
        ...


@runtime_checkable
class PriceProvider(Protocol):
    """One marketplace feed consumed by the price aggregator."""

    async def fetch_sources(self, card_info: CardInfo) -> List[PriceSource]:
        ...
