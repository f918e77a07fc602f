"""Mock marketplace quotes, used when no pricing API is configured."""

import random
from typing import Dict, List, Optional
from urllib.parse import quote

from ..core.types import CardInfo, CardKingdomPrice, PriceSource, TCGPlayerPrice
from ..utils.log import LoggerMixin

MOCK_PRICE_RANGES: Dict[str, Dict[str, float]] = {
    'common': {'low': 0.25, 'mid': 0.50, 'high': 1.00},
    'uncommon': {'low': 0.50, 'mid': 1.00, 'high': 2.00},
    'rare': {'low': 2.00, 'mid': 5.00, 'high': 10.00},
    'rare holo': {'low': 5.00, 'mid': 15.00, 'high': 30.00},
    'ultra rare': {'low': 20.00, 'mid': 50.00, 'high': 100.00},
}


class MockPriceProvider(LoggerMixin):
    """Rarity-banded random TCGPlayer and Card Kingdom quotes."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def tcgplayer_quote(self, card_name: str, rarity: str = "") -> TCGPlayerPrice:
        band = MOCK_PRICE_RANGES.get((rarity or 'rare').lower(), MOCK_PRICE_RANGES['rare'])
        multiplier = 0.8 + self.rng.random() * 0.4
        return TCGPlayerPrice(
            card_name=card_name,
            url=f"https://www.tcgplayer.com/search/pokemon/product?productName={quote(card_name)}",
            low=round(band['low'] * multiplier, 2),
            mid=round(band['mid'] * multiplier, 2),
            high=round(band['high'] * multiplier, 2),
            market=round(band['mid'] * multiplier, 2),
            product_id=self.rng.randint(1, 99999),
        )

    def card_kingdom_quote(self, card_name: str, market: float) -> CardKingdomPrice:
        adjusted = market * (0.9 + self.rng.random() * 0.2)
        return CardKingdomPrice(
            card_name=card_name,
            url=f"https://www.cardkingdom.com/catalog/search?filter%5Bname%5D={quote(card_name)}",
            nm=round(adjusted, 2),
            lp=round(adjusted * 0.85, 2),
            mp=round(adjusted * 0.65, 2),
            hp=round(adjusted * 0.45, 2),
            in_stock=self.rng.random() > 0.2,
        )

    async def fetch_sources(self, card_info: CardInfo) -> List[PriceSource]:
        tcg = self.tcgplayer_quote(card_info.name, card_info.rarity)
        ck = self.card_kingdom_quote(card_info.name, tcg.market)
        self.logger.info("Using mock price data", card_name=card_info.name)
        return [tcg, ck]
