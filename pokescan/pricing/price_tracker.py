"""Pokemon Price Tracker client: TCGPlayer, CardMarket and eBay quotes in one call."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from rapidfuzz import fuzz

from ..core.constants import (
    API_TIMEOUT_S,
    COMMON_GRADES,
    POKEMON_PRICE_TRACKER_BASE,
    RETRYABLE_STATUS,
    SOURCE_CARDMARKET,
    SOURCE_EBAY,
    SOURCE_TCGPLAYER,
)
from ..core.types import CardInfo, GenericPrice, PriceSource
from ..utils.error_handler import NetworkError, PricingError
from ..utils.helpers import extract_card_number
from ..utils.log import LoggerMixin, get_logger
from ..utils.retry import retry
from ..utils.validation import coerce_price
from .sources import price_source_from_dict

logger = get_logger(__name__)


class PokemonPriceTrackerClient(LoggerMixin):

    def __init__(self, api_key: str, timeout: float = API_TIMEOUT_S,
                 base_url: str = POKEMON_PRICE_TRACKER_BASE):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    @retry(
        max_attempts=3,
        base_delay=0.5,
        exceptions=(NetworkError, aiohttp.ClientConnectionError, asyncio.TimeoutError),
        logger=logger,
    )
    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        await self._ensure_session()
        async with self.session.get(f"{self.base_url}{path}", params=params) as response:
            if response.status in RETRYABLE_STATUS:
                raise NetworkError("Price tracker temporarily unavailable", details={"status": response.status})
            response.raise_for_status()
            payload = await response.json()
        if payload.get("error"):
            raise PricingError(f"Price tracker error: {payload['error']}")
        return payload

    async def search_cards(self, name: str, limit: int = 10) -> List[Dict[str, Any]]:
        payload = await self._get("/prices", {"name": name, "limit": limit})
        return payload.get("data") or []

    @staticmethod
    def select_card(cards: List[Dict[str, Any]], card_info: CardInfo) -> Optional[Dict[str, Any]]:
        if not cards:
            return None
        number = card_info.card_number or extract_card_number(card_info.set_number)
        if number:
            exact = [c for c in cards if str(c.get("number", "")).strip() == number]
            if exact:
                cards = exact
        return max(cards, key=lambda c: fuzz.ratio(card_info.name.lower(), c.get("name", "").lower()))

    @staticmethod
    def to_sources(card: Dict[str, Any]) -> List[PriceSource]:
        """Split one tracker record into per-marketplace sources."""
        sources: List[PriceSource] = []
        name = card.get("name", "")

        tcg = card.get("tcgplayer") or {}
        tcg_prices = tcg.get("prices") or {}
        if tcg_prices:
            sources.append(price_source_from_dict({
                "source": SOURCE_TCGPLAYER,
                "cardName": name,
                "url": tcg.get("url", ""),
                "prices": tcg_prices,
            }))

        cardmarket = card.get("cardmarket") or {}
        cm_prices = {k: v for k, v in (cardmarket.get("prices") or {}).items()
                     if coerce_price(v) is not None}
        if cm_prices:
            sources.append(GenericPrice(
                source=SOURCE_CARDMARKET,
                card_name=name,
                url=cardmarket.get("url", ""),
                prices=cm_prices,
            ))

        ebay_prices = (card.get("ebay") or {}).get("prices") or {}
        if ebay_prices:
            graded = {grade: coerce_price(ebay_prices[grade])
                      for grade in COMMON_GRADES
                      if coerce_price(ebay_prices.get(grade)) is not None}
            raw = coerce_price(ebay_prices.get("raw"))
            sources.append(GenericPrice(
                source=SOURCE_EBAY,
                card_name=name,
                url="",
                prices={"raw": raw} if raw is not None else {},
                metadata={"graded": graded, "last_updated": card.get("lastUpdated")},
            ))

        return sources

    async def fetch_sources(self, card_info: CardInfo) -> List[PriceSource]:
        context = self.log_start("price_tracker_lookup", card_name=card_info.name)
        card = self.select_card(await self.search_cards(card_info.name), card_info)
        if card is None:
            self.log_success(context, found=False)
            return []
        sources = self.to_sources(card)
        self.log_success(context, found=True, sources=[s.source for s in sources])
        return sources

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None
