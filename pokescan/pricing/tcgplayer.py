"""TCGPlayer catalog and pricing client."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.constants import (
    API_TIMEOUT_S,
    RETRYABLE_STATUS,
    TCGPLAYER_BASE,
    TCGPLAYER_POKEMON_CATEGORY,
)
from ..core.types import CardInfo, PriceSource, TCGPlayerPrice
from ..utils.error_handler import NetworkError, PricingError
from ..utils.helpers import is_valid_set_number
from ..utils.log import LoggerMixin, get_logger
from ..utils.retry import retry
from ..utils.validation import coerce_price

logger = get_logger(__name__)


class TCGPlayerClient(LoggerMixin):
    """Looks a card up in the TCGPlayer catalog and returns its Normal-printing quote."""

    def __init__(self, api_key: str, timeout: float = API_TIMEOUT_S,
                 base_url: str = TCGPLAYER_BASE):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={"Authorization": f"Bearer {self.api_key}"},
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
                raise NetworkError("TCGPlayer temporarily unavailable", details={"status": response.status})
            response.raise_for_status()
            payload = await response.json()
        if payload.get("success") is False:
            raise PricingError("TCGPlayer rejected the request", details={"errors": payload.get("errors") or []})
        return payload

    @staticmethod
    def select_product(products: List[Dict[str, Any]], set_number: str) -> Optional[Dict[str, Any]]:
        """Prefer the product whose extended "Number" field equals the set number."""
        if not products:
            return None
        if is_valid_set_number(set_number):
            for product in products:
                for data in product.get("extendedData") or []:
                    if data.get("name") == "Number" and data.get("value") == set_number:
                        return product
        return products[0]

    async def fetch_sources(self, card_info: CardInfo) -> List[PriceSource]:
        context = self.log_start("tcgplayer_price", card_name=card_info.name)

        search = await self._get(
            "/catalog/products",
            {
                "categoryId": TCGPLAYER_POKEMON_CATEGORY,
                "productName": card_info.name,
                "limit": 10,
            },
        )
        product = self.select_product(search.get("results") or [], card_info.set_number)
        if product is None:
            self.log_success(context, found=False)
            return []

        pricing = await self._get(f"/pricing/product/{product['productId']}")
        normal = [p for p in pricing.get("results") or [] if p.get("subTypeName") == "Normal"]
        if not normal:
            self.log_success(context, found=False, product_id=product["productId"])
            return []

        quote = normal[0]
        price = TCGPlayerPrice(
            card_name=product.get("name", card_info.name),
            url=f"https://www.tcgplayer.com/product/{product['productId']}",
            low=coerce_price(quote.get("lowPrice")) or 0.0,
            mid=coerce_price(quote.get("midPrice")) or 0.0,
            high=coerce_price(quote.get("highPrice")) or 0.0,
            market=coerce_price(quote.get("marketPrice")) or 0.0,
            product_id=product["productId"],
        )
        self.log_success(context, found=True, market=price.market)
        return [price]

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None
