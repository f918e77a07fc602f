"""Pokemon TCG API integration for card validation."""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp
from rapidfuzz import fuzz

from ..core.constants import (
    API_TIMEOUT_S,
    BACKOFF_S,
    POKEMON_TCG_BASE,
    RATE_LIMIT_INTERVAL_S,
    RETRYABLE_STATUS,
)
from ..core.types import ValidatedCard
from ..utils.error_handler import ErrorContext, ResolutionError, handle_error
from ..utils.helpers import extract_card_number
from ..utils.log import LoggerMixin


class PokemonTCGResolver(LoggerMixin):
    """Looks OCR'd cards up in the Pokemon TCG card database."""

    def __init__(self, api_key: Optional[str] = None, timeout: float = API_TIMEOUT_S,
                 base_url: str = POKEMON_TCG_BASE):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.min_request_interval = RATE_LIMIT_INTERVAL_S
        self.session: Optional[aiohttp.ClientSession] = None
        self.last_request_time = 0.0

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            headers = {"X-Api-Key": self.api_key} if self.api_key else {}
            self.session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def _rate_limit(self) -> None:
        """Apply rate limiting between requests."""
        loop = asyncio.get_running_loop()
        time_since_last = loop.time() - self.last_request_time

        if time_since_last < self.min_request_interval:
            await asyncio.sleep(self.min_request_interval - time_since_last)

        self.last_request_time = loop.time()

    async def _request_with_backoff(self, url: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """GET with backoff on 429/5xx; the last retryable status is raised."""
        await self._ensure_session()
        await self._rate_limit()

        for attempt, delay in enumerate([0.0, *BACKOFF_S]):
            if delay > 0:
                await asyncio.sleep(delay)

            async with self.session.get(url, params=params) as response:
                if response.status in RETRYABLE_STATUS and attempt < len(BACKOFF_S):
                    self.logger.warning(
                        "Retryable response from card database",
                        status=response.status,
                        attempt=attempt + 1,
                    )
                    continue
                response.raise_for_status()
                return await response.json()

        raise ResolutionError("All retry attempts failed", details={"url": url})

    @staticmethod
    def parse_card_data(card_data: Dict[str, Any]) -> Optional[ValidatedCard]:
        """Parse one raw API card; None when required fields are missing."""
        try:
            card_set = card_data["set"]
            return ValidatedCard(
                card_id=card_data["id"],
                name=card_data["name"],
                number=str(card_data.get("number", "")),
                set_name=card_set["name"],
                set_id=card_set["id"],
                rarity=card_data.get("rarity"),
                images=card_data.get("images") or {},
                set_series=card_set.get("series"),
                set_printed_total=card_set.get("printedTotal"),
                raw_tcgplayer=card_data.get("tcgplayer"),
            )
        except (KeyError, TypeError):
            return None

    @staticmethod
    def find_best_match(cards: List[ValidatedCard], name: str,
                        set_number: Optional[str] = None) -> Optional[ValidatedCard]:
        """Exact collector number first, then closest name."""
        if not cards:
            return None

        number = extract_card_number(set_number or "")
        pool = [c for c in cards if number and c.number == number] or list(cards)
        return max(pool, key=lambda c: fuzz.ratio(name.lower(), c.name.lower()))

    async def search_cards(self, query: str, limit: int = 10) -> List[ValidatedCard]:
        response_data = await self._request_with_backoff(
            f"{self.base_url}/cards", {"q": query, "pageSize": limit}
        )
        cards = []
        for card_data in (response_data.get("data") or [])[:limit]:
            card = self.parse_card_data(card_data)
            if card:
                cards.append(card)
        return cards

    async def validate(self, name: str, set_number: Optional[str] = None) -> Optional[ValidatedCard]:
        """Best database match for an OCR'd card, or None when there is none."""
        if not name:
            return None

        context = self.log_start("validate_card", card_name=name, set_number=set_number)
        escaped = name.replace('"', '\\"')
        try:
            cards = await self.search_cards(f'name:"{escaped}"', limit=10)
        except (aiohttp.ClientError, asyncio.TimeoutError, ResolutionError) as e:
            return handle_error(
                e,
                ErrorContext(
                    operation="validate_card",
                    module=__name__,
                    function="validate",
                    input_data={"name": name, "set_number": set_number},
                    timestamp=datetime.now().isoformat(),
                ),
                self.logger,
                reraise=False,
            )

        match = self.find_best_match(cards, name, set_number)
        self.log_success(
            context,
            candidates=len(cards),
            card_id=match.card_id if match else None,
        )
        return match

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None
