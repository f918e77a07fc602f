"""Combine marketplace quotes from every configured provider into one CardPrices."""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..core.constants import ERROR_MESSAGES
from ..core.types import CardInfo, CardPrices, GenericPrice, PriceSource
from ..utils.error_handler import ErrorContext, handle_error
from ..utils.log import LoggerMixin
from .normalizer import average_source_price


class PriceAggregator(LoggerMixin):
    """
    Pricing collaborator backed by one or more price providers.

    Providers are asked in order; a provider that fails is logged and
    skipped so one dead marketplace never hides the others.
    """

    def __init__(self, providers: Sequence):
        self.providers = list(providers)

    @staticmethod
    def collect_graded(sources: List[PriceSource]) -> Optional[Dict[str, float]]:
        graded: Dict[str, float] = {}
        for source in sources:
            if isinstance(source, GenericPrice) and source.metadata:
                for grade, price in (source.metadata.get("graded") or {}).items():
                    graded.setdefault(grade, price)
        return graded or None

    async def get_prices(self, card_info: CardInfo) -> Optional[CardPrices]:
        context = self.log_start(
            "price_lookup", card_name=card_info.name, providers=len(self.providers)
        )
        sources: List[PriceSource] = []

        for provider in self.providers:
            try:
                sources.extend(await provider.fetch_sources(card_info))
            except Exception as e:
                handle_error(
                    e,
                    ErrorContext(
                        operation="fetch_sources",
                        module=__name__,
                        function=type(provider).__name__,
                        input_data={"card_name": card_info.name},
                        timestamp=datetime.now().isoformat(),
                    ),
                    self.logger,
                    reraise=False,
                )

        if not sources:
            self.logger.warning(ERROR_MESSAGES["PRICE_UNAVAILABLE"], card_name=card_info.name)
            self.log_success(context, sources=0)
            return None

        prices = CardPrices(
            card_name=card_info.name,
            set_number=card_info.set_number,
            sources=sources,
            average_price=average_source_price(sources),
            graded_prices=self.collect_graded(sources),
        )
        self.log_success(context, sources=len(sources), average_price=prices.average_price)
        return prices

    async def close(self) -> None:
        for provider in self.providers:
            close = getattr(provider, "close", None)
            if close is not None:
                await close()
