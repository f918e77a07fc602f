"""Normalize heterogeneous price sources into one comparable market price."""

from decimal import ROUND_HALF_UP, Decimal
from statistics import mean
from typing import Iterable, Optional, Tuple

from ..core.constants import PRICE_BAND_HIGH, PRICE_BAND_LOW, SOURCE_TCGPLAYER
from ..core.types import CardPrices, PriceSource, PriceSummary
from ..utils.validation import coerce_price
from .sources import extract_source_price


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def average_source_price(sources: Iterable[PriceSource]) -> Optional[float]:
    """Mean of every source's representative price; non-positive quotes are ignored."""
    quotes = []
    for source in sources:
        price = extract_source_price(source)
        if price is not None and price > 0:
            quotes.append(price)
    return mean(quotes) if quotes else None


def best_market_price(prices: Optional[CardPrices]) -> Optional[float]:
    """
    Best available market price.

    A positive precomputed ``average_price`` wins verbatim; otherwise the
    price is rebuilt from the sources. None when nothing usable exists.
    """
    if prices is None:
        return None
    if prices.average_price is not None and prices.average_price > 0:
        return prices.average_price
    return average_source_price(prices.sources)


def price_band(market: Optional[float]) -> Tuple[Optional[float], Optional[float]]:
    if market is None:
        return None, None
    return round2(market * PRICE_BAND_LOW), round2(market * PRICE_BAND_HIGH)


def tcgplayer_price(prices: Optional[CardPrices]) -> Optional[float]:
    if prices is None:
        return None
    for source in prices.sources:
        if source.source == SOURCE_TCGPLAYER:
            market = coerce_price(source.prices.get("market"))
            return market if market is not None and market > 0 else None
    return None


def alternate_source(prices: Optional[CardPrices]) -> Optional[PriceSource]:
    """First source from another marketplace than TCGPlayer."""
    if prices is None:
        return None
    for source in prices.sources:
        if source.source != SOURCE_TCGPLAYER:
            return source
    return None


def alternate_price(prices: Optional[CardPrices]) -> Optional[float]:
    source = alternate_source(prices)
    return extract_source_price(source) if source is not None else None


def summarize_prices(prices: Optional[CardPrices]) -> PriceSummary:
    market = best_market_price(prices)
    low, high = price_band(market)
    other = alternate_source(prices)
    return PriceSummary(
        market=market,
        low=low,
        high=high,
        tcgplayer=tcgplayer_price(prices),
        alternate=alternate_price(prices),
        alternate_source=other.source if other is not None else None,
    )
