"""Pricing package: marketplace providers and price normalization."""

from .aggregator import PriceAggregator
from .mock import MockPriceProvider
from .normalizer import (
    average_source_price,
    best_market_price,
    price_band,
    round2,
    summarize_prices,
    tcgplayer_price,
)
from .price_tracker import PokemonPriceTrackerClient
from .sources import extract_source_price, price_source_from_dict, register_price_extractor
from .tcgplayer import TCGPlayerClient

__all__ = [
    "PriceAggregator",
    "MockPriceProvider",
    "PokemonPriceTrackerClient",
    "TCGPlayerClient",
    "average_source_price",
    "best_market_price",
    "price_band",
    "round2",
    "summarize_prices",
    "tcgplayer_price",
    "extract_source_price",
    "price_source_from_dict",
    "register_price_extractor",
]
