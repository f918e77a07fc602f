"""Tagged price-source variants and per-tag price extraction rules.

Every source exposes a ``source`` tag and a ``prices`` mapping. The rule for
turning a source into one representative price is looked up by tag, so a new
marketplace needs only a tag and (optionally) a registered rule; unknown tags
fall back to the generic key lookup.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from ..core.constants import (
    GENERIC_PRICE_KEYS,
    SOURCE_CARD_KINGDOM,
    SOURCE_EBAY,
    SOURCE_TCGPLAYER,
)
from ..core.types import CardKingdomPrice, GenericPrice, PriceSource, TCGPlayerPrice
from ..utils.validation import coerce_price

PriceExtractor = Callable[[Mapping[str, Any]], Optional[float]]


def _key_extractor(key: str) -> PriceExtractor:
    def extract(prices: Mapping[str, Any]) -> Optional[float]:
        return coerce_price(prices.get(key))
    return extract


def generic_extractor(prices: Mapping[str, Any]) -> Optional[float]:
    """First present of market, mid, average, nm."""
    for key in GENERIC_PRICE_KEYS:
        value = coerce_price(prices.get(key))
        if value is not None:
            return value
    return None


_EXTRACTORS: Dict[str, PriceExtractor] = {
    SOURCE_TCGPLAYER: _key_extractor("market"),
    SOURCE_CARD_KINGDOM: _key_extractor("nm"),
    # Ungraded sale price; graded prices travel in metadata
    SOURCE_EBAY: _key_extractor("raw"),
}


def register_price_extractor(tag: str, extractor: PriceExtractor) -> None:
    """Install (or replace) the extraction rule for a source tag."""
    _EXTRACTORS[tag] = extractor


def extractor_for(tag: str) -> PriceExtractor:
    return _EXTRACTORS.get(tag, generic_extractor)


def extract_source_price(source: PriceSource) -> Optional[float]:
    """Representative price of one source, or None when it has none."""
    prices = getattr(source, "prices", None) or {}
    return extractor_for(source.source)(prices)


def price_source_from_dict(payload: Mapping[str, Any]) -> PriceSource:
    """
    Build the variant matching a JSON-shaped source's tag.

    Unknown tags become GenericPrice; the tag is preserved verbatim.
    """
    tag = payload.get("source") or ""
    prices = payload.get("prices") or {}
    card_name = payload.get("cardName") or payload.get("card_name") or ""
    url = payload.get("url") or ""

    if tag == SOURCE_TCGPLAYER:
        return TCGPlayerPrice(
            card_name=card_name,
            url=url,
            low=coerce_price(prices.get("low")) or 0.0,
            mid=coerce_price(prices.get("mid")) or 0.0,
            high=coerce_price(prices.get("high")) or 0.0,
            market=coerce_price(prices.get("market")) or 0.0,
            product_id=payload.get("productId"),
        )
    if tag == SOURCE_CARD_KINGDOM:
        return CardKingdomPrice(
            card_name=card_name,
            url=url,
            nm=coerce_price(prices.get("nm")) or 0.0,
            lp=coerce_price(prices.get("lp")) or 0.0,
            mp=coerce_price(prices.get("mp")) or 0.0,
            hp=coerce_price(prices.get("hp")) or 0.0,
            in_stock=bool(payload.get("inStock", False)),
        )
    return GenericPrice(
        source=tag,
        card_name=card_name,
        url=url,
        prices={k: v for k, v in prices.items() if coerce_price(v) is not None},
        metadata=payload.get("metadata"),
    )
