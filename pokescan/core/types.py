from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import SOURCE_CARD_KINGDOM, SOURCE_TCGPLAYER


@dataclass(frozen=True)
class ImageData:
    uri: str
    base64: Optional[str] = None
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class CardInfo:
    """Facts extracted from one card photo; empty strings mean "not found"."""

    name: str = ""
    set_number: str = ""
    hp: str = ""
    type: str = ""
    rarity: str = ""
    full_text: str = ""
    set_name: Optional[str] = None
    attacks: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    retreat_cost: Optional[int] = None
    artist: Optional[str] = None
    card_number: Optional[str] = None
    total_cards: Optional[str] = None


@dataclass(frozen=True)
class AuthenticityChecks:
    has_name: bool
    has_set_number: bool
    has_hp: bool
    # Need image-level analysis; fixed until that exists
    font_consistency: bool = True
    print_quality: bool = True
    holo_pattern: bool = True

    def as_dict(self) -> Dict[str, bool]:
        return {
            "has_name": self.has_name,
            "has_set_number": self.has_set_number,
            "has_hp": self.has_hp,
            "font_consistency": self.font_consistency,
            "print_quality": self.print_quality,
            "holo_pattern": self.holo_pattern,
        }

    @property
    def passed(self) -> int:
        return sum(1 for ok in self.as_dict().values() if ok)

    @property
    def total(self) -> int:
        return len(self.as_dict())


@dataclass(frozen=True)
class AuthenticityResult:
    is_authentic: bool
    confidence: float
    issues: List[str]
    checks: AuthenticityChecks


@dataclass(frozen=True)
class ValidatedCard:
    card_id: str
    name: str
    number: str
    set_name: str
    set_id: str
    rarity: Optional[str]
    images: Dict[str, str]  # small/large
    set_series: Optional[str] = None
    set_printed_total: Optional[int] = None
    raw_tcgplayer: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class TCGPlayerPrice:
    card_name: str
    url: str
    low: float = 0.0
    mid: float = 0.0
    high: float = 0.0
    market: float = 0.0
    product_id: Optional[int] = None
    source: str = SOURCE_TCGPLAYER

    @property
    def prices(self) -> Dict[str, float]:
        return {"low": self.low, "mid": self.mid, "high": self.high, "market": self.market}


@dataclass(frozen=True)
class CardKingdomPrice:
    """Condition-graded quotes: nm = Near Mint, lp/mp/hp = Lightly/Moderately/Heavily Played."""

    card_name: str
    url: str
    nm: float = 0.0
    lp: float = 0.0
    mp: float = 0.0
    hp: float = 0.0
    in_stock: bool = False
    source: str = SOURCE_CARD_KINGDOM

    @property
    def prices(self) -> Dict[str, float]:
        return {"nm": self.nm, "lp": self.lp, "mp": self.mp, "hp": self.hp}


@dataclass(frozen=True)
class GenericPrice:
    source: str
    card_name: str
    url: str
    prices: Mapping[str, float] = field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None


PriceSource = Union[TCGPlayerPrice, CardKingdomPrice, GenericPrice]


@dataclass(frozen=True)
class CardPrices:
    card_name: str
    set_number: str
    sources: List[PriceSource] = field(default_factory=list)
    # Authoritative when present and positive
    average_price: Optional[float] = None
    graded_prices: Optional[Dict[str, float]] = None


@dataclass(frozen=True)
class PriceSummary:
    market: Optional[float] = None
    low: Optional[float] = None
    high: Optional[float] = None
    tcgplayer: Optional[float] = None
    alternate: Optional[float] = None
    alternate_source: Optional[str] = None


@dataclass(frozen=True)
class ScanResult:
    card_info: CardInfo
    validated_card: Optional[ValidatedCard]
    authenticity: AuthenticityResult
    prices: Optional[CardPrices]
    scan_time: datetime


class ScanStage(str, Enum):
    IDLE = "idle"
    EXTRACTING_TEXT = "extracting_text"
    VALIDATING_CARD = "validating_card"
    CHECKING_AUTHENTICITY = "checking_authenticity"
    FETCHING_PRICES = "fetching_prices"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanProgress:
    stage: ScanStage
    fraction: float
    label: str
