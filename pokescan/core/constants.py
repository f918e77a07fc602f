from typing import Dict, Final, List, Tuple

POKEMON_TYPES: Final[Tuple[str, ...]] = (
    "Fire", "Water", "Grass", "Electric", "Psychic", "Fighting",
    "Dark", "Steel", "Fairy", "Dragon", "Normal", "Colorless",
)

# Weakness lookup used by the mock OCR generator
TYPE_WEAKNESS: Final[Dict[str, str]] = {
    "Fire": "Water",
    "Water": "Electric",
    "Grass": "Fire",
    "Electric": "Fighting",
    "Psychic": "Dark",
    "Fighting": "Psychic",
    "Dark": "Fighting",
    "Steel": "Fire",
    "Dragon": "Fairy",
    "Fairy": "Steel",
}

# Authenticity scoring
AUTHENTIC_CONFIDENCE: Final[float] = 0.7
MISSING_INFO_CONFIDENCE: Final[float] = 0.3
NOT_IN_DATABASE_CONFIDENCE: Final[float] = 0.4
ISSUE_MISSING_INFO: Final[str] = "Missing essential card information"
ISSUE_NOT_IN_DATABASE: Final[str] = "Card not found in official database"

# Display bands for authenticity confidence
CONFIDENCE_HIGH: Final[float] = 0.8
CONFIDENCE_MEDIUM: Final[float] = 0.6

# Price band around the market price
PRICE_BAND_LOW: Final[float] = 0.8
PRICE_BAND_HIGH: Final[float] = 1.2

# Source tags
SOURCE_TCGPLAYER: Final[str] = "TCGPlayer"
SOURCE_CARD_KINGDOM: Final[str] = "Card Kingdom"
SOURCE_CARDMARKET: Final[str] = "CardMarket"
SOURCE_EBAY: Final[str] = "eBay"

# Generic source keys, in lookup order
GENERIC_PRICE_KEYS: Final[Tuple[str, ...]] = ("market", "mid", "average", "nm")

CONDITION_MULTIPLIERS: Final[Dict[str, float]] = {
    "NM": 1.0,
    "LP": 0.85,
    "MP": 0.65,
    "HP": 0.45,
    "DMG": 0.25,
}

CARD_CONDITIONS: Final[Dict[str, str]] = {
    "NM": "Near Mint",
    "LP": "Lightly Played",
    "MP": "Moderately Played",
    "HP": "Heavily Played",
    "DMG": "Damaged",
}

COMMON_GRADES: Final[Tuple[str, ...]] = (
    "PSA10", "PSA9", "PSA8", "PSA7",
    "BGS10", "BGS9.5", "BGS9", "BGS8.5", "BGS8",
    "CGC10", "CGC9.5", "CGC9", "CGC8.5",
    "SGC10", "SGC9.5", "SGC9", "SGC8.5",
)

ERROR_MESSAGES: Final[Dict[str, str]] = {
    "IMAGE_CAPTURE": "Failed to capture image. Please try again.",
    "OCR_FAILED": "Could not read card information. Please ensure good lighting and focus.",
    "NETWORK_ERROR": "Network error. Please check your connection.",
    "API_ERROR": "Service temporarily unavailable. Please try again later.",
    "CARD_NOT_FOUND": "Card not found in database. It may be a custom or proxy card.",
    "PRICE_UNAVAILABLE": "Price information currently unavailable.",
    "SCAN_IN_PROGRESS": "A scan is already in progress.",
}

# API endpoints
GOOGLE_VISION_URL: Final[str] = "https://vision.googleapis.com/v1/images:annotate"
POKEMON_TCG_BASE: Final[str] = "https://api.pokemontcg.io/v2"
TCGPLAYER_BASE: Final[str] = "https://api.tcgplayer.com/v1.39.0"
TCGPLAYER_POKEMON_CATEGORY: Final[int] = 3
POKEMON_PRICE_TRACKER_BASE: Final[str] = "https://www.pokemonpricetracker.com/api/v1"

API_TIMEOUT_S: Final[float] = 30.0
RATE_LIMIT_INTERVAL_S: Final[float] = 0.2
BACKOFF_S = [0.2, 1.0, 3.0]
RETRYABLE_STATUS: Final[Tuple[int, ...]] = (429, 500, 502, 503, 504)

SCAN_HISTORY_HEADER: Final[List[str]] = [
    "timestamp_iso", "card_id", "name", "set_number", "set_name", "hp", "type",
    "rarity", "validated", "is_authentic", "confidence", "market_usd",
    "low_usd", "high_usd", "tcgplayer_market_usd", "alternate_usd",
    "alternate_source", "price_sources", "source_image_uri",
]
