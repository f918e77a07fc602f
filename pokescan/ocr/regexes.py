"""Regex patterns for Pokemon card text extraction."""

import re
from typing import Dict, Optional

from ..core.constants import POKEMON_TYPES

# "Pikachu 60 HP", "Pikachu HP 60 HP"
HP_PATTERN = re.compile(r'(\w+.*?)\s+(?:HP\s*)?(\d+)\s*HP', re.IGNORECASE)
# "Pikachu HP 60"
HP_PREFIX_PATTERN = re.compile(r'(\w+.*?)\s+HP\s*(\d+)', re.IGNORECASE)

SET_NUMBER_PATTERN = re.compile(r'(\d+)/(\d+)')

TYPE_PATTERN = re.compile(
    r'\b(' + '|'.join(POKEMON_TYPES) + r')\b', re.IGNORECASE
)

RARE_WORD_PATTERN = re.compile(r'\bRare\b', re.IGNORECASE)
RARITY_GLYPHS = (
    ('★', 'Rare'),
    ('◆', 'Uncommon'),
    ('●', 'Common'),
)

ARTIST_PATTERN = re.compile(r'\bIllus(?:trator|\.)?\s*[:.]?\s*(.+)', re.IGNORECASE)
WEAKNESS_PATTERN = re.compile(r'\bweakness\b\s*[:\-]?\s*(\w+)', re.IGNORECASE)
RETREAT_PATTERN = re.compile(r'\bretreat(?:\s+cost)?\b\s*[:\-]?\s*(\d)', re.IGNORECASE)
# "Thunder Shock 20", "Fire Spin 100+", "Slash 30×"
ATTACK_PATTERN = re.compile(r"^([A-Z][A-Za-z'\- ]{2,30}?)\s+(\d{1,3})[+×x]?$")


def parse_set_number(text: str) -> Optional[Dict[str, str]]:
    """
    Find the first ``digits/digits`` token in text.

    Examples:
        >>> parse_set_number("Pikachu 25/102 ●")
        {'set_number': '25/102', 'card_number': '25', 'total_cards': '102'}
    """
    match = SET_NUMBER_PATTERN.search(text)
    if not match:
        return None
    return {
        'set_number': match.group(0),
        'card_number': match.group(1),
        'total_cards': match.group(2),
    }


def canonical_type(token: str) -> str:
    """Map a case-insensitive type token to its vocabulary spelling."""
    lowered = token.lower()
    for name in POKEMON_TYPES:
        if name.lower() == lowered:
            return name
    return token
