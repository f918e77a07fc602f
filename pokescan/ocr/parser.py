"""Heuristic parser turning raw OCR text into a CardInfo record."""

from typing import List, Optional, Tuple

from ..core.types import CardInfo
from ..utils.log import get_logger
from .regexes import (
    ARTIST_PATTERN,
    ATTACK_PATTERN,
    HP_PATTERN,
    HP_PREFIX_PATTERN,
    RARE_WORD_PATTERN,
    RARITY_GLYPHS,
    RETREAT_PATTERN,
    TYPE_PATTERN,
    WEAKNESS_PATTERN,
    canonical_type,
    parse_set_number,
)

logger = get_logger(__name__)


def _split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _find_name_and_hp(lines: List[str]) -> Tuple[str, str, Optional[int]]:
    """Return (name, hp, index of the HP line) for the first HP-bearing line."""
    for index, line in enumerate(lines):
        match = HP_PATTERN.search(line) or HP_PREFIX_PATTERN.search(line)
        if match:
            return match.group(1).strip(), match.group(2), index
    if lines:
        return lines[0], "", None
    return "", "", None


def _find_rarity(text: str) -> str:
    star_glyph, star_rarity = RARITY_GLYPHS[0]
    if star_glyph in text or RARE_WORD_PATTERN.search(text):
        return star_rarity
    for glyph, rarity in RARITY_GLYPHS[1:]:
        if glyph in text:
            return rarity
    return ""


def _find_attacks(lines: List[str], start: int) -> List[str]:
    attacks = []
    for line in lines[start:]:
        if WEAKNESS_PATTERN.search(line) or RETREAT_PATTERN.search(line):
            continue
        match = ATTACK_PATTERN.match(line)
        if match:
            attacks.append(match.group(1).strip())
    return attacks


def _find_weaknesses(text: str) -> List[str]:
    weaknesses = []
    for match in WEAKNESS_PATTERN.finditer(text):
        token = match.group(1)
        if TYPE_PATTERN.fullmatch(token):
            weaknesses.append(canonical_type(token))
    return weaknesses


def parse_card_info(raw_text: str) -> CardInfo:
    """
    Parse raw OCR text into a CardInfo.

    Never raises: fields that cannot be located are left empty and
    ``full_text`` always holds the untouched input.
    """
    text = raw_text or ""
    lines = _split_lines(text)

    name, hp, hp_index = _find_name_and_hp(lines)

    set_number = card_number = total_cards = None
    number_parts = parse_set_number(text)
    if number_parts:
        set_number = number_parts['set_number']
        card_number = number_parts['card_number']
        total_cards = number_parts['total_cards']

    type_match = TYPE_PATTERN.search(text)
    card_type = canonical_type(type_match.group(1)) if type_match else ""

    artist_match = ARTIST_PATTERN.search(text)
    retreat_match = RETREAT_PATTERN.search(text)

    card_info = CardInfo(
        name=name,
        set_number=set_number or "",
        hp=hp,
        type=card_type,
        rarity=_find_rarity(text),
        full_text=text,
        attacks=_find_attacks(lines, hp_index + 1) if hp_index is not None else [],
        weaknesses=_find_weaknesses(text),
        retreat_cost=int(retreat_match.group(1)) if retreat_match else None,
        artist=artist_match.group(1).strip() if artist_match else None,
        card_number=card_number,
        total_cards=total_cards,
    )

    logger.debug(
        "Parsed card info",
        name=card_info.name,
        hp=card_info.hp,
        type=card_info.type,
        set_number=card_info.set_number,
        rarity=card_info.rarity,
    )

    return card_info
