"""Formatting and card-number helpers shared by the CLI and collaborators."""

import re
from typing import Optional

from ..core.constants import CONDITION_MULTIPLIERS

SET_NUMBER_FORMAT = re.compile(r'^(\d+)/(\d+)$')


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    if amount is None:
        return "N/A"
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{amount:,.2f}"


def is_valid_set_number(set_number: str) -> bool:
    return bool(SET_NUMBER_FORMAT.match(set_number or ""))


def extract_card_number(set_number: str) -> Optional[str]:
    """Return the numerator of a set number, e.g. "25/102" -> "25"."""
    match = SET_NUMBER_FORMAT.match(set_number or "")
    return match.group(1) if match else None


def generate_card_id(card_name: str, set_number: str) -> str:
    sanitized_name = re.sub(r'[^a-z0-9]', '', card_name.lower())
    sanitized_number = set_number.replace('/', '-')
    return f"{sanitized_name}-{sanitized_number}"


def estimate_value_by_condition(nm_price: float, condition: str) -> float:
    """Scale a Near Mint price to another condition; unknown conditions get half."""
    return nm_price * CONDITION_MULTIPLIERS.get(condition, 0.5)
