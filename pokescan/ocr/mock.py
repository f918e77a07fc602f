"""Mock OCR collaborator producing realistic random cards for demos and offline runs."""

import asyncio
import random
from typing import Optional

from ..core.constants import POKEMON_TYPES, TYPE_WEAKNESS
from ..core.types import CardInfo
from ..utils.log import LoggerMixin

POKEMON_NAMES = [
    'Pikachu', 'Charizard', 'Bulbasaur', 'Squirtle', 'Mewtwo',
    'Rayquaza', 'Umbreon', 'Gengar', 'Dragonite', 'Lucario',
    'Eevee', 'Snorlax', 'Garchomp', 'Tyranitar', 'Blastoise',
]

SETS = [
    'Base Set', 'Jungle', 'Fossil', 'Team Rocket', 'Gym Heroes',
    'Neo Genesis', 'Aquapolis', 'Hidden Fates', 'Shining Fates',
    'Evolving Skies', 'Battle Styles', 'Fusion Strike',
]

RARITIES = ['Common', 'Uncommon', 'Rare', 'Rare Holo', 'Ultra Rare']


def generate_mock_card_info(rng: Optional[random.Random] = None) -> CardInfo:
    rng = rng or random.Random()
    name = rng.choice(POKEMON_NAMES)
    card_type = rng.choice([t for t in POKEMON_TYPES if t in TYPE_WEAKNESS])

    card_number = rng.randint(1, 200)
    total_cards = rng.randint(200, 299)
    hp = rng.randint(0, 19) * 10 + 30  # 30-220 HP

    return CardInfo(
        name=name,
        set_number=f"{card_number}/{total_cards}",
        set_name=rng.choice(SETS),
        rarity=rng.choice(RARITIES),
        type=card_type,
        hp=str(hp),
        attacks=[f"{card_type} Blast", "Quick Attack"],
        weaknesses=[TYPE_WEAKNESS[card_type]],
        retreat_cost=rng.randint(1, 4),
        artist="Ken Sugimori",
        card_number=str(card_number),
        total_cards=str(total_cards),
        full_text="",
    )


class MockOCRService(LoggerMixin):
    """Stands in for a real OCR backend when none is configured."""

    def __init__(self, delay: float = 0.0, seed: Optional[int] = None):
        self.delay = delay
        self.rng = random.Random(seed)

    async def extract_text(self, base64_image: str) -> Optional[CardInfo]:
        if self.delay:
            await asyncio.sleep(self.delay)
        card_info = generate_mock_card_info(self.rng)
        self.logger.info("Using mock OCR data", name=card_info.name)
        return card_info
