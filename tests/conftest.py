"""Pytest configuration and shared fixtures for Pokemon card scanner tests."""

import base64
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import cv2
import numpy as np
import pytest

from pokescan.authenticity import score_authenticity
from pokescan.core.types import (
    CardInfo,
    CardKingdomPrice,
    CardPrices,
    ImageData,
    ScanResult,
    TCGPlayerPrice,
    ValidatedCard,
)
from pokescan.ocr import parse_card_info

SAMPLE_CARD_TEXT = """Pikachu 60 HP
Electric
Thunder Shock 20
Quick Attack 10
Weakness Fighting
Retreat 1
Illus. Mitsuhiro Arita
58/102 ●
"""


@pytest.fixture(scope="function")
def temp_dirs():
    """Create temporary directories for each test function."""
    temp_dir = Path(tempfile.mkdtemp())
    output_dir = temp_dir / "output"
    output_dir.mkdir()

    yield {
        'temp_dir': temp_dir,
        'output_dir': output_dir,
    }

    # Cleanup
    shutil.rmtree(temp_dir)


@pytest.fixture(scope="function")
def mock_settings(temp_dirs):
    """Mock application settings to use test directories."""
    with patch('pokescan.utils.config.settings') as mock_settings:
        mock_settings.OUTPUT_DIR = str(temp_dirs['output_dir'])
        mock_settings.LOG_LEVEL = 'DEBUG'
        mock_settings.API_TIMEOUT_SECONDS = 30.0
        yield mock_settings


@pytest.fixture(scope="function")
def sample_card_text():
    return SAMPLE_CARD_TEXT


@pytest.fixture(scope="function")
def sample_card_info():
    """Parsed card info for the sample Pikachu text."""
    return parse_card_info(SAMPLE_CARD_TEXT)


@pytest.fixture(scope="function")
def sample_validated_card():
    return ValidatedCard(
        card_id="base1-58",
        name="Pikachu",
        number="58",
        set_name="Base",
        set_id="base1",
        rarity="Common",
        images={
            "small": "https://images.pokemontcg.io/base1/58.png",
            "large": "https://images.pokemontcg.io/base1/58_hires.png",
        },
        set_series="Base",
        set_printed_total=102,
    )


@pytest.fixture(scope="function")
def sample_api_card():
    """Raw Pokemon TCG API card record."""
    return {
        'id': 'base1-58',
        'name': 'Pikachu',
        'number': '58',
        'rarity': 'Common',
        'set': {'id': 'base1', 'name': 'Base', 'series': 'Base', 'printedTotal': 102},
        'images': {
            'small': 'https://images.pokemontcg.io/base1/58.png',
            'large': 'https://images.pokemontcg.io/base1/58_hires.png',
        },
        'tcgplayer': {'prices': {'normal': {'market': 1.5}}},
    }


@pytest.fixture(scope="function")
def sample_card_prices():
    return CardPrices(
        card_name="Pikachu",
        set_number="58/102",
        sources=[
            TCGPlayerPrice(card_name="Pikachu", url="https://tcgplayer.example/58",
                           low=8.0, mid=10.0, high=13.0, market=10.0),
            CardKingdomPrice(card_name="Pikachu", url="https://cardkingdom.example/58",
                             nm=14.0, lp=11.9, mp=9.1, hp=6.3, in_stock=True),
        ],
    )


@pytest.fixture(scope="function")
def sample_scan_result(sample_card_info, sample_validated_card, sample_card_prices):
    return ScanResult(
        card_info=sample_card_info,
        validated_card=sample_validated_card,
        authenticity=score_authenticity(sample_card_info, found_in_database=True),
        prices=sample_card_prices,
        scan_time=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )


@pytest.fixture(scope="function")
def sample_image():
    return ImageData(uri="file:///tmp/card.jpg", base64="aGVsbG8=", width=640, height=880)


@pytest.fixture(scope="function")
def png_base64():
    """A small real PNG, base64-encoded."""
    frame = np.full((40, 30, 3), 255, dtype=np.uint8)
    ok, encoded = cv2.imencode('.png', frame)
    assert ok
    return base64.b64encode(encoded.tobytes()).decode('ascii')


@pytest.fixture(scope="function")
def mock_collaborators(sample_card_info, sample_validated_card, sample_card_prices):
    """OCR, validator and pricing doubles returning the sample records."""
    ocr = MagicMock()
    ocr.extract_text = AsyncMock(return_value=sample_card_info)
    ocr.close = AsyncMock()

    validator = MagicMock()
    validator.validate = AsyncMock(return_value=sample_validated_card)
    validator.close = AsyncMock()

    pricing = MagicMock()
    pricing.get_prices = AsyncMock(return_value=sample_card_prices)
    pricing.close = AsyncMock()

    return {'ocr': ocr, 'validator': validator, 'pricing': pricing}


def make_response(status=200, payload=None):
    """aiohttp-style response usable as ``async with session.get(...)``."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload if payload is not None else {})
    if status >= 400:
        response.raise_for_status.side_effect = aiohttp.ClientResponseError(
            MagicMock(), (), status=status, message=f"HTTP {status}"
        )
    else:
        response.raise_for_status.return_value = None

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=None)
    return context


def make_session(*responses, method='get'):
    """Mock aiohttp session whose ``get``/``post`` yields the given responses in order."""
    session = MagicMock()
    session.closed = False
    getattr(session, method).side_effect = list(responses)
    session.close = AsyncMock()
    return session


# Configure pytest options
def pytest_configure(config):
    """Configure pytest with custom options."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark integration tests
        if "integration" in item.name.lower() or "Integration" in str(item.cls):
            item.add_marker(pytest.mark.integration)

        # Mark slow tests
        if any(slow_indicator in item.name.lower() for slow_indicator in ['performance', 'bulk', 'timeout']):
            item.add_marker(pytest.mark.slow)

        # Mark unit tests (default)
        if not item.get_closest_marker('integration') and not item.get_closest_marker('slow'):
            item.add_marker(pytest.mark.unit)
