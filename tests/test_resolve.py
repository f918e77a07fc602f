"""Tests for Pokemon TCG API card validation."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from conftest import make_response, make_session
from pokescan.core.constants import BACKOFF_S
from pokescan.core.types import ValidatedCard
from pokescan.resolve import PokemonTCGResolver


def _card(number, name="Pikachu", set_id="base1"):
    return ValidatedCard(card_id=f"{set_id}-{number}", name=name, number=number,
                         set_name="Base", set_id=set_id, rarity="Common", images={})


class TestParseCardData:

    def test_parse_card_data(self, sample_api_card):
        card = PokemonTCGResolver.parse_card_data(sample_api_card)
        assert card.card_id == "base1-58"
        assert card.name == "Pikachu"
        assert card.number == "58"
        assert card.set_name == "Base"
        assert card.set_id == "base1"
        assert card.set_series == "Base"
        assert card.set_printed_total == 102
        assert card.images["small"].endswith("58.png")
        assert card.raw_tcgplayer == sample_api_card["tcgplayer"]

    def test_parse_card_data_missing_fields(self):
        assert PokemonTCGResolver.parse_card_data({"id": "x", "name": "y"}) is None


class TestFindBestMatch:

    def test_number_match_wins(self):
        cards = [_card("60"), _card("58"), _card("27", name="Pikachu", set_id="jungle")]
        assert PokemonTCGResolver.find_best_match(cards, "Pikachu", "58/102").number == "58"

    def test_name_similarity_without_number_match(self):
        cards = [_card("14", name="Raichu"), _card("27", name="Pikachu")]
        assert PokemonTCGResolver.find_best_match(cards, "Pikachu", "99/99").name == "Pikachu"

    def test_no_candidates(self):
        assert PokemonTCGResolver.find_best_match([], "Pikachu") is None


class TestValidate:

    @pytest.mark.asyncio
    async def test_validate_returns_best_match(self, sample_api_card):
        other = dict(sample_api_card, id="base2-60", number="60")
        resolver = PokemonTCGResolver()
        resolver.session = make_session(make_response(payload={"data": [other, sample_api_card]}))

        card = await resolver.validate("Pikachu", "58/102")

        assert card.card_id == "base1-58"
        call = resolver.session.get.call_args
        assert call.args[0].endswith("/v2/cards")
        assert call.kwargs["params"] == {"q": 'name:"Pikachu"', "pageSize": 10}

    @pytest.mark.asyncio
    async def test_validate_miss(self):
        resolver = PokemonTCGResolver()
        resolver.session = make_session(make_response(payload={"data": []}))
        assert await resolver.validate("Fakemon", "1/1") is None

    @pytest.mark.asyncio
    async def test_validate_empty_name_skips_request(self):
        resolver = PokemonTCGResolver()
        resolver.session = make_session()
        assert await resolver.validate("") is None
        resolver.session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_validate_network_error_returns_none(self):
        resolver = PokemonTCGResolver()
        resolver.session = make_session()
        resolver.session.get.side_effect = aiohttp.ClientConnectionError("refused")
        assert await resolver.validate("Pikachu", "58/102") is None

    @pytest.mark.asyncio
    async def test_validate_propagates_unexpected_errors(self):
        resolver = PokemonTCGResolver()
        resolver.session = make_session()
        resolver.session.get.side_effect = ValueError("bad payload")
        with pytest.raises(ValueError):
            await resolver.validate("Pikachu")


class TestBackoff:

    def test_backoff_constants(self):
        assert BACKOFF_S == [0.2, 1.0, 3.0]

    @pytest.mark.asyncio
    async def test_429_then_200(self, sample_api_card):
        resolver = PokemonTCGResolver()
        resolver.session = make_session(
            make_response(status=429),
            make_response(payload={"data": [sample_api_card]}),
        )

        with patch('pokescan.resolve.poketcg.asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
            card = await resolver.validate("Pikachu", "58/102")

        assert card.card_id == "base1-58"
        assert resolver.session.get.call_count == 2
        mock_sleep.assert_any_await(BACKOFF_S[0])

    @pytest.mark.asyncio
    async def test_persistent_5xx_gives_up(self):
        resolver = PokemonTCGResolver()
        resolver.session = make_session(*(make_response(status=503) for _ in range(len(BACKOFF_S) + 1)))

        with patch('pokescan.resolve.poketcg.asyncio.sleep', new_callable=AsyncMock):
            assert await resolver.validate("Pikachu") is None

        assert resolver.session.get.call_count == len(BACKOFF_S) + 1

    @pytest.mark.asyncio
    async def test_close(self):
        resolver = PokemonTCGResolver()
        session = make_session()
        resolver.session = session
        await resolver.close()
        session.close.assert_awaited_once()
        assert resolver.session is None
