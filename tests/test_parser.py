"""Tests for the OCR text parser."""

from pokescan.ocr import parse_card_info


class TestNameAndHP:
    """Name/HP line detection."""

    def test_name_and_hp_from_hp_line(self, sample_card_text):
        info = parse_card_info(sample_card_text)
        assert info.name == "Pikachu"
        assert info.hp == "60"

    def test_hp_line_after_other_lines(self):
        info = parse_card_info("BASIC\nCharizard 120 HP\n4/102")
        assert info.name == "Charizard"
        assert info.hp == "120"

    def test_doubled_hp_marker(self):
        info = parse_card_info("Mewtwo HP 70 HP\n10/102")
        assert info.name == "Mewtwo"
        assert info.hp == "70"

    def test_hp_prefix_form(self):
        info = parse_card_info("Dark Gengar HP 90\n5/82")
        assert info.name == "Dark Gengar"
        assert info.hp == "90"

    def test_case_insensitive_hp(self):
        info = parse_card_info("Squirtle 40 hp")
        assert info.name == "Squirtle"
        assert info.hp == "40"

    def test_multi_word_name(self):
        info = parse_card_info("Mr. Mime 60 HP")
        assert info.name == "Mr. Mime"
        assert info.hp == "60"

    def test_no_hp_line_uses_first_non_empty_line(self):
        info = parse_card_info("\n\n   Professor Oak   \nDraw 7 cards\n")
        assert info.name == "Professor Oak"
        assert info.hp == ""

    def test_no_patterns_at_all(self):
        info = parse_card_info("just some words\nnothing else")
        assert info.name == "just some words"
        assert info.hp == ""
        assert info.set_number == ""
        assert info.type == ""
        assert info.rarity == ""
        assert info.attacks == []
        assert info.weaknesses == []
        assert info.retreat_cost is None
        assert info.artist is None


class TestSetNumber:
    """Set number detection."""

    def test_first_set_number_only(self):
        info = parse_card_info("Pikachu 60 HP\n58/102\n12/99")
        assert info.set_number == "58/102"
        assert info.card_number == "58"
        assert info.total_cards == "102"

    def test_set_number_inside_line(self):
        info = parse_card_info("Pikachu 60 HP\nBase Set 58/102 ●")
        assert info.set_number == "58/102"

    def test_missing_set_number(self):
        info = parse_card_info("Pikachu 60 HP")
        assert info.set_number == ""
        assert info.card_number is None
        assert info.total_cards is None


class TestTypeAndRarity:
    """Type vocabulary and rarity glyphs."""

    def test_type_is_canonical_case(self):
        info = parse_card_info("Charmander 50 HP\nFIRE\n4/102")
        assert info.type == "Fire"

    def test_type_requires_word_boundary(self):
        info = parse_card_info("Firestorm Trainer\nWaterfall shuffle")
        assert info.type == ""

    def test_first_type_wins(self):
        info = parse_card_info("Pikachu 60 HP\nElectric\nWeakness Fighting")
        assert info.type == "Electric"

    def test_star_is_rare(self):
        assert parse_card_info("Pikachu 60 HP\n58/102 ★").rarity == "Rare"

    def test_rare_word_is_rare(self):
        assert parse_card_info("Pikachu 60 HP\nRare Holo").rarity == "Rare"

    def test_rare_word_requires_word_boundary(self):
        assert parse_card_info("Pikachu 60 HP\nRarely seen").rarity == ""

    def test_diamond_is_uncommon(self):
        assert parse_card_info("Pikachu 60 HP\n58/102 ◆").rarity == "Uncommon"

    def test_circle_is_common(self, sample_card_text):
        assert parse_card_info(sample_card_text).rarity == "Common"

    def test_rare_outranks_other_glyphs(self):
        assert parse_card_info("Pikachu 60 HP\n● ◆ ★").rarity == "Rare"


class TestOptionalFields:
    """Attacks, weakness, retreat cost and artist."""

    def test_sample_card_optional_fields(self, sample_card_info):
        assert sample_card_info.attacks == ["Thunder Shock", "Quick Attack"]
        assert sample_card_info.weaknesses == ["Fighting"]
        assert sample_card_info.retreat_cost == 1
        assert sample_card_info.artist == "Mitsuhiro Arita"

    def test_attacks_with_damage_modifiers(self):
        info = parse_card_info("Charizard 120 HP\nFire Spin 100+\nSlash 30×")
        assert info.attacks == ["Fire Spin", "Slash"]

    def test_weakness_must_be_a_type(self):
        info = parse_card_info("Pikachu 60 HP\nWeakness none")
        assert info.weaknesses == []

    def test_no_attacks_without_hp_line(self):
        info = parse_card_info("Energy Search\nDraw 2 cards")
        assert info.attacks == []


class TestRobustness:
    """The parser never fails and keeps the raw text."""

    def test_full_text_is_untouched(self, sample_card_text):
        assert parse_card_info(sample_card_text).full_text == sample_card_text

    def test_empty_text(self):
        info = parse_card_info("")
        assert info.name == ""
        assert info.full_text == ""

    def test_none_text(self):
        info = parse_card_info(None)
        assert info.name == ""
        assert info.full_text == ""

    def test_whitespace_only(self):
        assert parse_card_info("   \n\t\n").name == ""
