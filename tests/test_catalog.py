"""Tests for card data loading and the catalog."""

import json

import pytest

from draftclaw.catalog.catalog import CardCatalog
from draftclaw.catalog.loader import (
    load_card_ratings,
    load_cards,
    load_catalog,
    parse_card,
    parse_card_type,
    parse_influence,
)
from draftclaw.core.constants import NO_CARD_TEXT
from draftclaw.core.types import CardKind, CardRarity, Influence
from draftclaw.utils.error_handler import CatalogError, ConfigurationError


class TestParseFields:
    """Test parsing of individual card data fields."""

    def test_parse_influence(self):
        assert parse_influence("{F}{F}{T}") == (Influence.FIRE, Influence.FIRE, Influence.TIME)
        assert parse_influence("{J}{X}{S}") == (Influence.JUSTICE, Influence.SHADOW)
        assert parse_influence("") == ()
        assert parse_influence(None) == ()

    def test_parse_card_type(self):
        fast = parse_card_type("Fast Spell")
        assert fast.kind == CardKind.SPELL and fast.is_fast
        assert str(fast) == "Fast Spell"

        unit = parse_card_type("Unit")
        assert unit.kind == CardKind.UNIT and not unit.is_fast

        assert parse_card_type("Weapon Relic").kind == CardKind.NONE
        assert parse_card_type(None).kind == CardKind.NONE

    @pytest.mark.parametrize("raw,rarity", [
        ("Legendary", CardRarity.LEGENDARY),
        ("rare", CardRarity.RARE),
        ("U", CardRarity.UNCOMMON),
        ("Promo", CardRarity.PROMO),
        ("Mythic", CardRarity.NONE),
        (None, CardRarity.NONE),
    ])
    def test_rarity(self, raw, rarity):
        assert CardRarity.from_string(raw) == rarity

    def test_rarity_order(self):
        assert CardRarity.LEGENDARY > CardRarity.RARE > CardRarity.UNCOMMON
        assert CardRarity.COMMON > CardRarity.PROMO > CardRarity.NONE


class TestParseCard:
    """Test conversion of one card data entry."""

    def test_full_entry(self, card_data):
        card = parse_card(card_data[1])
        assert card.name == "Oni Ronin"
        assert card.cost == 1
        assert card.influence_symbols == "F"
        assert card.has_stats
        assert (card.attack, card.health) == (2, 1)
        assert card.image_url == "https://cards.example/oni-ronin.png"

    def test_defaults(self):
        card = parse_card({"Name": " Fire Sigil ", "Cost": 0, "Rarity": "Common", "Type": "Power"})
        assert card.name == "Fire Sigil"
        assert card.card_text == NO_CARD_TEXT
        assert card.influence == ()
        assert not card.has_stats

    def test_to_text(self, card_data):
        assert parse_card(card_data[0]).to_text() == "[  Common  ] 1F      Torch"
        assert parse_card(card_data[1]).to_text() == "[  Common  ] 1F      Oni Ronin 2/1"

    def test_missing_required_field(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_card({"Name": "Torch"})
        assert "Cost" in str(exc_info.value)


class TestLoadCards:
    """Test reading the card data file."""

    def test_load_catalog(self, card_data_file, card_data):
        catalog = load_catalog(card_data_file)
        assert len(catalog) == len(card_data)
        assert "Torch" in catalog
        assert catalog.get("Torch").card_type.is_fast

    def test_bad_entry_reports_position(self, tmp_path, card_data):
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([card_data[0], {"Name": "Broken"}]), encoding="utf-8")
        with pytest.raises(CatalogError) as exc_info:
            load_cards(path)
        assert "position 1" in exc_info.value.message

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text('{"Name": "Torch"}', encoding="utf-8")
        with pytest.raises(CatalogError):
            load_cards(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_cards(tmp_path / "missing.json")


class TestLoadRatings:
    """Test reading the tab-separated ratings file."""

    def test_ratings_file(self, tmp_path):
        path = tmp_path / "card_rating.txt"
        path.write_text(
            "Rating\tCards\n"
            "A-\tSandstorm Titan\tRizahn, the Hero's Blade\n"
            "4 deliveries\tTorch\t\n"
            "10 cylices\tTrail Maker\n"
            "\tOrphan Card\n",
            encoding="utf-8",
        )
        ratings = load_card_ratings(path)
        assert ratings == {
            "Sandstorm Titan": "A-",
            "Rizahn, the Hero's Blade": "A-",
            "Torch": "D+",
            "Trail Maker": "D",
        }

    def test_missing_ratings_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_card_ratings(tmp_path / "missing.txt")


class TestCardCatalog:
    """Test the read-only catalog."""

    def test_duplicate_names_keep_last_entry(self, card_data):
        first = parse_card(card_data[0])
        second = parse_card(dict(card_data[0], Cost=3))
        catalog = CardCatalog([first, second])
        assert len(catalog) == 1
        assert catalog.get("Torch").cost == 3

    def test_iterates_every_card(self, catalog):
        names = [card.name for card in catalog]
        assert len(names) == len(catalog)
        assert "Sandstorm Titan" in names

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog._cards["New Card"] = None
