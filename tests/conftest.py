"""Pytest configuration and shared fixtures for Draft Claw tests."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from draftclaw.catalog.catalog import CardCatalog
from draftclaw.catalog.loader import parse_card
from draftclaw.draft.session import DraftSession
from draftclaw.store.context import RuntimeContext
from draftclaw.store.draft_store import DraftStore


SAMPLE_CARD_DATA = [
    {
        "SetNumber": 1, "Name": "Torch", "CardText": "Deal 2 damage to a unit.",
        "Cost": 1, "Influence": "{F}", "Attack": 0, "Health": 0, "Rarity": "Common",
        "Type": "Fast Spell", "ImageUrl": "https://cards.example/torch.png",
        "DetailsUrl": "https://cards.example/torch", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Oni Ronin", "CardText": "Charge",
        "Cost": 1, "Influence": "{F}", "Attack": 2, "Health": 1, "Rarity": "Common",
        "Type": "Unit", "ImageUrl": "https://cards.example/oni-ronin.png",
        "DetailsUrl": "https://cards.example/oni-ronin", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Permafrost", "CardText": "Stun a unit.",
        "Cost": 2, "Influence": "{P}", "Attack": 0, "Health": 0, "Rarity": "Common",
        "Type": "Spell", "ImageUrl": "https://cards.example/permafrost.png",
        "DetailsUrl": "https://cards.example/permafrost", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Sandstorm Titan", "CardText": "Endurance",
        "Cost": 6, "Influence": "{T}{T}", "Attack": 6, "Health": 6, "Rarity": "Rare",
        "Type": "Unit", "ImageUrl": "https://cards.example/sandstorm-titan.png",
        "DetailsUrl": "https://cards.example/sandstorm-titan", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Trail Maker", "CardText": "Summon: Draw a Sigil.",
        "Cost": 1, "Influence": "{T}", "Attack": 1, "Health": 1, "Rarity": "Common",
        "Type": "Unit", "ImageUrl": "https://cards.example/trail-maker.png",
        "DetailsUrl": "https://cards.example/trail-maker", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Fire Sigil",
        "Cost": 0, "Influence": "", "Attack": 0, "Health": 0, "Rarity": "Common",
        "Type": "Power", "ImageUrl": "https://cards.example/fire-sigil.png",
        "DetailsUrl": "https://cards.example/fire-sigil", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Time Sigil",
        "Cost": 0, "Influence": "", "Attack": 0, "Health": 0, "Rarity": "Common",
        "Type": "Power", "ImageUrl": "https://cards.example/time-sigil.png",
        "DetailsUrl": "https://cards.example/time-sigil", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
    {
        "SetNumber": 1, "Name": "Rizahn, the Hero's Blade", "CardText": "Killer",
        "Cost": 5, "Influence": "{J}{J}", "Attack": 5, "Health": 5, "Rarity": "Legendary",
        "Type": "Unit", "ImageUrl": "https://cards.example/rizahn.png",
        "DetailsUrl": "https://cards.example/rizahn", "DeckBuildable": True, "SetName": "The Empty Throne",
    },
]

SAMPLE_RATINGS = {"Torch": "B+", "Oni Ronin": "C", "Sandstorm Titan": "A-"}


@pytest.fixture(scope="session")
def card_data():
    """Raw card data entries in the static JSON format."""
    return SAMPLE_CARD_DATA


@pytest.fixture(scope="session")
def catalog(card_data):
    """Small catalog shared by resolver, session and command tests."""
    return CardCatalog(parse_card(entry) for entry in card_data)


@pytest.fixture(scope="session")
def letter_catalog():
    """Catalog with only three similarly named cards."""
    return CardCatalog(
        parse_card({"Name": name, "Cost": 1, "Rarity": "Common", "Type": "Unit"})
        for name in ("card alpha", "card beta", "card omega")
    )


@pytest.fixture(scope="function")
def card_data_file(tmp_path, card_data):
    """Card data written to a temporary JSON file."""
    path = tmp_path / "eternal-cards.json"
    path.write_text(json.dumps(card_data), encoding="utf-8")
    return path


@pytest.fixture(scope="function")
def ratings():
    return dict(SAMPLE_RATINGS)


@pytest.fixture(scope="function")
def store(tmp_path):
    """Draft store backed by a temporary SQLite file."""
    return DraftStore(tmp_path / "data" / "draft.db")


@pytest.fixture(scope="function")
def runtime_context(tmp_path):
    return RuntimeContext(tmp_path / "data" / "runtime_data.json")


@pytest.fixture(scope="function")
def mock_uploader():
    """Uploader that always succeeds without touching the network."""
    uploader = MagicMock()
    uploader.enabled = True
    uploader.upload = AsyncMock(return_value="https://i.imgur.com/abc123.png")
    return uploader


@pytest.fixture(scope="function")
def session(catalog, store, runtime_context, ratings, mock_uploader):
    """Draft session wired to temporary storage and a mock uploader."""
    return DraftSession(
        catalog=catalog,
        store=store,
        context=runtime_context,
        ratings=ratings,
        uploader=mock_uploader,
        lenient=False,
    )


@pytest.fixture(scope="function")
def pick_ten_observation():
    """Observation of pick 10: three cards left in the pack."""
    return {
        "pick": "Pick 10",
        "cards": ["T0rch", "0ni Ronin", "Permafr0st", "leftover slot"],
        "deck": [["Trail Maker", "2x"], ["Fire Siqil", "1x"]],
        "image": None,
    }


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
        if any(slow_indicator in item.name.lower() for slow_indicator in ['performance', 'bulk']):
            item.add_marker(pytest.mark.slow)

        # Mark unit tests (default)
        if not item.get_closest_marker('integration') and not item.get_closest_marker('slow'):
            item.add_marker(pytest.mark.unit)
