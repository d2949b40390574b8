"""Shared fixtures."""

from typing import Any, Dict

import pytest

from helpers import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metadata_payload() -> Dict[str, Any]:
    return {
        "sets": [
            {
                "id": 3,
                "name": "Legacy",
                "slug": "legacy",
                "type": "",
                "aliasSetIds": [2, 1646],
                "collectibleCount": 235,
                "collectibleRevealedCount": 235,
                "nonCollectibleCount": 0,
                "nonCollectibleRevealedCount": 0,
            },
            {"id": 1635, "name": "Core", "slug": "core", "aliasSetIds": []},
        ],
        "setGroups": [
            {
                "slug": "standard",
                "year": 2021,
                "svg": "",
                "cardSets": ["core"],
                "name": "Standard",
                "standard": True,
                "icon": "",
            },
        ],
        "types": [
            {"slug": "hero", "id": 3, "name": "Hero"},
            {"slug": "minion", "id": 4, "name": "Minion"},
            {"slug": "spell", "id": 5, "name": "Spell"},
        ],
        "rarities": [
            {"slug": "common", "id": 1, "craftingCost": [40, 400], "dustValue": [5, 50], "name": "Common"},
            {"slug": "legendary", "id": 5, "craftingCost": [1600, 3200], "dustValue": [400, 1600], "name": "Legendary"},
        ],
        "classes": [
            {"slug": "druid", "id": 2, "name": "Druid", "cardId": 274, "heroPowerCardId": 1123},
            {"slug": "warlock", "id": 9, "name": "Warlock", "cardId": 893, "heroPowerCardId": 1090},
            {"slug": "neutral", "id": 12, "name": "Neutral"},
        ],
        "minionTypes": [{"slug": "dragon", "id": 24, "name": "Dragon"}],
        "spellSchools": [{"slug": "fel", "id": 6, "name": "Fel"}],
        "gameModes": [{"slug": "constructed", "id": 1, "name": "Constructed"}],
        "cardBackCategories": [{"slug": "base", "id": 1, "name": "Base"}],
        "keywords": [
            {"id": 1, "slug": "taunt", "name": "Taunt", "refText": "Enemies must attack this.", "text": "..."},
        ],
        "filterableFields": ["attack", "health", "manaCost"],
        "numericFields": ["attack", "health", "manaCost"],
        "arenaIds": [1, 2, 3],
    }
