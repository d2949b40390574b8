"""Payload builders, endpoint URLs and a controllable clock for tests."""

from typing import Any, Dict, List

API_URL = "https://us.api.blizzard.com"
TOKEN_URL = "https://us.battle.net/oauth/token"
CARDS_URL = f"{API_URL}/hearthstone/cards"
METADATA_URL = f"{API_URL}/hearthstone/metadata"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def token_payload(access_token: str = "tok-1", expires_in: int = 86399) -> Dict[str, Any]:
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": expires_in,
        "sub": "client-id",
    }


def card_payload(card_id: int, name: str, **overrides: Any) -> Dict[str, Any]:
    raw = {
        "id": card_id,
        "collectible": 1,
        "slug": f"{card_id}-{name.lower().replace(' ', '-')}",
        "classId": 2,
        "multiClassIds": [],
        "cardTypeId": 4,
        "cardSetId": 3,
        "rarityId": 5,
        "artistName": None,
        "health": 8,
        "attack": 8,
        "manaCost": 8,
        "name": name,
        "text": "",
        "image": f"https://img.example.com/{card_id}.png",
        "imageGold": "",
        "flavorText": "",
        "cropImage": "",
        "parentId": 0,
    }
    raw.update(overrides)
    return raw


def search_payload(cards: List[Dict[str, Any]], page: int = 1, page_count: int = 1) -> Dict[str, Any]:
    return {"cards": cards, "cardCount": len(cards), "page": page, "pageCount": page_count}


