"""Data models for card search results, metadata and display records.

Raw records mirror the JSON returned by the Hearthstone game-data API.
Only the foreign keys and display fields are typed strictly; everything
else is carried through as received.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Card:
    """A single card as returned by ``GET /hearthstone/cards``."""

    id: int
    name: str
    image: str = ""
    card_type_id: int = 0
    rarity_id: int = 0
    card_set_id: int = 0
    class_id: int = 0
    mana_cost: int = 0
    slug: str = ""
    text: str = ""
    flavor_text: str = ""
    crop_image: str = ""
    image_gold: str = ""
    artist_name: Optional[str] = None
    health: Optional[int] = None
    attack: Optional[int] = None
    collectible: int = 0
    parent_id: int = 0
    multi_class_ids: List[int] = field(default_factory=list)


@dataclass
class CardSearchResult:
    """One page of card search results."""

    cards: List[Card] = field(default_factory=list)
    card_count: int = 0
    page: int = 1
    page_count: int = 1


@dataclass(frozen=True)
class MetadataEntry:
    """Generic ``{id, name, slug}`` grouping (types, spell schools, game modes...)."""

    id: int
    name: str
    slug: str = ""


@dataclass(frozen=True)
class Rarity(MetadataEntry):
    crafting_cost: List[Optional[int]] = field(default_factory=list)
    dust_value: List[Optional[int]] = field(default_factory=list)


@dataclass(frozen=True)
class CardClass(MetadataEntry):
    card_id: Optional[int] = None
    hero_power_card_id: Optional[int] = None
    alternate_hero_card_ids: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class CardSet(MetadataEntry):
    """A card set. ``alias_set_ids`` are older ids the set was renumbered from."""

    alias_set_ids: List[int] = field(default_factory=list)
    type: str = ""
    collectible_count: int = 0
    collectible_revealed_count: int = 0
    non_collectible_count: int = 0
    non_collectible_revealed_count: int = 0


@dataclass(frozen=True)
class Keyword(MetadataEntry):
    ref_text: str = ""
    text: str = ""


@dataclass(frozen=True)
class SetGroup:
    slug: str
    name: str
    card_sets: List[str] = field(default_factory=list)
    year: Optional[int] = None
    year_range: str = ""
    standard: bool = False
    icon: str = ""
    svg: str = ""


@dataclass
class MetadataResult:
    """Snapshot of every metadata collection for one locale."""

    types: List[MetadataEntry] = field(default_factory=list)
    rarities: List[Rarity] = field(default_factory=list)
    sets: List[CardSet] = field(default_factory=list)
    classes: List[CardClass] = field(default_factory=list)
    # Pass-through collections, not used for enrichment.
    arena_ids: List[int] = field(default_factory=list)
    card_back_categories: List[MetadataEntry] = field(default_factory=list)
    filterable_fields: List[str] = field(default_factory=list)
    game_modes: List[MetadataEntry] = field(default_factory=list)
    keywords: List[Keyword] = field(default_factory=list)
    minion_types: List[MetadataEntry] = field(default_factory=list)
    numeric_fields: List[str] = field(default_factory=list)
    set_groups: List[SetGroup] = field(default_factory=list)
    spell_schools: List[MetadataEntry] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        """Return the size of each collection, keyed by its API name."""
        return {
            "types": len(self.types),
            "rarities": len(self.rarities),
            "sets": len(self.sets),
            "classes": len(self.classes),
            "arenaIds": len(self.arena_ids),
            "cardBackCategories": len(self.card_back_categories),
            "filterableFields": len(self.filterable_fields),
            "gameModes": len(self.game_modes),
            "keywords": len(self.keywords),
            "minionTypes": len(self.minion_types),
            "numericFields": len(self.numeric_fields),
            "setGroups": len(self.set_groups),
            "spellSchools": len(self.spell_schools),
        }


@dataclass(frozen=True)
class EnrichedCard:
    """Display projection of a Card with foreign keys resolved to names."""

    id: str
    name: str
    type: str
    image: str
    rarity: str
    set: str
    card_class: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "image": self.image,
            "rarity": self.rarity,
            "set": self.set,
            "class": self.card_class,
        }
