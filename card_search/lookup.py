"""Resolve card foreign keys (type, rarity, set, class) to display names.

The ``resolve_*`` functions are plain linear scans over one metadata
collection. :class:`MetadataIndex` builds dict indexes once per metadata
snapshot and answers the same questions in constant time. Every lookup is
total: an unknown id resolves to ``""``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Sequence

from card_search.models import CardClass, CardSet, MetadataEntry, MetadataResult, Rarity

logger = logging.getLogger(__name__)


def resolve_generic(id: int, collection: Iterable[MetadataEntry]) -> str:
    for entry in collection:
        if entry.id == id:
            return entry.name
    return ""


def resolve_rarity(id: int, rarities: Iterable[Rarity]) -> str:
    return resolve_generic(id, rarities)


def resolve_class(id: int, classes: Iterable[CardClass]) -> str:
    return resolve_generic(id, classes)


def resolve_set(id: int, sets: Iterable[CardSet]) -> str:
    """Look up a set name by id or alias id.

    Each entry's aliases are checked before its own id, then the scan moves
    on to the next entry.
    """
    for entry in sets:
        if id in entry.alias_set_ids:
            return entry.name
        if entry.id == id:
            return entry.name
    return ""


def _index(collection: Iterable[MetadataEntry]) -> Dict[int, str]:
    index: Dict[int, str] = {}
    for entry in collection:
        index.setdefault(entry.id, entry.name)
    return index


def _index_sets(sets: Sequence[CardSet]) -> Dict[int, str]:
    # First writer wins, aliases before the primary id of the same entry.
    index: Dict[int, str] = {}
    for entry in sets:
        for alias in entry.alias_set_ids:
            index.setdefault(alias, entry.name)
        index.setdefault(entry.id, entry.name)
    return index


class MetadataIndex:
    """Constant-time name lookups over one metadata snapshot."""

    def __init__(self, metadata: MetadataResult) -> None:
        self.metadata = metadata
        self._types = _index(metadata.types)
        self._rarities = _index(metadata.rarities)
        self._classes = _index(metadata.classes)
        self._sets = _index_sets(metadata.sets)
        logger.debug(
            "Indexed metadata: %d types, %d rarities, %d classes, %d set ids",
            len(self._types), len(self._rarities), len(self._classes), len(self._sets),
        )

    def type_name(self, id: int) -> str:
        return self._types.get(id, "")

    def rarity_name(self, id: int) -> str:
        return self._rarities.get(id, "")

    def class_name(self, id: int) -> str:
        return self._classes.get(id, "")

    def set_name(self, id: int) -> str:
        return self._sets.get(id, "")
