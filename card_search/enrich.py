"""Join raw cards with metadata to produce display records."""

from __future__ import annotations

import logging
from typing import Iterable, List, Union

from card_search.lookup import MetadataIndex
from card_search.models import Card, EnrichedCard, MetadataResult

logger = logging.getLogger(__name__)


def enrich_card(card: Card, index: MetadataIndex) -> EnrichedCard:
    return EnrichedCard(
        id=str(card.id),
        name=card.name,
        type=index.type_name(card.card_type_id),
        image=card.image,
        rarity=index.rarity_name(card.rarity_id),
        set=index.set_name(card.card_set_id),
        card_class=index.class_name(card.class_id),
    )


def enrich_cards(
    cards: Iterable[Card], metadata: Union[MetadataResult, MetadataIndex]
) -> List[EnrichedCard]:
    """Return one enriched record per input card, in input order.

    Nothing is filtered out; ids missing from the metadata resolve to "".
    """
    index = metadata if isinstance(metadata, MetadataIndex) else MetadataIndex(metadata)
    enriched = [enrich_card(card, index) for card in cards]
    logger.debug("Enriched %d cards", len(enriched))
    return enriched
