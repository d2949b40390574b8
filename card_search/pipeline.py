"""Search, enrich and sample: the request path behind the card page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Union

from card_search.client import CardSearchParams, HearthstoneClient
from card_search.enrich import enrich_cards
from card_search.models import Card, EnrichedCard, MetadataResult
from card_search.sampler import DEFAULT_SAMPLE_SIZE, sample_cards

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    cards: List[Card] = field(default_factory=list)
    metadata: MetadataResult = field(default_factory=MetadataResult)
    enriched: List[EnrichedCard] = field(default_factory=list)
    sample: List[EnrichedCard] = field(default_factory=list)


class SearchPipeline:
    """Runs the configured searches in order, then one metadata fetch.

    API errors propagate to the caller untouched.
    """

    def __init__(
        self,
        client: HearthstoneClient,
        searches: Sequence[Union[CardSearchParams, Mapping[str, str]]],
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        seed: Optional[int] = None,
    ) -> None:
        self._client = client
        self._searches = list(searches)
        self._sample_size = sample_size
        self._seed = seed

    async def run(self) -> PipelineResult:
        cards: List[Card] = []
        for params in self._searches:
            result = await self._client.search_cards(params)
            cards.extend(result.cards)

        metadata = await self._client.get_metadata()
        enriched = enrich_cards(cards, metadata)
        sample = sample_cards(enriched, self._sample_size, seed=self._seed)
        logger.info(
            "Pipeline: %d searches, %d cards, %d sampled",
            len(self._searches), len(cards), len(sample),
        )
        return PipelineResult(cards=cards, metadata=metadata, enriched=enriched, sample=sample)
