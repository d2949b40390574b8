"""Pick a random, id-ordered subset of enriched cards for display."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from card_search.models import EnrichedCard

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 10


def sample_cards(
    cards: Sequence[EnrichedCard],
    count: int = DEFAULT_SAMPLE_SIZE,
    seed: Optional[int] = None,
) -> List[EnrichedCard]:
    """Shuffle a copy of ``cards``, keep the first ``count`` and sort them by id.

    Ids are compared as strings, so "100" sorts before "42". When fewer than
    ``count`` cards are available all of them are returned. A new generator
    is seeded on every call (from OS entropy unless ``seed`` is given).
    """
    if count < 0:
        raise ValueError(f"Sample size must be >= 0, got {count}")

    pool = list(cards)
    if len(pool) < count:
        logger.info("Only %d cards available, sampling all of them", len(pool))

    rng = random.Random(seed)
    rng.shuffle(pool)
    chosen = pool[:count]
    chosen.sort(key=lambda c: c.id)
    return chosen
