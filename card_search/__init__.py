"""Hearthstone card search: API client, metadata enrichment and sampling."""

from card_search.client import CardSearchParams, HearthstoneClient
from card_search.enrich import enrich_cards
from card_search.errors import AuthError, CardSearchError, TransportError, UpstreamError
from card_search.lookup import MetadataIndex
from card_search.sampler import sample_cards

__all__ = [
    "AuthError",
    "CardSearchError",
    "CardSearchParams",
    "HearthstoneClient",
    "MetadataIndex",
    "TransportError",
    "UpstreamError",
    "enrich_cards",
    "sample_cards",
]
