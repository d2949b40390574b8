"""Hearthstone game-data API client.

Wraps an ``httpx.AsyncClient`` bound to the regional API host. Every request
carries a bearer token managed by :class:`~card_search.auth.TokenManager` and
is retried only when the server answers 429 Too Many Requests.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

import httpx

from card_search.auth import TokenManager
from card_search.errors import TransportError, UpstreamError
from card_search.models import (
    Card,
    CardClass,
    CardSearchResult,
    CardSet,
    Keyword,
    MetadataEntry,
    MetadataResult,
    Rarity,
    SetGroup,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CARDS_PATH = "/hearthstone/cards"
METADATA_PATH = "/hearthstone/metadata"
DEFAULT_LOCALE = "en_US"
DEFAULT_REGION = "us"
MAX_RETRIES = 3

# region -> (api host, oauth host)
REGION_HOSTS: Dict[str, tuple] = {
    "us": ("https://us.api.blizzard.com", "https://us.battle.net"),
    "eu": ("https://eu.api.blizzard.com", "https://eu.battle.net"),
    "kr": ("https://kr.api.blizzard.com", "https://kr.battle.net"),
    "tw": ("https://tw.api.blizzard.com", "https://tw.battle.net"),
    "cn": ("https://gateway.battlenet.com.cn", "https://www.battlenet.com.cn"),
}

_LOCALE_RE = re.compile(r"^[a-z]{2}_[A-Z]{2}$")


def api_base_url(region: str) -> str:
    return REGION_HOSTS[region][0]


def token_url(region: str) -> str:
    return f"{REGION_HOSTS[region][1]}/oauth/token"


@dataclass(frozen=True)
class CardSearchParams:
    """Recognized card search filters.

    Unset fields are omitted from the query. ``extra`` is passed through
    verbatim for filters not modelled here (``attack``, ``health``,
    ``textFilter``, ``sort``...).
    """

    locale: str = DEFAULT_LOCALE
    card_class: Optional[str] = None
    rarity: Optional[str] = None
    mana_cost: Sequence[int] = ()
    set: Optional[str] = None
    type: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not _LOCALE_RE.match(self.locale):
            raise ValueError(f"Invalid locale '{self.locale}', expected e.g. 'en_US'")
        for cost in self.mana_cost:
            if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
                raise ValueError(f"Invalid mana cost {cost!r}: must be a non-negative integer")
        if self.page is not None and self.page < 1:
            raise ValueError(f"Invalid page {self.page}: must be >= 1")
        if self.page_size is not None and self.page_size < 1:
            raise ValueError(f"Invalid page size {self.page_size}: must be >= 1")

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, Any], default_locale: str = DEFAULT_LOCALE
    ) -> "CardSearchParams":
        """Build params from API-style keys (``class``, ``manaCost``...).

        ``default_locale`` applies when ``raw`` has no ``locale`` key.
        """
        known = {"locale", "class", "rarity", "manaCost", "set", "type", "page", "pageSize"}
        mana_raw = raw.get("manaCost", ())
        if isinstance(mana_raw, str):
            mana_cost = [int(m) for m in mana_raw.split(",") if m.strip()]
        elif isinstance(mana_raw, int):
            mana_cost = [mana_raw]
        else:
            mana_cost = [int(m) for m in mana_raw]
        return cls(
            locale=str(raw.get("locale") or default_locale),
            card_class=raw.get("class"),
            rarity=raw.get("rarity"),
            mana_cost=tuple(mana_cost),
            set=raw.get("set"),
            type=raw.get("type"),
            page=_int_or_none(raw.get("page")),
            page_size=_int_or_none(raw.get("pageSize")),
            extra={k: str(v) for k, v in raw.items() if k not in known},
        )

    def to_query(self) -> Dict[str, str]:
        query: Dict[str, str] = {"locale": self.locale}
        if self.card_class:
            query["class"] = self.card_class
        if self.rarity:
            query["rarity"] = self.rarity
        if self.mana_cost:
            query["manaCost"] = ",".join(str(m) for m in self.mana_cost)
        if self.set:
            query["set"] = self.set
        if self.type:
            query["type"] = self.type
        if self.page is not None:
            query["page"] = str(self.page)
        if self.page_size is not None:
            query["pageSize"] = str(self.page_size)
        query.update(self.extra)
        return query


class HearthstoneClient:
    """Authenticated client for the card search and metadata endpoints.

    Use as an async context manager, or call :meth:`close` when done.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        region: str = DEFAULT_REGION,
        locale: str = DEFAULT_LOCALE,
        max_retries: int = MAX_RETRIES,
        retry_backoff: float = 0.0,
        timeout: float = 30.0,
        debug: bool = False,
        http: Optional[httpx.AsyncClient] = None,
        token_manager: Optional[TokenManager] = None,
    ) -> None:
        if region not in REGION_HOSTS:
            raise ValueError(f"Unknown region '{region}'. Available: {list(REGION_HOSTS)}")
        self._region = region
        self._locale = locale
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff
        self._owns_http = http is None
        if http is None:
            hooks = {"request": [_log_request], "response": [_log_response]} if debug else {}
            http = httpx.AsyncClient(
                base_url=api_base_url(region),
                timeout=timeout,
                headers={"User-Agent": "card-search/0.1"},
                event_hooks=hooks,
            )
        self._http = http
        self._tokens = token_manager or TokenManager(
            client_id,
            client_secret,
            token_url(region),
            http,
        )

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    async def __aenter__(self) -> "HearthstoneClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()

    async def search_cards(
        self, options: Union[CardSearchParams, Mapping[str, str]]
    ) -> CardSearchResult:
        """Search cards. A plain mapping is sent as query parameters unchanged."""
        if isinstance(options, CardSearchParams):
            params = options.to_query()
        else:
            params = dict(options)
        result = await self._get_json(CARDS_PATH, params, _parse_search_result)
        logger.info(
            "Card search %s -> %d cards (page %d/%d)",
            params, len(result.cards), result.page, result.page_count,
        )
        return result

    async def get_metadata(self) -> MetadataResult:
        """Fetch every metadata collection for the client's locale."""
        metadata = await self._get_json(METADATA_PATH, {"locale": self._locale}, _parse_metadata)
        logger.info(
            "Metadata (%s): %d types, %d rarities, %d sets, %d classes",
            self._locale,
            len(metadata.types),
            len(metadata.rarities),
            len(metadata.sets),
            len(metadata.classes),
        )
        return metadata

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        path: str,
        params: Mapping[str, str],
        parse: Callable[[Dict[str, Any]], T],
    ) -> T:
        """GET ``path`` and parse the JSON object body.

        A 2xx body that is not JSON, or not shaped like the expected object,
        raises :class:`UpstreamError` carrying the status and body.
        """
        headers = await self._tokens.auth_header()
        attempt = 0
        while True:
            try:
                resp = await self._http.get(path, params=params, headers=headers)
            except httpx.TransportError as exc:
                raise TransportError(f"GET {path} failed: {exc}") from exc

            if resp.status_code == 429 and attempt < self._max_retries:
                attempt += 1
                delay = self._retry_delay(resp, attempt)
                logger.warning(
                    "Rate limited on %s, retry %d/%d in %.1fs",
                    path, attempt, self._max_retries, delay,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
                continue

            if not resp.is_success:
                raise UpstreamError(resp.status_code, resp.text)
            try:
                data = resp.json()
            except ValueError as exc:
                raise UpstreamError(resp.status_code, resp.text) from exc
            if not isinstance(data, dict):
                raise UpstreamError(resp.status_code, resp.text)
            try:
                return parse(data)
            except (TypeError, ValueError) as exc:
                raise UpstreamError(resp.status_code, resp.text) from exc

    def _retry_delay(self, resp: httpx.Response, attempt: int) -> float:
        if self._retry_backoff <= 0:
            return 0.0
        retry_after = resp.headers.get("Retry-After", "")
        try:
            return float(retry_after)
        except ValueError:
            return self._retry_backoff * (2 ** (attempt - 1))


def _int_or_none(val: Any) -> Optional[int]:
    if val is None or val == "":
        return None
    return int(val)


async def _log_request(request: httpx.Request) -> None:
    logger.debug("--> %s %s", request.method, request.url)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug("<-- %s %s %d", request.method, request.url, response.status_code)


# ----------------------------------------------------------------------
# Response parsing
# ----------------------------------------------------------------------


def _int(val: Any, default: int = 0) -> int:
    # JSON null decodes to the zero value, as a missing key does.
    if val is None or val == "":
        return default
    return int(val)


def _str(val: Any) -> str:
    return "" if val is None else str(val)


def _as_list(val: Any, name: str) -> List[Any]:
    if val is None:
        return []
    if not isinstance(val, list):
        raise ValueError(f"expected '{name}' to be a list, got {type(val).__name__}")
    return val


def _parse_items(data: Dict[str, Any], name: str, build: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Parse one collection, skipping entries that are not usable objects."""
    items: List[T] = []
    for raw in _as_list(data.get(name), name):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object entry in %s: %r", name, raw)
            continue
        try:
            items.append(build(raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping unparseable entry %s in %s: %s", raw.get("id", "?"), name, exc)
    return items


def _parse_search_result(data: Dict[str, Any]) -> CardSearchResult:
    cards = _parse_items(data, "cards", _parse_card)
    return CardSearchResult(
        cards=cards,
        card_count=_int(data.get("cardCount"), len(cards)),
        page=_int(data.get("page"), 1),
        page_count=_int(data.get("pageCount"), 1),
    )


def _parse_card(raw: Dict[str, Any]) -> Card:
    return Card(
        id=int(raw["id"]),
        name=_str(raw.get("name")),
        image=_str(raw.get("image")),
        card_type_id=_int(raw.get("cardTypeId")),
        rarity_id=_int(raw.get("rarityId")),
        card_set_id=_int(raw.get("cardSetId")),
        class_id=_int(raw.get("classId")),
        mana_cost=_int(raw.get("manaCost")),
        slug=_str(raw.get("slug")),
        text=_str(raw.get("text")),
        flavor_text=_str(raw.get("flavorText")),
        crop_image=_str(raw.get("cropImage")),
        image_gold=_str(raw.get("imageGold")),
        artist_name=raw.get("artistName"),
        health=raw.get("health"),
        attack=raw.get("attack"),
        collectible=_int(raw.get("collectible")),
        parent_id=_int(raw.get("parentId")),
        multi_class_ids=[int(i) for i in raw.get("multiClassIds") or []],
    )


def _parse_entry(raw: Dict[str, Any]) -> MetadataEntry:
    return MetadataEntry(id=int(raw["id"]), name=_str(raw.get("name")), slug=_str(raw.get("slug")))


def _parse_rarity(raw: Dict[str, Any]) -> Rarity:
    return Rarity(
        id=int(raw["id"]),
        name=_str(raw.get("name")),
        slug=_str(raw.get("slug")),
        crafting_cost=list(raw.get("craftingCost") or []),
        dust_value=list(raw.get("dustValue") or []),
    )


def _parse_set(raw: Dict[str, Any]) -> CardSet:
    return CardSet(
        id=int(raw["id"]),
        name=_str(raw.get("name")),
        slug=_str(raw.get("slug")),
        alias_set_ids=[int(a) for a in raw.get("aliasSetIds") or []],
        type=_str(raw.get("type")),
        collectible_count=_int(raw.get("collectibleCount")),
        collectible_revealed_count=_int(raw.get("collectibleRevealedCount")),
        non_collectible_count=_int(raw.get("nonCollectibleCount")),
        non_collectible_revealed_count=_int(raw.get("nonCollectibleRevealedCount")),
    )


def _parse_class(raw: Dict[str, Any]) -> CardClass:
    return CardClass(
        id=int(raw["id"]),
        name=_str(raw.get("name")),
        slug=_str(raw.get("slug")),
        card_id=raw.get("cardId"),
        hero_power_card_id=raw.get("heroPowerCardId"),
        alternate_hero_card_ids=list(raw.get("alternateHeroCardIds") or []),
    )


def _parse_keyword(raw: Dict[str, Any]) -> Keyword:
    return Keyword(
        id=int(raw["id"]),
        name=_str(raw.get("name")),
        slug=_str(raw.get("slug")),
        ref_text=_str(raw.get("refText")),
        text=_str(raw.get("text")),
    )


def _parse_set_group(raw: Dict[str, Any]) -> SetGroup:
    return SetGroup(
        slug=_str(raw.get("slug")),
        name=_str(raw.get("name")),
        card_sets=list(raw.get("cardSets") or []),
        year=raw.get("year"),
        year_range=_str(raw.get("yearRange")),
        standard=bool(raw.get("standard", False)),
        icon=_str(raw.get("icon")),
        svg=_str(raw.get("svg")),
    )


def _parse_metadata(data: Dict[str, Any]) -> MetadataResult:
    return MetadataResult(
        types=_parse_items(data, "types", _parse_entry),
        rarities=_parse_items(data, "rarities", _parse_rarity),
        sets=_parse_items(data, "sets", _parse_set),
        classes=_parse_items(data, "classes", _parse_class),
        arena_ids=list(_as_list(data.get("arenaIds"), "arenaIds")),
        card_back_categories=_parse_items(data, "cardBackCategories", _parse_entry),
        filterable_fields=list(_as_list(data.get("filterableFields"), "filterableFields")),
        game_modes=_parse_items(data, "gameModes", _parse_entry),
        keywords=_parse_items(data, "keywords", _parse_keyword),
        minion_types=_parse_items(data, "minionTypes", _parse_entry),
        numeric_fields=list(_as_list(data.get("numericFields"), "numericFields")),
        set_groups=_parse_items(data, "setGroups", _parse_set_group),
        spell_schools=_parse_items(data, "spellSchools", _parse_entry),
    )
