"""YAML configuration loader and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from card_search.client import DEFAULT_LOCALE, DEFAULT_REGION, MAX_RETRIES, REGION_HOSTS, CardSearchParams
from card_search.sampler import DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")

# Environment variables that override the config file.
ENV_CLIENT_ID = "CLIENT_ID"
ENV_CLIENT_SECRET = "CLIENT_SECRET"

LEGENDARY_MANA_COSTS = (7, 8, 9, 10, 11, 12)


@dataclass
class ApiConfig:
    """Credentials and transport settings for the game-data API."""

    client_id: str = ""
    client_secret: str = ""
    region: str = DEFAULT_REGION
    locale: str = DEFAULT_LOCALE
    max_retries: int = MAX_RETRIES
    retry_backoff: float = 0.0  # seconds; 0 retries immediately
    timeout: float = 30.0
    debug: bool = False

    def __repr__(self) -> str:
        return (
            f"ApiConfig(client_id={self.client_id!r}, client_secret='***', "
            f"region={self.region!r}, locale={self.locale!r}, max_retries={self.max_retries})"
        )


@dataclass
class SampleConfig:
    size: int = DEFAULT_SAMPLE_SIZE
    seed: Optional[int] = None


def _default_searches(locale: str = DEFAULT_LOCALE) -> List[CardSearchParams]:
    return [
        CardSearchParams(
            locale=locale, card_class=card_class, rarity="legendary", mana_cost=LEGENDARY_MANA_COSTS
        )
        for card_class in ("druid", "warlock")
    ]


@dataclass
class AppConfig:
    """Top-level application configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    searches: List[CardSearchParams] = field(default_factory=_default_searches)
    sample: SampleConfig = field(default_factory=SampleConfig)


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
) -> AppConfig:
    """Load configuration from YAML, then apply env and explicit overrides.

    Precedence, lowest to highest: defaults, file, ``CLIENT_ID`` /
    ``CLIENT_SECRET`` environment variables, keyword arguments.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.info("No config file at %s, using defaults", config_path)
        config = AppConfig()
    else:
        logger.info("Loading config from %s", config_path)
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        config = _parse_config(raw) if raw else AppConfig()

    env = os.environ if env is None else env
    if env.get(ENV_CLIENT_ID):
        config.api.client_id = env[ENV_CLIENT_ID]
    if env.get(ENV_CLIENT_SECRET):
        config.api.client_secret = env[ENV_CLIENT_SECRET]

    # CLI overrides
    if client_id:
        config.api.client_id = client_id
    if client_secret:
        config.api.client_secret = client_secret

    _validate_config(config)
    return config


def _parse_config(raw: Dict[str, Any]) -> AppConfig:
    """Parse raw YAML dict into AppConfig."""
    config = AppConfig()

    if "api" in raw:
        api = raw["api"] or {}
        config.api = ApiConfig(
            client_id=str(api.get("client_id", "") or ""),
            client_secret=str(api.get("client_secret", "") or ""),
            region=str(api.get("region", DEFAULT_REGION)),
            locale=str(api.get("locale", DEFAULT_LOCALE)),
            max_retries=int(api.get("max_retries", MAX_RETRIES)),
            retry_backoff=float(api.get("retry_backoff", 0.0)),
            timeout=float(api.get("timeout", 30.0)),
            debug=bool(api.get("debug", False)),
        )
        config.searches = _default_searches(config.api.locale)

    if "searches" in raw:
        searches = raw["searches"] or []
        try:
            config.searches = [
                CardSearchParams.from_mapping(s, default_locale=config.api.locale) for s in searches
            ]
        except ValueError as exc:
            raise ValueError(f"Config error: invalid search: {exc}") from exc

    if "sample" in raw:
        smp = raw["sample"] or {}
        seed = smp.get("seed")
        config.sample = SampleConfig(
            size=int(smp.get("size", DEFAULT_SAMPLE_SIZE)),
            seed=int(seed) if seed is not None else None,
        )

    return config


def _validate_config(config: AppConfig) -> None:
    """Validate config and raise on errors."""
    api = config.api
    if not api.client_id:
        raise ValueError("Config error: required API client-id missing")
    if not api.client_secret:
        raise ValueError("Config error: required API client-secret missing")
    if api.region not in REGION_HOSTS:
        raise ValueError(
            f"Config error: unknown region '{api.region}'. Known: {sorted(REGION_HOSTS)}"
        )
    if api.max_retries < 0:
        raise ValueError(f"Config error: max_retries must be >= 0, got {api.max_retries}")
    if config.sample.size < 0:
        raise ValueError(f"Config error: sample size must be >= 0, got {config.sample.size}")

    logger.info(
        "Config validated: region=%s, locale=%s, %d searches, sample size %d",
        api.region,
        api.locale,
        len(config.searches),
        config.sample.size,
    )
