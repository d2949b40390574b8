"""Tests for configuration loading."""

import pytest
import yaml

from card_search.client import CardSearchParams
from card_search.config import (
    LEGENDARY_MANA_COSTS,
    AppConfig,
    ApiConfig,
    SampleConfig,
    _parse_config,
    _validate_config,
    load_config,
)

NO_ENV = {}


def _valid(**api_kwargs):
    api = {"client_id": "id", "client_secret": "secret"}
    api.update(api_kwargs)
    return AppConfig(api=ApiConfig(**api))


def test_default_config():
    config = AppConfig()
    assert config.api.region == "us"
    assert config.api.locale == "en_US"
    assert config.api.max_retries == 3
    assert config.sample.size == 10
    assert config.sample.seed is None


def test_default_searches_are_legendary_druid_and_warlock():
    config = AppConfig()
    assert [s.card_class for s in config.searches] == ["druid", "warlock"]
    for search in config.searches:
        assert search.rarity == "legendary"
        assert tuple(search.mana_cost) == LEGENDARY_MANA_COSTS
        assert search.to_query()["manaCost"] == "7,8,9,10,11,12"


def test_parse_config():
    raw = {
        "api": {
            "client_id": "abc",
            "client_secret": "shh",
            "region": "eu",
            "locale": "de_DE",
            "max_retries": 5,
            "retry_backoff": 0.25,
            "debug": True,
        },
        "searches": [
            {"class": "mage", "rarity": "epic", "manaCost": [1, 2]},
            {"class": "rogue", "set": "core", "textFilter": "stealth"},
        ],
        "sample": {"size": 5, "seed": 99},
    }
    config = _parse_config(raw)
    assert config.api.client_id == "abc"
    assert config.api.region == "eu"
    assert config.api.max_retries == 5
    assert config.api.retry_backoff == 0.25
    assert config.api.debug is True
    assert config.searches[0] == CardSearchParams(card_class="mage", rarity="epic", mana_cost=(1, 2))
    assert config.searches[1].extra == {"textFilter": "stealth"}
    assert config.sample.size == 5
    assert config.sample.seed == 99


def test_parse_config_invalid_search():
    with pytest.raises(ValueError, match="invalid search"):
        _parse_config({"searches": [{"manaCost": [-3]}]})


def test_validate_config_missing_client_id():
    config = AppConfig(api=ApiConfig(client_secret="secret"))
    with pytest.raises(ValueError, match="client-id missing"):
        _validate_config(config)


def test_validate_config_missing_client_secret():
    config = AppConfig(api=ApiConfig(client_id="id"))
    with pytest.raises(ValueError, match="client-secret missing"):
        _validate_config(config)


def test_validate_config_unknown_region():
    with pytest.raises(ValueError, match="unknown region"):
        _validate_config(_valid(region="mars"))


def test_validate_config_negative_retries():
    with pytest.raises(ValueError, match="max_retries"):
        _validate_config(_valid(max_retries=-1))


def test_validate_config_negative_sample_size():
    config = _valid()
    config.sample = SampleConfig(size=-1)
    with pytest.raises(ValueError, match="sample size"):
        _validate_config(config)


def test_load_config_missing_file_requires_credentials(tmp_path):
    with pytest.raises(ValueError, match="client-id"):
        load_config(tmp_path / "nonexistent.yaml", env=NO_ENV)


def test_load_config_missing_file_with_env(tmp_path):
    config = load_config(
        tmp_path / "nonexistent.yaml",
        env={"CLIENT_ID": "env-id", "CLIENT_SECRET": "env-secret"},
    )
    assert config.api.client_id == "env-id"
    assert config.api.client_secret == "env-secret"
    assert len(config.searches) == 2


def test_load_config_from_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({
        "api": {"client_id": "file-id", "client_secret": "file-secret", "region": "kr"},
        "sample": {"size": 3},
    }))
    config = load_config(config_path, env=NO_ENV)
    assert config.api.client_id == "file-id"
    assert config.api.region == "kr"
    assert config.sample.size == 3


def test_load_config_empty_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")
    config = load_config(config_path, env={"CLIENT_ID": "a", "CLIENT_SECRET": "b"})
    assert config.api.region == "us"


def test_load_config_precedence(tmp_path):
    """File < environment < explicit arguments."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({
        "api": {"client_id": "file-id", "client_secret": "file-secret"},
    }))
    config = load_config(
        config_path,
        env={"CLIENT_ID": "env-id", "CLIENT_SECRET": "env-secret"},
        client_id="cli-id",
    )
    assert config.api.client_id == "cli-id"
    assert config.api.client_secret == "env-secret"


def test_api_config_repr_hides_secret():
    api = ApiConfig(client_id="id", client_secret="super-secret")
    assert "super-secret" not in repr(api)


def test_searches_follow_api_locale():
    config = _parse_config({
        "api": {"locale": "de_DE"},
        "searches": [{"class": "mage"}, {"class": "rogue", "locale": "fr_FR"}],
    })
    assert [s.locale for s in config.searches] == ["de_DE", "fr_FR"]


def test_default_searches_follow_api_locale():
    config = _parse_config({"api": {"locale": "de_DE"}})
    assert [s.locale for s in config.searches] == ["de_DE", "de_DE"]
    assert all(s.to_query()["locale"] == "de_DE" for s in config.searches)
