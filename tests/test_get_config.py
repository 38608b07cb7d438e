import json

import pytest

from leaguestandings.config.get_config import ConfigError, TABLE_NAMES, load_airtable_config, table_url


def test_packaged_config_loads_with_api_key():
    config = load_airtable_config(environ={"AIRTABLE_API_KEY": "key123"})
    assert config.api_key == "key123"
    assert config.base_id == "app4txUhczLPqX4y9"
    assert set(config.tables) == set(TABLE_NAMES)
    assert config.expiry_months == 6
    assert config.loser_point_fraction == 0.10
    assert config.output_path == "data/standings.json"


def test_missing_api_key_fails_fast():
    with pytest.raises(ConfigError, match="AIRTABLE_API_KEY"):
        load_airtable_config(environ={})


def test_blank_api_key_fails_fast():
    with pytest.raises(ConfigError):
        load_airtable_config(environ={"AIRTABLE_API_KEY": "   "})


def test_missing_table_ids_are_reported(tmp_path):
    path = tmp_path / "airtable.json"
    path.write_text(json.dumps({
        "api_url": "https://api.airtable.test/v0",
        "base_id": "appX",
        "tables": {"players": "tbl1"},
        "expiry_months": 6,
        "loser_point_fraction": 0.1,
        "output_path": "out.json",
    }), encoding="utf-8")

    with pytest.raises(ConfigError, match="match_types"):
        load_airtable_config(path, environ={"AIRTABLE_API_KEY": "key"})


def test_config_is_immutable():
    config = load_airtable_config(environ={"AIRTABLE_API_KEY": "key123"})
    with pytest.raises(Exception):
        config.api_key = "other"
    with pytest.raises(TypeError):
        config.tables["players"] = "tblOther"


def test_table_url(config):
    assert table_url(config, "tblPlayers") == "https://api.airtable.test/v0/appTest/tblPlayers"
