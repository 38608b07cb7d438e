import json
import threading
from types import MappingProxyType

import pandas as pd
import pytest

from leaguestandings.config.get_config import AirtableConfig

TABLE_IDS = {
    "players": "tblPlayers",
    "matches": "tblMatches",
    "doubles_teams": "tblTeams",
    "doubles_matches": "tblDoublesMatches",
    "match_types": "tblMatchTypes",
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Serves canned pages per URL; the offset param picks the page."""

    def __init__(self, pages_by_url):
        self.pages_by_url = pages_by_url
        self.calls = []
        self._lock = threading.Lock()
        self.closed = False

    def get(self, url, params=None):
        with self._lock:
            self.calls.append((url, params))
        pages = self.pages_by_url[url]
        offset = (params or {}).get("offset")
        return pages[offset]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True


def serving(session):
    """Session factory that hands out the same fake session for every table."""
    return lambda _config: session


@pytest.fixture
def config(tmp_path):
    return AirtableConfig(
        api_key="key123",
        base_id="appTest",
        api_url="https://api.airtable.test/v0",
        tables=MappingProxyType(dict(TABLE_IDS)),
        expiry_months=6,
        loser_point_fraction=0.10,
        output_path=str(tmp_path / "data" / "standings.json"),
    )


@pytest.fixture
def now():
    return pd.Timestamp("2025-06-15T12:00:00Z")


@pytest.fixture
def fake_session():
    return FakeSession
