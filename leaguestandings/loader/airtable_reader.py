from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List

import requests

from leaguestandings.config.get_config import AirtableConfig, TABLE_NAMES, table_url


class AirtableError(RuntimeError):
    """Raised for a non-success or malformed response from the Airtable API."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Airtable error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def make_session(config: AirtableConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update({"Authorization": f"Bearer {config.api_key}"})
    return session


def fetch_table(session: requests.Session, config: AirtableConfig, table_id: str) -> List[Dict]:
    """
    Fetch every record of one table, following the offset cursor page by page.
    """
    url = table_url(config, table_id)
    all_records = []
    offset = None

    while True:
        params = {"offset": offset} if offset else None
        resp = session.get(url, params=params)
        if not resp.ok:
            raise AirtableError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError:
            raise AirtableError(resp.status_code, resp.text)

        records = data.get("records") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise AirtableError(resp.status_code, resp.text)

        all_records.extend(records)
        offset = data.get("offset")
        if not offset:
            return all_records


def fetch_table_with_own_session(
    session_factory: Callable[[AirtableConfig], requests.Session], config: AirtableConfig, table_id: str
) -> List[Dict]:
    with session_factory(config) as session:
        return fetch_table(session, config, table_id)


def fetch_all_tables(
    config: AirtableConfig, session_factory: Callable[[AirtableConfig], requests.Session] = make_session
) -> Dict[str, List[Dict]]:
    """
    Fetch the five league tables concurrently, one session per table.

    Waits for every fetch; the first failure (in table order) is raised and no
    partial result is returned.
    """
    with ThreadPoolExecutor(max_workers=len(TABLE_NAMES)) as executor:
        futures = {
            name: executor.submit(fetch_table_with_own_session, session_factory, config, config.tables[name])
            for name in TABLE_NAMES
        }
        tables = {name: future.result() for name, future in futures.items()}

    print(
        f"Fetched: {len(tables['players'])} players, "
        f"{len(tables['matches'])} singles matches, "
        f"{len(tables['doubles_teams'])} doubles teams, "
        f"{len(tables['doubles_matches'])} doubles matches, "
        f"{len(tables['match_types'])} match types"
    )
    return tables
