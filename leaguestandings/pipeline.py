import sys
from typing import Callable, Dict, Optional

import pandas as pd
import requests

from leaguestandings.config.get_config import AirtableConfig, load_airtable_config
from leaguestandings.loader.airtable_reader import fetch_all_tables, make_session
from leaguestandings.loader.records import (
    DOUBLES_FIELDS,
    SINGLES_FIELDS,
    index_match_types,
    parse_entities,
    parse_match_types,
    parse_matches,
)
from leaguestandings.report.report_builder import build_match_type_info, build_report, save_report
from leaguestandings.standings.standings_calculator import calculate_standings, standings_to_records


def run(
    config: AirtableConfig,
    session_factory: Callable[[AirtableConfig], requests.Session] = make_session,
    now: Optional[pd.Timestamp] = None,
) -> Dict:
    """Fetch the league tables, compute singles and doubles standings and write the report."""
    tables = fetch_all_tables(config, session_factory=session_factory)

    players = parse_entities(tables["players"], SINGLES_FIELDS)
    singles_matches = parse_matches(tables["matches"], SINGLES_FIELDS)
    doubles_teams = parse_entities(tables["doubles_teams"], DOUBLES_FIELDS)
    doubles_matches = parse_matches(tables["doubles_matches"], DOUBLES_FIELDS)
    match_types = parse_match_types(tables["match_types"])
    match_types_by_id = index_match_types(match_types)

    singles_df = calculate_standings(players, singles_matches, match_types_by_id, config, now=now)
    doubles_df = calculate_standings(doubles_teams, doubles_matches, match_types_by_id, config, now=now)

    report = build_report(
        standings_to_records(singles_df),
        standings_to_records(doubles_df),
        build_match_type_info(match_types),
        generated_at=now.to_pydatetime() if now is not None else None,
    )
    save_report(report, config.output_path)
    return report


def main() -> int:
    try:
        config = load_airtable_config()
        print("Fetching data from Airtable...")
        run(config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
