import math
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd
from pyuca import Collator

from leaguestandings.config.get_config import AirtableConfig
from leaguestandings.loader.records import Entity, Match, MatchType

STANDINGS_COLUMNS = ["name", "points", "wins", "losses"]

COLLATOR = Collator()


def get_cutoff_date(expiry_months: int, now: Optional[pd.Timestamp] = None) -> pd.Timestamp:
    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    if now.tzinfo is None:
        now = now.tz_localize("UTC")
    # Day of month carries over into the next month when the target month is
    # shorter: Aug 31 minus 6 months is Mar 3, not Feb 28.
    first_of_month = now.replace(day=1) - pd.DateOffset(months=expiry_months)
    return first_of_month + pd.Timedelta(days=now.day - 1)


def is_within_window(date: Optional[pd.Timestamp], cutoff: pd.Timestamp) -> bool:
    """Undated matches always count; NaT never does."""
    if date is None:
        return True
    if pd.isna(date):
        return False
    return date >= cutoff


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def name_sort_key(name: str) -> tuple:
    """Unicode collation key; Ł sorts with L and Ø with O, lowercase first."""
    return COLLATOR.sort_key(name)


def rank_names(names: Iterable[str]) -> Dict[str, int]:
    ordered = sorted(set(names), key=lambda name: (name_sort_key(name), name))
    return {name: rank for rank, name in enumerate(ordered)}


def compute_match_stats(
    entities: Iterable[Entity],
    matches: Iterable[Match],
    match_types: Mapping[str, MatchType],
    loser_point_fraction: float,
    cutoff: pd.Timestamp,
) -> Dict[str, Dict[str, int]]:
    """
    Accumulate points, wins and losses per entity id over the active matches.

    Ids that only appear in matches are accumulated as well; they are dropped
    when the standings table is built from the canonical entity list.
    """
    entity_stats = defaultdict(lambda: {'points': 0, 'wins': 0, 'losses': 0})
    for entity in entities:
        entity_stats[entity.id]

    for match in matches:
        if not is_within_window(match.date, cutoff):
            continue
        if match.match_type_id is None:
            continue
        match_type = match_types.get(match.match_type_id)
        if match_type is None:
            continue

        winner_points = match_type.points or 0
        loser_points = round_half_up(winner_points * loser_point_fraction)

        for entity_id in match.winners:
            entity_stats[entity_id]['points'] += winner_points
            entity_stats[entity_id]['wins'] += 1

        for entity_id in match.losers:
            entity_stats[entity_id]['points'] += loser_points
            entity_stats[entity_id]['losses'] += 1

    return dict(entity_stats)


def build_standings_dataframe(entities: Iterable[Entity], entity_stats: Mapping[str, Dict[str, int]]) -> pd.DataFrame:
    empty = {'points': 0, 'wins': 0, 'losses': 0}
    rows = []
    for entity in entities:
        stats = entity_stats.get(entity.id, empty)
        rows.append({
            'name': entity.name,
            'points': stats['points'],
            'wins': stats['wins'],
            'losses': stats['losses'],
        })

    df = pd.DataFrame(rows, columns=STANDINGS_COLUMNS)
    df['points'] = df['points'].astype('int64')
    df['wins'] = df['wins'].astype('int64')
    df['losses'] = df['losses'].astype('int64')

    df['name_rank'] = df['name'].map(rank_names(df['name'])).astype('int64')
    df.sort_values(by=['points', 'name_rank'], ascending=[False, True], kind='stable', inplace=True)
    df.drop(columns=['name_rank'], inplace=True)
    return df.reset_index(drop=True)


def calculate_standings(
    entities: List[Entity],
    matches: List[Match],
    match_types: Mapping[str, MatchType],
    config: AirtableConfig,
    now: Optional[pd.Timestamp] = None,
) -> pd.DataFrame:
    """
    Compute the ranking table for one competition (singles or doubles).

    Parameters:
    -----------
    entities : list of Entity
        Canonical players or teams; each one gets exactly one row.

    matches : list of Match
        Matches of the same competition.

    match_types : mapping
        Match type id to MatchType, shared by both competitions.

    config : AirtableConfig
        Supplies the expiry window and the loser point fraction.

    now : pandas.Timestamp, optional
        Reference time for the expiry window (default is the current UTC time).

    Returns:
    --------
    pd.DataFrame
        Columns name, points, wins, losses; sorted by points descending, then name.
    """
    cutoff = get_cutoff_date(config.expiry_months, now)
    entity_stats = compute_match_stats(entities, matches, match_types, config.loser_point_fraction, cutoff)
    return build_standings_dataframe(entities, entity_stats)


def standings_to_records(standings_df: pd.DataFrame) -> List[Dict]:
    return [
        {'name': str(row.name), 'points': int(row.points), 'wins': int(row.wins), 'losses': int(row.losses)}
        for row in standings_df.itertuples(index=False)
    ]
