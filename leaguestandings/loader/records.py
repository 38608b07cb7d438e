from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

UNKNOWN_NAME = "Unknown"

DATE_FIELD = "Date"
MATCH_TYPE_FIELD = "Match Type"
POINTS_FIELD = "Default Points Awarded"
ACTIVE_FIELD = "Is Active"
MATCH_TYPE_ID_FIELD = "Id"


class MalformedRecordError(ValueError):
    """Raised when a record from the data service lacks its id or fields."""


@dataclass(frozen=True)
class MatchFields:
    """Field names that differ between the singles and doubles tables."""
    name_field: str
    winners_field: str
    losers_field: str


SINGLES_FIELDS = MatchFields(name_field="Name", winners_field="Winner(s)", losers_field="Loser(s)")
DOUBLES_FIELDS = MatchFields(name_field="Team Name", winners_field="Winner Team", losers_field="Loser Team")


@dataclass(frozen=True)
class Entity:
    id: str
    name: str = UNKNOWN_NAME


@dataclass(frozen=True)
class Match:
    id: str
    date: Optional[pd.Timestamp] = None
    match_type_id: Optional[str] = None
    winners: Tuple[str, ...] = ()
    losers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchType:
    id: str
    points: int = 0
    active: bool = False
    name: str = UNKNOWN_NAME


# -----------------------
# Field Helpers
# -----------------------
def _split_record(record) -> Tuple[str, dict]:
    if not isinstance(record, dict) or not record.get("id"):
        raise MalformedRecordError(f"Record without an id: {record!r}")
    fields = record.get("fields", {})
    if not isinstance(fields, dict):
        raise MalformedRecordError(f"Record {record['id']} has non-mapping fields: {fields!r}")
    return record["id"], fields


def _as_id_tuple(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def parse_date(value) -> Optional[pd.Timestamp]:
    """Return None for a missing date, NaT for one that cannot be parsed."""
    if value is None or value == "":
        return None
    return pd.to_datetime(value, utc=True, errors="coerce")


def parse_points(value) -> int:
    if not value:
        return 0
    return int(value)


# -----------------------
# Record Parsing
# -----------------------
def parse_entities(records: Iterable[dict], fields: MatchFields) -> List[Entity]:
    entities = []
    for record in records:
        record_id, values = _split_record(record)
        entities.append(Entity(id=record_id, name=str(values.get(fields.name_field) or UNKNOWN_NAME)))
    return entities


def parse_matches(records: Iterable[dict], fields: MatchFields) -> List[Match]:
    matches = []
    for record in records:
        record_id, values = _split_record(record)
        match_type_ids = _as_id_tuple(values.get(MATCH_TYPE_FIELD))
        matches.append(Match(
            id=record_id,
            date=parse_date(values.get(DATE_FIELD)),
            match_type_id=match_type_ids[0] if match_type_ids else None,
            winners=_as_id_tuple(values.get(fields.winners_field)),
            losers=_as_id_tuple(values.get(fields.losers_field)),
        ))
    return matches


def parse_match_types(records: Iterable[dict]) -> List[MatchType]:
    match_types = []
    for record in records:
        record_id, values = _split_record(record)
        match_types.append(MatchType(
            id=record_id,
            points=parse_points(values.get(POINTS_FIELD)),
            active=bool(values.get(ACTIVE_FIELD)),
            name=values.get(MATCH_TYPE_ID_FIELD) or values.get(MATCH_TYPE_FIELD) or UNKNOWN_NAME,
        ))
    return match_types


def index_match_types(match_types: Iterable[MatchType]) -> Dict[str, MatchType]:
    return {mt.id: mt for mt in match_types}
