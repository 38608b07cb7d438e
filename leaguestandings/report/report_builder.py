import os
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from leaguestandings.loader.records import MatchType


def ensure_dir(path: str):
    """Ensure the parent directory of a file path exists."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_match_type_info(match_types: Iterable[MatchType]) -> List[Dict]:
    """
    Active match types ordered by point value, for display next to the standings.
    """
    active = [mt for mt in match_types if mt.active]
    active.sort(key=lambda mt: mt.points)
    return [{"name": mt.name, "points": mt.points} for mt in active]


def build_report(
    singles: List[Dict],
    doubles: List[Dict],
    match_type_info: List[Dict],
    generated_at: Optional[datetime] = None,
) -> Dict:
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "generatedAt": format_timestamp(generated_at),
        "singles": singles,
        "doubles": doubles,
        "matchTypes": match_type_info,
    }


def save_report(report: Dict, output_path="data/standings.json") -> Path:
    """
    Write the report as indented JSON, replacing any previous file.
    """
    output_path = Path(output_path)
    ensure_dir(str(output_path))
    output_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote standings to {output_path}")
    return output_path
