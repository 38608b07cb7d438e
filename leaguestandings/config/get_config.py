import os
import json
from pathlib import Path
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

API_KEY_ENV = "AIRTABLE_API_KEY"
CONFIG_PATH = Path(__file__).with_name("airtable.json")

TABLE_NAMES = ("players", "matches", "doubles_teams", "doubles_matches", "match_types")


class ConfigError(RuntimeError):
    """Raised when the run cannot start because configuration is missing."""


@dataclass(frozen=True)
class AirtableConfig:
    api_key: str
    base_id: str
    api_url: str
    tables: Mapping[str, str] = field(default_factory=dict)
    expiry_months: int = 6
    loser_point_fraction: float = 0.10
    output_path: str = "data/standings.json"


def load_airtable_config(path=CONFIG_PATH, environ: Optional[Mapping[str, str]] = None) -> AirtableConfig:
    """
    Build the run configuration from the packaged JSON file and the environment.

    Parameters:
    -----------
    path : str or Path, optional
        JSON file holding the fixed settings (default is the packaged airtable.json).

    environ : mapping, optional
        Environment to read the API key from (default is os.environ).

    Returns:
    --------
    AirtableConfig
        Immutable configuration passed to the fetcher, calculator and report builder.
    """
    environ = os.environ if environ is None else environ
    api_key = (environ.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} environment variable is required")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    tables = data["tables"]
    missing = [name for name in TABLE_NAMES if name not in tables]
    if missing:
        raise ConfigError(f"Missing table ids in {path}: {', '.join(missing)}")

    return AirtableConfig(
        api_key=api_key,
        base_id=data["base_id"],
        api_url=data["api_url"].rstrip("/"),
        tables=MappingProxyType({name: tables[name] for name in TABLE_NAMES}),
        expiry_months=int(data["expiry_months"]),
        loser_point_fraction=float(data["loser_point_fraction"]),
        output_path=data["output_path"],
    )


def table_url(config: AirtableConfig, table_id: str) -> str:
    return f"{config.api_url}/{config.base_id}/{table_id}"
