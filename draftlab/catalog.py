"""
Player catalog loading.

Reads a player table from CSV, Parquet or JSON lines with pandas, normalizes
the column names and turns each row into a Player.
"""

import logging
import os
from pathlib import Path
from typing import List, Union
import pandas as pd

from .datamodels.player import InjuryStatus, Player, PlayerPosition, ScheduleStrength
from .exceptions import CatalogError

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = ['id', 'name', 'position', 'team', 'rank', 'tier', 'projected_points', 'adp']

COLUMN_ALIASES = {
    'player_id': 'id',
    'player_name': 'name',
    'player': 'name',
    'pos': 'position',
    'projection': 'projected_points',
    'projected': 'projected_points',
    'fantasy_points': 'projected_points',
    'rostered': 'ownership',
    'bye': 'bye_week',
    'injury': 'injury_status',
    'sos': 'schedule_strength',
}


def load_file(path: Union[str, Path]) -> pd.DataFrame:
    ext = os.path.splitext(str(path))[-1].lower()
    try:
        if ext == ".csv":
            return pd.read_csv(path)
        elif ext == ".parquet":
            return pd.read_parquet(path)
        elif ext in (".json", ".jsonl"):
            return pd.read_json(path, lines=True)
    except (OSError, ValueError) as e:
        raise CatalogError(f"Could not read player catalog {path}: {e}") from e

    raise CatalogError(f"Unsupported catalog file type: {ext}")


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(col).strip().lower().replace(" ", "_") for col in df.columns]
    renames = {col: COLUMN_ALIASES[col] for col in df.columns
               if col in COLUMN_ALIASES and COLUMN_ALIASES[col] not in df.columns}
    return df.rename(columns=renames)


def _optional_int(value):
    if pd.isna(value):
        return None
    return int(value)


def _row_to_player(row: pd.Series) -> Player:
    ownership = row.get('ownership')
    ownership = 50.0 if pd.isna(ownership) else float(str(ownership).rstrip('%'))

    bye_week = row.get('bye_week')
    schedule = row.get('schedule_strength')
    injury = row.get('injury_status')

    return Player(id=str(row['id']),
                  name=str(row['name']),
                  position=PlayerPosition(str(row['position']).strip().upper()),
                  team=str(row['team']),
                  rank=int(row['rank']),
                  tier=int(row['tier']),
                  projected_points=float(row['projected_points']),
                  adp=float(row['adp']),
                  age=_optional_int(row.get('age')),
                  experience=_optional_int(row.get('experience')),
                  ownership=ownership,
                  bye_week=0 if pd.isna(bye_week) else int(bye_week),
                  schedule_strength=ScheduleStrength.AVERAGE if pd.isna(schedule)
                  else ScheduleStrength(str(schedule).strip().lower()),
                  injury_status=InjuryStatus.HEALTHY if pd.isna(injury)
                  else InjuryStatus(str(injury).strip().lower()))


def players_from_frame(df: pd.DataFrame) -> List[Player]:
    """
    Convert a player table into Player objects.

    Args:
        df: One row per player; column names are normalized first

    Returns:
        Players in catalog rank order

    Raises:
        CatalogError: for missing required columns or rows that fail validation
    """
    df = normalize_columns(df)

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise CatalogError(f"Player catalog missing columns: {', '.join(missing)}")

    players = []
    for index, row in df.sort_values(by='rank', kind='stable').iterrows():
        try:
            players.append(_row_to_player(row))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid player row {index}: {e}") from e

    return players


def load_players(path: Union[str, Path]) -> List[Player]:
    """Load a player catalog file (CSV, Parquet or JSON lines)."""
    df = load_file(path)
    players = players_from_frame(df)
    logger.info(f'Loaded {len(players)} players from {path}')
    return players
