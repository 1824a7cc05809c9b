"""Shared fixtures: synthetic player catalogs, teams and settings"""
import random

import pytest

from draftlab.config import EngineSettings
from draftlab.datamodels.draft_state import DraftTeam, StrategyType
from draftlab.datamodels.player import Player, PlayerPosition
from draftlab.datamodels.roster import RosterRequirements
from draftlab.simulation.profiles import AUTOPILOT, STRATEGIES


NFL_TEAMS = ["KC", "BUF", "CIN", "PHI", "DAL", "SF", "MIA", "DET",
             "BAL", "GB", "LAR", "SEA", "MIN", "JAX", "LAC", "NYJ"]

# position -> (count, top projection, drop per player)
CATALOG_SHAPE = {
    PlayerPosition.QB: (24, 360.0, 8.0),
    PlayerPosition.RB: (60, 300.0, 4.5),
    PlayerPosition.WR: (70, 290.0, 3.8),
    PlayerPosition.TE: (24, 220.0, 6.0),
    PlayerPosition.K: (16, 150.0, 2.0),
    PlayerPosition.DST: (16, 140.0, 2.0),
}


def make_player(player_id, position, rank=1, tier=1, projected_points=200.0, adp=None, team="KC", **kwargs):
    return Player(id=player_id,
                  name=f"Player {player_id}",
                  position=PlayerPosition(position),
                  team=team,
                  rank=rank,
                  tier=tier,
                  projected_points=projected_points,
                  adp=float(rank) if adp is None else adp,
                  **kwargs)


def build_catalog(shape=None):
    """Deterministic player pool ranked overall by projected points."""
    shape = shape or CATALOG_SHAPE
    rows = []
    for position, (count, top, drop) in shape.items():
        for index in range(count):
            rows.append((position, index, max(10.0, top - drop * index)))

    rows.sort(key=lambda row: -row[2])
    players = []
    for rank, (position, index, points) in enumerate(rows, 1):
        players.append(make_player(f"{position.value.lower()}{index + 1}",
                                   position,
                                   rank=rank,
                                   tier=min(5, index // 6 + 1),
                                   projected_points=points,
                                   adp=rank + (index % 3) - 1 if rank > 1 else 1.0,
                                   team=NFL_TEAMS[index % len(NFL_TEAMS)],
                                   age=24 + index % 8,
                                   experience=index % 6))
    return players


def make_team(team_id="team_1", draft_position=1, strategy=StrategyType.BALANCED, personality=AUTOPILOT,
              template=None):
    return DraftTeam(team_id=team_id,
                     name=team_id.replace("_", " ").title(),
                     draft_position=draft_position,
                     strategy=STRATEGIES[strategy],
                     personality=personality,
                     position_template=template)


@pytest.fixture
def player_factory():
    return make_player


@pytest.fixture
def team_factory():
    return make_team


@pytest.fixture
def catalog_factory():
    return build_catalog


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def settings():
    return EngineSettings(seed=42)


@pytest.fixture
def requirements():
    return RosterRequirements.standard()


@pytest.fixture
def rng():
    return random.Random(7)
