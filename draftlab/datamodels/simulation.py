"""
Season simulation models and result structures.

These models capture league scheduling rules and the output of championship
simulations. Odds are rebuilt from counters on every run, never updated in
place.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

from .player import Player
from .lineup import LineupConfiguration


class ScoringType(str, Enum):
    STANDARD = "standard"
    PPR = "ppr"
    HALF_PPR = "half_ppr"


class LeagueSettings(BaseModel):
    team_count: int = Field(10, ge=1, description="Teams in the league")
    playoff_teams: int = Field(4, ge=1, description="Teams that make the playoffs")
    regular_season_weeks: int = Field(14, ge=1, description="Regular season length")
    games_per_season: int = Field(17, ge=1, description="Games behind a season projection")
    opponent_mean: float = Field(110.0, gt=0.0, description="Mean synthetic opponent score")
    opponent_std: float = Field(20.0, ge=0.0, description="Std dev of synthetic opponent score")
    seed_win_slope: float = Field(0.05, ge=0.0, description="Playoff win probability per win of separation")
    scoring_type: ScoringType = Field(ScoringType.PPR, description="Scoring rules")

    @model_validator(mode='after')
    def check_playoff_field(self) -> 'LeagueSettings':
        if self.playoff_teams > self.team_count:
            raise ValueError(f'playoff_teams ({self.playoff_teams}) cannot exceed team_count ({self.team_count})')
        return self


@dataclass(frozen=True)
class SeasonTeam:
    """Read-only snapshot of a team entering the simulated remainder of a season."""

    team_id: str
    name: str
    starters: Tuple[Player, ...]
    wins: int = 0
    losses: int = 0
    points_for: float = 0.0

    @classmethod
    def from_lineup(cls, team_id: str, lineup: LineupConfiguration, name: Optional[str] = None,
                    wins: int = 0, losses: int = 0, points_for: float = 0.0) -> 'SeasonTeam':
        return cls(team_id=team_id,
                   name=name or team_id,
                   starters=tuple(lineup.starter_players),
                   wins=wins,
                   losses=losses,
                   points_for=points_for)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses


class ChampionshipOdds(BaseModel):
    team_id: str = Field(..., description="Team identifier")
    team_name: str = Field(..., description="Team display name")
    playoff_probability: float = Field(..., ge=0.0, le=100.0, description="Percent of seasons making playoffs")
    championship_probability: float = Field(..., ge=0.0, le=100.0, description="Percent of seasons winning the title")
    first_place_probability: float = Field(..., ge=0.0, le=100.0, description="Percent of seasons finishing first")
    expected_finish: float = Field(..., ge=1.0, description="Mean final standings position")
    strength_of_schedule: float = Field(..., ge=0.0, description="Mean opponent score relative to league mean")
    average_wins: float = Field(..., ge=0.0, description="Mean final win total")
    trials: int = Field(..., ge=1, description="Seasons simulated")


class SimulationResult(BaseModel):
    simulation_id: str = Field(..., description="Unique simulation identifier")
    seed: Optional[int] = Field(None, description="Seed the trials were drawn from")
    trials: int = Field(..., ge=1, description="Seasons simulated")
    started_at: datetime = Field(..., description="When simulation started")
    completed_at: datetime = Field(..., description="When simulation completed")
    execution_time_ms: float = Field(..., description="Simulation runtime in milliseconds")
    odds: List[ChampionshipOdds] = Field(..., description="Per-team odds in input order")

    def get_team_odds(self, team_id: str) -> Optional[ChampionshipOdds]:
        for odds in self.odds:
            if odds.team_id == team_id:
                return odds
        return None

    @property
    def favorite(self) -> Optional[ChampionshipOdds]:
        if not self.odds:
            return None
        return max(self.odds, key=lambda o: o.championship_probability)
