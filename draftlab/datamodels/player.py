"""
Player data model and related enums.

Players come from an external catalog and are treated as read-only value
objects everywhere in the engine. Draft sessions index them by id and never
hand out mutable references.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PlayerPosition(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DST = "DST"


class PlayerTier(int, Enum):
    ELITE = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    DEPTH = 5


class ScheduleStrength(str, Enum):
    EASY = "easy"
    AVERAGE = "average"
    HARD = "hard"


class InjuryStatus(str, Enum):
    HEALTHY = "healthy"
    PROBABLE = "probable"
    QUESTIONABLE = "questionable"
    DOUBTFUL = "doubtful"
    OUT = "out"


# Tiers at or above this level count as "elite" for scarcity purposes
ELITE_TIER_MAX = PlayerTier.HIGH

SLEEPER_OWNERSHIP_MAX = 25.0
POPULAR_OWNERSHIP_MIN = 70.0
VALUE_ADP_GAP = 10.0


@dataclass(frozen=True)
class Player:
    """
    Represents an NFL player with fantasy football relevant data.

    projected_points is a season total. rank and adp are overall (1 = best),
    tier is positional (1 = best). experience counts completed NFL seasons, so
    a rookie has experience 0.
    """

    id: str
    name: str
    position: PlayerPosition
    team: str

    rank: int
    tier: int
    projected_points: float
    adp: float

    age: Optional[int] = None
    experience: Optional[int] = None
    ownership: float = 50.0
    bye_week: int = 0
    schedule_strength: ScheduleStrength = ScheduleStrength.AVERAGE
    injury_status: InjuryStatus = InjuryStatus.HEALTHY

    def __post_init__(self):
        if self.tier < 1:
            raise ValueError(f"Tier must be >= 1, got {self.tier} for {self.name}")
        if not 0.0 <= self.ownership <= 100.0:
            raise ValueError(f"Ownership must be 0-100, got {self.ownership} for {self.name}")
        if self.projected_points < 0:
            raise ValueError(f"Projected points cannot be negative for {self.name}")

    def __str__(self) -> str:
        return f'{self.name} ({self.position.value}, {self.team})'

    def __repr__(self) -> str:
        return f'Player (id={self.id}, name={self.name}, position={self.position.value})'

    @property
    def is_rookie(self) -> bool:
        return self.experience == 0

    @property
    def is_injured(self) -> bool:
        return self.injury_status in [InjuryStatus.QUESTIONABLE, InjuryStatus.DOUBTFUL, InjuryStatus.OUT]

    def is_elite(self, elite_tier: int = ELITE_TIER_MAX) -> bool:
        return self.tier <= elite_tier

    @property
    def adp_gap(self) -> float:
        """How many spots later the market drafts this player than consensus rank."""
        return self.adp - self.rank

    @property
    def is_value_player(self) -> bool:
        return self.adp_gap >= VALUE_ADP_GAP

    @property
    def is_sleeper(self) -> bool:
        """
        Statistically "hidden" player.

        Low ownership and an ADP that lags the consensus rank by 20% or more.
        """
        return self.ownership < SLEEPER_OWNERSHIP_MAX and self.adp > self.rank * 1.2

    def is_popular(self, overall_pick: Optional[int] = None) -> bool:
        if self.ownership >= POPULAR_OWNERSHIP_MIN:
            return True
        return overall_pick is not None and self.adp <= overall_pick
