"""
Lineup models produced by the optimizer.

LineupConfiguration is immutable: every optimization returns a new one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from .player import Player, PlayerPosition
from .projection import PlayerProjection


FLEX_SLOT = "FLEX"


class LineupStrategy(str, Enum):
    OPTIMAL = "optimal"
    CEILING = "ceiling"
    FLOOR = "floor"
    CONTRARIAN = "contrarian"


class StartSitDecision(str, Enum):
    START = "start"
    SIT = "sit"


@dataclass(frozen=True)
class LineupSlot:
    slot: str
    player: Player
    projection: PlayerProjection


@dataclass(frozen=True)
class LineupConfiguration:
    """
    A starting lineup plus bench for one roster.

    total_points includes the stacking bonus. unfilled_slots lists slots left
    empty because the roster had nobody eligible; such a lineup is still
    usable but is_complete is False.
    """

    starters: Tuple[LineupSlot, ...]
    bench: Tuple[Player, ...]
    total_points: float
    floor: float
    ceiling: float
    stack_bonus: float
    strategy: LineupStrategy = LineupStrategy.OPTIMAL
    unfilled_slots: Tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.unfilled_slots

    @property
    def starter_players(self) -> List[Player]:
        return [slot.player for slot in self.starters]

    @property
    def raw_points(self) -> float:
        """Sum of starter projections before any stacking bonus."""
        return sum(slot.projection.points for slot in self.starters)


class LineupStats(BaseModel):
    projected: float = Field(..., description="Projected points including stack bonus")
    floor: float = Field(..., description="Sum of starter floors")
    ceiling: float = Field(..., description="Sum of starter ceilings")
    volatility: float = Field(..., ge=0.0, description="(ceiling - floor) / projected")
    stack_bonus: float = Field(..., ge=1.0, description="Stacking multiplier applied")


class LineupComparison(BaseModel):
    lineup_a: LineupStats
    lineup_b: LineupStats
    recommended: str = Field(..., description="'A' or 'B'")
    confidence_delta: float = Field(..., ge=0.0, description="Relative projection gap |A - B| / A")
    explanation: str = Field(..., description="Human readable summary")


class StartSitRecommendation(BaseModel):
    player_id: str
    player_name: str
    position: PlayerPosition
    decision: StartSitDecision
    projected_points: float
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str


class LineupAnalysis(BaseModel):
    projected: float
    floor: float
    ceiling: float
    volatility: float
    boom_probability: float = Field(..., ge=0.0, le=1.0, description="Average starter boom probability")
    bust_probability: float = Field(..., ge=0.0, le=1.0, description="Average starter bust probability")
    weakest_player_id: Optional[str] = Field(None, description="Lowest projected starter")
    stacks: List[str] = Field(default_factory=list, description="Teams with a QB + pass catcher stack")
    unfilled_slots: List[str] = Field(default_factory=list)
