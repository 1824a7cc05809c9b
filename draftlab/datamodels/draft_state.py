"""
Draft state management models.

A DraftSession is the one place draft state lives: the player arena, the set
of drafted ids, the teams and their rosters, and the seeded random source.
Sessions are plain objects, so several drafts can run side by side.
"""

import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple
from pydantic import BaseModel, ConfigDict, Field

from .player import Player, PlayerPosition
from .roster import RosterRequirements

if TYPE_CHECKING:
    from ..config import EngineSettings


class DraftStatus(str, Enum):
    NOT_STARTED = "not_started"
    ROUND_IN_PROGRESS = "round_in_progress"
    COMPLETE = "complete"


class StrategyType(str, Enum):
    BALANCED = "balanced"
    RB_HEAVY = "rb_heavy"
    WR_HEAVY = "wr_heavy"
    ZERO_RB = "zero_rb"
    HERO_RB = "hero_rb"
    BEST_AVAILABLE = "best_available"


class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class DecisionSpeed(str, Enum):
    FAST = "fast"
    MODERATE = "moderate"
    SLOW = "slow"


class ResearchDepth(str, Enum):
    CASUAL = "casual"
    INFORMED = "informed"
    EXPERT = "expert"


class AIDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class PickReason(str, Enum):
    """Why a team made the pick it made."""

    BEST_AVAILABLE = "best_available"    # Highest value on the board
    POSITIONAL_NEED = "positional_need"  # Nobody rostered at a starting position
    STRATEGY_FIT = "strategy_fit"        # Top of the strategy's priority list
    VALUE_PICK = "value_pick"            # Late-round player falling past ADP
    SLEEPER = "sleeper"                  # Low-owned player the drafter likes
    TEMPLATE_TARGET = "template_target"  # Auto-draft template position
    FALLBACK = "fallback"                # Wanted position empty, took best available


@dataclass(frozen=True)
class DraftStrategy:
    """Named drafting archetype. Passed by value into every evaluation."""

    name: StrategyType
    position_priority: Tuple[PlayerPosition, ...]
    risk_tolerance: RiskTolerance = RiskTolerance.MODERATE
    rookie_preference: float = 0.5
    value_based: bool = True
    follow_adp: bool = False

    def __post_init__(self):
        if not 0.0 <= self.rookie_preference <= 1.0:
            raise ValueError("Rookie preference must be 0-1")

    def priority_index(self, position: PlayerPosition) -> Optional[int]:
        try:
            return self.position_priority.index(position)
        except ValueError:
            return None


@dataclass(frozen=True)
class AIPersonality:
    """
    Drafting temperament for one team.

    research_depth controls how many top candidates are pooled before the
    weighted draw; consistency controls how much noise perturbs valuations.
    """

    name: str
    decision_speed: DecisionSpeed = DecisionSpeed.MODERATE
    research_depth: ResearchDepth = ResearchDepth.INFORMED
    trade_aggression: float = 0.5
    reaches: float = 0.5
    sleepers: float = 0.5
    consistency: float = 0.8

    def __post_init__(self):
        for name in ('trade_aggression', 'reaches', 'sleepers', 'consistency'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be 0-1, got {value}")


class DraftPick(BaseModel):
    model_config = ConfigDict(frozen=True)

    round: int = Field(..., ge=1, description="Draft round (1-based)")
    pick_in_round: int = Field(..., ge=1, description="Pick within the round (1-based)")
    overall: int = Field(..., ge=1, description="Overall pick number")
    team_id: str = Field(..., description="Team that made the pick")
    player_id: str = Field(..., description="Player selected")
    position: PlayerPosition = Field(..., description="Position of the player selected")
    value: float = Field(..., ge=0.0, description="Valuation at the time of the pick")
    time_used: float = Field(..., ge=0.0, description="Simulated seconds on the clock")
    confidence: float = Field(..., ge=60.0, le=100.0, description="Pick confidence (60-100)")
    reason: PickReason = Field(..., description="Primary reason for the pick")
    alternatives: List[str] = Field(default_factory=list, description="Next-best player ids considered")


@dataclass
class DraftTeam:
    """
    A drafting team for one session.

    roster, needs and picks are mutated only by the draft orchestrator.
    position_template maps round -> target positions for auto-draft teams.
    """

    team_id: str
    name: str
    draft_position: int
    strategy: DraftStrategy
    personality: AIPersonality
    position_template: Optional[Dict[int, Tuple[PlayerPosition, ...]]] = None
    roster: List[Player] = field(default_factory=list)
    needs: List[PlayerPosition] = field(default_factory=list)
    picks: List[DraftPick] = field(default_factory=list)

    def position_counts(self) -> Dict[PlayerPosition, int]:
        return dict(Counter(player.position for player in self.roster))

    def position_count(self, position: PlayerPosition) -> int:
        return sum(1 for player in self.roster if player.position == position)

    def refresh_needs(self, requirements: RosterRequirements):
        self.needs = requirements.open_needs(self.position_counts())

    def add_pick(self, player: Player, pick: DraftPick, requirements: RosterRequirements):
        self.roster.append(player)
        self.picks.append(pick)
        self.refresh_needs(requirements)

    def template_positions(self, round_number: int) -> Optional[Tuple[PlayerPosition, ...]]:
        if not self.position_template:
            return None
        return self.position_template.get(round_number)


@dataclass
class DraftSession:
    """
    Explicit state for one draft.

    players is the arena of every player in the pool keyed by id; drafted is
    the only record of who is gone. Teams are ordered by draft position.
    """

    teams: List[DraftTeam]
    players: Dict[str, Player]
    settings: 'EngineSettings'
    requirements: RosterRequirements
    rng: random.Random
    drafted: Set[str] = field(default_factory=set)
    picks: List[DraftPick] = field(default_factory=list)
    status: DraftStatus = DraftStatus.NOT_STARTED
    current_round: int = 0
    terminated_early: bool = False

    def available_players(self) -> List[Player]:
        return [player for player_id, player in self.players.items() if player_id not in self.drafted]

    def team_at(self, draft_position: int) -> DraftTeam:
        return self.teams[draft_position - 1]

    def record_pick(self, team: DraftTeam, player: Player, pick: DraftPick):
        self.drafted.add(player.id)
        self.picks.append(pick)
        team.add_pick(player, pick, self.requirements)


@dataclass
class DraftResult:
    picks: List[DraftPick]
    teams: List[DraftTeam]
    status: DraftStatus
    terminated_early: bool
    rounds_completed: int

    @property
    def rosters(self) -> Dict[str, List[Player]]:
        return {team.team_id: list(team.roster) for team in self.teams}

    @property
    def is_complete(self) -> bool:
        return self.status == DraftStatus.COMPLETE and not self.terminated_early

    def roster_for(self, team_id: str) -> List[Player]:
        for team in self.teams:
            if team.team_id == team_id:
                return list(team.roster)
        raise KeyError(team_id)

    def picks_for_round(self, round_number: int) -> List[DraftPick]:
        return [pick for pick in self.picks if pick.round == round_number]
