"""
Roster construction rules.

RosterRequirements describes how many players a team may hold at each
position, how many of them start, and which positions can fill FLEX.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .player import PlayerPosition


class NeedLevel(str, Enum):
    URGENT = "urgent"          # Nobody rostered at a starting position
    MODERATE = "moderate"      # Below starters or minimum
    FLEX_DEPTH = "flex_depth"  # Starters covered, can still help at FLEX
    DEPTH = "depth"            # Starters covered, below maximum
    FILLED = "filled"          # At maximum


class PositionRequirement(BaseModel):
    min: int = Field(0, ge=0, description="Minimum players to roster")
    max: int = Field(..., ge=0, description="Maximum players to roster")
    starters: int = Field(0, ge=0, description="Dedicated starting slots")

    @model_validator(mode='after')
    def check_bounds(self) -> 'PositionRequirement':
        if self.min > self.max:
            raise ValueError(f'min ({self.min}) cannot exceed max ({self.max})')
        if self.starters > self.max:
            raise ValueError(f'starters ({self.starters}) cannot exceed max ({self.max})')
        return self

    @property
    def threshold(self) -> int:
        """Count at which the position stops being a draft need."""
        return max(self.min, self.starters)


class FlexDefinition(BaseModel):
    eligible: List[PlayerPosition] = Field(default_factory=lambda: [PlayerPosition.RB, PlayerPosition.WR, PlayerPosition.TE],
                                           description="Positions allowed in FLEX")
    count: int = Field(1, ge=0, description="Number of FLEX slots")


def _default_positions() -> Dict[PlayerPosition, PositionRequirement]:
    return {
        PlayerPosition.QB: PositionRequirement(min=1, max=3, starters=1),
        PlayerPosition.RB: PositionRequirement(min=2, max=6, starters=2),
        PlayerPosition.WR: PositionRequirement(min=2, max=6, starters=2),
        PlayerPosition.TE: PositionRequirement(min=1, max=3, starters=1),
        PlayerPosition.K: PositionRequirement(min=1, max=2, starters=1),
        PlayerPosition.DST: PositionRequirement(min=1, max=2, starters=1),
    }


class RosterRequirements(BaseModel):
    """
    Per-position limits plus FLEX and bench sizing.

    Starter slots (dedicated + FLEX) plus bench always equal the roster size.
    Passing roster_size_target pins that total and rejects layouts that do
    not add up to it.
    """

    positions: Dict[PlayerPosition, PositionRequirement] = Field(default_factory=_default_positions,
                                                                 description="Position -> limits")
    flex: FlexDefinition = Field(default_factory=FlexDefinition, description="FLEX slot definition")
    bench: int = Field(7, ge=0, description="Bench slots")
    roster_size_target: Optional[int] = Field(None, ge=1, description="Expected total roster size")

    @field_validator('positions')
    def require_positions(cls, v):
        if not v:
            raise ValueError('At least one position requirement is needed')
        return v

    @model_validator(mode='after')
    def check_roster_total(self) -> 'RosterRequirements':
        for position in self.flex.eligible:
            if position not in self.positions:
                raise ValueError(f'FLEX-eligible position {position.value} has no requirement')

        if self.roster_size < 1:
            raise ValueError('Roster must have at least one slot')

        if self.roster_size_target is not None and self.roster_size != self.roster_size_target:
            raise ValueError(f'Starter slots ({self.starter_slots}) + bench ({self.bench}) = {self.roster_size}, '
                             f'expected {self.roster_size_target}')

        minimum_total = sum(req.min for req in self.positions.values())
        if minimum_total > self.roster_size:
            raise ValueError(f'Position minimums ({minimum_total}) exceed roster size ({self.roster_size})')
        return self

    @classmethod
    def standard(cls) -> 'RosterRequirements':
        """QB1 RB2 WR2 TE1 FLEX1 K1 DST1 with a seven-man bench."""
        return cls(roster_size_target=16)

    @property
    def starter_slots(self) -> int:
        return sum(req.starters for req in self.positions.values()) + self.flex.count

    @property
    def roster_size(self) -> int:
        return self.starter_slots + self.bench

    @property
    def max_capacity(self) -> int:
        """Most players a roster can hold without exceeding any position maximum."""
        return sum(req.max for req in self.positions.values())

    def requirement(self, position: PlayerPosition) -> PositionRequirement:
        return self.positions.get(position, PositionRequirement(min=0, max=0, starters=0))

    def is_flex_eligible(self, position: PlayerPosition) -> bool:
        return self.flex.count > 0 and position in self.flex.eligible

    def max_starters(self, position: PlayerPosition) -> int:
        """Dedicated starters plus every FLEX slot the position could take."""
        flex = self.flex.count if self.is_flex_eligible(position) else 0
        return self.requirement(position).starters + flex

    def need_level(self, position: PlayerPosition, current_count: int) -> NeedLevel:
        required = self.requirement(position)

        if current_count >= required.max:
            return NeedLevel.FILLED
        if current_count == 0 and required.starters > 0:
            return NeedLevel.URGENT
        if current_count < required.threshold:
            return NeedLevel.MODERATE
        if self.is_flex_eligible(position):
            return NeedLevel.FLEX_DEPTH
        return NeedLevel.DEPTH

    def open_needs(self, position_counts: Dict[PlayerPosition, int]) -> List[PlayerPosition]:
        """One entry per missing player below each position's threshold."""
        needs = []
        for position, required in self.positions.items():
            missing = required.threshold - position_counts.get(position, 0)
            needs.extend([position] * max(0, missing))
        return needs
