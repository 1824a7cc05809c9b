"""
Draft-time player valuation.

A player's value is a base projection scaled by independent multipliers:
positional scarcity, team need, strategy fit, drafter personality and
situational factors. Every random draw comes from the generator passed in.
"""

import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from ..config import EngineSettings
from ..datamodels.draft_state import DraftTeam, RiskTolerance, StrategyType
from ..datamodels.player import ELITE_TIER_MAX, InjuryStatus, Player, PlayerPosition, ScheduleStrength
from ..datamodels.roster import NeedLevel, RosterRequirements
from ..datamodels.simulation import ScoringType
from .projections import POSITION_BASELINES

SCORING_ADJUSTMENTS = {
    ScoringType.PPR: {PlayerPosition.RB: 1.15, PlayerPosition.WR: 1.15},
    ScoringType.HALF_PPR: {PlayerPosition.RB: 1.07, PlayerPosition.WR: 1.07},
}

# (lower, upper) scarcity multipliers; positions not listed are never scarce
SCARCITY_BOUNDS = {
    PlayerPosition.QB: (0.80, 1.20),
    PlayerPosition.RB: (0.90, 1.40),
    PlayerPosition.WR: (0.95, 1.10),
    PlayerPosition.TE: (0.85, 1.30),
}

# Elite share of the remaining pool at which a position counts as plentiful
ELITE_SHARE_REFERENCE = 0.10

NEED_MULTIPLIERS = {
    NeedLevel.URGENT: 1.5,
    NeedLevel.MODERATE: 1.2,
    NeedLevel.FLEX_DEPTH: 0.9,
    NeedLevel.DEPTH: 0.7,
    NeedLevel.FILLED: 0.3,
}

INJURY_DISCOUNTS = {
    InjuryStatus.HEALTHY: 1.0,
    InjuryStatus.PROBABLE: 0.95,
    InjuryStatus.QUESTIONABLE: 0.85,
    InjuryStatus.DOUBTFUL: 0.60,
    InjuryStatus.OUT: 0.30,
}

SCHEDULE_SCORES = {
    ScheduleStrength.EASY: 0.2,
    ScheduleStrength.AVERAGE: 0.0,
    ScheduleStrength.HARD: -0.15,
}

# Same-position teammates already sharing the player's bye -> clustering penalty
BYE_CLUSTER_PENALTIES = [(2, 0.3), (1, 0.1)]

QB_WR_STACK_SCORE = 0.15
WR_PAIR_STACK_SCORE = 0.05
WR_OVERLOAD_STACK_SCORE = -0.1

LATE_ROUND_START = 11
MIN_STRATEGY_FIT = 0.5


@dataclass(frozen=True)
class PoolSummary:
    """
    Counts over the remaining player pool.

    Built once per draft turn so evaluating every candidate stays linear.
    """

    total: int
    elite_by_position: Dict[PlayerPosition, int]
    tier_counts: Dict[Tuple[PlayerPosition, int], int]

    @classmethod
    def from_players(cls, players: Iterable[Player], elite_tier: int = ELITE_TIER_MAX) -> 'PoolSummary':
        total = 0
        elite = Counter()
        tiers = Counter()
        for player in players:
            total += 1
            tiers[(player.position, player.tier)] += 1
            if player.is_elite(elite_tier):
                elite[player.position] += 1
        return cls(total=total, elite_by_position=dict(elite), tier_counts=dict(tiers))

    def elite_share(self, position: PlayerPosition) -> float:
        if self.total == 0:
            return 0.0
        return self.elite_by_position.get(position, 0) / self.total

    def tier_remaining(self, position: PlayerPosition, tier: int) -> int:
        return self.tier_counts.get((position, tier), 0)


@dataclass(frozen=True)
class ValuationBreakdown:
    player: Player
    base: float
    scarcity: float
    need: float
    need_level: NeedLevel
    strategy_fit: float
    personality: float
    situational: float
    roster_fit: float
    late_round_value: bool

    @property
    def value(self) -> float:
        return max(0.0, self.base * self.scarcity * self.need * self.strategy_fit *
                   self.personality * self.situational * self.roster_fit)


class PlayerEvaluator:
    """
    Scores a player for one team at one moment of a draft.

    Key insights modeled:
    1. Elite players at thin positions go early (scarcity)
    2. Empty starting slots pull harder than depth (need)
    3. Archetypes bend positional preferences by round (strategy)
    4. Drafters reach, chase sleepers and misjudge at different rates (personality)
    5. Rookies, injuries, schedules and late-round bargains shift value (situation)
    6. Bye-week clusters and same-team stacks depend on who is already rostered (roster fit)
    """

    def __init__(self, requirements: Optional[RosterRequirements] = None):
        self.requirements = requirements or RosterRequirements.standard()

    def evaluate(self,
                 player: Player,
                 team: DraftTeam,
                 available_pool: Union[PoolSummary, Iterable[Player]],
                 round_number: int,
                 settings: EngineSettings,
                 rng: random.Random,
                 overall_pick: Optional[int] = None) -> float:
        """
        Value a player for a team's pick.

        Args:
            player: Candidate being valued
            team: Team on the clock (roster, strategy, personality)
            available_pool: Remaining players, or a PoolSummary of them
            round_number: Current round (1-based)
            settings: Engine settings
            rng: Seeded generator for personality jitter
            overall_pick: Current overall pick, used for ADP comparisons

        Returns:
            Non-negative value; higher is better
        """
        return self.evaluate_breakdown(player, team, available_pool, round_number, settings, rng, overall_pick).value

    def evaluate_breakdown(self,
                           player: Player,
                           team: DraftTeam,
                           available_pool: Union[PoolSummary, Iterable[Player]],
                           round_number: int,
                           settings: EngineSettings,
                           rng: random.Random,
                           overall_pick: Optional[int] = None) -> ValuationBreakdown:
        if not isinstance(available_pool, PoolSummary):
            available_pool = PoolSummary.from_players(available_pool, settings.elite_tier)

        need_level = self.requirements.need_level(player.position, team.position_count(player.position))
        late_round_value = round_number >= LATE_ROUND_START and player.is_value_player

        return ValuationBreakdown(
            player=player,
            base=self.base_value(player, settings.scoring_type),
            scarcity=self.scarcity_multiplier(player.position, available_pool, round_number),
            need=NEED_MULTIPLIERS[need_level],
            need_level=need_level,
            strategy_fit=self.strategy_fit(player, team, available_pool, round_number, overall_pick),
            personality=self.personality_adjustment(player, team, settings, rng, overall_pick),
            situational=self.situational_adjustment(player, settings, late_round_value,
                                                    team.strategy.rookie_preference),
            roster_fit=self.roster_fit(player, team, settings),
            late_round_value=late_round_value,
        )

    def base_value(self, player: Player, scoring_type: ScoringType) -> float:
        base = player.projected_points or POSITION_BASELINES[player.position]
        tier_adjustment = max(0.7, 1.3 - 0.1 * (player.tier - 1))
        scoring_adjustment = SCORING_ADJUSTMENTS.get(scoring_type, {}).get(player.position, 1.0)
        return base * tier_adjustment * scoring_adjustment

    def scarcity_multiplier(self, position: PlayerPosition, pool: PoolSummary, round_number: int) -> float:
        """
        Interpolate between the position's bounds by elite share of the pool.

        No elite players left gives the upper bound; an elite share at or
        above ELITE_SHARE_REFERENCE gives the lower bound. Later rounds pull
        both bounds toward 1.0.
        """
        bounds = SCARCITY_BOUNDS.get(position)
        if bounds is None or pool.total == 0:
            return 1.0

        pull = self._round_pull(round_number)
        lower = 1.0 - (1.0 - bounds[0]) * pull
        upper = 1.0 + (bounds[1] - 1.0) * pull

        saturation = min(1.0, pool.elite_share(position) / ELITE_SHARE_REFERENCE)
        return upper - (upper - lower) * saturation

    @staticmethod
    def _round_pull(round_number: int) -> float:
        if round_number <= 5:
            return 1.0
        if round_number <= 10:
            return 0.75
        return 0.5

    def strategy_fit(self,
                     player: Player,
                     team: DraftTeam,
                     pool: PoolSummary,
                     round_number: int,
                     overall_pick: Optional[int]) -> float:
        strategy = team.strategy
        position = player.position
        fit = 1.0

        priority = strategy.priority_index(position)
        if priority is not None:
            fit += max(0, 5 - priority) * 0.05

        if strategy.name == StrategyType.RB_HEAVY:
            if position == PlayerPosition.RB and round_number <= 6:
                fit += 0.2
        elif strategy.name == StrategyType.WR_HEAVY:
            if position == PlayerPosition.WR and round_number <= 5:
                fit += 0.15
        elif strategy.name == StrategyType.ZERO_RB:
            if position == PlayerPosition.RB and round_number <= 4:
                fit -= 0.3
            elif position == PlayerPosition.WR and round_number <= 6:
                fit += 0.2
        elif strategy.name == StrategyType.HERO_RB:
            if position == PlayerPosition.RB and round_number == 1:
                fit += 0.25
            elif position == PlayerPosition.RB and round_number <= 6:
                fit -= 0.15

        if strategy.follow_adp and overall_pick is not None:
            # Positive when the player has fallen past their ADP
            fit += max(-0.2, min(0.2, (overall_pick - player.adp) / 100.0))

        if strategy.value_based and pool.tier_remaining(position, player.tier) <= 1:
            fit += 0.05  # last of a tier

        if strategy.risk_tolerance == RiskTolerance.CONSERVATIVE:
            if player.is_injured or (player.age is not None and player.age >= 30):
                fit -= 0.1
        elif strategy.risk_tolerance == RiskTolerance.AGGRESSIVE:
            if player.is_sleeper:
                fit += 0.1

        return max(MIN_STRATEGY_FIT, fit)

    def personality_adjustment(self,
                               player: Player,
                               team: DraftTeam,
                               settings: EngineSettings,
                               rng: random.Random,
                               overall_pick: Optional[int]) -> float:
        personality = team.personality
        multiplier = 1.0

        if personality.reaches > 0.5 and player.is_popular(overall_pick):
            multiplier *= 1.0 + (personality.reaches - 0.5) * settings.reach_multiplier

        if personality.sleepers > 0.5 and player.is_sleeper:
            multiplier *= 1.0 + (personality.sleepers - 0.5) * settings.sleeper_multiplier

        if personality.consistency < 1.0:
            deviation = (1.0 - personality.consistency) * settings.jitter_scale
            multiplier *= 1.0 + (rng.random() - 0.5) * deviation

        return multiplier

    def situational_adjustment(self, player: Player, settings: EngineSettings, late_round_value: bool,
                               rookie_preference: float = 0.5) -> float:
        multiplier = 1.0

        if player.is_rookie:
            if settings.include_rookies:
                multiplier *= 1.0 + 0.2 * rookie_preference
            else:
                multiplier *= 0.8

        if settings.injury_updates:
            multiplier *= INJURY_DISCOUNTS.get(player.injury_status, 1.0)

        multiplier *= 1.0 + SCHEDULE_SCORES[player.schedule_strength] * settings.schedule_weight

        if late_round_value:
            multiplier *= settings.late_round_value_bonus

        return multiplier

    def roster_fit(self, player: Player, team: DraftTeam, settings: EngineSettings) -> float:
        """
        Adjust for the players the team already holds.

        Stacking rewards a WR whose quarterback is rostered (and the reverse),
        while a third WR from one offense is penalized. Bye clustering
        penalizes players sharing a bye week with same-position teammates.
        """
        stacking = self.stacking_score(player, team.roster)
        bye_penalty = self.bye_week_penalty(player, team.roster)
        return (1.0 + stacking * settings.draft_stack_weight) * (1.0 - bye_penalty * settings.bye_penalty_weight)

    @staticmethod
    def stacking_score(player: Player, roster: Iterable[Player]) -> float:
        teammates = [p for p in roster if p.team == player.team]

        if player.position == PlayerPosition.WR:
            if any(p.position == PlayerPosition.QB for p in teammates):
                return QB_WR_STACK_SCORE
            receivers = sum(1 for p in teammates if p.position == PlayerPosition.WR)
            if receivers >= 2:
                return WR_OVERLOAD_STACK_SCORE
            if receivers == 1:
                return WR_PAIR_STACK_SCORE
        elif player.position == PlayerPosition.QB:
            if any(p.position == PlayerPosition.WR for p in teammates):
                return QB_WR_STACK_SCORE

        return 0.0

    @staticmethod
    def bye_week_penalty(player: Player, roster: Iterable[Player]) -> float:
        if player.bye_week <= 0:
            return 0.0  # unknown

        shared = sum(1 for p in roster if p.position == player.position and p.bye_week == player.bye_week)
        return next((penalty for count, penalty in BYE_CLUSTER_PENALTIES if shared >= count), 0.0)
