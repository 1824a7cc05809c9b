"""
Lineup and roster optimization.

Fills starting slots greedily: each position takes its best players by the
chosen ranking key, FLEX takes the best of what is left, everybody else sits
on the bench. Rosters that cannot fill every slot still produce a lineup,
flagged through unfilled_slots.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..datamodels.lineup import (
    FLEX_SLOT, LineupAnalysis, LineupComparison, LineupConfiguration, LineupSlot, LineupStats,
    LineupStrategy, StartSitDecision, StartSitRecommendation
)
from ..datamodels.player import InjuryStatus, Player, PlayerPosition
from ..datamodels.projection import PlayerProjection, ProjectionContext
from ..datamodels.roster import RosterRequirements
from ..valuation.projections import ProjectionModel

logger = logging.getLogger(__name__)


DEFAULT_STACK_BONUS = 1.05
STACK_TARGETS = (PlayerPosition.WR, PlayerPosition.TE)

CLOSE_CALL_THRESHOLD = 0.02
CLEAR_DECISION_CONFIDENCE = 0.9
CUTOFF_GAP_SCALE = 10.0


def contrarian_score(player: Player, projection: PlayerProjection) -> float:
    """Upside per projected point, discounted by how widely the player is owned."""
    if projection.points <= 0:
        return 0.0
    return projection.ceiling / projection.points * (1.0 - player.ownership / 100.0)


RANKING_KEYS: Dict[LineupStrategy, Callable[[Player, PlayerProjection], float]] = {
    LineupStrategy.OPTIMAL: lambda player, projection: projection.points,
    LineupStrategy.CEILING: lambda player, projection: projection.ceiling,
    LineupStrategy.FLOOR: lambda player, projection: projection.floor,
    LineupStrategy.CONTRARIAN: contrarian_score,
}


class LineupOptimizer:
    """
    Builds, compares and explains starting lineups.

    Projections come from a ProjectionModel so the optimizer and the draft
    share one view of player value.
    """

    def __init__(self,
                 projection_model: Optional[ProjectionModel] = None,
                 stack_bonus: float = DEFAULT_STACK_BONUS):
        """
        Args:
            projection_model: Source of player projections
            stack_bonus: Multiplier on total points for a QB + WR/TE stack
        """
        if stack_bonus < 1.0:
            raise ValueError(f"Stack bonus must be >= 1.0, got {stack_bonus}")

        self.projection_model = projection_model or ProjectionModel()
        self.stack_bonus = stack_bonus

    def optimize(self,
                 roster: Sequence[Player],
                 requirements: Optional[RosterRequirements] = None,
                 strategy_mode: LineupStrategy = LineupStrategy.OPTIMAL,
                 exclude_injured: bool = False,
                 context: Optional[ProjectionContext] = None) -> LineupConfiguration:
        """
        Select starters for a roster.

        Args:
            roster: Every player on the team
            requirements: Slot counts; defaults to the standard roster
            strategy_mode: Ranking key (optimal, ceiling, floor or contrarian)
            exclude_injured: Keep players ruled out on the bench
            context: Projection context shared by every player

        Returns:
            A new LineupConfiguration; unfilled slots are listed, not raised
        """
        requirements = requirements or RosterRequirements.standard()
        strategy_mode = LineupStrategy(strategy_mode)
        ranking_key = RANKING_KEYS[strategy_mode]

        projections = [self.projection_model.project(player, context) for player in roster]
        ordered = sorted(
            (index for index, player in enumerate(roster)
             if not (exclude_injured and player.injury_status == InjuryStatus.OUT)),
            key=lambda i: (-ranking_key(roster[i], projections[i]), roster[i].rank)
        )

        assigned: Set[int] = set()
        starters: List[LineupSlot] = []
        unfilled: List[str] = []

        def assign(index: int, slot: str):
            assigned.add(index)
            starters.append(LineupSlot(slot=slot, player=roster[index], projection=projections[index]))

        for position, requirement in requirements.positions.items():
            pool = [i for i in ordered if roster[i].position == position and i not in assigned]
            for slot_number in range(requirement.starters):
                if slot_number < len(pool):
                    assign(pool[slot_number], position.value)
                else:
                    unfilled.append(position.value)

        # FLEX goes last so it only sees players the primary slots passed over
        for _ in range(requirements.flex.count):
            pool = [i for i in ordered if roster[i].position in requirements.flex.eligible and i not in assigned]
            if pool:
                assign(pool[0], FLEX_SLOT)
            else:
                unfilled.append(FLEX_SLOT)

        if unfilled:
            logger.info(f'Lineup incomplete, unfilled slots: {", ".join(unfilled)}')

        return self._build_configuration(starters,
                                         tuple(roster[i] for i in range(len(roster)) if i not in assigned),
                                         strategy_mode,
                                         tuple(unfilled))

    def alternatives(self,
                     roster: Sequence[Player],
                     requirements: Optional[RosterRequirements] = None,
                     context: Optional[ProjectionContext] = None) -> Dict[LineupStrategy, LineupConfiguration]:
        """Ceiling, floor and contrarian lineups for the same roster."""
        return {mode: self.optimize(roster, requirements, mode, context=context)
                for mode in (LineupStrategy.CEILING, LineupStrategy.FLOOR, LineupStrategy.CONTRARIAN)}

    def compare(self,
                lineup_a: LineupConfiguration,
                lineup_b: LineupConfiguration,
                context: Optional[ProjectionContext] = None) -> LineupComparison:
        """
        Project two lineups under the same context and recommend one.

        confidence_delta is the projection gap relative to lineup A.
        """
        stats_a = self._lineup_stats(lineup_a, context)
        stats_b = self._lineup_stats(lineup_b, context)

        recommended = "A" if stats_a.projected >= stats_b.projected else "B"
        gap = abs(stats_a.projected - stats_b.projected)
        if stats_a.projected > 0:
            confidence_delta = gap / stats_a.projected
        else:
            confidence_delta = 0.0 if gap == 0 else 1.0

        return LineupComparison(lineup_a=stats_a,
                                lineup_b=stats_b,
                                recommended=recommended,
                                confidence_delta=confidence_delta,
                                explanation=self._explain(stats_a, stats_b, recommended, confidence_delta))

    def start_sit(self,
                  roster: Sequence[Player],
                  requirements: Optional[RosterRequirements] = None,
                  context: Optional[ProjectionContext] = None) -> List[StartSitRecommendation]:
        """
        START/SIT call for every rostered player, grouped by position.

        The last starter and the first sit share a confidence that shrinks
        toward 0.5 as the point gap between them closes.
        """
        requirements = requirements or RosterRequirements.standard()
        recommendations = []

        for position in PlayerPosition:
            group = [(player, self.projection_model.project(player, context))
                     for player in roster if player.position == position]
            if not group:
                continue

            group.sort(key=lambda item: (-item[1].points, item[0].rank))
            start_count = requirements.requirement(position).starters

            cutoff_confidence = CLEAR_DECISION_CONFIDENCE
            if 0 < start_count < len(group):
                cutoff_gap = group[start_count - 1][1].points - group[start_count][1].points
                cutoff_confidence = 0.5 + min(0.4, cutoff_gap / CUTOFF_GAP_SCALE)

            for index, (player, projection) in enumerate(group):
                decision = StartSitDecision.START if index < start_count else StartSitDecision.SIT
                at_cutoff = start_count - 1 <= index <= start_count
                confidence = cutoff_confidence if at_cutoff else CLEAR_DECISION_CONFIDENCE

                if decision == StartSitDecision.START:
                    reasoning = f'{position.value}{index + 1} at {projection.points:.1f} projected points'
                else:
                    reasoning = f'Behind {start_count} {position.value} starter(s) at {projection.points:.1f} projected points'
                if at_cutoff and confidence < CLEAR_DECISION_CONFIDENCE:
                    reasoning += ', close call at the cutoff'

                recommendations.append(StartSitRecommendation(player_id=player.id,
                                                              player_name=player.name,
                                                              position=position,
                                                              decision=decision,
                                                              projected_points=projection.points,
                                                              confidence=confidence,
                                                              reasoning=reasoning))

        return recommendations

    def analyze(self, lineup: LineupConfiguration) -> LineupAnalysis:
        projections = [slot.projection for slot in lineup.starters]
        weakest = min(lineup.starters, key=lambda slot: slot.projection.points, default=None)

        return LineupAnalysis(
            projected=lineup.total_points,
            floor=lineup.floor,
            ceiling=lineup.ceiling,
            volatility=self._volatility(lineup.floor, lineup.ceiling, lineup.total_points),
            boom_probability=sum(p.boom_probability for p in projections) / len(projections) if projections else 0.0,
            bust_probability=sum(p.bust_probability for p in projections) / len(projections) if projections else 0.0,
            weakest_player_id=weakest.player.id if weakest else None,
            stacks=sorted(self.find_stacks(lineup.starter_players)),
            unfilled_slots=list(lineup.unfilled_slots),
        )

    def flex_rankings(self,
                      lineup: LineupConfiguration,
                      requirements: Optional[RosterRequirements] = None,
                      context: Optional[ProjectionContext] = None) -> List[Tuple[Player, PlayerProjection]]:
        """Bench players eligible for FLEX, best projection first."""
        requirements = requirements or RosterRequirements.standard()
        candidates = [(player, self.projection_model.project(player, context))
                      for player in lineup.bench if player.position in requirements.flex.eligible]
        candidates.sort(key=lambda item: (-item[1].points, item[0].rank))
        return candidates

    @staticmethod
    def find_stacks(starters: Sequence[Player]) -> Set[str]:
        """NFL teams with a starting QB and a starting WR or TE."""
        qb_teams = {p.team for p in starters if p.position == PlayerPosition.QB}
        return {p.team for p in starters if p.position in STACK_TARGETS and p.team in qb_teams}

    def stack_multiplier(self, starters: Sequence[Player]) -> float:
        return self.stack_bonus if self.find_stacks(starters) else 1.0

    def _build_configuration(self,
                             starters: List[LineupSlot],
                             bench: Tuple[Player, ...],
                             strategy_mode: LineupStrategy,
                             unfilled: Tuple[str, ...]) -> LineupConfiguration:
        stack = self.stack_multiplier([slot.player for slot in starters])
        raw_points = sum(slot.projection.points for slot in starters)

        return LineupConfiguration(starters=tuple(starters),
                                   bench=bench,
                                   total_points=raw_points * stack,
                                   floor=sum(slot.projection.floor for slot in starters),
                                   ceiling=sum(slot.projection.ceiling for slot in starters),
                                   stack_bonus=stack,
                                   strategy=strategy_mode,
                                   unfilled_slots=unfilled)

    def _lineup_stats(self, lineup: LineupConfiguration, context: Optional[ProjectionContext]) -> LineupStats:
        players = lineup.starter_players
        projections = [self.projection_model.project(player, context) for player in players]
        stack = self.stack_multiplier(players)

        projected = sum(p.points for p in projections) * stack
        floor = sum(p.floor for p in projections)
        ceiling = sum(p.ceiling for p in projections)

        return LineupStats(projected=projected,
                           floor=floor,
                           ceiling=ceiling,
                           volatility=self._volatility(floor, ceiling, projected),
                           stack_bonus=stack)

    @staticmethod
    def _volatility(floor: float, ceiling: float, total: float) -> float:
        if total <= 0:
            return 0.0
        return max(0.0, (ceiling - floor) / total)

    @staticmethod
    def _explain(stats_a: LineupStats, stats_b: LineupStats, recommended: str, confidence_delta: float) -> str:
        if confidence_delta < CLOSE_CALL_THRESHOLD:
            return (f'Very close: lineup A projects {stats_a.projected:.1f} and lineup B '
                    f'{stats_b.projected:.1f}, within {CLOSE_CALL_THRESHOLD:.0%}.')

        better, worse = (stats_a, stats_b) if recommended == "A" else (stats_b, stats_a)
        if worse.projected > 0:
            edge = f'{(better.projected - worse.projected) / worse.projected:.1%} more points'
        else:
            edge = f'{better.projected:.1f} more points'

        if better.volatility < worse.volatility:
            volatility = 'lower volatility'
        elif better.volatility > worse.volatility:
            volatility = 'higher volatility'
        else:
            volatility = 'the same volatility'

        return f'Lineup {recommended} projects {edge} with {volatility}.'
