"""
Snake draft orchestration.

Runs a full multi-team draft over an explicit DraftSession. Each turn values
every legal candidate, pools the top few according to the drafter's research
depth, and makes one value-weighted random draw from that pool. All
randomness comes from the session's seeded generator.
"""

import logging
import random
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import EngineSettings
from ..datamodels.draft_state import (
    DecisionSpeed, DraftPick, DraftResult, DraftSession, DraftStatus, DraftTeam, PickReason, ResearchDepth
)
from ..datamodels.player import Player
from ..datamodels.roster import NeedLevel, RosterRequirements
from ..exceptions import ConfigurationError
from ..utils.snake_draft import SnakeDraftCalculator
from ..valuation.evaluator import PlayerEvaluator, PoolSummary, ValuationBreakdown

logger = logging.getLogger(__name__)


RESEARCH_POOL_SIZES = {
    ResearchDepth.CASUAL: 5,
    ResearchDepth.INFORMED: 3,
    ResearchDepth.EXPERT: 2,
}

DECISION_TIME_BASE = {
    DecisionSpeed.FAST: 15.0,
    DecisionSpeed.MODERATE: 45.0,
    DecisionSpeed.SLOW: 90.0,
}
DECISION_TIME_SPREAD = 30.0

MAX_ALTERNATIVES = 3


class DraftOrchestrator:
    """
    Drives a snake draft from NOT_STARTED to COMPLETE.

    Key behaviors:
    1. Odd rounds pick in ascending draft position, even rounds descending
    2. Candidates are limited to positions under the roster maximum
    3. Equal values fall back to consensus rank before the random draw
    4. An empty wanted position falls back to best available overall
    5. Running out of players ends the draft early with partial rosters

    The orchestrator holds no draft state of its own, so one instance can run
    any number of independent sessions.
    """

    def __init__(self, draft_calculator: Optional[SnakeDraftCalculator] = None):
        self.draft_calculator = draft_calculator or SnakeDraftCalculator()

    def create_session(self,
                       teams: Sequence[DraftTeam],
                       player_pool: Iterable[Player],
                       settings: EngineSettings,
                       rng: Optional[random.Random] = None,
                       requirements: Optional[RosterRequirements] = None) -> DraftSession:
        """
        Validate inputs and build a fresh session.

        The session gets its own copies of the teams with empty rosters, so
        the caller's team objects are never modified.

        Raises:
            ConfigurationError: for missing teams or inconsistent draft positions
        """
        requirements = requirements or RosterRequirements.standard()
        self._validate_teams(teams)

        if settings.round_limit > requirements.max_capacity:
            logger.warning(f'{settings.round_limit} rounds exceed the {requirements.max_capacity} players position '
                           f'maximums allow; late picks will go past roster maximums')

        if rng is None:
            rng = random.Random(settings.seed)

        players: Dict[str, Player] = {}
        for player in player_pool:
            if player.id in players:
                logger.warning(f'Duplicate player id {player.id} in pool, keeping first entry')
                continue
            players[player.id] = player

        session_teams = []
        for team in sorted(teams, key=lambda t: t.draft_position):
            session_team = replace(team, roster=[], needs=[], picks=[])
            session_team.refresh_needs(requirements)
            session_teams.append(session_team)

        return DraftSession(teams=session_teams,
                            players=players,
                            settings=settings,
                            requirements=requirements,
                            rng=rng)

    def run_draft(self,
                  teams: Sequence[DraftTeam],
                  player_pool: Iterable[Player],
                  settings: EngineSettings,
                  rng: Optional[random.Random] = None,
                  requirements: Optional[RosterRequirements] = None) -> DraftResult:
        """
        Run a complete draft.

        Args:
            teams: Participating teams with unique draft positions 1..N
            player_pool: Players available at the start of the draft
            settings: Engine settings (round limit, scoring, difficulty, ...)
            rng: Seeded generator; defaults to random.Random(settings.seed)
            requirements: Roster rules; defaults to the standard 16-man roster

        Returns:
            Pick history and final rosters
        """
        session = self.create_session(teams, player_pool, settings, rng, requirements)
        return self.run_session(session)

    def run_session(self, session: DraftSession) -> DraftResult:
        if session.status != DraftStatus.NOT_STARTED:
            raise ConfigurationError(f'Draft session already {session.status.value}')

        settings = session.settings
        logger.info(f'Starting draft: {len(session.teams)} teams, {settings.round_limit} rounds, '
                    f'{len(session.players)} players.')

        evaluator = PlayerEvaluator(session.requirements)
        rounds_completed = 0

        try:
            for round_number in range(1, settings.round_limit + 1):
                session.status = DraftStatus.ROUND_IN_PROGRESS
                session.current_round = round_number

                if not self.run_round(session, evaluator, round_number):
                    session.terminated_early = True
                    logger.warning(f'Player pool exhausted in round {round_number} after '
                                   f'{len(session.picks)} picks, ending draft early.')
                    break

                rounds_completed = round_number

        except Exception as e:
            logger.error(f'Draft failed in round {session.current_round}: {e}')
            raise

        session.status = DraftStatus.COMPLETE
        logger.info(f'Draft complete: {len(session.picks)} picks over {rounds_completed} full rounds.')

        return DraftResult(picks=list(session.picks),
                           teams=session.teams,
                           status=session.status,
                           terminated_early=session.terminated_early,
                           rounds_completed=rounds_completed)

    def run_round(self, session: DraftSession, evaluator: PlayerEvaluator, round_number: int) -> bool:
        """Run every turn of a round. Returns False if the pool ran dry."""
        team_count = len(session.teams)

        for pick_in_round, draft_position in enumerate(self.draft_calculator.round_order(round_number, team_count), 1):
            team = session.team_at(draft_position)
            overall = self.draft_calculator.overall_pick(round_number, draft_position, team_count)

            if self.take_turn(session, evaluator, team, round_number, pick_in_round, overall) is None:
                return False

        return True

    def take_turn(self,
                  session: DraftSession,
                  evaluator: PlayerEvaluator,
                  team: DraftTeam,
                  round_number: int,
                  pick_in_round: int,
                  overall: int) -> Optional[DraftPick]:
        """
        Make one pick for a team.

        Returns:
            The recorded pick, or None if no players remain
        """
        available = session.available_players()
        if not available:
            return None

        settings = session.settings
        candidates, used_fallback = self._candidate_pool(session, team, round_number, available)
        summary = PoolSummary.from_players(available, settings.elite_tier)

        ranked = self._rank_candidates(evaluator, candidates, team, summary, round_number, settings,
                                       session.rng, overall)
        choice = ranked[self._select_with_randomness(ranked, self._pool_size(team, settings), session.rng)]

        time_used = DECISION_TIME_BASE[team.personality.decision_speed] + session.rng.random() * DECISION_TIME_SPREAD
        alternatives = [item.player.id for item in ranked if item is not choice][:MAX_ALTERNATIVES]

        pick = DraftPick(round=round_number,
                         pick_in_round=pick_in_round,
                         overall=overall,
                         team_id=team.team_id,
                         player_id=choice.player.id,
                         position=choice.player.position,
                         value=choice.value,
                         time_used=time_used,
                         confidence=min(100.0, max(60.0, choice.value / 10.0)),
                         reason=self._pick_reason(team, choice, used_fallback, round_number),
                         alternatives=alternatives)

        session.record_pick(team, choice.player, pick)
        logger.debug(f'Pick {overall} (R{round_number}.{pick_in_round}): {team.name} takes {choice.player} '
                     f'[{pick.reason.value}, value {choice.value:.1f}]')
        return pick

    def _candidate_pool(self,
                        session: DraftSession,
                        team: DraftTeam,
                        round_number: int,
                        available: List[Player]) -> Tuple[List[Player], bool]:
        """
        Narrow the available players to the ones this team may take.

        Returns the candidates and whether best-available fallback was used.
        """
        counts = team.position_counts()
        requirements = session.requirements
        under_max = [p for p in available
                     if counts.get(p.position, 0) < requirements.requirement(p.position).max]

        targets = team.template_positions(round_number)
        if targets:
            targeted = [p for p in under_max if p.position in targets]
            if targeted:
                return targeted, False
            logger.debug(f'{team.name}: no {"/".join(t.value for t in targets)} left in round {round_number}')
            if not under_max:
                logger.warning(f'{team.name}: every position is at its maximum in round {round_number}')
            return (under_max or available), True

        if under_max:
            return under_max, False
        logger.warning(f'{team.name}: every position is at its maximum in round {round_number}')
        return available, True

    def _rank_candidates(self,
                         evaluator: PlayerEvaluator,
                         candidates: List[Player],
                         team: DraftTeam,
                         summary: PoolSummary,
                         round_number: int,
                         settings: EngineSettings,
                         rng: random.Random,
                         overall: int) -> List[ValuationBreakdown]:
        ranked = [evaluator.evaluate_breakdown(player, team, summary, round_number, settings, rng, overall)
                  for player in candidates]
        # Equal values go to the better consensus rank
        ranked.sort(key=lambda item: (-item.value, item.player.rank))
        return ranked

    def _pool_size(self, team: DraftTeam, settings: EngineSettings) -> int:
        depth = settings.research_depth_override or team.personality.research_depth
        return RESEARCH_POOL_SIZES[depth]

    def _select_with_randomness(self,
                                ranked: List[ValuationBreakdown],
                                pool_size: int,
                                rng: random.Random) -> int:
        """
        Value-weighted draw from the top pool_size candidates.

        One uniform draw is scaled by the pool's total value and walked down
        the pool until it is used up.
        """
        pool = ranked[:pool_size]
        total_value = sum(item.value for item in pool)
        if total_value <= 0:
            return 0

        remaining = rng.random() * total_value
        for index, item in enumerate(pool):
            remaining -= item.value
            if remaining <= 0:
                return index

        return len(pool) - 1

    def _pick_reason(self, team: DraftTeam, choice: ValuationBreakdown, used_fallback: bool,
                     round_number: int) -> PickReason:
        player = choice.player

        if used_fallback:
            return PickReason.FALLBACK
        if team.template_positions(round_number):
            return PickReason.TEMPLATE_TARGET
        if choice.need_level == NeedLevel.URGENT:
            return PickReason.POSITIONAL_NEED
        if choice.late_round_value:
            return PickReason.VALUE_PICK
        if player.is_sleeper and team.personality.sleepers > 0.5:
            return PickReason.SLEEPER

        priority = team.strategy.priority_index(player.position)
        if priority is not None and priority <= 1:
            return PickReason.STRATEGY_FIT
        return PickReason.BEST_AVAILABLE

    def _validate_teams(self, teams: Sequence[DraftTeam]):
        if not teams:
            raise ConfigurationError('A draft needs at least one team')

        team_ids = [team.team_id for team in teams]
        if len(set(team_ids)) != len(team_ids):
            raise ConfigurationError(f'Duplicate team ids: {sorted(team_ids)}')

        positions = sorted(team.draft_position for team in teams)
        if positions != list(range(1, len(teams) + 1)):
            raise ConfigurationError(f'Draft positions must be 1..{len(teams)}, got {positions}')


def run_draft(teams: Sequence[DraftTeam],
              player_pool: Iterable[Player],
              settings: EngineSettings,
              rng: Optional[random.Random] = None,
              requirements: Optional[RosterRequirements] = None) -> DraftResult:
    """Run a draft with a default orchestrator."""
    return DraftOrchestrator().run_draft(teams, player_pool, settings, rng, requirements)
