"""
Position analysis utilities for post-draft insights.

Provides tools for reading a finished (or in-progress) draft: positional
tiers and scarcity, position runs, picks that went well before or after
ADP, and letter grades for every roster.
"""

from typing import Dict, List, Optional, Sequence, Set
from collections import defaultdict
from dataclasses import dataclass, field
import numpy as np

from ..datamodels.draft_state import DraftPick, DraftResult, DraftTeam
from ..datamodels.player import ELITE_TIER_MAX, VALUE_ADP_GAP, Player, PlayerPosition
from ..datamodels.roster import RosterRequirements


TIER_BREAK_FACTOR = 1.5
RUN_WINDOW = 5
RUN_MIN_PICKS = 3
FLOW_WINDOW = 10

# How much each position's raw scarcity matters in practice
POSITION_SCARCITY_WEIGHTS = {
    PlayerPosition.QB: 0.7,
    PlayerPosition.RB: 1.2,
    PlayerPosition.WR: 0.9,
    PlayerPosition.TE: 1.1,
    PlayerPosition.K: 0.3,
    PlayerPosition.DST: 0.5,
}

GRADE_CUTOFFS = [
    (1.08, "A"),
    (1.03, "B"),
    (0.97, "C"),
    (0.92, "D"),
]
STRENGTH_MARGIN = 0.10


@dataclass(frozen=True)
class PickAssessment:
    """A pick compared with the player's average draft position."""
    pick: DraftPick
    player: Player

    @property
    def adp_delta(self) -> float:
        """Positive when the player went later than ADP (a steal)."""
        return self.pick.overall - self.player.adp


@dataclass
class TeamGrade:
    team_id: str
    team_name: str
    starter_points: float
    relative_score: float
    grade: str
    strengths: List[PlayerPosition] = field(default_factory=list)
    weaknesses: List[PlayerPosition] = field(default_factory=list)


class PositionAnalyzer:
    """
    Analyzes positional dynamics in fantasy drafts.

    Key functions:
    1. Group each position into tiers at point cliffs
    2. Score remaining scarcity per position
    3. Detect position runs and momentum in recent picks
    4. Flag reaches and steals against ADP
    5. Grade rosters against the rest of the league
    """

    def __init__(self, players: Dict[str, Player]):
        """
        Args:
            players: Every player in the draft pool, keyed by id
        """
        self.players = players
        self.position_tiers = self._calculate_position_tiers()

    @classmethod
    def from_pool(cls, player_pool: Sequence[Player]) -> 'PositionAnalyzer':
        return cls({player.id: player for player in player_pool})

    def _calculate_position_tiers(self) -> Dict[PlayerPosition, List[List[str]]]:
        """
        Group players into tiers by position based on projected points.

        A new tier starts when the drop to the next player is more than
        TIER_BREAK_FACTOR times the average drop so far.
        """
        position_players = defaultdict(list)
        for player in self.players.values():
            position_players[player.position].append(player)

        position_tiers = {}
        for position, players in position_players.items():
            players.sort(key=lambda p: p.projected_points, reverse=True)

            tiers = []
            current_tier = [players[0].id]
            for i in range(1, len(players)):
                point_drop = players[i - 1].projected_points - players[i].projected_points
                avg_drop = self._calculate_average_drop(players[:i])

                if avg_drop > 0 and point_drop > avg_drop * TIER_BREAK_FACTOR:
                    tiers.append(current_tier)
                    current_tier = [players[i].id]
                else:
                    current_tier.append(players[i].id)

            tiers.append(current_tier)
            position_tiers[position] = tiers

        return position_tiers

    def _calculate_average_drop(self, players: List[Player]) -> float:
        """Calculate average point drop between consecutive players."""
        if len(players) < 2:
            return 0.0

        drops = [players[i - 1].projected_points - players[i].projected_points for i in range(1, len(players))]
        return float(np.mean(drops))

    def calculate_position_scarcity(self,
                                    drafted: Set[str],
                                    position: PlayerPosition,
                                    elite_tier: int = int(ELITE_TIER_MAX)) -> float:
        """
        Calculate current scarcity score for a position (0-1 scale).

        Args:
            drafted: Ids of players already taken
            position: Position to analyze
            elite_tier: Highest tier number counted as elite

        Returns:
            Scarcity score from 0.0 (abundant) to 1.0 (none left)
        """
        at_position = [p for p in self.players.values() if p.position == position]
        remaining = [p for p in at_position if p.id not in drafted]

        if not remaining:
            return 1.0

        factors = [1.0 - len(remaining) / len(at_position)]

        total_elite = sum(1 for p in at_position if p.is_elite(elite_tier))
        if total_elite > 0:
            elite_remaining = sum(1 for p in remaining if p.is_elite(elite_tier))
            factors.append(1.0 - elite_remaining / total_elite)

        weight = POSITION_SCARCITY_WEIGHTS.get(position, 1.0)
        return float(min(1.0, np.mean(factors) * weight))

    def analyze_draft_flow(self, picks: Sequence[DraftPick], window: int = FLOW_WINDOW) -> Dict[str, object]:
        """
        Analyze recent draft flow for position runs and momentum.

        Args:
            picks: Picks in draft order
            window: How many of the latest picks to look at

        Returns:
            Dictionary with recent positions, runs and momentum
        """
        if not picks:
            return {'recent_positions': [], 'position_runs': {}, 'momentum': {}, 'picks_analyzed': 0}

        recent_picks = list(picks)[-window:]
        recent_positions = [pick.position.value for pick in recent_picks]

        return {
            'recent_positions': recent_positions,
            'position_runs': self._detect_position_runs(recent_positions),
            'momentum': self._calculate_position_momentum(recent_positions),
            'picks_analyzed': len(recent_picks)
        }

    def _detect_position_runs(self, recent_positions: List[str]) -> Dict[str, Dict]:
        """
        Detect position runs in recent picks.

        A run is RUN_MIN_PICKS or more picks of one position inside a
        RUN_WINDOW-pick window.
        """
        runs = {}

        for position in ['QB', 'RB', 'WR', 'TE']:
            max_in_window = 0
            for i in range(max(1, len(recent_positions) - RUN_WINDOW + 1)):
                window = recent_positions[i:i + RUN_WINDOW]
                max_in_window = max(max_in_window, window.count(position))

            if max_in_window >= RUN_MIN_PICKS:
                runs[position] = {
                    'intensity': max_in_window,
                    'is_active': recent_positions[-3:].count(position) >= 2,
                    'probability_continues': min(1.0, max_in_window / RUN_WINDOW)
                }

        return runs

    def _calculate_position_momentum(self, recent_positions: List[str]) -> Dict[str, float]:
        """
        Compare the later half of recent picks with the earlier half.

        Scores run from -1 (cooling off) to 1 (heating up).
        """
        if len(recent_positions) < 4:
            return {}

        mid_point = len(recent_positions) // 2
        earlier_half = recent_positions[:mid_point]
        recent_half = recent_positions[mid_point:]

        momentum = {}
        for position in PlayerPosition:
            earlier_rate = earlier_half.count(position.value) / len(earlier_half)
            recent_rate = recent_half.count(position.value) / len(recent_half)

            if earlier_rate + recent_rate > 0:
                momentum[position.value] = (recent_rate - earlier_rate) / (earlier_rate + recent_rate + 0.1)
            else:
                momentum[position.value] = 0.0

        return momentum

    def find_reaches(self, picks: Sequence[DraftPick], threshold: float = VALUE_ADP_GAP) -> List[PickAssessment]:
        """Picks made at least threshold slots before the player's ADP, biggest first."""
        assessed = [a for a in self._assess(picks) if a.adp_delta <= -threshold]
        return sorted(assessed, key=lambda a: a.adp_delta)

    def find_steals(self, picks: Sequence[DraftPick], threshold: float = VALUE_ADP_GAP) -> List[PickAssessment]:
        """Picks made at least threshold slots after the player's ADP, biggest first."""
        assessed = [a for a in self._assess(picks) if a.adp_delta >= threshold]
        return sorted(assessed, key=lambda a: a.adp_delta, reverse=True)

    def _assess(self, picks: Sequence[DraftPick]) -> List[PickAssessment]:
        return [PickAssessment(pick=pick, player=self.players[pick.player_id])
                for pick in picks if pick.player_id in self.players]

    def starter_points(self, roster: Sequence[Player], requirements: RosterRequirements) -> Dict[PlayerPosition, float]:
        """
        Projected points of a roster's best possible starters, by position.

        FLEX slots are credited to the position of the player who fills them.
        """
        by_position = defaultdict(list)
        for player in roster:
            by_position[player.position].append(player)

        points = defaultdict(float)
        leftovers = []
        for position in PlayerPosition:
            players = sorted(by_position.get(position, []), key=lambda p: p.projected_points, reverse=True)
            if not players:
                continue
            starters = requirements.requirement(position).starters
            points[position] += sum(p.projected_points for p in players[:starters])
            leftovers.extend(p for p in players[starters:] if requirements.is_flex_eligible(p.position))

        leftovers.sort(key=lambda p: p.projected_points, reverse=True)
        for player in leftovers[:requirements.flex.count]:
            points[player.position] += player.projected_points

        return dict(points)

    def grade_draft(self,
                    result: DraftResult,
                    requirements: Optional[RosterRequirements] = None) -> Dict[str, TeamGrade]:
        """
        Grade every roster against the league average.

        The score is the team's starter points over the league mean. A
        position is a strength when the team beats the league average there
        by STRENGTH_MARGIN, and a weakness when it trails by as much or
        cannot field its required starters.

        Returns:
            team id -> TeamGrade
        """
        requirements = requirements or RosterRequirements.standard()
        if not result.teams:
            return {}

        team_points = {team.team_id: self.starter_points(team.roster, requirements) for team in result.teams}
        totals = {team_id: sum(points.values()) for team_id, points in team_points.items()}
        league_mean = float(np.mean(list(totals.values())))

        position_means = {
            position: float(np.mean([points.get(position, 0.0) for points in team_points.values()]))
            for position in PlayerPosition
        }

        return {team.team_id: self._grade_team(team, team_points[team.team_id], totals[team.team_id],
                                               league_mean, position_means, requirements)
                for team in result.teams}

    def _grade_team(self,
                    team: DraftTeam,
                    points: Dict[PlayerPosition, float],
                    total: float,
                    league_mean: float,
                    position_means: Dict[PlayerPosition, float],
                    requirements: RosterRequirements) -> TeamGrade:
        relative = total / league_mean if league_mean > 0 else 1.0
        grade = next((letter for cutoff, letter in GRADE_CUTOFFS if relative >= cutoff), "F")

        counts = team.position_counts()
        strengths, weaknesses = [], []
        for position in PlayerPosition:
            if counts.get(position, 0) < requirements.requirement(position).starters:
                weaknesses.append(position)
                continue

            mean = position_means[position]
            if mean <= 0:
                continue
            ratio = points.get(position, 0.0) / mean
            if ratio >= 1 + STRENGTH_MARGIN:
                strengths.append(position)
            elif ratio <= 1 - STRENGTH_MARGIN:
                weaknesses.append(position)

        return TeamGrade(team_id=team.team_id,
                         team_name=team.name,
                         starter_points=total,
                         relative_score=relative,
                         grade=grade,
                         strengths=strengths,
                         weaknesses=weaknesses)
