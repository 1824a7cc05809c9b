"""
Weekly fantasy point projections.

Three small models vote on a point estimate; the player's own game log sets
the width of the floor/ceiling band. Players without enough history get a
wide default band and a low, explicit confidence instead of an error.
"""

import logging
import math
from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from ..datamodels.player import InjuryStatus, Player, PlayerPosition
from ..datamodels.projection import (
    MatchupContext, PlayerProjection, ProjectionContext, WeatherCondition, WeatherConditions
)
from ..exceptions import ConfigurationError
from .providers import ContextProvider, NeutralContextProvider

logger = logging.getLogger(__name__)


# Season totals used when a catalog entry has no projection
POSITION_BASELINES = {
    PlayerPosition.QB: 280.0,
    PlayerPosition.RB: 220.0,
    PlayerPosition.WR: 180.0,
    PlayerPosition.TE: 140.0,
    PlayerPosition.K: 120.0,
    PlayerPosition.DST: 110.0,
}

INJURY_MULTIPLIERS = {
    InjuryStatus.HEALTHY: 1.0,
    InjuryStatus.PROBABLE: 0.95,
    InjuryStatus.QUESTIONABLE: 0.85,
    InjuryStatus.DOUBTFUL: 0.60,
    InjuryStatus.OUT: 0.0,
}

WEATHER_IMPACTS = {
    (PlayerPosition.QB, WeatherCondition.RAIN): -0.15,
    (PlayerPosition.QB, WeatherCondition.WIND): -0.12,
    (PlayerPosition.QB, WeatherCondition.SNOW): -0.20,
    (PlayerPosition.RB, WeatherCondition.RAIN): 0.05,
    (PlayerPosition.RB, WeatherCondition.SNOW): -0.08,
    (PlayerPosition.WR, WeatherCondition.WIND): -0.18,
    (PlayerPosition.K, WeatherCondition.WIND): -0.25,
}

FEATURE_WEIGHTS = {
    "age": 0.10,
    "experience": 0.05,
    "adp": 0.15,
    "ownership": 0.05,
}

DEFAULT_BLEND_WEIGHTS = (0.3, 0.4, 0.3)

RECENT_GAMES = 5
MIN_HISTORY_GAMES = 3
BOOM_BUST_MIN_GAMES = 5
FULL_CONFIDENCE_GAMES = 16
BAND_Z = 1.96
NONLINEAR_SPREAD = 0.15

INSUFFICIENT_DATA_CV = 0.4
INSUFFICIENT_DATA_CONFIDENCE = 0.2
DEFAULT_BOOM_BUST = 0.25


class ProjectionModel:
    """
    Ensemble projection for a single player.

    Key insights modeled:
    1. Recent form matters most when there is enough of it
    2. Catalog features (age, experience, ADP, ownership) nudge the baseline
    3. A saturating nonlinear model keeps outliers from dominating
    4. Weekly context (matchup, weather, injury) scales the blended estimate
    5. Uncertainty comes from the player's own variance, widened for short logs
    """

    def __init__(self,
                 provider: Optional[ContextProvider] = None,
                 games_per_season: int = 17,
                 blend_weights: Tuple[float, float, float] = DEFAULT_BLEND_WEIGHTS):
        """
        Args:
            provider: Source of weather, matchup, injury and game log context
            games_per_season: Games behind a season-total projection
            blend_weights: Weights for the recency, linear and nonlinear models
        """
        if games_per_season < 1:
            raise ConfigurationError("games_per_season must be >= 1")
        if len(blend_weights) != 3 or any(w < 0 for w in blend_weights) or not math.isclose(sum(blend_weights), 1.0):
            raise ConfigurationError(f"Blend weights must be three non-negative values summing to 1, got {blend_weights}")

        self.provider = provider or NeutralContextProvider()
        self.games_per_season = games_per_season
        self.blend_weights = tuple(blend_weights)

    def project(self, player: Player, context: Optional[ProjectionContext] = None) -> PlayerProjection:
        """
        Project weekly fantasy points for a player.

        Args:
            player: Player to project
            context: Week to project for; None or week=None skips weekly adjustments

        Returns:
            Point estimate with floor, ceiling, confidence and boom/bust odds
        """
        context = context or ProjectionContext()
        history = self.provider.game_log(player)
        baseline = self.weekly_baseline(player)

        signals = self._feature_signals(player)
        recency_weight, linear_weight, nonlinear_weight = self.blend_weights
        points = (recency_weight * self._recency_model(history, baseline) +
                  linear_weight * self._linear_model(signals, baseline) +
                  nonlinear_weight * self._nonlinear_model(signals, baseline))

        if context.week is not None:
            points *= self._context_multiplier(player, context.week)

        return self._build_projection(max(0.0, points), history)

    def weekly_baseline(self, player: Player) -> float:
        season_points = player.projected_points or POSITION_BASELINES[player.position]
        return season_points / self.games_per_season

    def _recency_model(self, history: Sequence[float], baseline: float) -> float:
        if len(history) < MIN_HISTORY_GAMES:
            return baseline

        recent = np.asarray(history[-RECENT_GAMES:], dtype=float)
        weights = np.arange(1, len(recent) + 1, dtype=float)  # newest game weighs most
        return float(np.average(recent, weights=weights))

    def _feature_signals(self, player: Player) -> Dict[str, float]:
        """Catalog features scaled to roughly -1..1, zero meaning league-typical."""
        age = 0.0 if player.age is None else (27 - player.age) / 10.0
        experience = 0.0 if player.experience is None else (min(player.experience, 10) - 3) / 7.0
        adp = (100.0 - min(player.adp, 200.0)) / 100.0
        ownership = (player.ownership - 50.0) / 50.0

        return {
            "age": float(np.clip(age, -1.0, 1.0)),
            "experience": float(np.clip(experience, -1.0, 1.0)),
            "adp": float(np.clip(adp, -1.0, 1.0)),
            "ownership": float(np.clip(ownership, -1.0, 1.0)),
        }

    def _linear_model(self, signals: Dict[str, float], baseline: float) -> float:
        adjustment = sum(FEATURE_WEIGHTS[name] * value for name, value in signals.items())
        return baseline * max(0.5, 1.0 + adjustment)

    def _nonlinear_model(self, signals: Dict[str, float], baseline: float) -> float:
        mean_signal = float(np.mean(list(signals.values())))
        return baseline * (1.0 + NONLINEAR_SPREAD * math.tanh(2.0 * mean_signal))

    def _context_multiplier(self, player: Player, week: int) -> float:
        matchup = self.matchup_factor(self.provider.matchup(player, week))
        weather = self.weather_factor(player.position, self.provider.weather(player, week))
        injury = INJURY_MULTIPLIERS.get(self.provider.injury(player, week), 0.75)
        return matchup * weather * injury

    @staticmethod
    def matchup_factor(matchup: MatchupContext) -> float:
        ranking_factor = 1.0 + (16 - matchup.opponent_rank) / 32.0
        form_factor = 1.0 + (50.0 - matchup.opponent_form) / 100.0
        return max(0.0, 0.6 * ranking_factor + 0.4 * form_factor)

    @staticmethod
    def weather_factor(position: PlayerPosition, weather: WeatherConditions) -> float:
        impact = WEATHER_IMPACTS.get((position, weather.condition), 0.0)
        if impact == 0.0:
            return 1.0

        if weather.wind_mph > 20:
            impact *= 1.5
        if weather.temperature_f < 20:
            impact *= 1.2

        return max(0.0, 1.0 + impact)

    def _build_projection(self, points: float, history: Sequence[float]) -> PlayerProjection:
        games = np.asarray(history, dtype=float)
        sample_size = len(games)
        insufficient = sample_size < MIN_HISTORY_GAMES

        cv = INSUFFICIENT_DATA_CV
        if not insufficient:
            mean = float(games.mean())
            if mean > 0:
                # Short logs understate spread, so widen by 1/n
                cv = float(games.std()) / mean * (1.0 + 1.0 / sample_size)

        spread = BAND_Z * points * cv
        floor = max(0.0, points - spread)
        ceiling = points + spread

        data_confidence = min(1.0, sample_size / FULL_CONFIDENCE_GAMES)
        variance_confidence = max(0.0, 1.0 - 2.0 * cv)
        confidence = max(INSUFFICIENT_DATA_CONFIDENCE, 0.6 * data_confidence + 0.4 * variance_confidence)

        if points <= 0:
            boom, bust = 0.0, 1.0
        elif sample_size < BOOM_BUST_MIN_GAMES:
            boom, bust = DEFAULT_BOOM_BUST, DEFAULT_BOOM_BUST
        else:
            boom = float(np.mean(games >= 1.5 * points))
            bust = float(np.mean(games <= 0.5 * points))

        if insufficient:
            logger.debug(f'Only {sample_size} games of history, using default variance')

        return PlayerProjection(points=float(points),
                                floor=float(floor),
                                ceiling=float(ceiling),
                                confidence=float(min(1.0, confidence)),
                                boom_probability=boom,
                                bust_probability=bust,
                                sample_size=sample_size,
                                insufficient_data=insufficient)
