"""
Projection outputs and the weekly context that feeds them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WeatherCondition(str, Enum):
    CLEAR = "clear"
    RAIN = "rain"
    WIND = "wind"
    SNOW = "snow"
    DOME = "dome"


@dataclass(frozen=True)
class WeatherConditions:
    condition: WeatherCondition = WeatherCondition.CLEAR
    wind_mph: float = 0.0
    temperature_f: float = 60.0


@dataclass(frozen=True)
class MatchupContext:
    """
    Opponent context for one game.

    opponent_rank runs 1-32 with 1 the most favourable matchup; opponent_form
    is a 0-100 recent-performance score where 50 is league average.
    """

    opponent_rank: int = 16
    opponent_form: float = 50.0


@dataclass(frozen=True)
class ProjectionContext:
    """
    What a projection is for.

    week=None asks for a context-free baseline (season simulations); a week
    number pulls weather, matchup and injury context from the provider.
    """

    week: Optional[int] = None


@dataclass(frozen=True)
class PlayerProjection:
    points: float
    floor: float
    ceiling: float
    confidence: float
    boom_probability: float
    bust_probability: float
    sample_size: int = 0
    insufficient_data: bool = False

    @property
    def weekly_std(self) -> float:
        """Standard deviation implied by the 95% band."""
        return max(0.0, (self.ceiling - self.floor) / (2 * 1.96))
