"""
Context providers for projections.

The projection model never looks up weather, matchups, injuries or game logs
itself. It asks a provider, so tests and what-if runs can plug in fixed data
while a real deployment wires in a feed.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..datamodels.player import InjuryStatus, Player
from ..datamodels.projection import MatchupContext, WeatherConditions


class ContextProvider(ABC):
    """Given a player and a week, return the context a projection needs."""

    @abstractmethod
    def weather(self, player: Player, week: int) -> WeatherConditions:
        ...

    @abstractmethod
    def matchup(self, player: Player, week: int) -> MatchupContext:
        ...

    @abstractmethod
    def injury(self, player: Player, week: int) -> InjuryStatus:
        ...

    @abstractmethod
    def game_log(self, player: Player) -> List[float]:
        """Fantasy points per game, oldest first."""
        ...


class NeutralContextProvider(ContextProvider):
    """Clear weather, average matchup, catalog injury status, no history."""

    def weather(self, player: Player, week: int) -> WeatherConditions:
        return WeatherConditions()

    def matchup(self, player: Player, week: int) -> MatchupContext:
        return MatchupContext()

    def injury(self, player: Player, week: int) -> InjuryStatus:
        return player.injury_status

    def game_log(self, player: Player) -> List[float]:
        return []


class StaticContextProvider(NeutralContextProvider):
    """
    Table-driven provider.

    game_logs and injuries are keyed by player id, weather by NFL team and
    matchups by player id. Anything missing falls back to neutral context.
    """

    def __init__(self,
                 game_logs: Optional[Dict[str, Sequence[float]]] = None,
                 weather: Optional[Dict[str, WeatherConditions]] = None,
                 matchups: Optional[Dict[str, MatchupContext]] = None,
                 injuries: Optional[Dict[str, InjuryStatus]] = None):
        self.game_logs = {pid: list(log) for pid, log in (game_logs or {}).items()}
        self.weather_by_team = dict(weather or {})
        self.matchups = dict(matchups or {})
        self.injuries = dict(injuries or {})

    def weather(self, player: Player, week: int) -> WeatherConditions:
        return self.weather_by_team.get(player.team, super().weather(player, week))

    def matchup(self, player: Player, week: int) -> MatchupContext:
        return self.matchups.get(player.id, super().matchup(player, week))

    def injury(self, player: Player, week: int) -> InjuryStatus:
        return self.injuries.get(player.id, super().injury(player, week))

    def game_log(self, player: Player) -> List[float]:
        return list(self.game_logs.get(player.id, []))
