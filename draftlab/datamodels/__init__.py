"""
Data models for the draft, lineup and season engines.

This module exports the core data structures used throughout the package.
Keeping exports centralized here allows for easy imports.
"""

from .player import InjuryStatus, Player, PlayerPosition, PlayerTier, ScheduleStrength
from .roster import FlexDefinition, NeedLevel, PositionRequirement, RosterRequirements
from .draft_state import (
    AIDifficulty, AIPersonality, DecisionSpeed, DraftPick, DraftResult, DraftSession, DraftStatus,
    DraftStrategy, DraftTeam, PickReason, ResearchDepth, RiskTolerance, StrategyType
)
from .projection import (
    MatchupContext, PlayerProjection, ProjectionContext, WeatherCondition, WeatherConditions
)
from .lineup import (
    FLEX_SLOT, LineupAnalysis, LineupComparison, LineupConfiguration, LineupSlot, LineupStats,
    LineupStrategy, StartSitDecision, StartSitRecommendation
)
from .simulation import ChampionshipOdds, LeagueSettings, ScoringType, SeasonTeam, SimulationResult

__all__ = [
    "Player",
    "PlayerPosition",
    "PlayerTier",
    "InjuryStatus",
    "ScheduleStrength",

    "FlexDefinition",
    "NeedLevel",
    "PositionRequirement",
    "RosterRequirements",

    "AIDifficulty",
    "AIPersonality",
    "DecisionSpeed",
    "DraftPick",
    "DraftResult",
    "DraftSession",
    "DraftStatus",
    "DraftStrategy",
    "DraftTeam",
    "PickReason",
    "ResearchDepth",
    "RiskTolerance",
    "StrategyType",

    "MatchupContext",
    "PlayerProjection",
    "ProjectionContext",
    "WeatherCondition",
    "WeatherConditions",

    "FLEX_SLOT",
    "LineupAnalysis",
    "LineupComparison",
    "LineupConfiguration",
    "LineupSlot",
    "LineupStats",
    "LineupStrategy",
    "StartSitDecision",
    "StartSitRecommendation",

    "ChampionshipOdds",
    "LeagueSettings",
    "ScoringType",
    "SeasonTeam",
    "SimulationResult"
]
