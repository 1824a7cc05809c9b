"""
Engine configuration.

Defaults live in DEFAULT_SETTINGS and are merged with an optional JSON file
and explicit overrides, the same way the application factory merged its
config dict. Keys may be given in snake_case or in the camelCase used by
league front ends (leagueSize, scoringType, ...).
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .datamodels.draft_state import AIDifficulty, ResearchDepth, RiskTolerance
from .datamodels.player import ELITE_TIER_MAX
from .datamodels.simulation import LeagueSettings, ScoringType
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "league_size": 10,
    "scoring_type": "ppr",
    "round_limit": 16,
    "ai_difficulty": None,
    "include_rookies": True,
    "injury_updates": True,
    "trials": 10000,
    "risk_tolerance": "moderate",
    "seed": None,
}

DIFFICULTY_RESEARCH_DEPTH = {
    AIDifficulty.EASY: ResearchDepth.CASUAL,
    AIDifficulty.MEDIUM: ResearchDepth.INFORMED,
    AIDifficulty.HARD: ResearchDepth.EXPERT,
    AIDifficulty.EXPERT: ResearchDepth.EXPERT,
}


class EngineSettings(BaseModel):
    """
    Recognized configuration options for drafts, lineups and simulations.

    The personality and stacking constants are tunable defaults rather than
    calibrated values.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    league_size: int = Field(10, ge=1, alias="leagueSize", description="Teams in the draft")
    scoring_type: ScoringType = Field(ScoringType.PPR, alias="scoringType", description="Scoring rules")
    round_limit: int = Field(16, ge=1, alias="roundLimit", description="Draft rounds")
    ai_difficulty: Optional[AIDifficulty] = Field(None, alias="aiDifficulty",
                                                  description="Overrides every AI team's research depth")
    include_rookies: bool = Field(True, alias="includeRookies", description="Whether rookies get a bonus")
    injury_updates: bool = Field(True, alias="injuryUpdates", description="Whether injury status discounts value")
    trials: int = Field(10000, ge=1, description="Monte Carlo seasons per simulation")
    risk_tolerance: RiskTolerance = Field(RiskTolerance.MODERATE, alias="riskTolerance",
                                          description="Risk tolerance for user and auto-draft teams")
    seed: Optional[int] = Field(None, description="Seed for reproducible runs")

    # Tunable valuation constants
    elite_tier: int = Field(int(ELITE_TIER_MAX), ge=1, alias="eliteTier", description="Deepest tier counted as elite")
    reach_multiplier: float = Field(0.3, ge=0.0, alias="reachMultiplier")
    sleeper_multiplier: float = Field(0.4, ge=0.0, alias="sleeperMultiplier")
    jitter_scale: float = Field(0.2, ge=0.0, alias="jitterScale")
    late_round_value_bonus: float = Field(1.15, ge=1.0, alias="lateRoundValueBonus")
    stack_bonus: float = Field(1.05, ge=1.0, alias="stackBonus")
    schedule_weight: float = Field(0.05, ge=0.0, le=1.0, alias="scheduleWeight",
                                   description="Scale of the easy/hard schedule adjustment")
    bye_penalty_weight: float = Field(0.1, ge=0.0, le=1.0, alias="byePenaltyWeight",
                                      description="Scale of the same-position bye week penalty")
    draft_stack_weight: float = Field(0.05, ge=0.0, le=1.0, alias="draftStackWeight",
                                      description="Scale of the same-team QB/WR draft stacking bonus")

    @property
    def research_depth_override(self) -> Optional[ResearchDepth]:
        if self.ai_difficulty is None:
            return None
        return DIFFICULTY_RESEARCH_DEPTH[self.ai_difficulty]

    def league_settings(self, **overrides) -> LeagueSettings:
        values = {"team_count": self.league_size, "scoring_type": self.scoring_type}
        values["playoff_teams"] = min(4, self.league_size)
        values.update(overrides)
        return LeagueSettings(**values)


def _normalize_keys(values: Dict[str, Any]) -> Dict[str, Any]:
    aliases = {field.alias: name for name, field in EngineSettings.model_fields.items() if field.alias}
    return {aliases.get(key, key): value for key, value in values.items()}


def load_settings(path: Optional[Union[str, Path]] = None,
                  overrides: Optional[Dict[str, Any]] = None) -> EngineSettings:
    """
    Build EngineSettings from defaults, an optional JSON file and overrides.

    Args:
        path: Optional JSON file with settings
        overrides: Explicit values that win over the file and defaults

    Returns:
        Validated settings

    Raises:
        ConfigurationError: if the file is unreadable or a value is invalid
    """
    merged = dict(DEFAULT_SETTINGS)

    if path is not None:
        try:
            with open(path) as f:
                file_settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f'Could not read settings file {path}: {e}')
            raise ConfigurationError(f'Could not read settings file {path}: {e}') from e

        if not isinstance(file_settings, dict):
            raise ConfigurationError(f'Settings file {path} must contain a JSON object')
        merged.update(_normalize_keys(file_settings))

    if overrides:
        merged.update(_normalize_keys(overrides))

    try:
        return EngineSettings(**merged)
    except ValidationError as e:
        logger.error(f'Invalid settings: {e}')
        raise ConfigurationError(f'Invalid settings: {e}') from e
