"""
Player valuation: draft-time value and weekly projections.
"""

from .evaluator import PlayerEvaluator, PoolSummary, ValuationBreakdown
from .projections import ProjectionModel, POSITION_BASELINES
from .providers import ContextProvider, NeutralContextProvider, StaticContextProvider

__all__ = [
    "PlayerEvaluator",
    "PoolSummary",
    "ValuationBreakdown",
    "ProjectionModel",
    "POSITION_BASELINES",
    "ContextProvider",
    "NeutralContextProvider",
    "StaticContextProvider"
]
