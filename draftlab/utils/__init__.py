"""
Utility functions for draft analysis and calculations.

This package provides snake draft pick math and post-draft position
analysis.
"""

from .snake_draft import SnakeDraftCalculator
from .position_analysis import PickAssessment, PositionAnalyzer, TeamGrade

__all__ = [
    "SnakeDraftCalculator",
    "PositionAnalyzer",
    "PickAssessment",
    "TeamGrade"
]
