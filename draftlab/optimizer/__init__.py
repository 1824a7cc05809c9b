from .lineup import LineupOptimizer, contrarian_score, RANKING_KEYS

__all__ = [
    "LineupOptimizer",
    "contrarian_score",
    "RANKING_KEYS"
]
