from .orchestrator import DraftOrchestrator, run_draft
from .auto_draft import OPTIMAL_TEMPLATE, build_optimal_team, build_template_team
from .profiles import PERSONALITIES, STRATEGIES, build_ai_teams, strategy_for
from .monte_carlo import ChampionshipSimulator, simulate_probabilities

__all__ = [
    "DraftOrchestrator",
    "run_draft",
    "OPTIMAL_TEMPLATE",
    "build_optimal_team",
    "build_template_team",
    "PERSONALITIES",
    "STRATEGIES",
    "build_ai_teams",
    "strategy_for",
    "ChampionshipSimulator",
    "simulate_probabilities"
]
