"""
Built-in drafting strategies and AI personalities.

Both catalogs are plain dicts of immutable values, so callers can extend them
with their own archetypes without touching the engine.
"""

import random
from typing import Dict, List, Optional, Sequence

from ..datamodels.draft_state import (
    AIPersonality, DecisionSpeed, DraftStrategy, DraftTeam, ResearchDepth, RiskTolerance, StrategyType
)
from ..datamodels.player import PlayerPosition

QB, RB, WR, TE, K, DST = (PlayerPosition.QB, PlayerPosition.RB, PlayerPosition.WR,
                          PlayerPosition.TE, PlayerPosition.K, PlayerPosition.DST)


STRATEGIES: Dict[StrategyType, DraftStrategy] = {
    StrategyType.BALANCED: DraftStrategy(name=StrategyType.BALANCED,
                                         position_priority=(RB, WR, QB, TE, DST, K),
                                         risk_tolerance=RiskTolerance.MODERATE,
                                         rookie_preference=0.5,
                                         value_based=True,
                                         follow_adp=True),
    StrategyType.RB_HEAVY: DraftStrategy(name=StrategyType.RB_HEAVY,
                                         position_priority=(RB, RB, WR, QB, TE, DST),
                                         risk_tolerance=RiskTolerance.CONSERVATIVE,
                                         rookie_preference=0.3,
                                         value_based=False,
                                         follow_adp=False),
    StrategyType.WR_HEAVY: DraftStrategy(name=StrategyType.WR_HEAVY,
                                         position_priority=(WR, WR, RB, WR, QB, RB, TE, WR),
                                         risk_tolerance=RiskTolerance.MODERATE,
                                         rookie_preference=0.5,
                                         value_based=True,
                                         follow_adp=False),
    StrategyType.ZERO_RB: DraftStrategy(name=StrategyType.ZERO_RB,
                                        position_priority=(WR, WR, TE, WR, QB, WR, RB, RB),
                                        risk_tolerance=RiskTolerance.AGGRESSIVE,
                                        rookie_preference=0.7,
                                        value_based=True,
                                        follow_adp=False),
    StrategyType.HERO_RB: DraftStrategy(name=StrategyType.HERO_RB,
                                        position_priority=(RB, WR, WR, TE, QB, WR, RB, WR),
                                        risk_tolerance=RiskTolerance.MODERATE,
                                        rookie_preference=0.4,
                                        value_based=True,
                                        follow_adp=True),
    StrategyType.BEST_AVAILABLE: DraftStrategy(name=StrategyType.BEST_AVAILABLE,
                                               position_priority=(RB, WR, RB, WR, QB, TE, RB, WR),
                                               risk_tolerance=RiskTolerance.AGGRESSIVE,
                                               rookie_preference=0.6,
                                               value_based=True,
                                               follow_adp=False),
}


PERSONALITIES: Dict[str, AIPersonality] = {
    "The Scholar": AIPersonality(name="The Scholar", decision_speed=DecisionSpeed.SLOW,
                                 research_depth=ResearchDepth.EXPERT, trade_aggression=0.3,
                                 reaches=0.2, sleepers=0.8, consistency=0.9),
    "The Gambler": AIPersonality(name="The Gambler", decision_speed=DecisionSpeed.FAST,
                                 research_depth=ResearchDepth.CASUAL, trade_aggression=0.9,
                                 reaches=0.7, sleepers=0.6, consistency=0.4),
    "The Safe Pick": AIPersonality(name="The Safe Pick", decision_speed=DecisionSpeed.MODERATE,
                                   research_depth=ResearchDepth.INFORMED, trade_aggression=0.2,
                                   reaches=0.1, sleepers=0.2, consistency=0.8),
    "The Analyst": AIPersonality(name="The Analyst", decision_speed=DecisionSpeed.SLOW,
                                 research_depth=ResearchDepth.EXPERT, trade_aggression=0.4,
                                 reaches=0.1, sleepers=0.7, consistency=0.95),
    "The Gunslinger": AIPersonality(name="The Gunslinger", decision_speed=DecisionSpeed.FAST,
                                    research_depth=ResearchDepth.INFORMED, trade_aggression=0.8,
                                    reaches=0.6, sleepers=0.8, consistency=0.5),
    "The Traditionalist": AIPersonality(name="The Traditionalist", decision_speed=DecisionSpeed.MODERATE,
                                        research_depth=ResearchDepth.INFORMED, trade_aggression=0.3,
                                        reaches=0.2, sleepers=0.3, consistency=0.85),
    "The Contrarian": AIPersonality(name="The Contrarian", decision_speed=DecisionSpeed.FAST,
                                    research_depth=ResearchDepth.EXPERT, trade_aggression=0.6,
                                    reaches=0.5, sleepers=0.9, consistency=0.6),
    "The Rookie": AIPersonality(name="The Rookie", decision_speed=DecisionSpeed.SLOW,
                                research_depth=ResearchDepth.CASUAL, trade_aggression=0.2,
                                reaches=0.4, sleepers=0.2, consistency=0.7),
}

# Deterministic drafter used for auto-draft and user teams
AUTOPILOT = AIPersonality(name="Autopilot", decision_speed=DecisionSpeed.FAST,
                          research_depth=ResearchDepth.EXPERT, trade_aggression=0.0,
                          reaches=0.0, sleepers=0.0, consistency=1.0)


def strategy_for(name: StrategyType, risk_tolerance: Optional[RiskTolerance] = None) -> DraftStrategy:
    """Catalog strategy, optionally with its risk tolerance replaced."""
    strategy = STRATEGIES[StrategyType(name)]
    if risk_tolerance is None or risk_tolerance == strategy.risk_tolerance:
        return strategy
    return DraftStrategy(name=strategy.name,
                         position_priority=strategy.position_priority,
                         risk_tolerance=RiskTolerance(risk_tolerance),
                         rookie_preference=strategy.rookie_preference,
                         value_based=strategy.value_based,
                         follow_adp=strategy.follow_adp)


def build_ai_teams(count: int,
                   rng: random.Random,
                   strategies: Optional[Sequence[DraftStrategy]] = None,
                   personalities: Optional[Sequence[AIPersonality]] = None,
                   names: Optional[Sequence[str]] = None) -> List[DraftTeam]:
    """
    Create count AI teams in draft positions 1..count.

    Personalities are dealt from a shuffled deck so a league only repeats one
    after every personality has been used; strategies are drawn per team.
    """
    if count < 1:
        return []

    strategy_pool = list(strategies or STRATEGIES.values())
    personality_pool = list(personalities or PERSONALITIES.values())

    deck = []
    teams = []
    for index in range(count):
        if not deck:
            deck = list(personality_pool)
            rng.shuffle(deck)
        personality = deck.pop()
        strategy = rng.choice(strategy_pool)
        name = names[index] if names and index < len(names) else f"Team {index + 1}"

        teams.append(DraftTeam(team_id=f"team_{index + 1}",
                               name=name,
                               draft_position=index + 1,
                               strategy=strategy,
                               personality=personality))
    return teams
