"""
Auto-draft: build one team from a fixed position-by-round template.

This is the general orchestrator with a template team plugged in. The team
values players exactly like any other drafter, but only considers the
template's positions each round and falls back to best available when they
run dry.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import EngineSettings
from ..datamodels.draft_state import DraftResult, DraftTeam, StrategyType
from ..datamodels.player import Player, PlayerPosition
from ..datamodels.roster import RosterRequirements
from ..exceptions import ConfigurationError
from .orchestrator import DraftOrchestrator
from .profiles import AUTOPILOT, strategy_for

logger = logging.getLogger(__name__)

QB, RB, WR, TE, K, DST = (PlayerPosition.QB, PlayerPosition.RB, PlayerPosition.WR,
                          PlayerPosition.TE, PlayerPosition.K, PlayerPosition.DST)

OPTIMAL_TEMPLATE: Dict[int, Tuple[PlayerPosition, ...]] = {
    1: (RB,),
    2: (RB, WR),
    3: (WR,),
    4: (RB, WR),
    5: (QB,),
    6: (WR, RB),
    7: (TE,),
    8: (RB, WR),
    9: (WR, RB),
    10: (QB, TE),
    11: (RB, WR),
    12: (DST,),
    13: (RB, WR),
    14: (K,),
    15: (RB, WR),
    16: (QB, TE, RB, WR),
}

AUTO_TEAM_ID = "auto"


def build_template_team(settings: EngineSettings,
                        draft_position: int = 1,
                        template: Optional[Dict[int, Tuple[PlayerPosition, ...]]] = None,
                        team_id: str = AUTO_TEAM_ID,
                        name: str = "Auto Draft") -> DraftTeam:
    """Draft team that follows a position template with no personality noise."""
    return DraftTeam(team_id=team_id,
                     name=name,
                     draft_position=draft_position,
                     strategy=strategy_for(StrategyType.BALANCED, settings.risk_tolerance),
                     personality=AUTOPILOT,
                     position_template=dict(template or OPTIMAL_TEMPLATE))


def build_optimal_team(player_pool: Iterable[Player],
                       settings: EngineSettings,
                       rng: Optional[random.Random] = None,
                       requirements: Optional[RosterRequirements] = None,
                       draft_position: int = 1,
                       opponents: Optional[Sequence[DraftTeam]] = None,
                       template: Optional[Dict[int, Tuple[PlayerPosition, ...]]] = None) -> DraftResult:
    """
    Draft an "optimal" roster for a single team.

    Without opponents the template team drafts alone from the full pool. With
    opponents it takes draft_position and the others fill the remaining
    slots, which gives a realistic board for that slot.

    Args:
        player_pool: Players available at the start of the draft
        settings: Engine settings; round_limit sets roster length
        rng: Seeded generator
        requirements: Roster rules
        draft_position: Slot for the template team when drafting against opponents
        opponents: Other teams in the draft
        template: Round -> target positions; defaults to OPTIMAL_TEMPLATE

    Returns:
        DraftResult whose "auto" roster is the generated team
    """
    opponents = list(opponents or [])
    if not opponents:
        draft_position = 1
    elif not 1 <= draft_position <= len(opponents) + 1:
        raise ConfigurationError(f'Draft position {draft_position} outside 1..{len(opponents) + 1}')

    auto_team = build_template_team(settings, draft_position, template)

    # Opponents keep their relative order around the template team's slot
    teams: List[DraftTeam] = [auto_team]
    open_positions = [p for p in range(1, len(opponents) + 2) if p != draft_position]
    for position, opponent in zip(open_positions, sorted(opponents, key=lambda t: t.draft_position)):
        teams.append(DraftTeam(team_id=opponent.team_id,
                               name=opponent.name,
                               draft_position=position,
                               strategy=opponent.strategy,
                               personality=opponent.personality,
                               position_template=opponent.position_template))

    logger.info(f'Auto-drafting from slot {draft_position} against {len(opponents)} opponents.')
    return DraftOrchestrator().run_draft(teams, player_pool, settings, rng, requirements)
