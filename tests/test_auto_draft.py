"""Tests for template auto-drafting"""
import random

import pytest

from draftlab.datamodels.draft_state import PickReason
from draftlab.datamodels.player import PlayerPosition
from draftlab.exceptions import ConfigurationError
from draftlab.simulation.auto_draft import AUTO_TEAM_ID, OPTIMAL_TEMPLATE, build_optimal_team
from draftlab.simulation.profiles import build_ai_teams


class TestAutoDraft:
    """Test the position template drafter"""

    def test_template_has_sixteen_rounds(self):
        assert sorted(OPTIMAL_TEMPLATE) == list(range(1, 17))

    def test_solo_draft_follows_template(self, catalog, settings):
        result = build_optimal_team(catalog, settings, random.Random(1))
        roster = result.roster_for(AUTO_TEAM_ID)
        picks = {pick.round: pick for pick in result.picks}

        assert len(roster) == 16
        assert result.is_complete
        for round_number, expected in [(1, PlayerPosition.RB), (3, PlayerPosition.WR), (5, PlayerPosition.QB),
                                       (7, PlayerPosition.TE), (12, PlayerPosition.DST), (14, PlayerPosition.K)]:
            assert picks[round_number].position == expected
            assert picks[round_number].reason == PickReason.TEMPLATE_TARGET

    def test_drafts_against_opponents(self, catalog, settings):
        rng = random.Random(6)
        opponents = build_ai_teams(9, rng)
        result = build_optimal_team(catalog, settings, rng, draft_position=4, opponents=opponents)

        slots = {team.team_id: team.draft_position for team in result.teams}
        assert slots[AUTO_TEAM_ID] == 4
        assert sorted(slots.values()) == list(range(1, 11))
        assert len(result.roster_for(AUTO_TEAM_ID)) == 16
        assert len(result.picks) == 160

        # Opponents keep their relative order around the auto team
        opponent_slots = [slots[team.team_id] for team in opponents]
        assert opponent_slots == sorted(opponent_slots)

    def test_rejects_slot_outside_draft(self, catalog, settings):
        opponents = build_ai_teams(3, random.Random(1))
        with pytest.raises(ConfigurationError):
            build_optimal_team(catalog, settings, draft_position=6, opponents=opponents)
