"""Tests for player and roster models"""
import pytest
from pydantic import ValidationError

from draftlab.datamodels.draft_state import AIPersonality, DraftPick, PickReason
from draftlab.datamodels.player import InjuryStatus, PlayerPosition
from draftlab.datamodels.roster import NeedLevel, PositionRequirement, RosterRequirements
from draftlab.datamodels.simulation import LeagueSettings


class TestPlayer:
    """Test player validation and derived flags"""

    def test_rejects_invalid_values(self, player_factory):
        with pytest.raises(ValueError):
            player_factory("p1", "RB", tier=0)
        with pytest.raises(ValueError):
            player_factory("p1", "RB", ownership=120.0)
        with pytest.raises(ValueError):
            player_factory("p1", "RB", projected_points=-1.0)

    def test_sleeper_and_value_flags(self, player_factory):
        sleeper = player_factory("p1", "WR", rank=40, adp=60.0, ownership=10.0)
        assert sleeper.is_sleeper
        assert sleeper.is_value_player

        popular = player_factory("p2", "WR", rank=40, adp=41.0, ownership=80.0)
        assert not popular.is_sleeper
        assert popular.is_popular()

    def test_popular_by_adp(self, player_factory):
        player = player_factory("p1", "RB", rank=20, adp=25.0, ownership=40.0)
        assert not player.is_popular()
        assert player.is_popular(overall_pick=30)

    def test_rookie_and_injury(self, player_factory):
        rookie = player_factory("p1", "RB", experience=0, injury_status=InjuryStatus.QUESTIONABLE)
        assert rookie.is_rookie
        assert rookie.is_injured
        assert not player_factory("p2", "RB").is_rookie


class TestRosterRequirements:
    """Test roster rules and need levels"""

    def test_standard_roster(self, requirements):
        assert requirements.starter_slots == 9
        assert requirements.roster_size == 16
        assert requirements.max_starters(PlayerPosition.RB) == 3
        assert requirements.max_starters(PlayerPosition.QB) == 1

    def test_need_levels(self, requirements):
        assert requirements.need_level(PlayerPosition.RB, 0) == NeedLevel.URGENT
        assert requirements.need_level(PlayerPosition.RB, 1) == NeedLevel.MODERATE
        assert requirements.need_level(PlayerPosition.RB, 2) == NeedLevel.FLEX_DEPTH
        assert requirements.need_level(PlayerPosition.QB, 1) == NeedLevel.DEPTH
        assert requirements.need_level(PlayerPosition.QB, 3) == NeedLevel.FILLED
        assert requirements.need_level(PlayerPosition.RB, 6) == NeedLevel.FILLED

    def test_open_needs(self, requirements):
        needs = requirements.open_needs({PlayerPosition.RB: 1, PlayerPosition.QB: 1})
        assert needs.count(PlayerPosition.RB) == 1
        assert PlayerPosition.QB not in needs
        assert needs.count(PlayerPosition.WR) == 2

    def test_rejects_mismatched_target(self):
        with pytest.raises(ValidationError):
            RosterRequirements(bench=5, roster_size_target=16)

    def test_rejects_bad_position_bounds(self):
        with pytest.raises(ValidationError):
            PositionRequirement(min=3, max=2)
        with pytest.raises(ValidationError):
            PositionRequirement(min=0, max=1, starters=2)

    def test_rejects_flex_without_requirement(self):
        with pytest.raises(ValidationError):
            RosterRequirements(positions={PlayerPosition.QB: PositionRequirement(min=1, max=2, starters=1)})


class TestDraftModels:
    """Test draft value objects"""

    def test_personality_bounds(self):
        with pytest.raises(ValueError):
            AIPersonality(name="Broken", reaches=1.5)

    def test_pick_confidence_range(self):
        with pytest.raises(ValidationError):
            DraftPick(round=1, pick_in_round=1, overall=1, team_id="t", player_id="p",
                      position=PlayerPosition.RB, value=100.0, time_used=10.0,
                      confidence=40.0, reason=PickReason.BEST_AVAILABLE)

    def test_league_settings_playoff_field(self):
        with pytest.raises(ValidationError):
            LeagueSettings(team_count=4, playoff_teams=6)
