"""Tests for snake draft orchestration"""
import logging
import random
from collections import Counter

import pytest

from draftlab.config import EngineSettings
from draftlab.datamodels.draft_state import DraftStatus, PickReason
from draftlab.datamodels.player import PlayerPosition
from draftlab.exceptions import ConfigurationError
from draftlab.simulation.auto_draft import build_template_team
from draftlab.simulation.orchestrator import DraftOrchestrator, run_draft
from draftlab.simulation.profiles import build_ai_teams


def ten_team_draft(catalog, seed=42):
    teams = build_ai_teams(10, random.Random(seed))
    return run_draft(teams, catalog, EngineSettings(seed=seed))


class TestDraftOrchestrator:
    """Test full multi-team drafts"""

    def test_ten_team_sixteen_round_draft(self, catalog, requirements):
        result = ten_team_draft(catalog)

        assert result.status == DraftStatus.COMPLETE
        assert result.is_complete
        assert result.rounds_completed == 16
        assert len(result.picks) == 160
        for team in result.teams:
            assert len(team.roster) == 16
            for position, count in team.position_counts().items():
                assert count <= requirements.requirement(position).max

    def test_no_player_drafted_twice(self, catalog):
        result = ten_team_draft(catalog)
        player_ids = [pick.player_id for pick in result.picks]
        assert len(set(player_ids)) == len(player_ids)

        rostered = [player.id for team in result.teams for player in team.roster]
        assert sorted(rostered) == sorted(player_ids)

    def test_snake_order(self, catalog):
        result = ten_team_draft(catalog)
        positions = {team.team_id: team.draft_position for team in result.teams}

        for round_number in range(1, 17):
            order = [positions[pick.team_id] for pick in result.picks_for_round(round_number)]
            expected = list(range(1, 11))
            assert order == (expected if round_number % 2 == 1 else expected[::-1])

        assert [pick.overall for pick in result.picks] == list(range(1, 161))

    def test_same_seed_same_draft(self, catalog):
        first = ten_team_draft(catalog, seed=11)
        second = ten_team_draft(catalog, seed=11)
        assert [p.player_id for p in first.picks] == [p.player_id for p in second.picks]

    def test_pick_metadata(self, catalog):
        result = ten_team_draft(catalog)
        for pick in result.picks:
            assert 60.0 <= pick.confidence <= 100.0
            assert pick.value >= 0.0
            assert pick.player_id not in pick.alternatives
            assert len(pick.alternatives) <= 3

    def test_caller_teams_are_not_modified(self, catalog):
        teams = build_ai_teams(4, random.Random(3))
        run_draft(teams, catalog, EngineSettings(seed=3, league_size=4))
        assert all(not team.roster and not team.picks for team in teams)

    def test_pool_exhaustion_ends_draft_early(self, catalog):
        teams = build_ai_teams(10, random.Random(5))
        result = run_draft(teams, catalog[:25], EngineSettings(seed=5))

        assert result.terminated_early
        assert not result.is_complete
        assert result.status == DraftStatus.COMPLETE
        assert len(result.picks) == 25
        assert result.rounds_completed == 2

    def test_empty_template_position_falls_back(self, catalog, settings):
        no_kickers = [p for p in catalog if p.position != PlayerPosition.K]
        team = build_template_team(settings, template={1: (PlayerPosition.K,)})

        result = run_draft([team], no_kickers, settings.model_copy(update={"round_limit": 1}))
        pick = result.picks[0]
        assert pick.reason == PickReason.FALLBACK
        assert pick.position != PlayerPosition.K

    def test_rounds_past_position_maximums_warn(self, catalog, settings, team_factory, requirements, caplog):
        caplog.set_level(logging.WARNING, logger="draftlab.simulation.orchestrator")
        rounds = requirements.max_capacity + 1

        result = run_draft([team_factory()], catalog, settings.model_copy(update={"round_limit": rounds}))

        assert len(result.picks) == rounds
        assert [pick.reason for pick in result.picks[:-1]].count(PickReason.FALLBACK) == 0
        assert result.picks[-1].reason == PickReason.FALLBACK
        messages = [record.getMessage() for record in caplog.records]
        assert any("exceed" in message for message in messages)
        assert any("every position is at its maximum in round 23" in message for message in messages)

    def test_standard_draft_does_not_warn_about_capacity(self, catalog, caplog):
        caplog.set_level(logging.WARNING, logger="draftlab.simulation.orchestrator")
        ten_team_draft(catalog)
        assert not any("maximum" in record.getMessage() for record in caplog.records)

    def test_rejects_bad_team_setup(self, catalog, settings, team_factory):
        with pytest.raises(ConfigurationError):
            run_draft([], catalog, settings)

        clash = [team_factory("team_1", 1), team_factory("team_2", 1)]
        with pytest.raises(ConfigurationError):
            run_draft(clash, catalog, settings)

        duplicate_ids = [team_factory("team_1", 1), team_factory("team_1", 2)]
        with pytest.raises(ConfigurationError):
            run_draft(duplicate_ids, catalog, settings)

    def test_session_runs_once(self, catalog, settings, team_factory):
        orchestrator = DraftOrchestrator()
        session = orchestrator.create_session([team_factory()], catalog, settings.model_copy(update={"round_limit": 2}))
        orchestrator.run_session(session)

        with pytest.raises(ConfigurationError):
            orchestrator.run_session(session)

    def test_difficulty_override_still_completes(self, catalog):
        teams = build_ai_teams(6, random.Random(8))
        result = run_draft(teams, catalog, EngineSettings(seed=8, league_size=6, ai_difficulty="easy"))
        assert len(result.picks) == 96
        assert Counter(p.team_id for p in result.picks) == {team.team_id: 16 for team in teams}


class TestProfiles:
    """Test AI team generation"""

    def test_build_ai_teams_is_seeded(self):
        first = build_ai_teams(10, random.Random(4))
        second = build_ai_teams(10, random.Random(4))

        assert [t.draft_position for t in first] == list(range(1, 11))
        assert [(t.strategy.name, t.personality.name) for t in first] == \
            [(t.strategy.name, t.personality.name) for t in second]

    def test_personalities_dealt_before_repeating(self):
        teams = build_ai_teams(8, random.Random(2))
        assert len({team.personality.name for team in teams}) == 8
