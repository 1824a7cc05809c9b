"""Tests for lineup optimization"""
import pytest

from draftlab.datamodels.lineup import FLEX_SLOT, LineupStrategy, StartSitDecision
from draftlab.datamodels.player import InjuryStatus, PlayerPosition
from draftlab.optimizer.lineup import LineupOptimizer


@pytest.fixture
def roster(player_factory):
    """2 QB, 5 RB, 5 WR, 2 TE, 1 K, 1 DST with distinct projections and NFL teams."""
    layout = [
        ("qb1", "QB", 340.0, "KC"), ("qb2", "QB", 250.0, "NYJ"),
        ("rb1", "RB", 290.0, "SF"), ("rb2", "RB", 250.0, "DAL"), ("rb3", "RB", 210.0, "MIA"),
        ("rb4", "RB", 150.0, "DET"), ("rb5", "RB", 100.0, "GB"),
        ("wr1", "WR", 280.0, "CIN"), ("wr2", "WR", 240.0, "PHI"), ("wr3", "WR", 200.0, "BAL"),
        ("wr4", "WR", 140.0, "LAR"), ("wr5", "WR", 90.0, "SEA"),
        ("te1", "TE", 180.0, "MIN"), ("te2", "TE", 110.0, "JAX"),
        ("k1", "K", 140.0, "LAC"), ("dst1", "DST", 130.0, "BUF"),
    ]
    return [player_factory(pid, pos, rank=i + 1, projected_points=points, team=team)
            for i, (pid, pos, points, team) in enumerate(layout)]


class TestLineupOptimizer:
    """Test lineup construction and comparisons"""

    def setup_method(self):
        self.optimizer = LineupOptimizer()

    def test_standard_lineup(self, roster, requirements):
        lineup = self.optimizer.optimize(roster, requirements)

        assert lineup.is_complete
        assert len(lineup.starters) == 9
        assert len(lineup.bench) == 7
        assert {p.id for p in lineup.starter_players} == {
            "qb1", "rb1", "rb2", "wr1", "wr2", "te1", "k1", "dst1", "rb3"
        }

        flex = [slot for slot in lineup.starters if slot.slot == FLEX_SLOT]
        assert len(flex) == 1
        assert flex[0].player.id == "rb3"

    def test_starters_and_bench_partition_roster(self, roster, requirements):
        lineup = self.optimizer.optimize(roster, requirements)
        ids = [p.id for p in lineup.starter_players] + [p.id for p in lineup.bench]
        assert sorted(ids) == sorted(p.id for p in roster)
        assert [p.id for p in lineup.bench] == [p.id for p in roster if p not in lineup.starter_players]

    def test_missing_position_is_flagged(self, roster, requirements):
        no_kicker = [p for p in roster if p.position != PlayerPosition.K]
        lineup = self.optimizer.optimize(no_kicker, requirements)

        assert not lineup.is_complete
        assert lineup.unfilled_slots == ("K",)
        assert len(lineup.starters) == 8

    def test_stack_bonus(self, player_factory, roster, requirements):
        stacked = [p for p in roster if p.id != "wr2"] + [player_factory("wr2", "WR", rank=9, projected_points=240.0,
                                                                         team="KC")]
        lineup = self.optimizer.optimize(stacked, requirements)

        assert lineup.stack_bonus == pytest.approx(1.05)
        assert lineup.total_points == pytest.approx(lineup.raw_points * 1.05)
        assert self.optimizer.analyze(lineup).stacks == ["KC"]

        plain = self.optimizer.optimize(roster, requirements)
        assert plain.stack_bonus == 1.0

    def test_exclude_injured(self, player_factory, roster, requirements):
        hurt = [p for p in roster if p.id != "rb1"] + [player_factory("rb1", "RB", rank=3, projected_points=290.0,
                                                                      team="SF", injury_status=InjuryStatus.OUT)]
        lineup = self.optimizer.optimize(hurt, requirements, exclude_injured=True)

        assert "rb1" in {p.id for p in lineup.bench}
        assert lineup.is_complete

    def test_alternatives(self, roster, requirements):
        alternatives = self.optimizer.alternatives(roster, requirements)
        assert set(alternatives) == {LineupStrategy.CEILING, LineupStrategy.FLOOR, LineupStrategy.CONTRARIAN}
        for mode, lineup in alternatives.items():
            assert lineup.strategy == mode
            assert len(lineup.starters) == 9

    def test_compare_prefers_stronger_lineup(self, roster, requirements):
        best = self.optimizer.optimize(roster, requirements)
        weak_roster = [p for p in roster if p.id not in ("qb1", "rb1", "wr1")]
        weaker = self.optimizer.optimize(weak_roster, requirements)

        comparison = self.optimizer.compare(best, weaker)
        assert comparison.recommended == "A"
        assert comparison.confidence_delta > 0.02
        assert comparison.explanation.startswith("Lineup A projects")

        reverse = self.optimizer.compare(weaker, best)
        assert reverse.recommended == "B"

    def test_compare_close_call(self, roster, requirements):
        lineup = self.optimizer.optimize(roster, requirements)
        comparison = self.optimizer.compare(lineup, lineup)
        assert comparison.confidence_delta == 0.0
        assert comparison.explanation.startswith("Very close")

    def test_start_sit(self, roster, requirements):
        recommendations = {r.player_id: r for r in self.optimizer.start_sit(roster, requirements)}

        assert len(recommendations) == len(roster)
        assert recommendations["qb1"].decision == StartSitDecision.START
        assert recommendations["qb2"].decision == StartSitDecision.SIT
        assert recommendations["rb2"].decision == StartSitDecision.START
        assert recommendations["rb3"].decision == StartSitDecision.SIT
        assert recommendations["rb5"].confidence == pytest.approx(0.9)
        assert 0.5 <= recommendations["rb2"].confidence <= 0.9

    def test_start_sit_tie_at_cutoff(self, player_factory, requirements):
        roster = [player_factory("qb1", "QB", rank=1, adp=5.0, projected_points=300.0),
                  player_factory("qb2", "QB", rank=2, adp=5.0, projected_points=300.0)]
        recommendations = {r.player_id: r for r in self.optimizer.start_sit(roster, requirements)}

        assert recommendations["qb1"].decision == StartSitDecision.START
        assert recommendations["qb2"].decision == StartSitDecision.SIT
        assert recommendations["qb1"].confidence == pytest.approx(0.5)
        assert recommendations["qb2"].confidence == pytest.approx(0.5)
        assert "close call" in recommendations["qb1"].reasoning

    def test_start_sit_confidence_grows_with_gap(self, player_factory, requirements):
        starter = player_factory("qb1", "QB", rank=1, adp=5.0, projected_points=300.0)
        confidences = []
        for backup_points in [300.0, 295.0, 285.0, 270.0, 240.0, 150.0, 20.0]:
            backup = player_factory("qb2", "QB", rank=2, adp=5.0, projected_points=backup_points)
            recommendations = {r.player_id: r for r in self.optimizer.start_sit([starter, backup], requirements)}
            assert recommendations["qb1"].confidence == recommendations["qb2"].confidence
            confidences.append(recommendations["qb1"].confidence)

        assert confidences == sorted(confidences)
        assert len(set(confidences)) > 3
        assert confidences[0] == pytest.approx(0.5)
        assert confidences[-1] == pytest.approx(0.9)
        assert max(confidences) <= 0.9

    def test_analyze_and_flex_rankings(self, roster, requirements):
        lineup = self.optimizer.optimize(roster, requirements)
        analysis = self.optimizer.analyze(lineup)

        assert analysis.weakest_player_id == "dst1"
        assert analysis.floor <= analysis.projected <= analysis.ceiling

        rankings = self.optimizer.flex_rankings(lineup, requirements)
        assert [player.id for player, _ in rankings][:3] == ["wr3", "rb4", "wr4"]
        assert all(player.position != PlayerPosition.QB for player, _ in rankings)
