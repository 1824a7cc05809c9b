"""Tests for season and championship simulation"""
import asyncio

import pytest

from draftlab.datamodels.simulation import LeagueSettings, SeasonTeam
from draftlab.exceptions import ConfigurationError
from draftlab.simulation.monte_carlo import ChampionshipSimulator, simulate_probabilities


STARTER_POSITIONS = ["QB", "RB", "RB", "WR", "WR", "TE", "WR", "K", "DST"]


@pytest.fixture
def season_team(player_factory):
    def build(team_id, strength=1.0, wins=0, losses=0, points_for=0.0):
        starters = tuple(
            player_factory(f"{team_id}_{index}", position, rank=100, adp=100.0,
                           projected_points=200.0 * strength)
            for index, position in enumerate(STARTER_POSITIONS)
        )
        return SeasonTeam(team_id=team_id, name=team_id.title(), starters=starters,
                          wins=wins, losses=losses, points_for=points_for)
    return build


@pytest.fixture
def league(season_team):
    teams = [season_team(f"team_{i}", strength=0.8 + 0.1 * i) for i in range(6)]
    return teams, LeagueSettings(team_count=6, playoff_teams=4)


class TestChampionshipSimulator:
    """Test probability estimates"""

    def test_probabilities_are_conserved(self, league):
        teams, settings = league
        odds = simulate_probabilities(teams, settings, trials=2000, seed=1)

        assert [o.team_id for o in odds] == [t.team_id for t in teams]
        assert sum(o.championship_probability for o in odds) == pytest.approx(100.0)
        assert sum(o.first_place_probability for o in odds) == pytest.approx(100.0)
        assert sum(o.playoff_probability for o in odds) == pytest.approx(400.0)
        assert sum(o.expected_finish for o in odds) == pytest.approx(21.0)
        for team_odds in odds:
            assert team_odds.championship_probability <= team_odds.playoff_probability
            assert team_odds.first_place_probability <= team_odds.playoff_probability
            assert 1.0 <= team_odds.expected_finish <= 6.0
            assert 0.0 <= team_odds.average_wins <= 14.0
            assert team_odds.trials == 2000

    def test_stronger_team_is_favored(self, league):
        teams, settings = league
        odds = simulate_probabilities(teams, settings, trials=4000, seed=2)

        assert odds[-1].championship_probability > odds[0].championship_probability
        assert odds[-1].average_wins > odds[0].average_wins

    def test_results_do_not_depend_on_thread_count(self, league):
        teams, settings = league

        with ChampionshipSimulator(thread_pool_size=1, chunk_size=250) as single:
            one = single.simulate_probabilities(teams, settings, trials=1200, seed=9)
        with ChampionshipSimulator(thread_pool_size=4, chunk_size=250) as pooled:
            four = pooled.simulate_probabilities(teams, settings, trials=1200, seed=9)

        assert [o.model_dump() for o in one] == [o.model_dump() for o in four]

    def test_async_matches_sync(self, league):
        teams, settings = league

        with ChampionshipSimulator(chunk_size=300) as simulator:
            expected = simulator.simulate_probabilities(teams, settings, trials=900, seed=4)
            result = asyncio.run(simulator.run_simulation(teams, settings, trials=900, seed=4))

        assert result.seed == 4
        assert result.trials == 900
        assert result.completed_at >= result.started_at
        assert [o.model_dump() for o in result.odds] == [o.model_dump() for o in expected]
        assert result.favorite.team_id == max(expected, key=lambda o: o.championship_probability).team_id
        assert result.get_team_odds("team_0") is not None
        assert result.get_team_odds("missing") is None

    def test_finished_season_uses_final_standings(self, season_team):
        teams = [season_team("a", wins=12, losses=2), season_team("b", wins=8, losses=6),
                 season_team("c", wins=5, losses=9), season_team("d", wins=3, losses=11)]
        settings = LeagueSettings(team_count=4, playoff_teams=2)
        odds = {o.team_id: o for o in simulate_probabilities(teams, settings, trials=20000, seed=3)}

        assert odds["a"].first_place_probability == 100.0
        assert odds["a"].playoff_probability == 100.0
        assert odds["b"].playoff_probability == 100.0
        assert odds["c"].playoff_probability == 0.0
        assert odds["a"].expected_finish == 1.0
        assert odds["d"].expected_finish == 4.0
        assert odds["a"].average_wins == 12.0
        assert odds["a"].strength_of_schedule == 1.0

        # Four wins of separation: 0.5 + 4 * 0.05
        assert odds["a"].championship_probability == pytest.approx(70.0, abs=2.0)
        assert odds["b"].championship_probability == pytest.approx(30.0, abs=2.0)

    def test_ties_keep_input_order(self, season_team):
        teams = [season_team("first", wins=7, losses=7, points_for=1500.0),
                 season_team("second", wins=7, losses=7, points_for=1500.0)]
        settings = LeagueSettings(team_count=2, playoff_teams=1)
        odds = simulate_probabilities(teams, settings, trials=50, seed=5)

        assert odds[0].first_place_probability == 100.0
        assert odds[0].championship_probability == 100.0
        assert odds[1].playoff_probability == 0.0

    def test_strength_of_schedule_near_league_mean(self, league):
        teams, settings = league
        odds = simulate_probabilities(teams, settings, trials=2000, seed=6)
        for team_odds in odds:
            assert team_odds.strength_of_schedule == pytest.approx(1.0, abs=0.02)

    def test_converges_at_fifty_thousand_trials(self, season_team):
        teams = [season_team("strong", strength=1.2), season_team("mid_a"), season_team("mid_b"),
                 season_team("weak", strength=0.8)]
        settings = LeagueSettings(team_count=4, playoff_teams=2)

        first = simulate_probabilities(teams, settings, trials=50000, seed=101)
        second = simulate_probabilities(teams, settings, trials=50000, seed=202)

        for a, b in zip(first, second):
            assert a.championship_probability == pytest.approx(b.championship_probability, abs=2.0)
            assert a.playoff_probability == pytest.approx(b.playoff_probability, abs=2.0)
            assert a.first_place_probability == pytest.approx(b.first_place_probability, abs=2.0)

    def test_rejects_bad_configuration(self, league, season_team):
        teams, settings = league

        with ChampionshipSimulator() as simulator:
            with pytest.raises(ConfigurationError):
                simulator.simulate_probabilities([], settings)
            with pytest.raises(ConfigurationError):
                simulator.simulate_probabilities(teams, settings, trials=0)
            with pytest.raises(ConfigurationError):
                simulator.simulate_probabilities(teams[:3], settings)
            with pytest.raises(ConfigurationError):
                simulator.simulate_probabilities([teams[0], teams[0]], LeagueSettings(team_count=2, playoff_teams=1))

        with pytest.raises(ConfigurationError):
            ChampionshipSimulator(thread_pool_size=0)
