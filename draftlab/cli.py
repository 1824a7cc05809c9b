"""
Command line entry point.

    draftlab draft --players players.csv --seed 7
    draftlab season --players players.parquet --trials 20000 --config league.json
"""

import argparse
import logging
import random
import sys
from typing import Any, Dict, List, Optional

from .catalog import load_players
from .config import EngineSettings, load_settings
from .datamodels.draft_state import DraftResult
from .datamodels.player import Player
from .datamodels.roster import RosterRequirements
from .datamodels.simulation import SeasonTeam
from .exceptions import DraftLabError
from .optimizer.lineup import LineupOptimizer
from .simulation.auto_draft import build_optimal_team
from .simulation.monte_carlo import ChampionshipSimulator
from .simulation.orchestrator import DraftOrchestrator
from .simulation.profiles import build_ai_teams
from .utils.position_analysis import PositionAnalyzer
from .valuation.projections import ProjectionModel

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _settings_from_args(args: argparse.Namespace) -> EngineSettings:
    overrides: Dict[str, Any] = {}
    for option, key in [("teams", "league_size"), ("rounds", "round_limit"), ("seed", "seed"),
                        ("difficulty", "ai_difficulty"), ("trials", "trials")]:
        value = getattr(args, option, None)
        if value is not None:
            overrides[key] = value
    return load_settings(args.config, overrides)


def _run_draft(args: argparse.Namespace, settings: EngineSettings, players: List[Player]) -> DraftResult:
    rng = random.Random(settings.seed)

    if args.auto_slot is not None:
        opponents = build_ai_teams(settings.league_size - 1, rng)
        return build_optimal_team(players, settings, rng, draft_position=args.auto_slot, opponents=opponents)

    teams = build_ai_teams(settings.league_size, rng)
    return DraftOrchestrator().run_draft(teams, players, settings, rng)


def _print_draft(result: DraftResult, analyzer: PositionAnalyzer):
    names = {team.team_id: team.name for team in result.teams}
    for pick in result.picks:
        player = analyzer.players[pick.player_id]
        print(f"{pick.overall:>3}. R{pick.round}.{pick.pick_in_round:<2} {names[pick.team_id]:<14} "
              f"{player.name:<24} {pick.position.value:<3} {pick.reason.value}")

    if result.terminated_early:
        print(f"\nDraft ended early after {len(result.picks)} picks: player pool exhausted")

    print("\nGrades:")
    for team_id, grade in analyzer.grade_draft(result).items():
        strengths = ", ".join(p.value for p in grade.strengths) or "-"
        weaknesses = ", ".join(p.value for p in grade.weaknesses) or "-"
        print(f"  {grade.team_name:<14} {grade.grade}  ({grade.starter_points:.0f} pts)  "
              f"strong: {strengths}  weak: {weaknesses}")


def draft_command(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    players = load_players(args.players)
    result = _run_draft(args, settings, players)
    analyzer = PositionAnalyzer.from_pool(players)
    _print_draft(result, analyzer)
    return 0


def season_command(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    result = _run_draft(args, settings, load_players(args.players))

    projection_model = ProjectionModel(games_per_season=settings.league_settings().games_per_season)
    optimizer = LineupOptimizer(projection_model, stack_bonus=settings.stack_bonus)
    requirements = RosterRequirements.standard()

    season_teams: List[SeasonTeam] = []
    for team in result.teams:
        lineup = optimizer.optimize(team.roster, requirements)
        season_teams.append(SeasonTeam.from_lineup(team.team_id, lineup, name=team.name))

    with ChampionshipSimulator(projection_model, thread_pool_size=args.threads) as simulator:
        odds = simulator.simulate_probabilities(season_teams, settings.league_settings(), settings.trials,
                                                settings.seed)

    print(f"{'Team':<14} {'Playoffs':>9} {'Title':>7} {'1st':>7} {'Finish':>7} {'Wins':>6}")
    for team_odds in sorted(odds, key=lambda o: o.championship_probability, reverse=True):
        print(f"{team_odds.team_name:<14} {team_odds.playoff_probability:>8.1f}% "
              f"{team_odds.championship_probability:>6.1f}% {team_odds.first_place_probability:>6.1f}% "
              f"{team_odds.expected_finish:>7.2f} {team_odds.average_wins:>6.2f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="draftlab", description="Fantasy football draft and season simulator")
    parser.add_argument("--verbose", action="store_true", help="Log every pick")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser):
        sub.add_argument("--players", type=str, required=True, help="Player catalog (CSV, JSON lines, Parquet)")
        sub.add_argument("--config", type=str, help="JSON settings file")
        sub.add_argument("--teams", type=int, help="Teams in the league")
        sub.add_argument("--rounds", type=int, help="Draft rounds")
        sub.add_argument("--seed", type=int, help="Seed for reproducible runs")
        sub.add_argument("--difficulty", type=str, choices=["easy", "medium", "hard", "expert"],
                         help="AI difficulty for every team")
        sub.add_argument("--auto-slot", type=int, help="Draft slot for the template auto-draft team")

    draft_parser = subparsers.add_parser("draft", help="Run a mock draft and grade the rosters")
    add_common(draft_parser)
    draft_parser.set_defaults(handler=draft_command)

    season_parser = subparsers.add_parser("season", help="Draft, set lineups and simulate the season")
    add_common(season_parser)
    season_parser.add_argument("--trials", type=int, help="Seasons to simulate")
    season_parser.add_argument("--threads", type=int, default=4, help="Simulation worker threads")
    season_parser.set_defaults(handler=season_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.handler(args)
    except DraftLabError as e:
        logger.error(f'{e}')
        return 1


if __name__ == "__main__":
    sys.exit(main())
