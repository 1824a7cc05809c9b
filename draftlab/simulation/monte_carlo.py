"""
Monte Carlo season simulation for playoff and championship odds.

Each trial plays out the rest of a regular season against synthetic
opponents, sorts the standings, runs a seeded playoff bracket and records
who made it, who finished first and who won. Trials only share read-only
inputs, so they run in parallel chunks and are combined by plain addition.
"""

import asyncio
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
import numpy as np

from ..datamodels.projection import ProjectionContext
from ..datamodels.simulation import ChampionshipOdds, LeagueSettings, SeasonTeam, SimulationResult
from ..exceptions import ConfigurationError
from ..valuation.projections import ProjectionModel

logger = logging.getLogger(__name__)


DEFAULT_TRIALS = 10000
DEFAULT_CHUNK_SIZE = 500


@dataclass(frozen=True)
class SeasonInputs:
    """Read-only arrays every trial works from."""

    means: np.ndarray            # (players,) weekly mean per starter
    stds: np.ndarray             # (players,) weekly noise per starter
    membership: np.ndarray       # (players, teams) 1 where a starter belongs to a team
    week_mask: np.ndarray        # (weeks, teams) True for weeks still to play
    base_wins: np.ndarray        # (teams,)
    base_points: np.ndarray      # (teams,)
    playoff_teams: int
    opponent_mean: float
    opponent_std: float
    seed_win_slope: float

    @property
    def team_count(self) -> int:
        return self.membership.shape[1]


@dataclass
class TrialCounters:
    """Per-team tallies over a batch of trials. Merging is plain addition."""

    trials: int
    playoffs: np.ndarray
    championships: np.ndarray
    first_place: np.ndarray
    finish_total: np.ndarray
    wins_total: np.ndarray
    opponent_points: np.ndarray
    games: np.ndarray

    @classmethod
    def zeros(cls, team_count: int) -> 'TrialCounters':
        return cls(trials=0,
                   playoffs=np.zeros(team_count, dtype=np.int64),
                   championships=np.zeros(team_count, dtype=np.int64),
                   first_place=np.zeros(team_count, dtype=np.int64),
                   finish_total=np.zeros(team_count, dtype=np.int64),
                   wins_total=np.zeros(team_count, dtype=np.int64),
                   opponent_points=np.zeros(team_count, dtype=float),
                   games=np.zeros(team_count, dtype=np.int64))

    def merge(self, other: 'TrialCounters') -> 'TrialCounters':
        return TrialCounters(trials=self.trials + other.trials,
                             playoffs=self.playoffs + other.playoffs,
                             championships=self.championships + other.championships,
                             first_place=self.first_place + other.first_place,
                             finish_total=self.finish_total + other.finish_total,
                             wins_total=self.wins_total + other.wins_total,
                             opponent_points=self.opponent_points + other.opponent_points,
                             games=self.games + other.games)


class ChampionshipSimulator:
    """
    Monte Carlo engine for season outcome probabilities.

    The core algorithm:
    1. For each trial:
       - Score every remaining week as starter projections plus per-player noise
       - Compare against a normally distributed synthetic opponent
       - Sort standings by wins, then points for
       - Play the bracket with seed-weighted coin flips
    2. Sum per-team counters across trials
    3. Divide by the trial count for probabilities

    Trials are grouped into fixed-size chunks and chunk k always draws from
    the generator seeded with (seed, k). Results therefore depend on the seed
    and trial count only, not on how many threads ran the chunks.
    """

    def __init__(self,
                 projection_model: Optional[ProjectionModel] = None,
                 thread_pool_size: int = 4,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Args:
            projection_model: Source of weekly starter projections
            thread_pool_size: Number of threads for parallel chunks
            chunk_size: Trials per chunk
        """
        if thread_pool_size < 1 or chunk_size < 1:
            raise ConfigurationError("thread_pool_size and chunk_size must be >= 1")

        self.projection_model = projection_model or ProjectionModel()
        self.thread_pool = ThreadPoolExecutor(max_workers=thread_pool_size)
        self.chunk_size = chunk_size

        logger.info(f'Initialized championship simulator with {thread_pool_size} threads.')

    def __enter__(self) -> 'ChampionshipSimulator':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def simulate_probabilities(self,
                               teams: Sequence[SeasonTeam],
                               league_settings: LeagueSettings,
                               trials: int = DEFAULT_TRIALS,
                               seed: Optional[int] = None) -> List[ChampionshipOdds]:
        """
        Estimate playoff, championship and first-place odds.

        Args:
            teams: Teams with their starters and current record
            league_settings: Schedule, playoff and opponent settings
            trials: Seasons to simulate
            seed: Seed for reproducible results; random when omitted

        Returns:
            One ChampionshipOdds per team, in input order

        Raises:
            ConfigurationError: before any simulation work if inputs are unusable
        """
        self._validate(teams, league_settings, trials)
        seed = self._resolve_seed(seed)
        start_time = time.time()

        logger.info(f'Simulating {trials} seasons for {len(teams)} teams (seed {seed}).')

        try:
            inputs = self._prepare_inputs(teams, league_settings)
            plan = self._chunk_plan(trials)
            chunk_results = self.thread_pool.map(lambda chunk: self._run_chunk(inputs, seed, *chunk), plan)

            counters = TrialCounters.zeros(len(teams))
            for result in chunk_results:
                counters = counters.merge(result)

            odds = self._build_odds(teams, counters, league_settings)

        except Exception as e:
            logger.error(f'Season simulation failed: {e}')
            raise

        logger.info(f'Simulation of {trials} seasons completed in {(time.time() - start_time) * 1000:.0f}ms.')
        return odds

    async def run_simulation(self,
                             teams: Sequence[SeasonTeam],
                             league_settings: LeagueSettings,
                             trials: int = DEFAULT_TRIALS,
                             seed: Optional[int] = None) -> SimulationResult:
        """
        Async variant that dispatches chunks to the thread pool from an event loop.

        Produces the same odds as simulate_probabilities for the same seed and
        trial count, wrapped with timing metadata.
        """
        self._validate(teams, league_settings, trials)
        seed = self._resolve_seed(seed)
        start_time = time.time()
        simulation_id = f'sim_{int(start_time)}_{uuid.uuid4().hex[:8]}'

        logger.info(f'Starting simulation {simulation_id} with {trials} trials.')

        try:
            inputs = self._prepare_inputs(teams, league_settings)
            loop = asyncio.get_running_loop()

            tasks = [loop.run_in_executor(self.thread_pool, self._run_chunk, inputs, seed, chunk_index, size)
                     for chunk_index, size in self._chunk_plan(trials)]
            chunk_results = await asyncio.gather(*tasks)

            counters = TrialCounters.zeros(len(teams))
            for result in chunk_results:
                counters = counters.merge(result)

            odds = self._build_odds(teams, counters, league_settings)

        except Exception as e:
            logger.error(f'Simulation {simulation_id} failed: {e}')
            raise

        end_time = time.time()
        execution_time_ms = (end_time - start_time) * 1000
        logger.info(f'Simulation {simulation_id} completed in {execution_time_ms:.0f}ms.')

        return SimulationResult(simulation_id=simulation_id,
                                seed=seed,
                                trials=trials,
                                started_at=datetime.fromtimestamp(start_time),
                                completed_at=datetime.fromtimestamp(end_time),
                                execution_time_ms=execution_time_ms,
                                odds=odds)

    def _validate(self, teams: Sequence[SeasonTeam], league_settings: LeagueSettings, trials: int):
        if not teams:
            raise ConfigurationError('Season simulation needs at least one team')
        if trials < 1:
            raise ConfigurationError(f'trials must be >= 1, got {trials}')

        team_ids = [team.team_id for team in teams]
        if len(set(team_ids)) != len(team_ids):
            raise ConfigurationError('Team ids must be unique')

        if league_settings.playoff_teams > len(teams):
            raise ConfigurationError(f'{league_settings.playoff_teams} playoff spots but only {len(teams)} teams')

        if league_settings.team_count != len(teams):
            logger.warning(f'League configured for {league_settings.team_count} teams, simulating {len(teams)}')

    @staticmethod
    def _resolve_seed(seed: Optional[int]) -> int:
        if seed is not None:
            return seed
        return int(np.random.SeedSequence().entropy)

    def _prepare_inputs(self, teams: Sequence[SeasonTeam], league_settings: LeagueSettings) -> SeasonInputs:
        context = ProjectionContext()
        means, stds, owners = [], [], []

        for team_index, team in enumerate(teams):
            for player in team.starters:
                projection = self.projection_model.project(player, context)
                means.append(projection.points)
                stds.append(projection.weekly_std)
                owners.append(team_index)

        membership = np.zeros((len(owners), len(teams)))
        membership[np.arange(len(owners)), owners] = 1.0

        remaining = np.array([max(0, league_settings.regular_season_weeks - team.games_played) for team in teams])
        weeks = int(remaining.max()) if len(remaining) else 0
        week_mask = np.arange(weeks)[:, None] < remaining[None, :]

        return SeasonInputs(means=np.array(means, dtype=float),
                            stds=np.array(stds, dtype=float),
                            membership=membership,
                            week_mask=week_mask,
                            base_wins=np.array([team.wins for team in teams], dtype=np.int64),
                            base_points=np.array([team.points_for for team in teams], dtype=float),
                            playoff_teams=league_settings.playoff_teams,
                            opponent_mean=league_settings.opponent_mean,
                            opponent_std=league_settings.opponent_std,
                            seed_win_slope=league_settings.seed_win_slope)

    def _chunk_plan(self, trials: int) -> List[Tuple[int, int]]:
        return [(chunk_index, min(self.chunk_size, trials - start))
                for chunk_index, start in enumerate(range(0, trials, self.chunk_size))]

    def _run_chunk(self, inputs: SeasonInputs, seed: int, chunk_index: int, size: int) -> TrialCounters:
        """Simulate size independent seasons with the chunk's own generator."""
        rng = np.random.default_rng([seed, chunk_index])
        team_count = inputs.team_count
        weeks = inputs.week_mask.shape[0]

        wins = np.tile(inputs.base_wins, (size, 1))
        points = np.tile(inputs.base_points, (size, 1))
        opponent_points = np.zeros(team_count)
        games = inputs.week_mask.sum(axis=0).astype(np.int64) * size

        if weeks > 0:
            noise = rng.standard_normal((size, weeks, len(inputs.means))) * inputs.stds
            player_scores = np.maximum(inputs.means + noise, 0.0)
            team_scores = player_scores @ inputs.membership                      # (trials, weeks, teams)
            opponent_scores = rng.normal(inputs.opponent_mean, inputs.opponent_std, (size, weeks, team_count))

            played = inputs.week_mask[None, :, :]
            wins = wins + ((team_scores > opponent_scores) & played).sum(axis=1)
            points = points + (team_scores * played).sum(axis=1)
            opponent_points = (opponent_scores * played).sum(axis=(0, 1))

        # Stable sort: wins desc, then points desc, then input order
        standings = np.lexsort((-points, -wins), axis=-1)

        finish = np.empty_like(standings)
        np.put_along_axis(finish, standings, np.broadcast_to(np.arange(team_count), standings.shape), axis=1)

        playoff_seeds = standings[:, :inputs.playoff_teams]
        championships = np.zeros(team_count, dtype=np.int64)
        for trial in range(size):
            champion = self._play_bracket(playoff_seeds[trial], wins[trial], inputs.seed_win_slope, rng)
            championships[champion] += 1

        return TrialCounters(trials=size,
                             playoffs=np.bincount(playoff_seeds.ravel(), minlength=team_count).astype(np.int64),
                             championships=championships,
                             first_place=np.bincount(standings[:, 0], minlength=team_count).astype(np.int64),
                             finish_total=(finish + 1).sum(axis=0).astype(np.int64),
                             wins_total=wins.sum(axis=0).astype(np.int64),
                             opponent_points=opponent_points,
                             games=games)

    @staticmethod
    def _play_bracket(seeds: np.ndarray, wins: np.ndarray, slope: float, rng: np.random.Generator) -> int:
        """
        Single-elimination bracket over seeds in order.

        Adjacent seeds meet; an unpaired last seed gets a bye into the next round.
        """
        remaining = [int(team) for team in seeds]

        while len(remaining) > 1:
            advancing = []
            for i in range(0, len(remaining) - 1, 2):
                higher, lower = remaining[i], remaining[i + 1]
                p_higher = min(1.0, max(0.0, 0.5 + (wins[higher] - wins[lower]) * slope))
                advancing.append(higher if rng.random() < p_higher else lower)

            if len(remaining) % 2 == 1:
                advancing.append(remaining[-1])
            remaining = advancing

        return remaining[0]

    def _build_odds(self,
                    teams: Sequence[SeasonTeam],
                    counters: TrialCounters,
                    league_settings: LeagueSettings) -> List[ChampionshipOdds]:
        trials = counters.trials
        odds = []

        for index, team in enumerate(teams):
            games = counters.games[index]
            if games > 0:
                strength = counters.opponent_points[index] / games / league_settings.opponent_mean
            else:
                strength = 1.0

            odds.append(ChampionshipOdds(
                team_id=team.team_id,
                team_name=team.name,
                playoff_probability=counters.playoffs[index] / trials * 100,
                championship_probability=counters.championships[index] / trials * 100,
                first_place_probability=counters.first_place[index] / trials * 100,
                expected_finish=counters.finish_total[index] / trials,
                strength_of_schedule=max(0.0, float(strength)),
                average_wins=counters.wins_total[index] / trials,
                trials=trials,
            ))

        return odds

    def close(self):
        self.thread_pool.shutdown(wait=True)


def simulate_probabilities(teams: Sequence[SeasonTeam],
                           league_settings: LeagueSettings,
                           trials: int = DEFAULT_TRIALS,
                           seed: Optional[int] = None,
                           projection_model: Optional[ProjectionModel] = None) -> List[ChampionshipOdds]:
    """Run a one-off simulation with a short-lived simulator."""
    with ChampionshipSimulator(projection_model) as simulator:
        return simulator.simulate_probabilities(teams, league_settings, trials, seed)
