from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from .config import SearchConfig
from .constructive_nn import CONSTRUCTORS
from .geometry import as_points
from .kopt import improve
from .tabu import TabuList
from .tour import TourState

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    tour: np.ndarray
    length: float
    restarts: int = 0
    kopt_calls: int = 0
    elapsed: float = 0.0
    timed_out: bool = False
    # best length after the initial tour and after each completed restart
    history: List[float] = field(default_factory=list)


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.perf_counter() >= deadline


def search(points, try_limit: Optional[int] = None, seed: Optional[int] = None,
           config: Optional[SearchConfig] = None) -> SearchResult:
    """
    Restarted tabu-guided k-opt search.

    Every restart seeds a fresh tour and a fresh tabu list, then applies k-opt
    moves until the stagnation pressure reaches the threshold. The threshold
    drops by one each time a stall is broken by a new improvement, so restarts
    that keep stalling and recovering give up sooner. The best tour over all
    restarts is kept.

    Args:
        points: Array-like of shape (n, 2).
        try_limit: Overrides `config.try_limit`.
        seed: Overrides `config.seed`.
        config: Search parameters, defaults to SearchConfig().

    Returns:
        SearchResult with the best tour as a visiting order starting at node 0.
    """
    config = config or SearchConfig()
    overrides = {}
    if try_limit is not None:
        overrides['try_limit'] = try_limit
    if seed is not None:
        overrides['seed'] = seed
    if overrides:
        config = dataclasses.replace(config, **overrides)

    points = as_points(points)
    n = len(points)
    start_time = time.perf_counter()
    if n <= 1:
        return SearchResult(tour=np.arange(n, dtype=np.int64), length=0.0, history=[0.0])

    deadline = None if config.time_limit is None else start_time + config.time_limit
    rng = np.random.default_rng(config.seed)
    construct = CONSTRUCTORS[config.construction]

    best_tour, best_value = construct(points, rng)
    best_next = best_tour.next.copy()
    history = [best_value]
    logger.debug("Initial %s tour length: %.4f", config.construction, best_value)

    restarts = 0
    kopt_calls = 0
    timed_out = False
    iterator = range(config.try_limit)
    if config.progress:
        iterator = tqdm(iterator, desc="Restarts", unit="restart")

    for try_count in iterator:
        if _expired(deadline):
            timed_out = True
            break

        tabu = TabuList.for_size(n, config.tabu_divisor)
        tour, value = construct(points, rng)
        threshold = config.threshold
        pressure = 0
        while pressure < threshold:
            delta = improve(tour, tabu, config.k, config.exclude_tabu_candidates)
            kopt_calls += 1
            value += delta
            if delta == 0:
                pressure += 1
            else:
                if pressure != 0:
                    threshold -= 1
                pressure = 0
            if _expired(deadline):
                timed_out = True
                break

        restarts += 1
        if value < best_value:
            best_value = value
            best_next = tour.next.copy()
            logger.debug("Restart %d: new best length %.4f", try_count + 1, best_value)
        history.append(best_value)
        if timed_out:
            break

    best = TourState.from_next(points, best_next)
    result = SearchResult(
        tour=best.to_order(0),
        length=best.total_length(),
        restarts=restarts,
        kopt_calls=kopt_calls,
        elapsed=time.perf_counter() - start_time,
        timed_out=timed_out,
        history=history,
    )
    if timed_out:
        logger.warning("Time limit reached after %d of %d restarts", restarts, config.try_limit)
    logger.info("Search complete: length=%.4f restarts=%d kopt_calls=%d time=%.2fs",
                result.length, result.restarts, result.kopt_calls, result.elapsed)
    return result


class TSPSolver:
    def __init__(self, coordinates, distance_matrix: Optional[np.ndarray] = None,
                 config: Optional[SearchConfig] = None):
        """
        Initialize the TSP solver.

        Args:
            coordinates: Array-like of shape (n, 2) containing the (x, y) coordinates of each city.
            distance_matrix: Accepted for call compatibility with other solvers and not used;
                distances are computed from the coordinates.
            config: Search parameters, defaults to SearchConfig().
        """
        self.coordinates = as_points(coordinates)
        self.distance_matrix = distance_matrix
        self.config = config or SearchConfig()
        self.result: Optional[SearchResult] = None

    def solve(self) -> np.ndarray:
        """
        Returns:
            A numpy array of shape (n,) containing a permutation of integers
            [0, 1, ..., n-1] representing the order in which the cities are visited.
        """
        self.result = search(self.coordinates, config=self.config)
        return self.result.tour
