import numpy as np
from numba import njit

from .geometry import _node_distance
from .tour import TourState


@njit(cache=True)
def _nearest_neighbor_numba(points: np.ndarray, start_node: int) -> np.ndarray:
    n = len(points)
    tour = np.empty(n, dtype=np.int64)
    visited = np.zeros(n, dtype=np.bool_)

    tour[0] = start_node
    visited[start_node] = True
    current_city = start_node

    for step in range(1, n):
        best_dist = np.inf
        best_node = -1
        # Ascending scan with a strict comparison: ties go to the lowest index.
        for v in range(n):
            if not visited[v]:
                d = _node_distance(points, current_city, v)
                if d < best_dist:
                    best_dist = d
                    best_node = v

        tour[step] = best_node
        visited[best_node] = True
        current_city = best_node

    return tour


def nearest_neighbor_order(points: np.ndarray, start_node: int) -> np.ndarray:
    """
    Visiting order of the nearest neighbor heuristic started at `start_node`.

    From the current city the closest unvisited city is appended until every
    city has been visited. Among equally close cities the one with the lowest
    index wins, so the result is fully determined by `start_node`.

    Returns:
        A numpy array of shape (n,) with a permutation of [0, 1, ..., n-1].
    """
    if not 0 <= start_node < len(points):
        raise ValueError(f"start node {start_node} out of range for {len(points)} points")
    return _nearest_neighbor_numba(points, start_node)


def construct(points: np.ndarray, rng: np.random.Generator) -> tuple:
    """
    Build a nearest neighbor tour from a uniformly random start node.

    Returns:
        (tour, length) where tour is a TourState and length its total length.
    """
    n = len(points)
    if n == 0:
        raise ValueError("cannot build a tour over zero points")
    start_node = int(rng.integers(n))
    tour = TourState(points, nearest_neighbor_order(points, start_node))
    return tour, tour.total_length()


def construct_random(points: np.ndarray, rng: np.random.Generator) -> tuple:
    """Build a tour from a uniformly random permutation."""
    n = len(points)
    if n == 0:
        raise ValueError("cannot build a tour over zero points")
    tour = TourState(points, rng.permutation(n))
    return tour, tour.total_length()


CONSTRUCTORS = {
    'greedy': construct,
    'random': construct_random,
}
