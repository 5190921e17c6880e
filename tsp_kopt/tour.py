import numpy as np
from numba import njit

from .geometry import _node_distance


# ==============================================================================
# Numba kernels over the successor / predecessor / edge length arrays
# ==============================================================================

@njit(cache=True)
def _link_order(points: np.ndarray, order: np.ndarray, next_: np.ndarray, prev: np.ndarray,
                edge_length: np.ndarray) -> None:
    n = len(order)
    for idx in range(n):
        a = order[idx]
        b = order[(idx + 1) % n]
        next_[a] = b
        prev[b] = a
        edge_length[a] = _node_distance(points, a, b)


@njit(cache=True)
def _rebuild_caches_numba(points: np.ndarray, next_: np.ndarray, prev: np.ndarray,
                          edge_length: np.ndarray) -> None:
    for i in range(len(next_)):
        prev[next_[i]] = i
        edge_length[i] = _node_distance(points, i, next_[i])


@njit(cache=True)
def _walk(next_: np.ndarray, start: int) -> np.ndarray:
    n = len(next_)
    order = np.empty(n, dtype=np.int64)
    node = start
    for idx in range(n):
        order[idx] = node
        node = next_[node]
    return order


@njit(cache=True)
def _is_single_cycle(next_: np.ndarray) -> bool:
    """True if following `next_` from node 0 visits every node once and returns."""
    n = len(next_)
    seen = np.zeros(n, dtype=np.bool_)
    node = 0
    for _ in range(n):
        if node < 0 or node >= n or seen[node]:
            return False
        seen[node] = True
        node = next_[node]
    return node == 0


class TourState:
    """
    A tour stored as a doubly-linked cycle over node indices.

    `next[i]` and `prev[i]` are the successor and predecessor of node i, and
    `edge_length[i]` caches the length of the edge i -> next[i].
    """

    def __init__(self, points: np.ndarray, order=None):
        self.points = points
        self.n = len(points)
        self.next = np.arange(self.n, dtype=np.int64)
        self.prev = np.arange(self.n, dtype=np.int64)
        self.edge_length = np.zeros(self.n, dtype=np.float64)
        if order is not None:
            self.init_from_permutation(order)

    @classmethod
    def from_next(cls, points: np.ndarray, next_) -> "TourState":
        """Rebuild a tour from a successor array alone."""
        tour = cls(points)
        next_ = np.array(next_, dtype=np.int64)
        if next_.shape != (tour.n,) or (tour.n and not _is_single_cycle(next_)):
            raise ValueError("successor array does not describe a single cycle over all nodes")
        tour.next = next_
        tour.rebuild_caches()
        return tour

    def init_from_permutation(self, order) -> None:
        """Link the nodes in visiting order and recompute every edge length."""
        order = np.asarray(order, dtype=np.int64)
        if order.shape != (self.n,) or not np.array_equal(np.sort(order), np.arange(self.n)):
            raise ValueError(f"order must be a permutation of 0..{self.n - 1}")
        _link_order(self.points, order, self.next, self.prev, self.edge_length)

    def rebuild_caches(self) -> None:
        """Recompute `prev` and `edge_length` from `next`."""
        _rebuild_caches_numba(self.points, self.next, self.prev, self.edge_length)

    def total_length(self) -> float:
        return float(self.edge_length.sum())

    def to_order(self, start: int = 0) -> np.ndarray:
        """Visiting order obtained by walking `next` from `start`."""
        if self.n == 0:
            return np.empty(0, dtype=np.int64)
        return _walk(self.next, start)

    def is_valid(self) -> bool:
        """Check the linked-cycle invariants and the cached lengths."""
        if self.n == 0:
            return True
        if not np.array_equal(self.prev[self.next], np.arange(self.n)):
            return False
        if not _is_single_cycle(self.next):
            return False
        live = np.hypot(*(self.points[self.next] - self.points).T)
        return bool(np.allclose(self.edge_length, live, rtol=1e-12, atol=1e-12))
