import math

import numpy as np
from numba import njit


@njit(cache=True)
def distance(a, b) -> float:
    """Euclidean distance between two 2-D points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return math.sqrt(dx * dx + dy * dy)


@njit(cache=True)
def _node_distance(points: np.ndarray, i: int, j: int) -> float:
    dx = points[i, 0] - points[j, 0]
    dy = points[i, 1] - points[j, 1]
    return math.sqrt(dx * dx + dy * dy)


@njit(cache=True)
def _tour_length_numba(points: np.ndarray, order: np.ndarray) -> float:
    n = len(order)
    if n < 2:
        return 0.0
    total = 0.0
    for i in range(n):
        # wrap-around closes the cycle
        total += _node_distance(points, order[i], order[(i + 1) % n])
    return total


def as_points(coordinates) -> np.ndarray:
    """
    Convert coordinates into the contiguous float64 array the kernels expect.

    Args:
        coordinates: Array-like of shape (n, 2) with the (x, y) coordinates of each point.

    Returns:
        A C-contiguous numpy array of shape (n, 2) and dtype float64.
    """
    points = np.asarray(coordinates, dtype=np.float64)
    if points.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"coordinates must have shape (n, 2), got {points.shape}")
    if not np.all(np.isfinite(points)):
        raise ValueError("coordinates must be finite")
    return np.ascontiguousarray(points)


def tour_length(points: np.ndarray, order) -> float:
    """Length of the closed tour visiting `points` in `order`."""
    return float(_tour_length_numba(as_points(points), np.asarray(order, dtype=np.int64)))
