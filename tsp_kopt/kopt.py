import numpy as np
from numba import njit

from .geometry import _node_distance
from .tabu import TabuList, _tabu_push
from .tour import TourState

# Relative to the summed length of the four edges of an exchange.
GAIN_TOLERANCE = 1e-12


# ==============================================================================
# Sequential edge exchange kernel
# ==============================================================================

@njit(cache=True)
def _kopt_numba(
        points: np.ndarray,
        next_: np.ndarray,
        prev: np.ndarray,
        edge_length: np.ndarray,
        tabu_mask: np.ndarray,
        tabu_queue: np.ndarray,
        tabu_cursor: np.ndarray,
        k: int,
        exclude_tabu_candidates: bool
) -> float:
    """
    One chain of at most k-1 improving 2-opt exchanges starting at the longest
    non-tabu edge. Mutates the tour arrays and the tabu set in place and returns
    the total change in tour length (<= 0).
    """
    n = len(next_)

    # The anchor is the non-tabu node with the longest outgoing edge.
    selected = -1
    max_dist = -1.0
    for i in range(n):
        if not tabu_mask[i] and edge_length[i] > max_dist:
            max_dist = edge_length[i]
            selected = i
    if selected == -1:
        return 0.0

    diff = 0.0
    min_diff = 0.0
    steps = k - 1
    while steps > 0 and not tabu_mask[selected]:
        steps -= 1
        _tabu_push(tabu_mask, tabu_queue, tabu_cursor, selected)

        selected_next = next_[selected]
        selected_prev = prev[selected]
        anchor_edge = edge_length[selected]

        improvement = 0.0
        found_edge = 0.0
        found_edge2 = 0.0
        candidate = -1
        for i in range(n):
            if i == selected or i == selected_next or i == selected_prev:
                continue
            if exclude_tabu_candidates and tabu_mask[i]:
                continue
            new_edge = _node_distance(points, i, selected)
            new_edge2 = _node_distance(points, next_[i], selected_next)
            removed = anchor_edge + edge_length[i]
            gain = new_edge + new_edge2 - removed
            # Gains within rounding noise of the touched edges are not improvements.
            if gain < improvement and gain < -GAIN_TOLERANCE * (removed + new_edge + new_edge2):
                improvement = gain
                found_edge = new_edge
                found_edge2 = new_edge2
                candidate = i

        if candidate == -1:
            break

        candidate_next = next_[candidate]

        # Reverse the chain selected_next .. candidate; prev is still the old one here.
        node = candidate
        while node != selected_next:
            p = prev[node]
            next_[node] = p
            edge_length[node] = edge_length[p]
            node = p
        next_[selected] = candidate
        edge_length[selected] = found_edge

        node = selected
        while node != selected_next:
            prev[next_[node]] = node
            node = next_[node]

        next_[selected_next] = candidate_next
        prev[candidate_next] = selected_next
        edge_length[selected_next] = found_edge2

        # The chain continues from the old successor, now pointing at candidate_next.
        selected = selected_next
        diff += improvement
        if diff < min_diff:
            min_diff = diff

    # Every accepted exchange has negative gain, so the final state is the best of the chain.
    return min_diff


def improve(tour: TourState, tabu: TabuList, k: int = 3, exclude_tabu_candidates: bool = False) -> float:
    """
    Apply one k-opt move to `tour` in place.

    Args:
        tour: Live tour; its invariants hold again on return.
        tabu: Tabu list of the current restart. Every anchor used by the move is pushed.
        k: Depth of the move; at most k-1 sequential exchanges are made.
        exclude_tabu_candidates: Also skip tabu nodes when scanning exchange candidates.

    Returns:
        The change in tour length, 0.0 when no improving exchange was found.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")
    if len(tabu.mask) != tour.n:
        raise ValueError("tabu list was sized for a different instance")
    if tour.n == 0:
        return 0.0
    return float(_kopt_numba(tour.points, tour.next, tour.prev, tour.edge_length,
                             tabu.mask, tabu.queue, tabu.cursor, k, exclude_tabu_candidates))
