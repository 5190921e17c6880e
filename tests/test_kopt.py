import numpy as np
import pytest

from tsp_kopt.constructive_nn import construct
from tsp_kopt.kopt import improve
from tsp_kopt.tabu import TabuList
from tsp_kopt.tour import TourState


def test_uncrosses_the_square(unit_square):
    tour = TourState(unit_square, [0, 2, 1, 3])
    tabu = TabuList.for_size(4)
    delta = improve(tour, tabu, k=3)
    assert delta == pytest.approx(2.0 - 2.0 * np.sqrt(2.0))
    assert tour.is_valid()
    assert tour.total_length() == pytest.approx(4.0)
    assert list(tour.to_order()) in ([0, 1, 2, 3], [0, 3, 2, 1])
    # both anchors of the chain were pushed; capacity 1 keeps the last
    assert tabu.members() == [2]


def test_optimal_tour_is_left_alone(unit_square):
    tour = TourState(unit_square, [0, 1, 2, 3])
    tabu = TabuList.for_size(4)
    assert improve(tour, tabu) == 0.0
    assert list(tour.to_order()) == [0, 1, 2, 3]
    assert tabu.contains(0)


@pytest.mark.parametrize("points", [
    [[0.0, 0.0]],
    [[0.0, 0.0], [3.0, 4.0]],
    [[1.0, 1.0], [1.0, 1.0], [2.0, 2.0]],
])
def test_tiny_instances_are_noops(points):
    points = np.array(points)
    tour = TourState(points, np.arange(len(points)))
    before = tour.next.copy()
    assert improve(tour, TabuList.for_size(len(points))) == 0.0
    np.testing.assert_array_equal(tour.next, before)
    assert tour.is_valid()


def test_all_tabu_is_a_noop(unit_square):
    tour = TourState(unit_square, [0, 2, 1, 3])
    tabu = TabuList(4, 4)
    for node in range(4):
        tabu.push(node)
    assert improve(tour, tabu) == 0.0
    assert list(tour.to_order()) == [0, 2, 1, 3]


def test_tabu_candidates_can_be_excluded(unit_square):
    tour = TourState(unit_square, [0, 2, 1, 3])
    tabu = TabuList(2, 4)
    tabu.push(1)
    assert improve(tour, tabu, exclude_tabu_candidates=True) == 0.0
    assert list(tour.to_order()) == [0, 2, 1, 3]

    tabu = TabuList(2, 4)
    tabu.push(1)
    assert improve(tour, tabu) < 0.0
    assert tour.total_length() == pytest.approx(4.0)


def test_repeated_moves_keep_invariants(random_points, rng):
    tour, value = construct(random_points, rng)
    tabu = TabuList.for_size(len(random_points))
    for _ in range(200):
        delta = improve(tour, tabu, k=3)
        assert delta <= 0.0
        value += delta
        assert tour.is_valid()
        assert len(tabu) <= tabu.capacity
    assert value == pytest.approx(tour.total_length(), rel=1e-9)


def test_deeper_moves_keep_invariants(random_points):
    tour = TourState(random_points, np.random.default_rng(9).permutation(len(random_points)))
    start = tour.total_length()
    tabu = TabuList.for_size(len(random_points))
    total = sum(improve(tour, tabu, k=6) for _ in range(50))
    assert tour.is_valid()
    assert total < 0.0
    assert tour.total_length() == pytest.approx(start + total, rel=1e-9)


def test_invalid_depth_and_mismatched_tabu(unit_square):
    tour = TourState(unit_square, [0, 1, 2, 3])
    with pytest.raises(ValueError):
        improve(tour, TabuList.for_size(4), k=1)
    with pytest.raises(ValueError):
        improve(tour, TabuList.for_size(5))


def test_optimal_collinear_tour_has_no_improving_move():
    points = np.array([[0.1 * i, 0.3 * i] for i in range(30)])
    tour = TourState(points, np.arange(30))
    tabu = TabuList.for_size(30)
    for _ in range(100):
        assert improve(tour, tabu) == 0.0
    assert list(tour.to_order()) == list(range(30))


def test_zero_gain_exchanges_among_duplicates_are_rejected():
    points = np.repeat(np.array([[0.0, 0.0], [0.1, 0.2]]), 10, axis=0)
    tour = TourState(points, np.arange(20))
    before = tour.next.copy()
    tabu = TabuList.for_size(20)
    for _ in range(50):
        assert improve(tour, tabu) == 0.0
    np.testing.assert_array_equal(tour.next, before)
