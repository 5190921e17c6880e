import csv

import numpy as np
import pytest

from tsp_kopt.config import SearchConfig
from tsp_kopt.evaluation_tsp import TSPEvaluation, main


@pytest.fixture
def instance_files(tmp_path):
    square = tmp_path / "square.txt"
    square.write_text("4\n0 0\n0 1\n1 1\n1 0\n")
    pair = tmp_path / "pair.txt"
    pair.write_text("2\n0 0\n3 4\n")
    broken = tmp_path / "broken.txt"
    broken.write_text("3\n0 0\n")
    return [str(square), str(pair), str(broken)]


def test_evaluate_writes_rows_in_input_order(instance_files, tmp_path):
    output = tmp_path / "results.csv"
    evaluator = TSPEvaluation(instance_files, num_threads=2, output_csv_path=str(output),
                              config=SearchConfig(try_limit=3, seed=0))
    results = evaluator.evaluate()

    assert [row['instance_name'] for row in results] == ['square', 'pair', 'broken']
    assert results[0]['feasible'] is True
    assert results[0]['length'] == pytest.approx(4.0)
    assert results[1]['length'] == pytest.approx(10.0)
    assert results[2]['feasible'] == 'input_error'

    with open(output, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [row['instance_name'] for row in rows] == ['square', 'pair', 'broken']
    assert rows[2]['length'] == 'N/A'


def test_check_feasibility():
    evaluator = TSPEvaluation([])
    assert evaluator.check_feasibility(np.array([2, 0, 1]), 3)
    assert not evaluator.check_feasibility((0, 1, 2), 3)
    assert not evaluator.check_feasibility([0, 1], 3)
    assert not evaluator.check_feasibility([0, 1, 1], 3)


def test_tour_cost():
    evaluator = TSPEvaluation([])
    points = np.array([[0.0, 0.0], [3.0, 4.0]])
    assert evaluator.tour_cost(points, [0, 1]) == pytest.approx(10.0)


def test_main(instance_files, tmp_path):
    output = tmp_path / "cli.csv"
    assert main(instance_files[:2] + ["--output", str(output), "--tries", "2", "--seed", "5"]) == 0
    assert output.exists()
