from __future__ import annotations

import argparse
import concurrent.futures
import csv
import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

import numpy as np
from tqdm import tqdm

from .config import SearchConfig
from .geometry import tour_length
from .read_data import InstanceFormatError, read_instance
from .tabu_search import TSPSolver

logger = logging.getLogger(__name__)

__all__ = ['TSPEvaluation']

HEADERS = ['instance_name', 'n', 'length', 'time', 'feasible']


class TSPEvaluation:
    """
    Runs the solver over a set of instance files, optionally in parallel,
    and writes one CSV row per instance.
    """

    def __init__(self,
                 instance_paths: List[str],
                 num_threads: int = 1,
                 output_csv_path: str = 'tsp_results.csv',
                 config: Optional[SearchConfig] = None):
        """
        Args:
            instance_paths: Instance files in the format read by `read_instance`.
            num_threads: Number of instances evaluated concurrently; each runs its own solver.
            output_csv_path: Path to write the final results CSV file.
            config: Search parameters shared by every run.
        """
        self.instance_paths = list(instance_paths)
        self.num_threads = num_threads
        self.output_csv_path = output_csv_path
        self.config = config or SearchConfig()

    def tour_cost(self, instance: np.ndarray, solution) -> float:
        """Total length of the closed tour."""
        return tour_length(instance, solution)

    def check_feasibility(self, solution, problem_size: int) -> bool:
        """Checks that the solution visits every node exactly once."""
        if not isinstance(solution, (list, np.ndarray)):
            logger.warning("solution must be a list or numpy array")
            return False
        if len(solution) != problem_size:
            logger.warning("solution must be of length %d, got %d", problem_size, len(solution))
            return False
        if set(int(node) for node in solution) != set(range(problem_size)):
            logger.warning("solution must be a permutation of 0..%d", problem_size - 1)
            return False
        return True

    def _run_single_solve(self, path: str) -> Dict[str, Any]:
        """Solve one instance; input errors are recorded in the row instead of raised."""
        instance_name = os.path.splitext(os.path.basename(path))[0]
        try:
            coordinates = read_instance(path)
        except (FileNotFoundError, InstanceFormatError) as e:
            logger.error("Cannot read %s: %s", path, e)
            return {'instance_name': instance_name, 'feasible': 'input_error'}

        problem_size = len(coordinates)
        solver = TSPSolver(coordinates, config=self.config)
        solve_start_time = time.perf_counter()
        solution = solver.solve()
        solve_time = time.perf_counter() - solve_start_time

        feasible = self.check_feasibility(solution, problem_size)
        length = self.tour_cost(coordinates, solution) if feasible else float('nan')
        logger.info("instance_name=%s, length=%s, solve_time=%.3f", instance_name, length, solve_time)
        return {
            'instance_name': instance_name,
            'n': problem_size,
            'length': length,
            'time': solve_time,
            'feasible': feasible,
        }

    def evaluate(self) -> List[Dict[str, Any]]:
        """
        Evaluates the solver on every instance; results keep the input order.
        """
        start_time = time.time()
        results_by_path = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.num_threads) as executor:
            future_to_path = {executor.submit(self._run_single_solve, path): path
                              for path in self.instance_paths}
            for future in tqdm(concurrent.futures.as_completed(future_to_path),
                               total=len(future_to_path), desc="Evaluating instances"):
                results_by_path[future_to_path[future]] = future.result()

        ordered_results = [results_by_path[path] for path in self.instance_paths]
        self.write_results_to_csv(ordered_results)
        logger.info("Evaluation finished in %.2f seconds", time.time() - start_time)
        return ordered_results

    def write_results_to_csv(self, results_data: List[Dict[str, Any]]) -> None:
        if not results_data:
            logger.warning("No results to write")
            return
        with open(self.output_csv_path, 'w', newline='') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=HEADERS, restval='N/A')
            writer.writeheader()
            writer.writerows(results_data)
        logger.info("Wrote results to %s", self.output_csv_path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate the k-opt solver on instance files")
    parser.add_argument("instances", nargs="+")
    parser.add_argument("--output", default="tsp_results.csv")
    parser.add_argument("--threads", type=int, default=1)
    parser.add_argument("--tries", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--time-limit", type=float, default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = SearchConfig(try_limit=args.tries, seed=args.seed, time_limit=args.time_limit)
    evaluator = TSPEvaluation(args.instances, num_threads=args.threads,
                              output_csv_path=args.output, config=config)
    evaluator.evaluate()
    return 0


if __name__ == '__main__':
    sys.exit(main())
