"""Command line entry point: python -m tsp_kopt -file=<path>"""
from __future__ import annotations

import argparse
import logging
import sys

from .config import SearchConfig
from .constructive_nn import CONSTRUCTORS
from .read_data import InstanceFormatError, read_instance, write_solution
from .tabu_search import search

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tsp-kopt", description="Tabu-guided k-opt TSP solver")
    parser.add_argument("-file", dest="file", default=None, help="instance file to solve")
    parser.add_argument("--tries", type=int, default=2000, help="number of restarts")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--time-limit", type=float, default=None, help="wall-clock budget in seconds")
    parser.add_argument("--construction", choices=sorted(CONSTRUCTORS), default="greedy")
    parser.add_argument("--exclude-tabu-candidates", action="store_true",
                        help="skip tabu nodes as exchange candidates")
    parser.add_argument("--output", default="solution", help="solution file path")
    parser.add_argument("--progress", action="store_true", help="show a progress bar over restarts")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if unknown:
        logger.debug("Ignoring unrecognized arguments: %s", " ".join(unknown))
    if args.file is None:
        return 0

    try:
        config = SearchConfig(
            try_limit=args.tries,
            seed=args.seed,
            time_limit=args.time_limit,
            construction=args.construction,
            exclude_tabu_candidates=args.exclude_tabu_candidates,
            progress=args.progress,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        points = read_instance(args.file)
    except (FileNotFoundError, InstanceFormatError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info("Loaded %d points from %s", len(points), args.file)
    result = search(points, config=config)
    write_solution(result.length, result.tour, args.output, stream=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
