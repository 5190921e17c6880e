"""Search parameters.

    try_limit                number of greedy restarts after the initial tour
    k                        depth of each k-opt move (k-1 sequential exchanges)
    threshold                initial stagnation patience of a restart
    tabu_divisor             tabu capacity is max(1, n // tabu_divisor)
    construction             'greedy' (nearest neighbor) or 'random'
    exclude_tabu_candidates  skip tabu nodes as exchange candidates, not only as anchors
    time_limit               wall-clock budget in seconds, None for no limit
    seed                     seed of the numpy Generator, None for fresh entropy
    progress                 show a tqdm bar over restarts
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constructive_nn import CONSTRUCTORS


@dataclass
class SearchConfig:
    try_limit: int = 2000
    k: int = 3
    threshold: int = 20
    tabu_divisor: int = 10
    construction: str = 'greedy'
    exclude_tabu_candidates: bool = False
    time_limit: Optional[float] = None
    seed: Optional[int] = None
    progress: bool = False

    def __post_init__(self):
        if self.try_limit < 0:
            raise ValueError(f"try_limit must be non-negative, got {self.try_limit}")
        if self.k < 2:
            raise ValueError(f"k must be at least 2, got {self.k}")
        if self.threshold < 1:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.tabu_divisor < 1:
            raise ValueError(f"tabu_divisor must be positive, got {self.tabu_divisor}")
        if self.construction not in CONSTRUCTORS:
            raise ValueError(f"unknown construction {self.construction!r}, "
                             f"expected one of {sorted(CONSTRUCTORS)}")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit must be non-negative, got {self.time_limit}")


__all__ = ['SearchConfig']
