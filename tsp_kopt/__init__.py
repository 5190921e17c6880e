from .config import SearchConfig
from .constructive_nn import construct, construct_random, nearest_neighbor_order
from .geometry import as_points, distance, tour_length
from .kopt import improve
from .read_data import InstanceFormatError, format_solution, parse_instance, read_instance, write_solution
from .tabu import TabuList
from .tabu_search import SearchResult, TSPSolver, search
from .tour import TourState

__version__ = "0.1.0"

__all__ = [
    'InstanceFormatError',
    'SearchConfig',
    'SearchResult',
    'TSPSolver',
    'TabuList',
    'TourState',
    'as_points',
    'construct',
    'construct_random',
    'distance',
    'format_solution',
    'improve',
    'nearest_neighbor_order',
    'parse_instance',
    'read_instance',
    'search',
    'tour_length',
    'write_solution',
]
