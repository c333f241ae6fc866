from .solver import solve, try_place_combination, min_pieces_needed
from .worker import SolveJob, SolveWorker

__all__ = ["solve", "try_place_combination", "min_pieces_needed", "SolveJob", "SolveWorker"]
