"""Process-wide CP-SAT engine handle."""

import logging
import threading
from dataclasses import dataclass

from ortools.sat.python import cp_model

from ..constants import MIN_MIP_TIME_LIMIT_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverEngine:
    """Shared solver configuration.

    The engine is created once per process. Each solve still gets its own
    ``CpSolver`` from ``new_solver``, so concurrent solves never share
    solver state.
    """

    num_workers: int = 0
    log_search_progress: bool = False

    def new_solver(self, time_limit_seconds: float) -> cp_model.CpSolver:
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = max(MIN_MIP_TIME_LIMIT_SECONDS, time_limit_seconds)
        solver.parameters.log_search_progress = self.log_search_progress
        if self.num_workers > 0:
            solver.parameters.num_workers = self.num_workers
        return solver


_engine: SolverEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> SolverEngine:
    """Return the engine, initializing it on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = SolverEngine()
                logger.debug("Initialized CP-SAT engine")
    return _engine


def configure_engine(num_workers: int = 0, log_search_progress: bool = False) -> SolverEngine:
    """Initialize the engine with explicit settings.

    Only the first initialization takes effect; once the engine exists it is
    returned unchanged, and differing settings are logged and ignored.
    """
    global _engine
    with _engine_lock:
        requested = SolverEngine(num_workers=num_workers, log_search_progress=log_search_progress)
        if _engine is None:
            _engine = requested
            logger.debug(f"Initialized CP-SAT engine with {requested}")
        elif _engine != requested:
            logger.warning(f"CP-SAT engine already initialized as {_engine}, ignoring {requested}")
    return _engine
