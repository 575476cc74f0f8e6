"""CP-SAT solver components."""

from .builder import ModelBuilder
from .engine import SolverEngine, configure_engine, get_engine
from .extractor import HorizonCheck, SolutionExtractor
from .variables import VariableManager

__all__ = [
    "SolverEngine",
    "get_engine",
    "configure_engine",
    "VariableManager",
    "ModelBuilder",
    "SolutionExtractor",
    "HorizonCheck",
]
