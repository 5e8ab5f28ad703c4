"""Structural perturbation analysis of directed pathway graphs."""

from .simulation import SimulationResult, run_simulation
from .utils.errors import (
    InvalidInputError,
    MissingParameterError,
    NodeNotFoundError,
    PathwaySimError,
    UnsupportedPerturbationTypeError,
)

__all__ = [
    "run_simulation",
    "SimulationResult",
    "PathwaySimError",
    "InvalidInputError",
    "MissingParameterError",
    "UnsupportedPerturbationTypeError",
    "NodeNotFoundError",
]
