"""Error hierarchy for the perturbation engine.

Every error is raised synchronously by the engine and left for the calling
layer to translate. ``http_status`` is the status code a web layer is expected
to map the error to.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class PathwaySimError(Exception):
    """Base exception for pathway simulation failures."""

    http_status = 500

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class InvalidInputError(PathwaySimError, ValueError):
    """Malformed pathway shape (nodes/edges are not sequences, bad payload)."""

    http_status = 400


class MissingParameterError(PathwaySimError, ValueError):
    """Absent perturbation type or target node id."""

    http_status = 400


class UnsupportedPerturbationTypeError(PathwaySimError, ValueError):
    """Perturbation type outside of ``knockout``/``overexpression``."""

    http_status = 400


class NodeNotFoundError(PathwaySimError, LookupError):
    """Target node id absent from the pathway."""

    http_status = 404


class InterpretationError(PathwaySimError):
    """Interpreter returned something that cannot be read as an analysis."""


__all__ = [
    "PathwaySimError",
    "InvalidInputError",
    "MissingParameterError",
    "UnsupportedPerturbationTypeError",
    "NodeNotFoundError",
    "InterpretationError",
]
