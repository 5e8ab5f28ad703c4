"""Run a single perturbation on a pathway and compare the structure before and after.

:func:`run_simulation` is a pure function of its arguments: it validates the
request, computes the metric bundle on the untouched input, applies the
perturbation to a clone, computes the same bundle on the result and reconciles
the two.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .metrics.comparison import (
    centrality_delta,
    connectivity_delta,
    high_centrality_nodes,
    structural_summary,
)
from .metrics.metrics import metric_bundle
from .utils.errors import (
    InvalidInputError,
    MissingParameterError,
    NodeNotFoundError,
    UnsupportedPerturbationTypeError,
)
from .utils.graph_ops import DEFAULT_MULTIPLIER, PERTURBATIONS
from .utils.pathway import Pathway, clone_pathway, is_sequence

PERTURBATION_TYPES = tuple(PERTURBATIONS)


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one perturbation.

    ``analysis`` is read-only all the way down (nested maps are
    ``MappingProxyType``, sequences are tuples). The two pathways are private
    clones: changing them never reaches the caller's input.
    """

    perturbation: Mapping[str, str]
    original_pathway: Pathway
    perturbed_pathway: Pathway
    analysis: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: ``perturbation``, ``originalPathway``, ``perturbedPathway``, ``analysis``."""
        return {
            "perturbation": dict(self.perturbation),
            "originalPathway": self.original_pathway.to_dict(),
            "perturbedPathway": self.perturbed_pathway.to_dict(),
            "analysis": _thaw(self.analysis),
        }


def _freeze(value: Any) -> Any:
    """Read-only deep copy: mappings become ``MappingProxyType``, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _coerce_pathway(pathway: Pathway | Mapping[str, Any]) -> Pathway:
    if isinstance(pathway, Pathway):
        if not is_sequence(pathway.nodes) or not is_sequence(pathway.edges):
            raise InvalidInputError("Invalid pathway: nodes and edges must be arrays.")
        return pathway
    return Pathway.from_dict(pathway)


def validate_request(
    pathway: Pathway | Mapping[str, Any],
    perturbation_type: Any,
    target_node_id: Any,
) -> Pathway:
    """Check a perturbation request and return the pathway as a record.

    Raises
    ------
    InvalidInputError
        ``nodes`` or ``edges`` is not a sequence.
    MissingParameterError
        ``target_node_id`` or ``perturbation_type`` is missing or empty.
    UnsupportedPerturbationTypeError
        ``perturbation_type`` is not ``knockout`` or ``overexpression``.
    NodeNotFoundError
        No node of the pathway has id ``target_node_id``.
    """
    if pathway is None:
        raise InvalidInputError("Invalid pathway: nodes and edges must be arrays.")
    graph = _coerce_pathway(pathway)
    if not isinstance(target_node_id, str) or not target_node_id:
        raise MissingParameterError("targetNodeId is required.")
    if not perturbation_type:
        raise MissingParameterError("perturbationType is required.")
    if perturbation_type not in PERTURBATION_TYPES:
        raise UnsupportedPerturbationTypeError(
            "perturbationType must be knockout or overexpression.",
            context={"perturbationType": perturbation_type},
        )
    if not graph.has_node(target_node_id):
        raise NodeNotFoundError(
            f"Node '{target_node_id}' not found in pathway.",
            context={"pathway": graph.name, "nodeId": target_node_id},
        )
    return graph


def run_simulation(
    pathway: Pathway | Mapping[str, Any],
    perturbation_type: str,
    target_node_id: str,
    multiplier: float = DEFAULT_MULTIPLIER,
) -> SimulationResult:
    """Apply one perturbation and return before/after metrics with their deltas.

    Parameters
    ----------
    pathway:
        A :class:`Pathway` or its wire mapping. It is never modified.
    perturbation_type:
        ``"knockout"`` or ``"overexpression"``.
    target_node_id:
        Id of the node to perturb. Must exist in ``pathway``.
    multiplier:
        Influence multiplier for overexpression; ignored for knockout.
    """
    logger = logging.getLogger("pathway_sim")
    graph = validate_request(pathway, perturbation_type, target_node_id)
    original = clone_pathway(graph)
    logger.info(
        "Simulating %s of '%s' on pathway '%s': nodes=%d edges=%d",
        perturbation_type, target_node_id, original.name, len(original.nodes), len(original.edges),
    )

    before = metric_bundle(original)
    perturbed = PERTURBATIONS[perturbation_type](original, target_node_id, multiplier)
    after = metric_bundle(perturbed)

    analysis = {
        "degreeCentrality": after["centrality"],
        "beforeDegreeCentrality": before["centrality"],
        "centralityComparison": {
            "before": before["centrality"],
            "after": after["centrality"],
            "delta": centrality_delta(before["centrality"], after["centrality"]),
        },
        "directedDegrees": {"before": before["directed"], "after": after["directed"]},
        "connectivity": {
            "before": before["connectivity"],
            "after": after["connectivity"],
            "deltaPercent": connectivity_delta(before["connectivity"], after["connectivity"]),
        },
        "regulatoryRanking": after["ranking"],
        "beforeRegulatoryRanking": before["ranking"],
        "mostInfluentialNode": {"before": before["most_influential"], "after": after["most_influential"]},
        "highCentralityNodes": high_centrality_nodes(after["ranking"]),
        "knockedOutNode": target_node_id if perturbation_type == "knockout" else None,
        "overexpressedNode": target_node_id if perturbation_type == "overexpression" else None,
        "structural": structural_summary(original, perturbed, perturbation_type, target_node_id),
    }
    logger.info(
        "Simulation done: connectivity %.2f -> %.2f (%.2f%%), most influential %s -> %s",
        before["connectivity"], after["connectivity"], analysis["connectivity"]["deltaPercent"],
        before["most_influential"], after["most_influential"],
    )
    return SimulationResult(
        perturbation=MappingProxyType({"type": perturbation_type, "nodeId": target_node_id}),
        original_pathway=original,
        perturbed_pathway=perturbed,
        analysis=_freeze(analysis),
    )
