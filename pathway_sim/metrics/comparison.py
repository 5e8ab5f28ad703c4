import logging
from typing import Any, Dict, List, Mapping, Sequence

from ..utils.graph_ops import count_incident_edges
from ..utils.pathway import Pathway

HIGH_CENTRALITY_TOP_N = 3


def centrality_delta(before: Mapping[str, int], after: Mapping[str, int]) -> Dict[str, int]:
    """``after - before`` for every id in either map; a missing id counts as 0."""
    ids = list(before) + [i for i in after if i not in before]
    return {i: after.get(i, 0) - before.get(i, 0) for i in ids}


def connectivity_delta(before: float, after: float) -> float:
    """Relative change of the connectivity ratio, in percent of ``before``."""
    if before > 0:
        return round((after - before) / before * 100, 2)
    return 0


def high_centrality_nodes(ranking: Sequence[Mapping[str, Any]], top_n: int = HIGH_CENTRALITY_TOP_N) -> List[str]:
    return [r["nodeId"] for r in ranking[:top_n]]


def structural_summary(
    original: Pathway,
    perturbed: Pathway,
    perturbation_type: str,
    node_id: str,
) -> Dict[str, int]:
    """Node/edge counts before and after a perturbation.

    ``lostEdges`` is counted on the original pathway (edges whose source or
    target is ``node_id``) and is only non-zero for knockouts.
    """
    lost = count_incident_edges(original, node_id) if perturbation_type == "knockout" else 0
    summary = {
        "originalNodeCount": len(original.nodes),
        "originalEdgeCount": len(original.edges),
        "perturbedNodeCount": len(perturbed.nodes),
        "perturbedEdgeCount": len(perturbed.edges),
        "lostEdges": lost,
    }
    logging.getLogger("pathway_sim").info(
        "Structural summary: nodes %d->%d edges %d->%d lost=%d",
        summary["originalNodeCount"], summary["perturbedNodeCount"],
        summary["originalEdgeCount"], summary["perturbedEdgeCount"], lost,
    )
    return summary
