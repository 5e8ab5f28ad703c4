import logging
from typing import Any, Dict, List, Mapping, Optional

from ..utils.pathway import Pathway, resolve_influence

NOT_AVAILABLE = "N/A"


def degree_centrality(pathway: Pathway) -> Dict[str, int]:
    """Combined in+out degree for every node.

    Edge endpoints naming unknown ids are ignored; a self-loop counts twice.
    """
    centrality = {n.id: 0 for n in pathway.nodes}
    for e in pathway.edges:
        if e.source in centrality:
            centrality[e.source] += 1
        if e.target in centrality:
            centrality[e.target] += 1
    return centrality


def directed_degrees(pathway: Pathway) -> Dict[str, Dict[str, int]]:
    """In-degree and out-degree per node, as ``{"inDegree", "outDegree"}``."""
    degrees = {n.id: {"inDegree": 0, "outDegree": 0} for n in pathway.nodes}
    for e in pathway.edges:
        if e.source in degrees:
            degrees[e.source]["outDegree"] += 1
        if e.target in degrees:
            degrees[e.target]["inDegree"] += 1
    return degrees


def connectivity_ratio(pathway: Pathway) -> float:
    """Edge count as a percentage of the ``N * (N - 1)`` possible directed edges.

    Zero for graphs with at most one node. The value is not clamped, so dense
    multigraphs or graphs with self-loops may exceed 100.
    """
    n = len(pathway.nodes)
    if n <= 1:
        return 0
    max_edges = n * (n - 1)
    return round(len(pathway.edges) / max_edges * 100, 2)


def _influence_lookup(pathway: Pathway) -> Dict[str, Any]:
    # first occurrence wins for duplicated ids
    lookup: Dict[str, Any] = {}
    for n in pathway.nodes:
        lookup.setdefault(n.id, n.influence_score)
    return lookup


def rank_regulatory_nodes(
    pathway: Pathway,
    centrality: Mapping[str, int],
    directed: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> List[Dict[str, Any]]:
    """Rank nodes by ``regulatoryScore = degree * influenceScore``.

    Parameters
    ----------
    pathway:
        Pathway the centrality was computed on; supplies influence scores.
    centrality:
        Output of :func:`degree_centrality`. Its iteration order (node order)
        is the order equal scores keep.
    directed:
        Optional output of :func:`directed_degrees` used to fill ``inDegree``
        and ``outDegree``. Both are 0 when omitted.

    Returns
    -------
    list of dict
        Entries sorted by descending ``regulatoryScore``. The sort is stable:
        entries with equal scores stay in node order.
    """
    influence = _influence_lookup(pathway)
    directed = directed or {}
    ranking = []
    for node_id, degree in centrality.items():
        score = resolve_influence(influence.get(node_id))
        node_directed = directed.get(node_id, {})
        ranking.append(
            {
                "nodeId": node_id,
                "degree": degree,
                "inDegree": node_directed.get("inDegree", 0),
                "outDegree": node_directed.get("outDegree", 0),
                "influenceScore": score,
                "regulatoryScore": degree * score,
            }
        )
    # sorted() with reverse=True keeps equal elements in their original order
    return sorted(ranking, key=lambda r: r["regulatoryScore"], reverse=True)


def most_influential_node(pathway: Pathway, centrality: Mapping[str, int]) -> str:
    """Node with the highest ``degree * influenceScore``; the first one wins ties."""
    influence = _influence_lookup(pathway)
    best = None
    best_score = -1.0
    for node_id, degree in centrality.items():
        score = degree * resolve_influence(influence.get(node_id))
        if score > best_score:
            best_score = score
            best = node_id
    return best if best is not None else NOT_AVAILABLE


def metric_bundle(pathway: Pathway) -> Dict[str, Any]:
    """All structural metrics of one pathway, as used for before/after comparison."""
    centrality = degree_centrality(pathway)
    directed = directed_degrees(pathway)
    bundle = {
        "centrality": centrality,
        "directed": directed,
        "connectivity": connectivity_ratio(pathway),
        "ranking": rank_regulatory_nodes(pathway, centrality, directed),
        "most_influential": most_influential_node(pathway, centrality),
    }
    logging.getLogger("pathway_sim").debug(
        "Metrics computed: nodes=%d edges=%d connectivity=%.2f most_influential=%s",
        len(pathway.nodes), len(pathway.edges), bundle["connectivity"], bundle["most_influential"],
    )
    return bundle
