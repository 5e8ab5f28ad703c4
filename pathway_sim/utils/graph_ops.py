import logging
from dataclasses import replace
from typing import Callable, Dict

import networkx as nx

from .pathway import Pathway, clone_pathway

DEFAULT_MULTIPLIER = 2.0


def knockout(pathway: Pathway, node_id: str) -> Pathway:
    """Remove ``node_id`` and every edge touching it from a copy of ``pathway``.

    Parameters
    ----------
    pathway:
        Original pathway. It is never modified.
    node_id:
        Identifier of the node to knock out.

    Returns
    -------
    Pathway
        A clone without the node and its incident edges. No existence check is
        made: an unknown ``node_id`` yields an otherwise unchanged clone.

    Examples
    --------
    >>> from pathway_sim.utils.pathway import Node, Edge
    >>> p = Pathway("p", [Node("A"), Node("B")], [Edge("A", "B")])
    >>> knocked = knockout(p, "B")
    >>> [n.id for n in knocked.nodes], knocked.edges
    (['A'], [])
    """
    perturbed = clone_pathway(pathway)
    perturbed.nodes = [n for n in perturbed.nodes if n.id != node_id]
    perturbed.edges = [e for e in perturbed.edges if not e.touches(node_id)]
    return perturbed


def overexpress(pathway: Pathway, node_id: str, multiplier: float = DEFAULT_MULTIPLIER) -> Pathway:
    """Scale the influence score of ``node_id`` on a copy of ``pathway``.

    The new score is ``round(base * multiplier, 4)`` where ``base`` is the
    node's current score read with the ``1.0`` default. Node and edge counts
    are unchanged.
    """
    perturbed = clone_pathway(pathway)
    perturbed.nodes = [
        replace(n, influence_score=round(n.influence * multiplier, 4)) if n.id == node_id else n
        for n in perturbed.nodes
    ]
    return perturbed


def count_incident_edges(pathway: Pathway, node_id: str) -> int:
    return sum(1 for e in pathway.edges if e.touches(node_id))


# Perturbation type -> operator taking (pathway, node_id, multiplier)
PERTURBATIONS: Dict[str, Callable[..., Pathway]] = {
    "knockout": lambda pathway, node_id, multiplier=DEFAULT_MULTIPLIER: knockout(pathway, node_id),
    "overexpression": overexpress,
}


def pathway_to_nx(pathway: Pathway) -> nx.MultiDiGraph:
    """Convert a pathway to a ``MultiDiGraph`` keyed by node id.

    Parallel edges are kept. Edges naming unknown node ids are skipped rather
    than letting networkx create placeholder nodes for them.
    """
    G = nx.MultiDiGraph(name=pathway.name)
    for n in pathway.nodes:
        G.add_node(n.id, label=n.label, influence_score=n.influence)
    skipped = 0
    for e in pathway.edges:
        if e.source in G and e.target in G:
            G.add_edge(e.source, e.target, type=e.kind)
        else:
            skipped += 1
    if skipped:
        logging.getLogger("pathway_sim").info(
            "Skipped %d edge(s) with unknown endpoints while converting pathway '%s'",
            skipped, pathway.name,
        )
    return G
