from .pathway import Node, Edge, Pathway, clone_pathway, resolve_influence
from .graph_ops import knockout, overexpress, pathway_to_nx
from .loaders import load_pathway, validate_pathway_payload

__all__ = [
    'Node',
    'Edge',
    'Pathway',
    'clone_pathway',
    'resolve_influence',
    'knockout',
    'overexpress',
    'pathway_to_nx',
    'load_pathway',
    'validate_pathway_payload',
]
