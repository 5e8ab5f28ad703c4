from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Tuple

import json
import logging
import yaml

from .errors import InvalidInputError
from .pathway import Edge, Node, Pathway

# Consensus signaling network from Sachs et al. (2005): 11 phosphoproteins,
# 17 edges. PKA phosphorylates Raf at an inhibitory site.
SACHS_EDGES: list[tuple[str, str, str]] = [
    ("Erk", "Akt", "activation"),
    ("PKA", "Akt", "activation"),
    ("Mek", "Erk", "activation"),
    ("PKA", "Erk", "activation"),
    ("PKA", "Jnk", "activation"),
    ("PKC", "Jnk", "activation"),
    ("PKA", "Mek", "activation"),
    ("PKC", "Mek", "activation"),
    ("Raf", "Mek", "activation"),
    ("PKA", "P38", "activation"),
    ("PKC", "P38", "activation"),
    ("PIP3", "PIP2", "activation"),
    ("Plcg", "PIP2", "activation"),
    ("Plcg", "PIP3", "activation"),
    ("PKC", "PKA", "activation"),
    ("PKA", "Raf", "inhibition"),
    ("PKC", "Raf", "activation"),
]

SACHS_LABELS: dict[str, str] = {
    "Raf": "Raf kinase",
    "Mek": "MEK1/2",
    "Plcg": "Phospholipase C-gamma",
    "PIP2": "Phosphatidylinositol 4,5-bisphosphate",
    "PIP3": "Phosphatidylinositol 3,4,5-trisphosphate",
    "Erk": "ERK1/2 (p44/42)",
    "Akt": "Protein kinase B",
    "PKA": "Protein kinase A",
    "PKC": "Protein kinase C",
    "P38": "p38 MAPK",
    "Jnk": "c-Jun N-terminal kinase",
}

# Linear MAPK cascade with a negative feedback loop from ERK to SOS.
MAPK_NODES: list[tuple[str, str, float]] = [
    ("EGFR", "EGF receptor", 1.5),
    ("SOS", "Son of sevenless", 1.0),
    ("Ras", "Ras GTPase", 1.2),
    ("Raf", "Raf kinase", 1.0),
    ("Mek", "MEK1/2", 1.0),
    ("Erk", "ERK1/2", 2.0),
]

MAPK_EDGES: list[tuple[str, str, str]] = [
    ("EGFR", "SOS", "activation"),
    ("SOS", "Ras", "activation"),
    ("Ras", "Raf", "activation"),
    ("Raf", "Mek", "activation"),
    ("Mek", "Erk", "activation"),
    ("Erk", "SOS", "inhibition"),
]


def _edges(edges: List[Tuple[str, str, str]]) -> List[Edge]:
    return [Edge(u, v, t) for u, v, t in edges]


def _sachs() -> Pathway:
    ids: list[str] = []
    for u, v, _ in SACHS_EDGES:
        for n in (u, v):
            if n not in ids:
                ids.append(n)
    nodes = [Node(n, SACHS_LABELS.get(n, n)) for n in ids]
    return Pathway("sachs", nodes, _edges(SACHS_EDGES))


def _mapk() -> Pathway:
    nodes = [Node(i, label, score) for i, label, score in MAPK_NODES]
    return Pathway("mapk", nodes, _edges(MAPK_EDGES))


BUILTIN_PATHWAYS: Dict[str, Callable[[], Pathway]] = {
    "sachs": _sachs,
    "mapk": _mapk,
}


def validate_pathway_payload(data: Any) -> None:
    """Check a stored-pathway payload before it is accepted.

    These are the checks a persistence layer applies: a mapping body, a
    non-empty string ``name``, list ``nodes`` and ``edges`` and unique node
    ids. The simulation itself only requires list ``nodes`` and ``edges``.

    Raises
    ------
    InvalidInputError
        On the first failed check.
    """
    if not isinstance(data, Mapping):
        raise InvalidInputError("Request body is required.")
    if not data.get("name") or not isinstance(data.get("name"), str):
        raise InvalidInputError("Pathway name is required.")
    if not isinstance(data.get("nodes"), list):
        raise InvalidInputError("nodes must be an array.")
    if not isinstance(data.get("edges"), list):
        raise InvalidInputError("edges must be an array.")
    seen = set()
    for n in data["nodes"]:
        node_id = n.get("id") if isinstance(n, Mapping) else None
        if node_id is not None:
            node_id = str(node_id)
        if node_id is not None and node_id in seen:
            raise InvalidInputError(f"Duplicate node id detected: {node_id}", context={"nodeId": node_id})
        seen.add(node_id)


def read_pathway_file(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".json", ".yaml", ".yml"}:
        raise InvalidInputError(f"Unsupported pathway file type: {path.suffix}", context={"path": str(path)})
    with open(path) as f:
        if suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_pathway(source: str | Path) -> Pathway:
    """Load a built-in pathway by name or a pathway from a JSON/YAML file."""
    logger = logging.getLogger("pathway_sim")
    key = str(source).lower()
    if key in BUILTIN_PATHWAYS:
        pathway = BUILTIN_PATHWAYS[key]()
        logger.info("Loaded built-in pathway '%s': nodes=%d edges=%d", key, len(pathway.nodes), len(pathway.edges))
        return pathway

    path = Path(source)
    if not path.exists():
        raise InvalidInputError(f"Unknown pathway: {source}")
    data = read_pathway_file(path)
    validate_pathway_payload(data)
    pathway = Pathway.from_dict(data)
    logger.info(
        "Loaded pathway '%s': nodes=%d edges=%d path=%s",
        pathway.name, len(pathway.nodes), len(pathway.edges), str(path),
    )
    return pathway
