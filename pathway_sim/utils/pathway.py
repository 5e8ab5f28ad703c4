"""Record types for a pathway graph and the clone operation.

A pathway is a directed, labeled graph. Nodes keep whatever influence score
they were given; the default of ``1.0`` for missing or non-numeric scores is
applied every time the score is read (see :func:`resolve_influence`), never
written back into the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Dict, List, Mapping

from .errors import InvalidInputError

DEFAULT_INFLUENCE = 1.0
DEFAULT_EDGE_TYPE = "activation"


def resolve_influence(value: Any) -> float:
    """Return ``value`` as a float when it is a real number, else ``1.0``.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, Real) and not isinstance(value, bool):
        return float(value)
    return DEFAULT_INFLUENCE


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _as_id(value: Any) -> Any:
    # ids are strings; YAML reads unquoted ids such as `1` as numbers
    return value if value is None or isinstance(value, str) else str(value)


@dataclass
class Node:
    id: str
    label: str = ""
    influence_score: Any = None

    @property
    def influence(self) -> float:
        return resolve_influence(self.influence_score)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | "Node") -> "Node":
        if isinstance(data, Node):
            return replace(data)
        if not isinstance(data, Mapping):
            raise InvalidInputError(f"Node must be a mapping, got {type(data).__name__}")
        return cls(
            id=_as_id(data.get("id")),
            label=data.get("label", ""),
            influence_score=data.get("influenceScore"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "label": self.label}
        if self.influence_score is not None:
            out["influenceScore"] = self.influence_score
        return out


@dataclass
class Edge:
    source: str
    target: str
    type: str | None = DEFAULT_EDGE_TYPE

    @property
    def kind(self) -> str:
        return self.type or DEFAULT_EDGE_TYPE

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | "Edge") -> "Edge":
        if isinstance(data, Edge):
            return replace(data)
        if not isinstance(data, Mapping):
            raise InvalidInputError(f"Edge must be a mapping, got {type(data).__name__}")
        return cls(
            source=_as_id(data.get("source")),
            target=_as_id(data.get("target")),
            type=data.get("type"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"source": self.source, "target": self.target}
        if self.type is not None:
            out["type"] = self.type
        return out


@dataclass
class Pathway:
    name: str = ""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

    def get_node(self, node_id: str) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | "Pathway") -> "Pathway":
        """Build a pathway from its wire shape.

        Parameters
        ----------
        data:
            Mapping with ``name``, ``nodes`` and ``edges`` keys, where nodes
            and edges are lists of mappings (or already-built records). A
            :class:`Pathway` instance is accepted and cloned.

        Raises
        ------
        InvalidInputError
            If ``nodes`` or ``edges`` is not a list/tuple, or an item is not a
            mapping.
        """
        if isinstance(data, Pathway):
            return clone_pathway(data)
        if not isinstance(data, Mapping):
            raise InvalidInputError("Invalid pathway: expected a mapping.")
        nodes = data.get("nodes")
        edges = data.get("edges")
        if not is_sequence(nodes) or not is_sequence(edges):
            raise InvalidInputError("Invalid pathway: nodes and edges must be arrays.")
        return cls(
            name=data.get("name", ""),
            nodes=[Node.from_dict(n) for n in nodes],
            edges=[Edge.from_dict(e) for e in edges],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def clone_pathway(pathway: Pathway) -> Pathway:
    """Copy ``pathway`` one level deep.

    The result has new node/edge lists holding shallow copies of every record,
    so assigning a field on the clone never reaches the input.
    """
    return Pathway(
        name=pathway.name,
        nodes=[replace(n) for n in pathway.nodes],
        edges=[replace(e) for e in pathway.edges],
    )
