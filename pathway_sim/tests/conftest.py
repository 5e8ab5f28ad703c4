import pytest

from pathway_sim.utils.pathway import Edge, Node, Pathway


@pytest.fixture
def chain():
    """A -> B -> C -> D, all activation edges, default influence."""
    nodes = [Node(i, f"Protein {i}") for i in "ABCD"]
    edges = [Edge("A", "B"), Edge("B", "C"), Edge("C", "D")]
    return Pathway("chain", nodes, edges)
