import networkx as nx
import pytest

from pathway_sim.utils import knockout, overexpress, pathway_to_nx
from pathway_sim.utils.graph_ops import count_incident_edges
from pathway_sim.utils.pathway import Edge, Node, Pathway


def test_knockout_removes_node_and_incident_edges(chain):
    knocked = knockout(chain, "B")
    assert knocked.node_ids() == ["A", "C", "D"]
    assert [(e.source, e.target) for e in knocked.edges] == [("C", "D")]
    assert len(knocked.nodes) == len(chain.nodes) - 1
    assert len(knocked.edges) == len(chain.edges) - count_incident_edges(chain, "B")
    assert all(not e.touches("B") for e in knocked.edges)
    # input untouched
    assert chain.node_ids() == ["A", "B", "C", "D"]
    assert len(chain.edges) == 3


def test_knockout_unknown_node_is_noop_clone(chain):
    knocked = knockout(chain, "ZZZ")
    assert knocked == chain
    assert knocked is not chain


def test_knockout_self_loop():
    p = Pathway("loop", [Node("A"), Node("B")], [Edge("A", "A"), Edge("A", "B"), Edge("B", "B")])
    assert count_incident_edges(p, "A") == 2
    knocked = knockout(p, "A")
    assert [(e.source, e.target) for e in knocked.edges] == [("B", "B")]


def test_overexpress_scales_only_target(chain):
    chain.nodes[2].influence_score = 1
    boosted = overexpress(chain, "C")
    assert boosted.nodes[2].influence_score == 2.0
    assert [n.influence_score for i, n in enumerate(boosted.nodes) if i != 2] == [None, None, None]
    assert len(boosted.nodes) == len(chain.nodes)
    assert boosted.edges == chain.edges
    assert chain.nodes[2].influence_score == 1


def test_overexpress_default_base_and_rounding():
    p = Pathway("p", [Node("A"), Node("B", influence_score=0.123456)], [])
    assert overexpress(p, "A", multiplier=3).nodes[0].influence_score == 3.0
    assert overexpress(p, "B", multiplier=3).nodes[1].influence_score == pytest.approx(0.3704)


def test_pathway_to_nx_skips_unknown_endpoints():
    p = Pathway(
        "p",
        [Node("A", influence_score=2), Node("B")],
        [Edge("A", "B"), Edge("A", "B", "inhibition"), Edge("A", "X")],
    )
    G = pathway_to_nx(p)
    assert isinstance(G, nx.MultiDiGraph)
    assert set(G.nodes) == {"A", "B"}
    assert G.number_of_edges("A", "B") == 2
    assert G.nodes["A"]["influence_score"] == 2.0
    assert sorted(d["type"] for _, _, d in G.edges(data=True)) == ["activation", "inhibition"]
