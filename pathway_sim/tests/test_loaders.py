import json

import pytest
import yaml

from pathway_sim import run_simulation
from pathway_sim.utils import load_pathway, validate_pathway_payload
from pathway_sim.utils.errors import InvalidInputError


def test_sachs_loader():
    p = load_pathway("sachs")
    assert p.name == "sachs"
    assert len(p.nodes) == 11
    assert len(p.edges) == 17
    assert len(set(p.node_ids())) == 11
    assert {e.kind for e in p.edges} == {"activation", "inhibition"}


def test_mapk_loader_case_insensitive():
    p = load_pathway("MAPK")
    assert p.node_ids() == ["EGFR", "SOS", "Ras", "Raf", "Mek", "Erk"]
    assert p.get_node("Erk").influence == 2.0


def test_load_json_and_yaml(tmp_path):
    data = {
        "name": "toy",
        "nodes": [{"id": "A", "label": "a"}, {"id": "B", "label": "b", "influenceScore": 2}],
        "edges": [{"source": "A", "target": "B", "type": "inhibition"}],
    }
    json_path = tmp_path / "toy.json"
    json_path.write_text(json.dumps(data))
    yaml_path = tmp_path / "toy.yaml"
    yaml_path.write_text(yaml.safe_dump(data))

    for path in (json_path, yaml_path):
        p = load_pathway(path)
        assert p.to_dict() == data


def test_load_unknown_source(tmp_path):
    with pytest.raises(InvalidInputError):
        load_pathway("no-such-pathway")
    txt = tmp_path / "toy.txt"
    txt.write_text("A B")
    with pytest.raises(InvalidInputError):
        load_pathway(txt)


def test_validate_pathway_payload():
    ok = {"name": "p", "nodes": [{"id": "A"}, {"id": "B"}], "edges": []}
    validate_pathway_payload(ok)

    with pytest.raises(InvalidInputError, match="Request body"):
        validate_pathway_payload(None)
    with pytest.raises(InvalidInputError, match="name"):
        validate_pathway_payload({"nodes": [], "edges": []})
    with pytest.raises(InvalidInputError, match="nodes"):
        validate_pathway_payload({"name": "p", "nodes": {}, "edges": []})
    with pytest.raises(InvalidInputError, match="edges"):
        validate_pathway_payload({"name": "p", "nodes": [], "edges": None})
    with pytest.raises(InvalidInputError, match="Duplicate node id detected: A"):
        validate_pathway_payload({"name": "p", "nodes": [{"id": "A"}, {"id": "A"}], "edges": []})


def test_numeric_yaml_ids_are_read_as_strings(tmp_path):
    path = tmp_path / "numeric.yaml"
    path.write_text(
        "name: numeric\n"
        "nodes:\n"
        "  - {id: 1, label: one}\n"
        "  - {id: 2, label: two, influenceScore: 3}\n"
        "edges:\n"
        "  - {source: 1, target: 2}\n"
    )
    p = load_pathway(path)
    assert p.node_ids() == ["1", "2"]
    assert (p.edges[0].source, p.edges[0].target) == ("1", "2")

    result = run_simulation(p, "knockout", "1")
    assert result.perturbed_pathway.node_ids() == ["2"]
    assert result.analysis["structural"]["lostEdges"] == 1


def test_duplicate_ids_detected_across_types():
    with pytest.raises(InvalidInputError, match="Duplicate node id detected: 1"):
        validate_pathway_payload({"name": "p", "nodes": [{"id": 1}, {"id": "1"}], "edges": []})
