import json

import pytest

from pathway_sim import run_simulation
from pathway_sim.interpretation import (
    FALLBACK_SUMMARY,
    build_interpretation_request,
    interpret_simulation,
    normalize_interpretation,
    parse_interpretation_text,
)
from pathway_sim.utils.errors import InterpretationError


def test_request_contains_perturbed_graph_and_top_nodes(chain):
    result = run_simulation(chain, "knockout", "B")
    request = build_interpretation_request(result, top_n=2)
    assert request["perturbation"] == {"type": "knockout", "nodeId": "B"}
    assert [n["id"] for n in request["pathway"]["nodes"]] == ["A", "C", "D"]
    assert request["centrality"] == {"A": 0, "C": 1, "D": 1}
    assert request["topNodes"] == [
        {"id": "C", "degree": 1, "influence": 1.0},
        {"id": "D", "degree": 1, "influence": 1.0},
    ]


def test_parse_interpretation_text():
    assert parse_interpretation_text('{"summary": "ok"}') == {"summary": "ok"}
    assert parse_interpretation_text('Here you go:\n{"summary": "ok"}\nThanks') == {"summary": "ok"}
    assert parse_interpretation_text("no json here") is None
    assert parse_interpretation_text("{broken") is None
    assert parse_interpretation_text(None) is None


def test_normalize_interpretation_defaults_and_clamp():
    normalized = normalize_interpretation({"affected_nodes": ["A"], "confidence_score": 3})
    assert normalized["summary"] == "No summary provided."
    assert normalized["confidence_score"] == 1.0
    assert normalized["keyAffectedNodes"] == ["A"]
    assert normalized["predictedBiologicalOutcome"] == ""
    assert normalize_interpretation({"confidence_score": "high"})["confidence_score"] == 0.7
    with pytest.raises(InterpretationError):
        normalize_interpretation(["not", "a", "mapping"])


def test_interpret_merges_into_analysis(chain):
    result = run_simulation(chain, "knockout", "B")
    seen = []

    def interpreter(request):
        seen.append(request)
        return json.dumps({"summary": "Signal is cut at B.", "affected_nodes": ["C", "D"], "confidence_score": 0.9})

    bundle = interpret_simulation(result, interpreter)
    assert len(seen) == 1
    assert bundle["analysis"]["summary"] == "Signal is cut at B."
    assert bundle["analysis"]["keyAffectedNodes"] == ["C", "D"]
    assert bundle["analysis"]["confidence_score"] == 0.9
    assert bundle["analysis"]["structural"]["lostEdges"] == 2
    # the result itself is left as computed
    assert "summary" not in result.analysis


def test_interpreter_failure_falls_back(chain):
    result = run_simulation(chain, "overexpression", "A")

    def broken(request):
        raise RuntimeError("service unavailable")

    bundle = interpret_simulation(result, broken)
    assert bundle["analysis"]["summary"] == FALLBACK_SUMMARY
    assert bundle["analysis"]["affected_nodes"] == []
    assert bundle["analysis"]["aiError"] == "service unavailable"
    assert bundle["analysis"]["overexpressedNode"] == "A"


def test_unparseable_interpreter_output_falls_back(chain):
    result = run_simulation(chain, "knockout", "A")
    bundle = interpret_simulation(result, lambda request: "I cannot answer that.")
    assert bundle["analysis"]["summary"] == FALLBACK_SUMMARY
    assert "invalid JSON" in bundle["analysis"]["aiError"]
