"""Hand a simulation result to an interpreter and merge its answer.

The interpreter is any callable supplied by the caller (an LLM client wrapper,
a rule-based summarizer, a stub in tests). It receives the dictionary built by
:func:`build_interpretation_request` and returns either a mapping or the raw
text of a JSON object. Nothing here owns or caches an interpreter.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .simulation import SimulationResult
from .utils.errors import InterpretationError

Interpreter = Callable[[Dict[str, Any]], Union[Mapping[str, Any], str]]

DEFAULT_CONFIDENCE = 0.7
FALLBACK_SUMMARY = "AI analysis failed or unavailable."

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def build_interpretation_request(result: SimulationResult, top_n: int = 5) -> Dict[str, Any]:
    """Input handed to the interpreter: the perturbed pathway and its post-perturbation metrics."""
    ranking = result.analysis["regulatoryRanking"]
    return {
        "perturbation": dict(result.perturbation),
        "pathway": result.perturbed_pathway.to_dict(),
        "centrality": dict(result.analysis["degreeCentrality"]),
        "topNodes": [
            {"id": r["nodeId"], "degree": r["degree"], "influence": r["influenceScore"]}
            for r in ranking[:top_n]
        ],
    }


def parse_interpretation_text(text: Any) -> Optional[Dict[str, Any]]:
    """Parse ``text`` as JSON, falling back to the outermost ``{...}`` block.

    Returns ``None`` when nothing parseable is found.
    """
    if not text or not isinstance(text, str):
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_BLOCK.search(text)
        if not match:
            return None
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            return None


def normalize_interpretation(parsed: Any) -> Dict[str, Any]:
    if not isinstance(parsed, Mapping):
        raise InterpretationError("Interpreter returned an invalid JSON structure.")
    confidence = parsed.get("confidence_score")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        confidence = min(1.0, max(0.0, float(confidence)))
    else:
        confidence = DEFAULT_CONFIDENCE
    affected = parsed.get("affected_nodes")
    affected = list(affected) if isinstance(affected, (list, tuple)) else []
    summary = parsed.get("summary")
    outcome = parsed.get("predicted_outcome")
    context = parsed.get("biological_context")
    normalized = {
        "summary": summary if isinstance(summary, str) else "No summary provided.",
        "affected_nodes": affected,
        "predicted_outcome": outcome if isinstance(outcome, str) else "",
        "biological_context": context if isinstance(context, str) else "",
        "confidence_score": confidence,
    }
    normalized["keyAffectedNodes"] = normalized["affected_nodes"]
    normalized["predictedBiologicalOutcome"] = normalized["predicted_outcome"]
    return normalized


def interpret_simulation(result: SimulationResult, interpreter: Interpreter) -> Dict[str, Any]:
    """Return ``result`` in wire shape with the interpreter's fields merged into ``analysis``.

    A failing interpreter does not fail the perturbation: its error is
    reported under ``aiError`` next to placeholder fields.
    """
    logger = logging.getLogger("pathway_sim")
    bundle = result.to_dict()
    try:
        raw = interpreter(build_interpretation_request(result))
        parsed = parse_interpretation_text(raw) if isinstance(raw, str) else raw
        extra = normalize_interpretation(parsed)
    except Exception as e:
        logger.warning("Interpretation failed for %s of '%s': %s",
                       result.perturbation["type"], result.perturbation["nodeId"], e)
        extra = {
            "summary": FALLBACK_SUMMARY,
            "affected_nodes": [],
            "predicted_outcome": "",
            "biological_context": "",
            "aiError": str(e),
        }
    bundle["analysis"].update(extra)
    return bundle
