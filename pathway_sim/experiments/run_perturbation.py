import argparse
import re
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

import joblib
import numpy as np
import pandas as pd
import yaml

from ..simulation import run_simulation
from ..utils.errors import PathwaySimError
from ..utils.graph_ops import DEFAULT_MULTIPLIER
from ..utils.loaders import BUILTIN_PATHWAYS, load_pathway
from ..utils.logging_utils import close_file_handlers, setup_logging
from ..utils.provenance import save_result_artifacts, save_run_metadata
from .scenarios import SCENARIOS

RESULTS_DIR = Path("results")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def _safe(part: Any) -> str:
    return _UNSAFE_CHARS.sub("_", str(part)) or "_"


def _resolve_source(source: str, config_dir: Path) -> str:
    # relative pathway files are looked up next to the config first
    if str(source).lower() in BUILTIN_PATHWAYS:
        return str(source)
    candidate = config_dir / source
    if not Path(source).is_absolute() and candidate.exists():
        return str(candidate)
    return str(source)


def _parse_perturbations(entries: List[Any], default_multiplier: float) -> List[Dict[str, Any]]:
    parsed = []
    for entry in entries:
        if not isinstance(entry, dict) or "type" not in entry or "node" not in entry:
            raise ValueError(f"Invalid perturbation entry: {entry}")
        parsed.append(
            {
                "type": entry["type"],
                "node": entry["node"] if entry["node"] is None else str(entry["node"]),
                "multiplier": float(entry.get("multiplier", default_multiplier)),
            }
        )
    return parsed


def _artifact_names(alias: str, perturbations: List[Dict[str, Any]]) -> List[str]:
    """Unique file stem per scenario.

    Overexpression stems carry the multiplier (``mapk_overexpression_Erk_x4``);
    a stem that still repeats gets the scenario index appended.
    """
    stems = []
    for p in perturbations:
        stem = f"{alias}_{_safe(p['type'])}_{_safe(p['node'])}"
        if p["type"] == "overexpression":
            stem += f"_x{_safe(format(p['multiplier'], 'g'))}"
        stems.append(stem)
    counts = Counter(stems)
    return [f"{s}_{i}" if counts[s] > 1 else s for i, s in enumerate(stems)]


def run(
    config_path: str,
    output_dir: str | Path | None = None,
    parallel_jobs: int | None = None,
) -> pd.DataFrame:
    """Run every configured perturbation on one pathway and write the artifacts.

    Per scenario, ``outputs/`` receives the full result JSON, a before/after
    ranking CSV and the perturbed adjacency matrix. ``summary_metrics.csv``
    holds one row per scenario; scenarios rejected by the engine get NaN
    metrics and their error message instead of aborting the run.
    """
    config_path = Path(config_path)
    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}

    source = cfg.get("pathway")
    if not source:
        raise ValueError(f"No pathway configured in {config_path}")
    source = _resolve_source(source, config_path.parent)

    base_dir = Path(output_dir) if output_dir is not None else RESULTS_DIR
    outputs_dir = base_dir / "outputs"
    logs_dir = base_dir / "logs"
    outputs_dir.mkdir(parents=True, exist_ok=True)
    logs_dir.mkdir(parents=True, exist_ok=True)

    parallel_jobs = int(parallel_jobs if parallel_jobs is not None else cfg.get("parallel_jobs", 1))
    default_multiplier = float(cfg.get("multiplier", DEFAULT_MULTIPLIER))

    pathway = load_pathway(source)
    alias = _safe(cfg.get("alias") or pathway.name or Path(source).stem)
    log_file = logs_dir / f"{alias}.log"
    logger = setup_logging(log_file, cfg.get("log_level", "INFO"))

    try:
        entries = cfg.get("perturbations") or SCENARIOS.get(pathway.name, [])
        if not entries:
            raise ValueError(f"No perturbations configured for pathway '{pathway.name}'")
        perturbations = _parse_perturbations(entries, default_multiplier)
        logger.info(
            "Run start: pathway=%s scenarios=%d parallel_jobs=%d out=%s",
            alias, len(perturbations), parallel_jobs, str(base_dir),
        )

        artifacts = _artifact_names(alias, perturbations)

        def process(p: Dict[str, Any], artifact: str) -> Dict[str, Any]:
            row: Dict[str, Any] = {
                "pathway": alias,
                "type": p["type"],
                "node": p["node"],
                "multiplier": p["multiplier"] if p["type"] == "overexpression" else np.nan,
            }
            try:
                result = run_simulation(pathway, p["type"], p["node"], multiplier=p["multiplier"])
            except PathwaySimError as e:
                logger.warning("Scenario %s/%s rejected: %s", p["type"], p["node"], e.log_message())
                row.update(
                    {
                        "nodes_before": len(pathway.nodes),
                        "nodes_after": np.nan,
                        "edges_before": len(pathway.edges),
                        "edges_after": np.nan,
                        "lost_edges": np.nan,
                        "connectivity_before": np.nan,
                        "connectivity_after": np.nan,
                        "connectivity_delta_pct": np.nan,
                        "most_influential_before": "",
                        "most_influential_after": "",
                        "high_centrality_nodes": "",
                        "mean_abs_centrality_delta": np.nan,
                        "artifact": "",
                        "error": str(e),
                    }
                )
                return row

            analysis = result.analysis
            save_result_artifacts(outputs_dir, artifact, result.to_dict(), result.perturbed_pathway)

            deltas = np.array(list(analysis["centralityComparison"]["delta"].values()), dtype=float)
            structural = analysis["structural"]
            row.update(
                {
                    "nodes_before": structural["originalNodeCount"],
                    "nodes_after": structural["perturbedNodeCount"],
                    "edges_before": structural["originalEdgeCount"],
                    "edges_after": structural["perturbedEdgeCount"],
                    "lost_edges": structural["lostEdges"],
                    "connectivity_before": analysis["connectivity"]["before"],
                    "connectivity_after": analysis["connectivity"]["after"],
                    "connectivity_delta_pct": analysis["connectivity"]["deltaPercent"],
                    "most_influential_before": analysis["mostInfluentialNode"]["before"],
                    "most_influential_after": analysis["mostInfluentialNode"]["after"],
                    "high_centrality_nodes": ";".join(analysis["highCentralityNodes"]),
                    "mean_abs_centrality_delta": float(np.abs(deltas).mean()) if deltas.size else 0.0,
                    "artifact": artifact,
                    "error": "",
                }
            )
            return row

        rows = joblib.Parallel(n_jobs=parallel_jobs, prefer="threads")(
            joblib.delayed(process)(p, a) for p, a in zip(perturbations, artifacts)
        )

        df = pd.DataFrame(rows)
        df.to_csv(base_dir / "summary_metrics.csv", index=False)
        save_run_metadata(base_dir / "run_metadata.json", pathway, source, perturbations, config_path)
        n_fail = int((df["error"] != "").sum())
        logger.info("Run done: scenarios=%d failed=%d", len(df), n_fail)
        return df
    finally:
        close_file_handlers(log_file)


def main():
    parser = argparse.ArgumentParser(description="Run single-node perturbations on a pathway graph.")
    parser.add_argument(
        "--config", default=str(Path(__file__).with_name("config.yaml"))
    )
    parser.add_argument("--out-dir", default=None)
    parser.add_argument("--parallel-jobs", type=int, default=None)
    args = parser.parse_args()
    run(args.config, args.out_dir, parallel_jobs=args.parallel_jobs)


if __name__ == "__main__":
    main()
