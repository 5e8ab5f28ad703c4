import json
import hashlib
import platform
import sys
import joblib
import pandas as pd
import numpy as np
import networkx as nx
import yaml
from pathlib import Path
from typing import Dict, Any, List

from .graph_ops import pathway_to_nx
from .pathway import Pathway


def calculate_file_hash(filepath: Path) -> str:
    """Calculate SHA256 hash of a file."""
    sha256_hash = hashlib.sha256()
    with open(filepath, "rb") as f:
        for byte_block in iter(lambda: f.read(4096), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()


def get_library_versions() -> Dict[str, str]:
    """Get versions of key libraries."""
    return {
        "python": sys.version,
        "platform": platform.platform(),
        "pandas": pd.__version__,
        "numpy": np.__version__,
        "networkx": nx.__version__,
        "pyyaml": yaml.__version__,
        "joblib": joblib.__version__,
    }


def save_run_metadata(
    output_path: Path,
    pathway: Pathway,
    pathway_source: str,
    perturbations: List[Dict[str, Any]],
    config_path: Path | None = None,
):
    """Save metadata for one experiment run."""
    source_path = Path(pathway_source)
    metadata = {
        "pathway": {
            "name": pathway.name,
            "source": str(pathway_source),
            "sha256": calculate_file_hash(source_path) if source_path.is_file() else None,
            "n_nodes": len(pathway.nodes),
            "n_edges": len(pathway.edges),
        },
        "perturbations": perturbations,
        "config": {
            "path": str(config_path) if config_path is not None else None,
            "sha256": calculate_file_hash(config_path) if config_path is not None and config_path.is_file() else None,
        },
        "environment": {
            "libraries": get_library_versions(),
        },
    }

    with open(output_path, "w") as f:
        json.dump(metadata, f, indent=2)


def save_result_artifacts(output_dir: Path, base_filename: str, result_dict: Dict[str, Any], perturbed: Pathway):
    """Save simulation artifacts: full result JSON, ranking table and perturbed adjacency."""
    output_dir.mkdir(parents=True, exist_ok=True)

    # 1. Full result in wire shape
    with open(output_dir / f"{base_filename}.json", "w") as f:
        json.dump(result_dict, f, indent=2)

    # 2. Before/after regulatory ranking side by side
    analysis = result_dict["analysis"]
    before = pd.DataFrame(analysis["beforeRegulatoryRanking"]).assign(stage="before")
    after = pd.DataFrame(analysis["regulatoryRanking"]).assign(stage="after")
    ranking = pd.concat([before, after], ignore_index=True)
    ranking.to_csv(output_dir / f"{base_filename}_ranking.csv", index=False)

    # 3. Perturbed adjacency, parallel edges counted
    nodes = list(dict.fromkeys(perturbed.node_ids()))
    adj = nx.to_numpy_array(pathway_to_nx(perturbed), nodelist=nodes, weight=None)
    pd.DataFrame(adj, index=nodes, columns=nodes).to_csv(output_dir / f"{base_filename}_adj.csv")
