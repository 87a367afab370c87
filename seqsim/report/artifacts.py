"""Artifact writing: realizations table and summary."""

import json
from pathlib import Path

from seqsim.engine.simulator import SimulationResult


def write_artifacts(
    result: SimulationResult,
    outdir: str | Path,
    domain=None,
    metadata: dict | None = None,
) -> dict[str, Path]:
    """Write simulation results to disk.

    Args:
        result: Completed simulation
        outdir: Output directory (created if missing)
        domain: Optional domain, to include centroids in the CSV
        metadata: Extra run information stored in the summary

    Returns:
        Mapping from artifact name to written path
    """
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    realizations_path = outdir / "realizations.csv"
    result.to_frame(domain).to_csv(realizations_path, index=False)

    summary_path = outdir / "summary.json"
    with open(summary_path, "w") as f:
        json.dump(
            {
                "metadata": metadata or {},
                "nreals": result.nreals,
                "summary": result.summary,
                "stats": result.stats,
            },
            f,
            indent=2,
        )

    return {"realizations": realizations_path, "summary": summary_path}
