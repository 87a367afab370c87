"""Summary metrics computation.

Computes distributional statistics of simulated values, pooled over
locations and realizations.
"""

import numpy as np
import pandas as pd


def compute_summary_metrics(values: np.ndarray) -> dict[str, float]:
    """Compute summary statistics for continuous simulated values.

    Args:
        values: Array of simulated values

    Returns:
        Dictionary with keys:
            - mean: Mean value
            - std: Standard deviation
            - p10: 10th percentile
            - p50: 50th percentile (median)
            - p90: 90th percentile
    """
    values = np.asarray(values, dtype=float)
    return {
        "mean": float(np.mean(values)),
        "std": float(np.std(values)),
        "p10": float(np.percentile(values, 10)),
        "p50": float(np.percentile(values, 50)),
        "p90": float(np.percentile(values, 90)),
    }


def compute_proportions(values: np.ndarray) -> dict[str, float]:
    """Proportion of each category among simulated values.

    Returns:
        Dictionary mapping ``str(level)`` to its frequency, in order of
        first appearance
    """
    counts = pd.Series(values).value_counts(normalize=True, sort=False)
    return {str(level): float(p) for level, p in counts.items()}
