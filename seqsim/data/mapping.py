"""Data-to-domain mapping methods.

A mapping assigns hard-data rows to domain locations for one variable.
Rows with a missing value for that variable are never mapped, and each
location receives at most one row.
"""

import numpy as np
import pandas as pd
from scipy.spatial.distance import cdist

from seqsim.data.interfaces import Domain


class NearestMapping:
    """Assign each datum to the location with the nearest centroid.

    When several rows fall on the same location, the row closest to the
    centroid wins; exact ties keep the lowest row index.
    """

    max_distance: float = np.inf

    def map(self, table, domain: Domain, variable: str) -> dict[int, int]:
        """Compute the location -> row mapping for a variable.

        Args:
            table: GeoTable with hard data
            domain: Simulation domain
            variable: Variable to map

        Returns:
            Mapping from location index to data row index

        Raises:
            ValueError: If data and domain dimensions differ
        """
        if table.ndim != domain.ndim:
            raise ValueError(
                f"Data has {table.ndim} coordinates but domain has {domain.ndim}"
            )

        rows = np.flatnonzero(~pd.isna(table.column(variable)))
        if rows.size == 0:
            return {}

        dists = cdist(table.coords[rows], domain.centroids)
        nearest = np.argmin(dists, axis=1)
        nearest_dist = dists[np.arange(rows.size), nearest]

        mapping: dict[int, int] = {}
        best: dict[int, float] = {}
        for row, loc, dist in zip(rows, nearest, nearest_dist):
            if dist > self.max_distance:
                continue
            loc = int(loc)
            if loc not in mapping or dist < best[loc]:
                mapping[loc] = int(row)
                best[loc] = dist

        return mapping


class ExactMapping(NearestMapping):
    """Map only data that coincide with a centroid (within a tolerance)."""

    def __init__(self, tol: float = 1e-9):
        if tol < 0:
            raise ValueError(f"tol must be non-negative, got {tol}")
        self.max_distance = tol


MAPPING_REGISTRY: dict[str, type] = {
    "nearest": NearestMapping,
    "exact": ExactMapping,
}


def get_mapping(name: str, **params):
    """Instantiate a mapping method by name.

    Raises:
        ValueError: If the name is not in the registry
    """
    if name not in MAPPING_REGISTRY:
        available = ", ".join(MAPPING_REGISTRY.keys())
        raise ValueError(f"Unknown mapping '{name}'. Available mappings: {available}")
    return MAPPING_REGISTRY[name](**params)
