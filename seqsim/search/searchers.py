"""Masked bounded-neighbor searchers.

Both searchers rank eligible locations by distance to the query and break
ties by the lowest location index, so results are reproducible for a fixed
mask and query regardless of platform.
"""

from dataclasses import dataclass

import numpy as np

from seqsim.data.interfaces import Domain
from seqsim.search.distances import Distance


@dataclass(frozen=True)
class BallNeighborhood:
    """Spherical search neighborhood.

    Attributes:
        radius: Maximum distance of a neighbor from the query
    """

    radius: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")


class KNearestSearch:
    """Up to ``maxneighbors`` nearest eligible locations."""

    def __init__(self, domain: Domain, maxneighbors: int, distance: Distance | None = None):
        if maxneighbors < 0:
            raise ValueError(f"maxneighbors must be non-negative, got {maxneighbors}")
        self.domain = domain
        self.maxneighbors = maxneighbors
        self.distance = distance or Distance()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(maxneighbors={self.maxneighbors}, "
            f"distance={self.distance.name})"
        )

    def _admissible(self, dists: np.ndarray) -> np.ndarray:
        return np.ones(dists.shape, dtype=bool)

    def search(self, position, mask, out: np.ndarray) -> int:
        """Write nearest eligible locations into ``out`` and return their count.

        Raises:
            ValueError: If mask length differs from the domain size or
                ``out`` is smaller than maxneighbors
        """
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (len(self.domain),):
            raise ValueError(
                f"mask has shape {mask.shape}, expected ({len(self.domain)},)"
            )
        if out.shape[0] < self.maxneighbors:
            raise ValueError(
                f"neighbor buffer holds {out.shape[0]} entries, "
                f"needs {self.maxneighbors}"
            )

        candidates = np.flatnonzero(mask)
        if candidates.size == 0 or self.maxneighbors == 0:
            return 0

        dists = self.distance.pairwise(position, self.domain.centroids[candidates])[0]
        keep = self._admissible(dists)
        candidates, dists = candidates[keep], dists[keep]

        # primary key distance, secondary key location index
        order = np.lexsort((candidates, dists))[: self.maxneighbors]
        k = order.size
        out[:k] = candidates[order]
        return k


class KBallSearch(KNearestSearch):
    """Up to ``maxneighbors`` nearest eligible locations within a ball."""

    def __init__(
        self,
        domain: Domain,
        maxneighbors: int,
        neighborhood: BallNeighborhood,
        distance: Distance | None = None,
    ):
        super().__init__(domain, maxneighbors, distance)
        self.neighborhood = neighborhood

    def __repr__(self) -> str:
        return (
            f"KBallSearch(maxneighbors={self.maxneighbors}, "
            f"radius={self.neighborhood.radius}, distance={self.distance.name})"
        )

    def _admissible(self, dists: np.ndarray) -> np.ndarray:
        return dists <= self.neighborhood.radius


def build_searcher(
    domain: Domain,
    maxneighbors: int,
    distance: Distance | None = None,
    neighborhood: BallNeighborhood | None = None,
) -> KNearestSearch:
    """Choose the bounded searcher for a variable.

    Args:
        domain: Simulation domain
        maxneighbors: Maximum number of neighbors per query
        distance: Metric used to rank neighbors
        neighborhood: Optional ball restricting the search

    Returns:
        KNearestSearch without a neighborhood, KBallSearch otherwise
    """
    if neighborhood is None:
        return KNearestSearch(domain, maxneighbors, distance)
    return KBallSearch(domain, maxneighbors, neighborhood, distance)
