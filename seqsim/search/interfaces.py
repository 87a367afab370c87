"""Protocol definition for bounded neighbor search."""

from typing import Protocol
import numpy as np


class BoundedSearcher(Protocol):
    """Finds up to ``maxneighbors`` nearest eligible locations.

    Eligibility is given by a boolean mask over the domain. Ineligible
    locations are never returned, and the result is reproducible for a fixed
    query and mask.
    """

    maxneighbors: int

    def search(self, position: np.ndarray, mask: np.ndarray, out: np.ndarray) -> int:
        """Search neighbors of a position.

        Args:
            position: Query coordinates
            mask: Boolean array over domain locations, True = eligible
            out: Caller-owned int buffer with capacity >= maxneighbors;
                the first k entries are overwritten with neighbor indices

        Returns:
            Number of neighbors k written to ``out``
        """
        ...
