"""Protocol definitions for spatial data collaborators.

The simulation core only needs a handful of operations from the domain. These abstractions allow swapping in
other geometry models (meshes, geographic grids) without touching the engine.
"""

from typing import Protocol
import numpy as np


class Domain(Protocol):
    """An ordered, finite collection of locations with centroids."""

    def __len__(self) -> int:
        """Number of locations in the domain."""
        ...

    @property
    def ndim(self) -> int:
        """Embedding dimension of the centroids."""
        ...

    @property
    def centroids(self) -> np.ndarray:
        """Read-only (N, ndim) array of centroids, indexed by location."""
        ...

    def centroid(self, location: int) -> np.ndarray:
        """Centroid of a single location."""
        ...
