"""Concrete spatial domains.

Locations are identified by their integer index in ``range(len(domain))``.
Centroids are stored once and flagged read-only so a domain can be shared
between variables (and threads) during a simulation run.
"""

import numpy as np


class PointSet:
    """A domain made of explicit point locations.

    Attributes:
        centroids: Read-only (N, ndim) float array of point coordinates
    """

    def __init__(self, coords):
        """Initialize the point set.

        Args:
            coords: Array-like of shape (N, ndim) or (N,) for 1-D points

        Raises:
            ValueError: If the coordinates are not a 1-D or 2-D array
        """
        centroids = np.array(coords, dtype=float)
        if centroids.ndim == 1:
            centroids = centroids[:, np.newaxis]
        if centroids.ndim != 2:
            raise ValueError(
                f"coords must have shape (N, ndim), got {centroids.shape}"
            )
        centroids.setflags(write=False)
        self._centroids = centroids

    def __len__(self) -> int:
        return self._centroids.shape[0]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nelements={len(self)}, ndim={self.ndim})"

    @property
    def ndim(self) -> int:
        return self._centroids.shape[1]

    @property
    def centroids(self) -> np.ndarray:
        return self._centroids

    def centroid(self, location: int) -> np.ndarray:
        """Centroid of a location.

        Raises:
            IndexError: If the location is outside the domain
        """
        if not 0 <= location < len(self):
            raise IndexError(
                f"location {location} out of range for domain of size {len(self)}"
            )
        return self._centroids[location]


class CartesianGrid(PointSet):
    """Regular grid of cells, addressed in linear order (first axis fastest).

    Cell centroids sit at ``origin + (index + 0.5) * spacing`` along each axis.
    """

    def __init__(self, dims, origin=None, spacing=None):
        """Initialize the grid.

        Args:
            dims: Number of cells along each axis
            origin: Lower corner of the grid (defaults to zeros)
            spacing: Cell size along each axis (defaults to ones)

        Raises:
            ValueError: If dims/origin/spacing are inconsistent or non-positive
        """
        dims = tuple(int(d) for d in dims)
        if not dims or any(d <= 0 for d in dims):
            raise ValueError(f"dims must be positive, got {dims}")

        origin = np.zeros(len(dims)) if origin is None else np.asarray(origin, dtype=float)
        spacing = np.ones(len(dims)) if spacing is None else np.asarray(spacing, dtype=float)
        if origin.shape != (len(dims),) or spacing.shape != (len(dims),):
            raise ValueError(
                f"origin and spacing must have {len(dims)} entries, "
                f"got {origin.shape} and {spacing.shape}"
            )
        if np.any(spacing <= 0):
            raise ValueError(f"spacing must be positive, got {spacing.tolist()}")

        self.dims = dims
        self.origin = origin
        self.spacing = spacing

        axes = [origin[i] + (np.arange(n) + 0.5) * spacing[i] for i, n in enumerate(dims)]
        mesh = np.meshgrid(*axes, indexing="ij")
        coords = np.column_stack([m.ravel(order="F") for m in mesh])
        super().__init__(coords)

    def __repr__(self) -> str:
        return f"CartesianGrid(dims={self.dims})"
