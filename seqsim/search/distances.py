"""Named distance metrics backed by scipy.spatial.distance."""

from dataclasses import dataclass

import numpy as np
from scipy.spatial.distance import cdist


DISTANCE_REGISTRY: tuple[str, ...] = (
    "euclidean",
    "sqeuclidean",
    "cityblock",
    "chebyshev",
    "minkowski",
)


@dataclass(frozen=True)
class Distance:
    """A distance metric between coordinate arrays.

    Attributes:
        name: Metric name (see DISTANCE_REGISTRY)
        p: Order of the Minkowski metric, only used for "minkowski"
    """

    name: str = "euclidean"
    p: float | None = None

    def __post_init__(self):
        if self.name not in DISTANCE_REGISTRY:
            available = ", ".join(DISTANCE_REGISTRY)
            raise ValueError(
                f"Unknown distance '{self.name}'. Available distances: {available}"
            )
        if self.name == "minkowski" and (self.p is None or self.p < 1):
            raise ValueError(f"minkowski distance requires p >= 1, got {self.p}")

    def pairwise(self, x, y) -> np.ndarray:
        """Distances between every row of x and every row of y.

        Returns:
            Array of shape (len(x), len(y))
        """
        x = np.atleast_2d(np.asarray(x, dtype=float))
        y = np.atleast_2d(np.asarray(y, dtype=float))
        if x.shape[0] == 0 or y.shape[0] == 0:
            return np.empty((x.shape[0], y.shape[0]))
        if self.name == "minkowski":
            return cdist(x, y, metric="minkowski", p=self.p)
        return cdist(x, y, metric=self.name)

    def __call__(self, a, b) -> float:
        return float(self.pairwise(a, b)[0, 0])
