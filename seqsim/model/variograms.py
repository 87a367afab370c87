"""Variogram models for kriging estimators.

All models reach ``nugget + sill`` at the practical range ``range``;
exponential and gaussian models use the usual factor-of-3 scaling.
"""

from dataclasses import dataclass

import numpy as np


VARIOGRAM_MODELS: tuple[str, ...] = ("spherical", "exponential", "gaussian")


@dataclass(frozen=True)
class Variogram:
    """Isotropic variogram.

    Attributes:
        model: One of VARIOGRAM_MODELS
        range: Practical range (distance at which correlation vanishes)
        sill: Partial sill
        nugget: Nugget effect (discontinuity at the origin)
    """

    model: str = "spherical"
    range: float = 1.0
    sill: float = 1.0
    nugget: float = 0.0

    def __post_init__(self):
        """Validate parameter ranges."""
        if self.model not in VARIOGRAM_MODELS:
            available = ", ".join(VARIOGRAM_MODELS)
            raise ValueError(f"Unknown variogram model '{self.model}'. Available: {available}")
        if self.range <= 0:
            raise ValueError(f"range must be positive, got {self.range}")
        if self.sill < 0:
            raise ValueError(f"sill must be non-negative, got {self.sill}")
        if self.nugget < 0:
            raise ValueError(f"nugget must be non-negative, got {self.nugget}")

    @property
    def total_sill(self) -> float:
        return self.nugget + self.sill

    def evaluate(self, h) -> np.ndarray:
        """Variogram value gamma(h) at lag distances h."""
        h = np.asarray(h, dtype=float)
        hr = h / self.range

        if self.model == "spherical":
            structure = np.where(hr < 1.0, 1.5 * hr - 0.5 * hr**3, 1.0)
        elif self.model == "exponential":
            structure = 1.0 - np.exp(-3.0 * hr)
        else:
            structure = 1.0 - np.exp(-3.0 * hr**2)

        return np.where(h > 0, self.nugget + self.sill * structure, 0.0)

    def covariance(self, h) -> np.ndarray:
        """Covariance C(h) = total_sill - gamma(h)."""
        return self.total_sill - self.evaluate(h)
