"""Kriging estimators producing Gaussian conditional distributions.

Simple kriging assumes a known mean; ordinary kriging estimates it locally
through a Lagrange multiplier. Both solve the kriging system once per fit
and reuse the factorization for prediction. A system that cannot be solved
reliably (e.g. duplicate neighbors without nugget) is reported through
``status=False`` so the caller can fall back to the marginal.
"""

import numpy as np
import scipy.stats
from scipy import linalg

from seqsim.model.distributions import Degenerate
from seqsim.model.interfaces import LocalDataset
from seqsim.model.variograms import Variogram
from seqsim.search.distances import Distance


# Above this condition number the kriging system is treated as singular
MAX_CONDITION = 1e12


class FittedKriging:
    """Kriging system factorized for one local dataset."""

    def __init__(self, estimator, dataset: LocalDataset, factor=None):
        self.estimator = estimator
        self.dataset = dataset
        self.factor = factor
        self.status = factor is not None

    def predictprob(self, variable: str, position):
        """Conditional normal distribution at a position.

        Raises:
            KeyError: If the variable differs from the fitted one
            RuntimeError: If called on a failed fit
        """
        if variable != self.dataset.variable:
            raise KeyError(
                f"Model fitted for '{self.dataset.variable}', not '{variable}'"
            )
        if not self.status:
            raise RuntimeError("Cannot predict from a failed kriging fit")

        mean, variance = self.estimator.estimate(self, position)
        if variance <= np.finfo(float).eps * self.estimator.variogram.total_sill:
            return Degenerate(mean)
        return scipy.stats.norm(loc=mean, scale=np.sqrt(variance))


class _Kriging:
    def __init__(self, variogram: Variogram, distance: Distance | None = None):
        self.variogram = variogram
        self.distance = distance or Distance()

    def lhs(self, positions: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def fit(self, dataset: LocalDataset) -> FittedKriging:
        """Factorize the kriging system for the dataset."""
        if len(dataset) == 0:
            return FittedKriging(self, dataset)

        values = np.asarray(dataset.values, dtype=float)
        if not np.all(np.isfinite(values)):
            return FittedKriging(self, dataset)

        A = self.lhs(np.asarray(dataset.positions, dtype=float))
        if not np.all(np.isfinite(A)) or np.linalg.cond(A) > MAX_CONDITION:
            return FittedKriging(self, dataset)

        numeric = LocalDataset(dataset.variable, dataset.positions, values)
        return FittedKriging(self, numeric, linalg.lu_factor(A))

    def covariances_to(self, fitted: FittedKriging, position) -> np.ndarray:
        h = self.distance.pairwise(fitted.dataset.positions, position)[:, 0]
        return self.variogram.covariance(h)


class SimpleKriging(_Kriging):
    """Simple kriging with a known global mean."""

    def __init__(self, variogram: Variogram, mean: float = 0.0, distance: Distance | None = None):
        super().__init__(variogram, distance)
        self.mean = mean

    def __repr__(self) -> str:
        return f"SimpleKriging(variogram={self.variogram}, mean={self.mean})"

    def lhs(self, positions: np.ndarray) -> np.ndarray:
        return self.variogram.covariance(self.distance.pairwise(positions, positions))

    def estimate(self, fitted: FittedKriging, position) -> tuple[float, float]:
        """Kriging mean and variance at a position."""
        c0 = self.covariances_to(fitted, position)
        weights = linalg.lu_solve(fitted.factor, c0)
        residuals = fitted.dataset.values - self.mean
        mean = self.mean + float(weights @ residuals)
        variance = self.variogram.total_sill - float(weights @ c0)
        return mean, max(variance, 0.0)


class OrdinaryKriging(_Kriging):
    """Ordinary kriging with an unknown, locally constant mean."""

    def __repr__(self) -> str:
        return f"OrdinaryKriging(variogram={self.variogram})"

    def lhs(self, positions: np.ndarray) -> np.ndarray:
        k = positions.shape[0]
        A = np.ones((k + 1, k + 1))
        A[:k, :k] = self.variogram.covariance(self.distance.pairwise(positions, positions))
        A[k, k] = 0.0
        return A

    def estimate(self, fitted: FittedKriging, position) -> tuple[float, float]:
        """Kriging mean and variance at a position."""
        c0 = self.covariances_to(fitted, position)
        b = np.append(c0, 1.0)
        solution = linalg.lu_solve(fitted.factor, b)
        weights, multiplier = solution[:-1], solution[-1]
        mean = float(weights @ fitted.dataset.values)
        variance = self.variogram.total_sill - float(weights @ c0) - multiplier
        return mean, max(variance, 0.0)
