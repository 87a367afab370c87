"""Inverse-distance-weighting estimators.

Cheap alternatives to kriging: a numeric variant yielding a normal
conditional, and an indicator variant for categorical variables yielding
weighted level proportions.
"""

import numpy as np
import pandas as pd
import scipy.stats

from seqsim.model.distributions import Categorical, Degenerate
from seqsim.model.interfaces import LocalDataset
from seqsim.search.distances import Distance


def idw_weights(distances: np.ndarray, power: float) -> np.ndarray:
    """Normalized inverse-distance weights.

    Coincident points (zero distance) take all the weight, shared equally.
    """
    coincident = distances == 0
    if np.any(coincident):
        weights = coincident.astype(float)
    else:
        weights = 1.0 / distances**power
    return weights / weights.sum()


class FittedWeighting:
    """Local dataset held by a weighting estimator."""

    def __init__(self, estimator, dataset: LocalDataset, status: bool):
        self.estimator = estimator
        self.dataset = dataset
        self.status = status

    def predictprob(self, variable: str, position):
        if variable != self.dataset.variable:
            raise KeyError(
                f"Model fitted for '{self.dataset.variable}', not '{variable}'"
            )
        if not self.status:
            raise RuntimeError("Cannot predict from a failed fit")

        h = self.estimator.distance.pairwise(self.dataset.positions, position)[:, 0]
        weights = idw_weights(h, self.estimator.power)
        return self.estimator.conditional(weights, self.dataset.values)


class InverseDistanceWeighting:
    """Normal conditional centred on the IDW mean of the neighbors.

    The spread is the weighted standard deviation of neighbor values; a
    zero spread gives a point mass at the mean.
    """

    def __init__(self, power: float = 2.0, distance: Distance | None = None):
        if power <= 0:
            raise ValueError(f"power must be positive, got {power}")
        self.power = power
        self.distance = distance or Distance()

    def __repr__(self) -> str:
        return f"InverseDistanceWeighting(power={self.power})"

    def fit(self, dataset: LocalDataset) -> FittedWeighting:
        values = np.asarray(dataset.values, dtype=float)
        ok = len(dataset) > 0 and bool(np.all(np.isfinite(values)))
        numeric = LocalDataset(dataset.variable, dataset.positions, values)
        return FittedWeighting(self, numeric, ok)

    def conditional(self, weights: np.ndarray, values: np.ndarray):
        mean = float(weights @ values)
        spread = float(np.sqrt(weights @ (values - mean) ** 2))
        if spread == 0:
            return Degenerate(mean)
        return scipy.stats.norm(loc=mean, scale=spread)


class IndicatorProportions:
    """Categorical conditional from inverse-distance-weighted level counts.

    Fitting fails when there are no neighbors, or when ``levels`` is given
    and a neighbor holds a label outside it.
    """

    def __init__(self, levels=None, power: float = 1.0, distance: Distance | None = None):
        if power <= 0:
            raise ValueError(f"power must be positive, got {power}")
        self.levels = list(levels) if levels is not None else None
        self.power = power
        self.distance = distance or Distance()

    def __repr__(self) -> str:
        return f"IndicatorProportions(levels={self.levels}, power={self.power})"

    def fit(self, dataset: LocalDataset) -> FittedWeighting:
        ok = len(dataset) > 0
        if ok and self.levels is not None:
            ok = all(value in self.levels for value in dataset.values)
        return FittedWeighting(self, dataset, ok)

    def conditional(self, weights: np.ndarray, values: np.ndarray) -> Categorical:
        levels = self.levels if self.levels is not None else list(pd.unique(values))
        probs = [weights[values == level].sum() for level in levels]
        return Categorical(levels, probs)
