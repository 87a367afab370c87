"""Protocol definitions for estimators and distributions.

An estimator is fitted to the local neighborhood of a location and yields
a conditional distribution there. The simulation loop never inspects fitted
models beyond their ``status`` flag.
"""

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np


@dataclass(frozen=True)
class LocalDataset:
    """Previously simulated values around a location.

    Attributes:
        variable: Name of the simulated variable
        positions: (k, ndim) centroids of the neighbors
        values: (k,) realization values at the neighbors
    """

    variable: str
    positions: np.ndarray
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)


class Distribution(Protocol):
    """Anything that can draw a single value from a random generator.

    scipy.stats frozen distributions satisfy this protocol.
    """

    def rvs(self, random_state=None) -> Any:
        ...


class FittedModel(Protocol):
    """Result of fitting an estimator to a local dataset."""

    status: bool

    def predictprob(self, variable: str, position: np.ndarray) -> Distribution:
        """Conditional distribution of a variable at a position."""
        ...


class Estimator(Protocol):
    """Estimator family selected at configuration time."""

    def fit(self, dataset: LocalDataset) -> FittedModel:
        """Fit to a local dataset; failure is reported via ``status``."""
        ...
