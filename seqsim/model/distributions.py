"""Distributions used as marginals and conditionals.

Numeric marginals are plain scipy.stats frozen distributions. This module
adds the two shapes scipy does not provide directly (a categorical over
arbitrary labels and a point mass) plus the single sampling entry point.
"""

from typing import Any

import numpy as np
import scipy.stats


class Categorical:
    """Discrete distribution over arbitrary labels."""

    def __init__(self, levels, probs):
        """Initialize the distribution.

        Args:
            levels: Category labels
            probs: Non-negative weights, normalized internally

        Raises:
            ValueError: If weights are negative, all zero or mismatched
        """
        levels = list(levels)
        probs = np.asarray(probs, dtype=float)
        if probs.shape != (len(levels),):
            raise ValueError(
                f"Got {probs.size} probabilities for {len(levels)} levels"
            )
        if np.any(probs < 0) or probs.sum() <= 0:
            raise ValueError(f"probs must be non-negative with positive sum, got {probs}")

        self.levels = levels
        self.probs = probs / probs.sum()

    def __repr__(self) -> str:
        pairs = ", ".join(f"{lvl!r}: {p:.3f}" for lvl, p in zip(self.levels, self.probs))
        return f"Categorical({{{pairs}}})"

    def pmf(self, level) -> float:
        if level not in self.levels:
            return 0.0
        return float(self.probs[self.levels.index(level)])

    def rvs(self, random_state=None):
        rng = np.random.default_rng(random_state)
        return self.levels[rng.choice(len(self.levels), p=self.probs)]


class Degenerate:
    """Point mass at a single value."""

    def __init__(self, value):
        self.value = value

    def __repr__(self) -> str:
        return f"Degenerate({self.value!r})"

    def rvs(self, random_state=None):
        return self.value


def sample(distribution, rng: np.random.Generator) -> Any:
    """Draw one value from a distribution using the given generator.

    Args:
        distribution: Object with an ``rvs(random_state=...)`` method
        rng: Random generator, advanced deterministically by the draw

    Returns:
        A scalar value (Python or NumPy scalar, or a category label)
    """
    value = distribution.rvs(random_state=rng)
    if isinstance(value, np.ndarray) and value.ndim == 0:
        return value[()]
    return value


def get_distribution(name: str, params: dict[str, Any] | None = None):
    """Build a marginal distribution from a name and parameters.

    ``"categorical"`` expects ``levels`` and ``probs``; any other name is
    looked up among scipy.stats continuous and discrete distributions
    (e.g. ``norm`` with ``loc``/``scale``).

    Raises:
        ValueError: If the name is unknown or the parameters are invalid
    """
    params = dict(params or {})
    if name == "categorical":
        return Categorical(params.get("levels", []), params.get("probs", []))
    if name == "degenerate":
        return Degenerate(params["value"])

    family = getattr(scipy.stats, name, None)
    if not isinstance(family, (scipy.stats.rv_continuous, scipy.stats.rv_discrete)):
        raise ValueError(f"Unknown distribution '{name}'")

    try:
        return family(**params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for distribution '{name}': {e}") from e


def match_level(levels, value):
    """Return the level equal to a raw value.

    Lets hard data read as floats (``1.0``) resolve to integer codes (``1``).

    Raises:
        ValueError: If no level matches the value
    """
    for level in levels:
        if level == value:
            return level
    raise ValueError(f"{value!r} matches none of the levels {list(levels)}")
