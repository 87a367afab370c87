"""Estimators, variograms and distributions."""

from typing import Any

from seqsim.model.kriging import OrdinaryKriging, SimpleKriging
from seqsim.model.variograms import Variogram
from seqsim.model.weighting import IndicatorProportions, InverseDistanceWeighting
from seqsim.search.distances import Distance

# Estimator registry for string-based lookup
ESTIMATOR_REGISTRY: dict[str, type] = {
    "simple_kriging": SimpleKriging,
    "ordinary_kriging": OrdinaryKriging,
    "idw": InverseDistanceWeighting,
    "indicator_proportions": IndicatorProportions,
}


def get_estimator(estimator_name: str):
    """Get an estimator class by name.

    Args:
        estimator_name: Name of the estimator (e.g., "simple_kriging")

    Returns:
        Estimator class from registry

    Raises:
        ValueError: If estimator name not found in registry
    """
    if estimator_name not in ESTIMATOR_REGISTRY:
        available = ", ".join(ESTIMATOR_REGISTRY.keys())
        raise ValueError(
            f"Unknown estimator '{estimator_name}'. Available estimators: {available}"
        )
    return ESTIMATOR_REGISTRY[estimator_name]


def build_estimator(
    estimator_name: str,
    params: dict[str, Any] | None = None,
    distance: Distance | None = None,
):
    """Instantiate an estimator from configuration parameters.

    A ``variogram`` entry given as a mapping is converted to a Variogram.
    """
    params = dict(params or {})
    if isinstance(params.get("variogram"), dict):
        params["variogram"] = Variogram(**params["variogram"])

    EstimatorClass = get_estimator(estimator_name)
    try:
        return EstimatorClass(distance=distance, **params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for estimator '{estimator_name}': {e}") from e
