"""Sequential simulation solver parameters."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from seqsim.data.mapping import NearestMapping
from seqsim.engine.path import LinearPath
from seqsim.search.distances import Distance
from seqsim.search.searchers import BallNeighborhood


class VariableParams(BaseModel):
    """Solver parameters for one variable.

    Attributes:
        estimator: Estimator fitted to each neighborhood
        marginal: Fallback distribution when the neighborhood is too small
            or fitting fails
        path: Simulation path policy
        minneighbors: Minimum number of neighbors for conditional simulation
        maxneighbors: Maximum number of neighbors searched per location
        neighborhood: Optional search ball
        distance: Metric used to rank neighbors
        mapping: Method assigning hard data to locations
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    estimator: Any
    marginal: Any
    path: Any = Field(default_factory=LinearPath)
    minneighbors: int = Field(default=1, ge=0)
    maxneighbors: int = Field(default=10, ge=0)
    neighborhood: BallNeighborhood | None = None
    distance: Distance = Field(default_factory=Distance)
    mapping: Any = Field(default_factory=NearestMapping)

    @model_validator(mode="after")
    def validate_neighbor_bounds(self):
        """Ensure minneighbors <= maxneighbors."""
        if self.minneighbors > self.maxneighbors:
            raise ValueError(
                f"minneighbors ({self.minneighbors}) must not exceed "
                f"maxneighbors ({self.maxneighbors})"
            )
        return self


class SeqSim:
    """Sequential simulation solver.

    For each location along the path, up to ``maxneighbors`` previously
    simulated neighbors are used to fit the estimator. When fewer than
    ``minneighbors`` are found, or the fit fails, the value is drawn from
    the marginal distribution instead.
    """

    def __init__(self, params: dict[str, VariableParams], seed: int | None = 0):
        """Initialize the solver.

        Args:
            params: Mapping from variable name to its parameters
            seed: Seed of the random source shared by the run
        """
        if not params:
            raise ValueError("SeqSim needs parameters for at least one variable")
        self.params = dict(params)
        self.seed = seed

    def __repr__(self) -> str:
        return f"SeqSim(variables={list(self.params)}, seed={self.seed})"
