"""Pydantic configuration schemas.

Defines validated data structures for the domain, hard data and the
per-variable solver parameters.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class DistributionConfig(BaseModel):
    """A named distribution.

    Attributes:
        name: scipy.stats distribution name, or "categorical"
        params: Keyword parameters (e.g. loc/scale, levels/probs)
    """

    name: str = Field(..., description="Distribution name")
    params: dict[str, Any] = Field(default_factory=dict)


class EstimatorConfig(BaseModel):
    """A named estimator with its parameters."""

    name: str = Field(..., description="Estimator name")
    params: dict[str, Any] = Field(default_factory=dict)


class PathConfig(BaseModel):
    """Simulation path policy."""

    name: Literal["linear", "random", "shifted"] = "linear"
    seed: int = Field(default=0, description="Seed of a random path")
    offset: int = Field(default=0, description="Start of a shifted path")


class NeighborhoodConfig(BaseModel):
    """Spherical search neighborhood."""

    radius: float = Field(..., gt=0, description="Search radius (must be > 0)")


class DistanceConfig(BaseModel):
    """Distance used to rank neighbors."""

    name: str = "euclidean"
    p: float | None = Field(default=None, ge=1, description="Minkowski order")


class MappingConfig(BaseModel):
    """Hard data mapping method."""

    name: Literal["nearest", "exact"] = "nearest"
    tol: float = Field(default=1e-9, ge=0, description="Tolerance of exact mapping")


class VariableConfig(BaseModel):
    """Solver parameters for a single variable.

    Attributes:
        type: Value type of the variable
        estimator: Estimator fitted to each neighborhood
        marginal: Fallback distribution
        path: Simulation path
        minneighbors: Minimum neighbors for conditional simulation
        maxneighbors: Maximum neighbors searched
        neighborhood: Optional search ball
        distance: Neighbor distance
        mapping: Data mapping method
    """

    type: Literal["continuous", "categorical"] = "continuous"
    estimator: EstimatorConfig
    marginal: DistributionConfig
    path: PathConfig = Field(default_factory=PathConfig)
    minneighbors: int = Field(default=1, ge=0)
    maxneighbors: int = Field(default=10, ge=0)
    neighborhood: NeighborhoodConfig | None = None
    distance: DistanceConfig = Field(default_factory=DistanceConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)

    @model_validator(mode="after")
    def validate_neighbor_bounds(self):
        """Ensure minneighbors <= maxneighbors."""
        if self.minneighbors > self.maxneighbors:
            raise ValueError(
                f"minneighbors ({self.minneighbors}) must not exceed "
                f"maxneighbors ({self.maxneighbors})"
            )
        return self


class GridConfig(BaseModel):
    """Regular grid domain."""

    dims: list[int] = Field(..., min_length=1)
    origin: list[float] | None = None
    spacing: list[float] | None = None

    @field_validator("dims")
    @classmethod
    def validate_dims(cls, dims):
        """Ensure every grid dimension is positive."""
        if any(d <= 0 for d in dims):
            raise ValueError(f"Grid dims must be positive, got {dims}")
        return dims


class DomainConfig(BaseModel):
    """Simulation domain: either a grid or explicit points."""

    grid: GridConfig | None = None
    points: list[list[float]] | None = None

    @model_validator(mode="after")
    def validate_exactly_one(self):
        """Ensure exactly one domain kind is given."""
        if (self.grid is None) == (self.points is None):
            raise ValueError("Domain must define exactly one of 'grid' or 'points'")
        return self


class DataConfig(BaseModel):
    """Hard data CSV file."""

    path: str = Field(..., description="CSV path, relative to the config file")
    coordinates: list[str] = Field(..., min_length=1)


class SimulationConfig(BaseModel):
    """Top-level simulation configuration.

    Attributes:
        seed: Seed of the random source shared by the run
        nreals: Number of realizations
        domain: Simulation domain
        data: Optional hard data
        variables: Mapping from variable name to solver parameters
    """

    seed: int = Field(default=0, description="Random seed")
    nreals: int = Field(default=1, gt=0, description="Number of realizations")
    domain: DomainConfig
    data: DataConfig | None = None
    variables: dict[str, VariableConfig] = Field(..., min_length=1)
