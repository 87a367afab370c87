"""Config-backed providers for problems and solvers.

Turn a validated SimulationConfig into the runtime objects the engine
consumes.
"""

from pathlib import Path

from seqsim.config.schema import SimulationConfig, VariableConfig
from seqsim.data.domain import CartesianGrid, PointSet
from seqsim.data.mapping import get_mapping
from seqsim.data.table import GeoTable
from seqsim.engine.path import get_path
from seqsim.engine.problem import SeqSimProblem
from seqsim.engine.solver import SeqSim, VariableParams
from seqsim.model import build_estimator
from seqsim.model.distributions import get_distribution
from seqsim.search.distances import Distance
from seqsim.search.searchers import BallNeighborhood


class ConfigProblemProvider:
    """Provides the simulation problem from configuration."""

    def __init__(self, config: SimulationConfig, base_dir: str | Path = "."):
        """Initialize with simulation configuration.

        Args:
            config: Validated SimulationConfig
            base_dir: Directory against which relative data paths are resolved
        """
        self.config = config
        self.base_dir = Path(base_dir)

    def get_domain(self):
        """Build the simulation domain."""
        domain = self.config.domain
        if domain.grid is not None:
            return CartesianGrid(domain.grid.dims, domain.grid.origin, domain.grid.spacing)
        return PointSet(domain.points)

    def get_data(self) -> GeoTable | None:
        """Load the hard data table, if configured."""
        if self.config.data is None:
            return None
        path = Path(self.config.data.path)
        if not path.is_absolute():
            path = self.base_dir / path
        return GeoTable.from_csv(path, self.config.data.coordinates)

    def get_problem(self, nreals: int | None = None) -> SeqSimProblem:
        """Build the simulation problem.

        Args:
            nreals: Number of realizations (overrides config)
        """
        return SeqSimProblem(
            domain=self.get_domain(),
            variables={name: var.type for name, var in self.config.variables.items()},
            data=self.get_data(),
            nreals=nreals if nreals is not None else self.config.nreals,
        )


def build_variable_params(varconfig: VariableConfig) -> VariableParams:
    """Convert a variable configuration into solver parameters."""
    distance = Distance(varconfig.distance.name, varconfig.distance.p)

    if varconfig.path.name == "random":
        path = get_path("random", seed=varconfig.path.seed)
    elif varconfig.path.name == "shifted":
        path = get_path("shifted", offset=varconfig.path.offset)
    else:
        path = get_path("linear")

    if varconfig.mapping.name == "exact":
        mapping = get_mapping("exact", tol=varconfig.mapping.tol)
    else:
        mapping = get_mapping("nearest")

    neighborhood = None
    if varconfig.neighborhood is not None:
        neighborhood = BallNeighborhood(varconfig.neighborhood.radius)

    return VariableParams(
        estimator=build_estimator(
            varconfig.estimator.name, varconfig.estimator.params, distance
        ),
        marginal=get_distribution(varconfig.marginal.name, varconfig.marginal.params),
        path=path,
        minneighbors=varconfig.minneighbors,
        maxneighbors=varconfig.maxneighbors,
        neighborhood=neighborhood,
        distance=distance,
        mapping=mapping,
    )


class ConfigSolverProvider:
    """Provides the SeqSim solver from configuration."""

    def __init__(self, config: SimulationConfig):
        self.config = config

    def get_solver(self, seed: int | None = None) -> SeqSim:
        """Build the solver.

        Args:
            seed: Random seed (overrides config)
        """
        params = {
            name: build_variable_params(varconfig)
            for name, varconfig in self.config.variables.items()
        }
        return SeqSim(params, seed=seed if seed is not None else self.config.seed)
