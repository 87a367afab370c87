"""Per-variable preprocessing.

Resolves solver parameters, builds the bounded searcher and computes the
hard-data mapping once per problem. The resulting bundles are immutable and
shared by every realization of the run.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import structlog

from seqsim.engine.path import Path, check_path
from seqsim.model.distributions import Categorical, Degenerate, match_level
from seqsim.model.interfaces import Distribution, Estimator
from seqsim.model.kriging import OrdinaryKriging, SimpleKriging
from seqsim.model.weighting import IndicatorProportions, InverseDistanceWeighting
from seqsim.search.interfaces import BoundedSearcher
from seqsim.search.searchers import build_searcher


logger = structlog.get_logger()


@dataclass(frozen=True)
class Preprocessed:
    """Everything the simulation loop needs for one variable.

    Attributes:
        estimator: Estimator fitted at each location
        marginal: Fallback distribution
        minneighbors: Minimum neighbors for conditional simulation
        maxneighbors: Capacity of the neighbor buffer
        path: Path policy
        searcher: Bounded searcher over the domain
        mappings: Read-only location -> data row mapping (empty without data)
        levels: Category levels of a categorical variable, None otherwise
    """

    estimator: Estimator
    marginal: Distribution
    minneighbors: int
    maxneighbors: int
    path: Path
    searcher: BoundedSearcher
    mappings: Mapping[int, int]
    levels: tuple | None = None


def _check_mapping(mapping: dict[int, int], problem, variable: str) -> None:
    n = len(problem.domain)
    m = len(problem.data)
    for loc, row in mapping.items():
        if not 0 <= loc < n:
            raise ValueError(
                f"Mapping for '{variable}' targets location {loc} outside domain of size {n}"
            )
        if not 0 <= row < m:
            raise ValueError(
                f"Mapping for '{variable}' references data row {row}, table has {m} rows"
            )


def _check_value_type(variable: str, value_type: str, varparams) -> None:
    marginal = varparams.marginal
    estimator = varparams.estimator
    if value_type == "continuous":
        if isinstance(marginal, Categorical):
            raise ValueError(f"Continuous variable '{variable}' has a categorical marginal")
        if isinstance(estimator, IndicatorProportions):
            raise ValueError(
                f"Continuous variable '{variable}' cannot use an indicator estimator"
            )
    else:
        if not isinstance(marginal, (Categorical, Degenerate)):
            raise ValueError(
                f"Categorical variable '{variable}' needs a categorical marginal, "
                f"got {type(marginal).__name__}"
            )
        if isinstance(estimator, (SimpleKriging, OrdinaryKriging, InverseDistanceWeighting)):
            raise ValueError(
                f"Categorical variable '{variable}' cannot use {type(estimator).__name__}"
            )


def _category_levels(varparams) -> tuple | None:
    levels = getattr(varparams.marginal, "levels", None)
    if levels is None:
        levels = getattr(varparams.estimator, "levels", None)
    return tuple(levels) if levels is not None else None


def _check_hard_values(mapping, problem, variable: str, levels) -> None:
    vals = problem.data.column(variable)
    continuous = problem.variables[variable] == "continuous"
    for row in mapping.values():
        value = vals[row]
        if levels is not None:
            try:
                match_level(levels, value)
            except ValueError as e:
                raise ValueError(f"Hard data for '{variable}': {e}") from e
        elif continuous:
            try:
                float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"Hard data for continuous variable '{variable}' is not numeric: {value!r}"
                ) from e


def preprocess(problem, solver) -> dict[str, Preprocessed]:
    """Build the parameter bundle of every problem variable.

    Args:
        problem: SeqSimProblem
        solver: SeqSim with parameters for each problem variable

    Returns:
        Mapping from variable name to its Preprocessed bundle

    Raises:
        ValueError: If variables and solver parameters don't match, a path
            does not cover the domain, a data mapping is malformed, parameters
            do not suit the value type, or hard data matches no category level
    """
    missing = [var for var in problem.variables if var not in solver.params]
    if missing:
        raise ValueError(f"No solver parameters for variables: {', '.join(missing)}")
    unknown = [var for var in solver.params if var not in problem.variables]
    if unknown:
        raise ValueError(
            f"Solver parameters given for unknown variables: {', '.join(unknown)}"
        )

    preproc: dict[str, Preprocessed] = {}

    for var in problem.variables:
        varparams = solver.params[var]
        value_type = problem.variables[var]

        _check_value_type(var, value_type, varparams)
        levels = _category_levels(varparams) if value_type == "categorical" else None

        check_path(varparams.path, problem.domain)

        searcher = build_searcher(
            problem.domain,
            varparams.maxneighbors,
            varparams.distance,
            varparams.neighborhood,
        )

        if problem.has_data and problem.data.has_variable(var):
            mapping = varparams.mapping.map(problem.data, problem.domain, var)
            _check_mapping(mapping, problem, var)
            _check_hard_values(mapping, problem, var, levels)
        else:
            mapping = {}

        preproc[var] = Preprocessed(
            estimator=varparams.estimator,
            marginal=varparams.marginal,
            minneighbors=varparams.minneighbors,
            maxneighbors=varparams.maxneighbors,
            path=varparams.path,
            searcher=searcher,
            mappings=MappingProxyType(dict(mapping)),
            levels=levels,
        )

        logger.info(
            "variable_preprocessed",
            variable=var,
            searcher=repr(searcher),
            hard_data=len(mapping),
        )

    return preproc
