"""Sequential simulation engine.

Core simulation logic: deterministic given the problem, the solver and
the seed, free of I/O, with estimators and searchers injected through the
preprocessed bundles.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
import structlog
from pydantic import BaseModel, ConfigDict

from seqsim.engine.errors import SimulationError
from seqsim.engine.metrics import compute_proportions, compute_summary_metrics
from seqsim.engine.preprocess import Preprocessed, preprocess
from seqsim.model.distributions import match_level, sample
from seqsim.model.interfaces import LocalDataset


logger = structlog.get_logger()


@dataclass
class LoopStats:
    """How each location of one variable obtained its value."""

    hard_data: int = 0
    conditional: int = 0
    marginal_few_neighbors: int = 0
    marginal_fit_failed: int = 0

    @property
    def total(self) -> int:
        return (
            self.hard_data
            + self.conditional
            + self.marginal_few_neighbors
            + self.marginal_fit_failed
        )


class SimulationResult(BaseModel):
    """Container for simulation results.

    Attributes:
        realizations: {variable: [realization_0, realization_1, ...]},
            each realization an array indexed by location
        summary: Nested dict {variable: {metric: value}}
        stats: Nested dict {variable: [loop statistics per realization]}
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    realizations: dict[str, list[np.ndarray]]
    summary: dict[str, dict[str, float]]
    stats: dict[str, list[dict[str, int]]]

    @property
    def nreals(self) -> int:
        return len(next(iter(self.realizations.values())))

    def to_frame(self, domain=None) -> pd.DataFrame:
        """Tidy table with one row per (realization, location).

        Args:
            domain: Optional domain whose centroids are added as x0, x1, ...

        Returns:
            DataFrame with columns [realization, location, (x0, ...), variables...]
        """
        frames = []
        for r in range(self.nreals):
            columns = {var: reals[r] for var, reals in self.realizations.items()}
            frame = pd.DataFrame(columns)
            frame.insert(0, "location", np.arange(len(frame)))
            frame.insert(0, "realization", r)
            if domain is not None:
                for axis in range(domain.ndim):
                    frame.insert(2 + axis, f"x{axis}", domain.centroids[:, axis])
            frames.append(frame)
        return pd.concat(frames, ignore_index=True)


def simulate_variable(
    problem,
    variable: str,
    preproc: Preprocessed,
    rng: np.random.Generator,
) -> tuple[np.ndarray, LoopStats]:
    """Simulate one realization of a variable along its path.

    Hard data are copied first and never re-simulated. Every other location
    is visited in path order: neighbors are searched among already simulated
    locations only, and the value is drawn from the conditional distribution
    of the fitted estimator, or from the marginal when fewer than
    ``minneighbors`` neighbors exist or the fit fails.

    Args:
        problem: SeqSimProblem
        variable: Variable to simulate
        preproc: Preprocessed bundle of the variable
        rng: Random source, advanced by each draw

    Returns:
        Tuple of (realization array indexed by location, loop statistics)

    Raises:
        SimulationError: If a searcher or estimator fails unexpectedly
    """
    domain = problem.domain
    nelements = len(domain)
    categorical = problem.variables[variable] == "categorical"

    # pre-allocate memory for result
    if categorical:
        realization = np.full(nelements, None, dtype=object)
    else:
        realization = np.full(nelements, np.nan)

    # pre-allocate memory for neighbors
    neighbors = np.empty(preproc.maxneighbors, dtype=np.intp)

    # keep track of simulated locations
    simulated = np.zeros(nelements, dtype=bool)
    stats = LoopStats()

    if preproc.mappings:
        vals = problem.data.column(variable)
        for loc, datloc in preproc.mappings.items():
            value = vals[datloc]
            if preproc.levels is not None:
                value = match_level(preproc.levels, value)
            realization[loc] = value
            simulated[loc] = True
        stats.hard_data = len(preproc.mappings)

    centroids = domain.centroids

    for location in preproc.path.traverse(domain):
        if simulated[location]:
            continue

        position = domain.centroid(location)

        try:
            # find neighbors with previously simulated values
            nneigh = preproc.searcher.search(position, simulated, neighbors)

            if nneigh < preproc.minneighbors:
                value = sample(preproc.marginal, rng)
                stats.marginal_few_neighbors += 1
            else:
                nview = neighbors[:nneigh]
                dataset = LocalDataset(
                    variable=variable,
                    positions=centroids[nview],
                    values=realization[nview],
                )

                fitted = preproc.estimator.fit(dataset)

                if fitted.status:
                    conditional = fitted.predictprob(variable, position)
                    value = sample(conditional, rng)
                    stats.conditional += 1
                else:
                    value = sample(preproc.marginal, rng)
                    stats.marginal_fit_failed += 1

            realization[location] = value
        except Exception as e:
            raise SimulationError(variable, location, str(e)) from e

        # mark location as simulated and continue
        simulated[location] = True

    if not simulated.all():
        raise SimulationError(
            variable, None, f"{int((~simulated).sum())} locations left unsimulated"
        )

    return realization, stats


def solve_single(
    problem,
    preproc: dict[str, Preprocessed],
    rng: np.random.Generator,
) -> tuple[dict[str, np.ndarray], dict[str, LoopStats]]:
    """Simulate one realization of every variable, sharing one random source.

    Variables are simulated in problem order, so the random source is
    consumed in a reproducible order.
    """
    reals = {}
    stats = {}
    for var in problem.variables:
        reals[var], stats[var] = simulate_variable(problem, var, preproc[var], rng)
        logger.info("variable_simulated", variable=var, **asdict(stats[var]))
    return reals, stats


def solve_single_parallel(
    problem,
    preproc: dict[str, Preprocessed],
    seeds: list[np.random.SeedSequence],
) -> tuple[dict[str, np.ndarray], dict[str, LoopStats]]:
    """Simulate one realization of every variable concurrently.

    Each variable draws from its own generator seeded by ``seeds`` (one per
    variable, in problem order), so results don't depend on scheduling.
    If any variable fails, the exception propagates and nothing is returned.
    """
    variables = list(problem.variables)
    with ThreadPoolExecutor(max_workers=len(variables)) as executor:
        futures = {
            var: executor.submit(
                simulate_variable, problem, var, preproc[var], np.random.default_rng(seed)
            )
            for var, seed in zip(variables, seeds)
        }
        outcomes = {var: future.result() for var, future in futures.items()}

    reals = {var: outcome[0] for var, outcome in outcomes.items()}
    stats = {var: outcome[1] for var, outcome in outcomes.items()}
    for var in variables:
        logger.info("variable_simulated", variable=var, **asdict(stats[var]))
    return reals, stats


def solve(problem, solver, parallel: bool = False) -> SimulationResult:
    """Run sequential simulation for all variables and realizations.

    Sequential mode uses a single generator seeded with ``solver.seed`` and
    consumed realization by realization, variable by variable. Parallel mode
    spawns an independent sub-stream per (realization, variable) from the
    same seed; it is reproducible too, but yields different values than
    sequential mode.

    Args:
        problem: SeqSimProblem
        solver: SeqSim
        parallel: Simulate variables of a realization in separate threads

    Returns:
        SimulationResult with realizations, summaries and loop statistics

    Raises:
        ValueError: If preprocessing detects a precondition violation
        SimulationError: If a collaborator fails during the simulation loop
    """
    preproc = preprocess(problem, solver)
    logger.info(
        "simulation_started",
        variables=list(problem.variables),
        nreals=problem.nreals,
        nelements=len(problem.domain),
        seed=solver.seed,
        parallel=parallel,
    )

    realizations: dict[str, list[np.ndarray]] = {var: [] for var in problem.variables}
    stats: dict[str, list[dict[str, int]]] = {var: [] for var in problem.variables}

    if parallel:
        children = np.random.SeedSequence(solver.seed).spawn(problem.nreals)
    else:
        rng = np.random.default_rng(solver.seed)

    for r in range(problem.nreals):
        if parallel:
            seeds = children[r].spawn(len(problem.variables))
            reals, rstats = solve_single_parallel(problem, preproc, seeds)
        else:
            reals, rstats = solve_single(problem, preproc, rng)

        for var in problem.variables:
            realizations[var].append(reals[var])
            stats[var].append(asdict(rstats[var]))

    summary = {}
    for var, vtype in problem.variables.items():
        pooled = np.concatenate(realizations[var])
        if vtype == "categorical":
            summary[var] = compute_proportions(pooled)
        else:
            summary[var] = compute_summary_metrics(pooled)

    logger.info("simulation_complete", nreals=problem.nreals)

    return SimulationResult(realizations=realizations, summary=summary, stats=stats)
