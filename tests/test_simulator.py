"""Tests for the sequential simulation loop."""

from types import MappingProxyType

import numpy as np
import pytest
import scipy.stats

from seqsim.data.domain import CartesianGrid, PointSet
from seqsim.data.table import GeoTable
from seqsim.engine.errors import SimulationError
from seqsim.engine.path import LinearPath, RandomPath
from seqsim.engine.preprocess import Preprocessed
from seqsim.engine.problem import SeqSimProblem
from seqsim.engine import simulator
from seqsim.engine.simulator import simulate_variable, solve
from seqsim.engine.solver import SeqSim, VariableParams
from seqsim.model.distributions import Categorical, Degenerate
from seqsim.model.kriging import SimpleKriging
from seqsim.model.variograms import Variogram
from seqsim.model.weighting import IndicatorProportions
from seqsim.search.searchers import KNearestSearch


MARGINAL_VALUE = -1.0
CONDITIONAL_VALUE = 1.0


class StubFitted:
    def __init__(self, status: bool, value):
        self.status = status
        self.value = value

    def predictprob(self, variable, position):
        return Degenerate(self.value)


class StubEstimator:
    """Records every dataset it is fitted to."""

    def __init__(self, status: bool = True, value=CONDITIONAL_VALUE):
        self.status = status
        self.value = value
        self.datasets = []

    def fit(self, dataset):
        self.datasets.append(dataset)
        return StubFitted(self.status, self.value)


class FailingEstimator:
    def fit(self, dataset):
        raise RuntimeError("degenerate geometry")


class RecordingSearcher:
    """Wraps a searcher and records masks and results of each query."""

    def __init__(self, searcher):
        self.searcher = searcher
        self.maxneighbors = searcher.maxneighbors
        self.positions = []
        self.masks = []
        self.results = []

    def search(self, position, mask, out):
        self.positions.append(np.array(position))
        self.masks.append(np.array(mask))
        k = self.searcher.search(position, mask, out)
        self.results.append(out[:k].copy())
        return k


def make_bundle(domain, estimator, minneighbors, maxneighbors, path=None, mappings=None):
    return Preprocessed(
        estimator=estimator,
        marginal=Degenerate(MARGINAL_VALUE),
        minneighbors=minneighbors,
        maxneighbors=maxneighbors,
        path=path or LinearPath(),
        searcher=RecordingSearcher(KNearestSearch(domain, maxneighbors)),
        mappings=MappingProxyType(mappings or {}),
    )


def test_collinear_scenario_branches():
    """First location falls back to the marginal, later ones are conditional."""
    domain = PointSet([0.0, 1.0, 2.0, 3.0, 4.0])
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"})
    estimator = StubEstimator()
    bundle = make_bundle(domain, estimator, minneighbors=1, maxneighbors=2)

    real, stats = simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    np.testing.assert_array_equal(real, [-1.0, 1.0, 1.0, 1.0, 1.0])
    assert stats.marginal_few_neighbors == 1
    assert stats.conditional == 4

    # location 1 sees only location 0
    first = estimator.datasets[0]
    np.testing.assert_array_equal(first.positions, [[0.0]])
    np.testing.assert_array_equal(first.values, [MARGINAL_VALUE])

    # location 2 sees its two predecessors, nearest first
    second = estimator.datasets[1]
    np.testing.assert_array_equal(second.positions, [[1.0], [0.0]])
    assert len(estimator.datasets) == 4


def test_fit_failure_falls_back_to_marginal():
    """A failed fit draws from the marginal and the run continues."""
    domain = PointSet([0.0, 1.0, 2.0, 3.0, 4.0])
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"})
    bundle = make_bundle(domain, StubEstimator(status=False), minneighbors=1, maxneighbors=2)

    real, stats = simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    assert np.all(real == MARGINAL_VALUE)
    assert stats.marginal_few_neighbors == 1
    assert stats.marginal_fit_failed == 4
    assert stats.conditional == 0


def test_insufficient_neighbors_uses_marginal():
    """Locations with fewer than minneighbors simulated neighbors use the marginal."""
    domain = PointSet([0.0, 1.0, 2.0, 3.0, 4.0])
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"})
    estimator = StubEstimator()
    bundle = make_bundle(domain, estimator, minneighbors=3, maxneighbors=3)

    real, stats = simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    np.testing.assert_array_equal(real, [-1.0, -1.0, -1.0, 1.0, 1.0])
    assert [len(r) for r in bundle.searcher.results] == [0, 1, 2, 3, 3]
    assert all(len(d) == 3 for d in estimator.datasets)


def test_hard_data_location_is_skipped():
    """Hard data are never re-simulated and stay simulated throughout."""
    domain = PointSet([0.0, 1.0, 2.0, 3.0, 4.0])
    data = GeoTable([2.0], {"z": [42.0]})
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"}, data=data)
    estimator = StubEstimator()
    bundle = make_bundle(domain, estimator, minneighbors=1, maxneighbors=2, mappings={2: 0})

    real, stats = simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    assert real[2] == 42.0
    assert stats.hard_data == 1
    assert stats.total == 5

    searcher = bundle.searcher
    assert len(searcher.positions) == 4
    assert not any(np.array_equal(p, [2.0]) for p in searcher.positions)
    assert all(mask[2] for mask in searcher.masks)

    # location 0 already sees the datum, so every location is conditional
    np.testing.assert_array_equal(searcher.results[0], [2])
    assert stats.conditional == 4


def test_neighbors_are_previously_simulated():
    """Every neighbor precedes its query on the path or is hard data."""
    rng = np.random.default_rng(5)
    domain = PointSet(rng.uniform(0, 10, size=(30, 2)))
    hard = {4: 0, 17: 1, 23: 2}
    data = GeoTable(domain.centroids[[4, 17, 23]], {"z": [0.5, 0.7, 0.9]})
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"}, data=data)
    path = RandomPath(seed=11)
    bundle = make_bundle(domain, StubEstimator(), 1, 4, path=path, mappings=hard)

    simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    order = list(path.traverse(domain))
    position = {loc: p for p, loc in enumerate(order)}
    visited = [loc for loc in order if loc not in hard]

    assert len(bundle.searcher.results) == len(visited)
    for loc, neighbors, mask in zip(visited, bundle.searcher.results, bundle.searcher.masks):
        assert not mask[loc]
        for n in neighbors:
            assert mask[n]
            assert n in hard or position[n] < position[loc]


def test_collaborator_failure_propagates():
    """Unexpected estimator errors abort the variable with context."""
    domain = PointSet([0.0, 1.0, 2.0])
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"})
    bundle = make_bundle(domain, FailingEstimator(), minneighbors=1, maxneighbors=2)

    with pytest.raises(SimulationError, match="degenerate geometry") as excinfo:
        simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    assert excinfo.value.variable == "z"
    assert excinfo.value.location == 1
    assert isinstance(excinfo.value.__cause__, RuntimeError)


@pytest.fixture
def kriging_problem():
    domain = CartesianGrid((6, 5))
    data = GeoTable([[0.5, 0.5], [4.5, 3.5]], {"z": [2.0, -1.0]})
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"}, data=data, nreals=2)
    params = VariableParams(
        estimator=SimpleKriging(Variogram("spherical", range=4.0), mean=0.0),
        marginal=scipy.stats.norm(0.0, 1.0),
        path=RandomPath(seed=3),
        maxneighbors=6,
    )
    return problem, params


def test_solve_coverage_and_hard_data(kriging_problem):
    """Every location gets a finite value and hard data are preserved."""
    problem, params = kriging_problem
    result = solve(problem, SeqSim({"z": params}, seed=7))

    assert result.nreals == 2
    for real in result.realizations["z"]:
        assert real.shape == (30,)
        assert np.all(np.isfinite(real))
        assert real[0] == 2.0
        assert real[3 * 6 + 4] == -1.0

    assert set(result.summary["z"]) == {"mean", "std", "p10", "p50", "p90"}
    assert result.stats["z"][0]["hard_data"] == 2


def test_solve_deterministic(kriging_problem):
    """Fixed seed gives identical realizations."""
    problem, params = kriging_problem

    result1 = solve(problem, SeqSim({"z": params}, seed=7))
    result2 = solve(problem, SeqSim({"z": params}, seed=7))
    result3 = solve(problem, SeqSim({"z": params}, seed=8))

    for r1, r2 in zip(result1.realizations["z"], result2.realizations["z"]):
        assert r1.tobytes() == r2.tobytes()
    assert not np.array_equal(result1.realizations["z"][0], result3.realizations["z"][0])

    # realizations of one run consume the generator sequentially
    assert not np.array_equal(result1.realizations["z"][0], result1.realizations["z"][1])


def test_solve_categorical_variable():
    """Categorical realizations only hold known levels."""
    domain = CartesianGrid((8, 8))
    levels = ["sand", "shale"]
    problem = SeqSimProblem(domain=domain, variables={"facies": "categorical"})
    params = VariableParams(
        estimator=IndicatorProportions(levels=levels),
        marginal=Categorical(levels, [0.5, 0.5]),
        path=RandomPath(seed=0),
        maxneighbors=4,
    )

    result = solve(problem, SeqSim({"facies": params}, seed=1))

    real = result.realizations["facies"][0]
    assert real.dtype == object
    assert set(real) <= set(levels)
    assert sum(result.summary["facies"].values()) == pytest.approx(1.0)


def test_solve_parallel_deterministic(kriging_problem):
    """Parallel variables use independent sub-streams reproducibly."""
    problem, params = kriging_problem
    problem = SeqSimProblem(
        domain=problem.domain,
        variables={"z": "continuous", "w": "continuous"},
        data=problem.data,
        nreals=2,
    )
    solver = SeqSim({"z": params, "w": params}, seed=3)

    result1 = solve(problem, solver, parallel=True)
    result2 = solve(problem, solver, parallel=True)

    for var in ("z", "w"):
        for r1, r2 in zip(result1.realizations[var], result2.realizations[var]):
            np.testing.assert_array_equal(r1, r2)

    # "w" has no data column, so it is simulated unconditionally
    assert result1.stats["w"][0]["hard_data"] == 0
    assert result1.realizations["z"][0][0] == 2.0
    assert not np.array_equal(result1.realizations["z"][0], result1.realizations["w"][0])


def test_solve_rejects_invalid_bounds():
    """minneighbors greater than maxneighbors is rejected up front."""
    with pytest.raises(ValueError, match="must not exceed"):
        VariableParams(
            estimator=StubEstimator(),
            marginal=Degenerate(0.0),
            minneighbors=5,
            maxneighbors=2,
        )


class RecordingLogger:
    def __init__(self):
        self.events = []

    def info(self, event, **kw):
        self.events.append(("info", event, kw))

    def debug(self, event, **kw):
        self.events.append(("debug", event, kw))


def test_unstorable_value_fails_with_location():
    """A drawn value the realization cannot hold aborts with context."""
    domain = PointSet([0.0, 1.0, 2.0])
    problem = SeqSimProblem(domain=domain, variables={"z": "continuous"})
    bundle = make_bundle(domain, StubEstimator(value="shale"), minneighbors=1, maxneighbors=2)

    with pytest.raises(SimulationError) as excinfo:
        simulate_variable(problem, "z", bundle, np.random.default_rng(0))

    assert excinfo.value.variable == "z"
    assert excinfo.value.location == 1
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_solve_categorical_integer_codes_with_missing_data():
    """Float codes in hard data are stored as the integer levels."""
    domain = PointSet([0.0, 1.0, 2.0, 3.0, 4.0])
    data = GeoTable([0.0, 2.0, 4.0], {"f": [1.0, np.nan, 2.0]})
    problem = SeqSimProblem(domain=domain, variables={"f": "categorical"}, data=data, nreals=2)
    params = VariableParams(
        estimator=IndicatorProportions(levels=[1, 2]),
        marginal=Categorical([1, 2], [0.5, 0.5]),
        maxneighbors=2,
    )

    result = solve(problem, SeqSim({"f": params}, seed=4))

    for real in result.realizations["f"]:
        assert real[0] == 1
        assert real[4] == 2
        assert all(type(value) is int for value in real)
    assert set(result.summary["f"]) <= {"1", "2"}
    assert result.stats["f"][0]["hard_data"] == 2


def test_solve_failure_in_later_variable_emits_no_result(kriging_problem):
    """A failing variable aborts the whole run after earlier ones succeed."""
    problem, params = kriging_problem
    problem = SeqSimProblem(
        domain=problem.domain,
        variables={"z": "continuous", "w": "continuous"},
        data=problem.data,
    )
    failing = VariableParams(
        estimator=FailingEstimator(),
        marginal=scipy.stats.norm(0.0, 1.0),
    )

    result = None
    with pytest.raises(SimulationError, match="degenerate geometry") as excinfo:
        result = solve(problem, SeqSim({"z": params, "w": failing}, seed=2))

    assert excinfo.value.variable == "w"
    assert result is None


def test_loop_logs_per_variable_not_per_location(kriging_problem, monkeypatch):
    """Only per-variable counts are logged by the loop."""
    problem, params = kriging_problem
    recorder = RecordingLogger()
    monkeypatch.setattr(simulator, "logger", recorder)

    solve(problem, SeqSim({"z": params}, seed=7))

    events = [event for _, event, _ in recorder.events]
    assert "location_simulated" not in events
    assert events.count("variable_simulated") == problem.nreals
    assert all(level == "info" for level, _, _ in recorder.events)
