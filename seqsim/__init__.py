"""Sequential geostatistical simulation."""

from seqsim.data.domain import CartesianGrid, PointSet
from seqsim.data.table import GeoTable
from seqsim.engine.problem import SeqSimProblem
from seqsim.engine.solver import SeqSim, VariableParams
from seqsim.engine.simulator import solve, solve_single, simulate_variable

__all__ = [
    "CartesianGrid",
    "PointSet",
    "GeoTable",
    "SeqSimProblem",
    "SeqSim",
    "VariableParams",
    "solve",
    "solve_single",
    "simulate_variable",
]
