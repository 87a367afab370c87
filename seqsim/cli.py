"""Command-line interface for sequential simulation.

Orchestrates config loading, problem and solver construction, simulation
execution, and artifact generation.
"""

import argparse
from pathlib import Path

import structlog

from seqsim.config.loader import load_config
from seqsim.config.settings import settings
from seqsim.data.sources.config_source import ConfigProblemProvider, ConfigSolverProvider
from seqsim.engine.simulator import solve
from seqsim.logging_config import configure_logging
from seqsim.report.artifacts import write_artifacts


logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sequential geostatistical simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration YAML file",
    )
    parser.add_argument(
        "--outdir",
        type=str,
        default=settings.output_dir,
        help="Output directory for artifacts",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducibility (overrides config)",
    )
    parser.add_argument(
        "--nreals",
        type=int,
        help="Number of realizations (overrides config)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        default=settings.parallel,
        help="Simulate variables concurrently with independent random sub-streams",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None):
    """Run the sequential simulation CLI."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    # Load and validate configuration
    logger.info("loading_config", path=args.config)
    config = load_config(args.config)

    problem = ConfigProblemProvider(config, Path(args.config).parent).get_problem(args.nreals)
    solver = ConfigSolverProvider(config).get_solver(args.seed)

    logger.info(
        "simulation_parameters",
        domain=repr(problem.domain),
        variables=problem.variables,
        nreals=problem.nreals,
        seed=solver.seed,
        hard_data=len(problem.data) if problem.data is not None else 0,
    )

    result = solve(problem, solver, parallel=args.parallel)

    paths = write_artifacts(
        result,
        args.outdir,
        domain=problem.domain,
        metadata={"config": str(args.config), "seed": solver.seed},
    )

    logger.info("simulation_written", **{name: str(p) for name, p in paths.items()})
    return result


if __name__ == "__main__":
    main()
