"""Command-line entry point for a single PSO MAXSAT run.

Usage:
    pso-maxsat PROBLEM ITERATIONS PARTICLES TOPOLOGY [--seed N] [--log-dir DIR]

TOPOLOGY is one of global, ring, von_neumann, random (or gl, ri, vn, ra).
"""

from __future__ import annotations

import argparse
from pathlib import Path

from pso_maxsat.clauses import MalformedInputError
from pso_maxsat.config import PSOParams, ConfigurationError
from pso_maxsat.core import Swarm
from pso_maxsat.loader import load_problem
from pso_maxsat.run_logger import RunLogger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Approximate MAXSAT with particle swarm optimization.")
    ap.add_argument("problem", help="DIMACS-like MAXSAT file, e.g. v20-c91.cnf")
    ap.add_argument("iterations", type=int)
    ap.add_argument("particles", type=int)
    ap.add_argument("topology", help="global | ring | von_neumann | random (or gl, ri, vn, ra)")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--log-dir", dest="log_dir", default=None,
                    help="Write per-iteration metrics to a CSV file in this directory.")
    ap.add_argument("--log-every", dest="log_every", type=int, default=None,
                    help="Progress print interval when --verbose is set.")
    ap.add_argument("--legacy-pbest", dest="legacy_pbest", action="store_true",
                    help="Keep the personal-best vector fixed on improvement (reference behaviour).")
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv=None) -> None:
    ap = build_parser()
    args = ap.parse_args(argv)

    params = PSOParams(
        swarm_size=args.particles,
        iters=args.iterations,
        topology=args.topology,
        seed=args.seed,
        legacy_pbest=args.legacy_pbest,
        log_every=args.log_every,
    )
    try:
        clauses = load_problem(args.problem)
        swarm = Swarm(clauses, params)
    except (MalformedInputError, ConfigurationError) as exc:
        ap.error(str(exc))

    if args.verbose:
        print(f"Loaded {clauses!r} from {args.problem}")

    logger = None
    if args.log_dir is not None:
        logger = RunLogger(base_dir=Path(args.log_dir))

    result = swarm.run(
        logger=logger,
        logger_metadata={"problem": Path(args.problem).name},
        verbose=args.verbose,
    )

    if logger is not None and logger.rows:
        path = logger.flush()
        if args.verbose:
            print(f"Wrote iteration log to {path}")

    print(f"After {result.iterations} iterations, "
          f"{result.best_fitness} percentage of clauses satisfied.")


if __name__ == "__main__":
    main()
