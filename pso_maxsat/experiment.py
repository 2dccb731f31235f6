# experiment.py
from __future__ import annotations
import os, csv, time
from typing import Callable, Tuple

import numpy as np

from pso_maxsat.clauses import ClauseSet
from pso_maxsat.config import PSOParams, ConfigurationError, canonical_topology
from pso_maxsat.constants import TOPOLOGIES
from pso_maxsat.core import pso_run

"""
This file orchestrates repeated runs on one problem and persists results in a
reproducible way.
"""

RUN_COLUMNS = ["problem", "topology", "run", "best_f", "iterations", "evals", "time_s"]


def run_seed(seed0: int, topology: str, run: int) -> np.random.SeedSequence:
    """Seed for one (topology, run) pair, stable across processes."""
    return np.random.SeedSequence([seed0, TOPOLOGIES.index(topology), run])


def run_suite(
    *,
    clauses: ClauseSet,
    problem: str,
    outdir: str,
    runs: int,
    topology: str,
    seed0: int,
    param_factory: Callable[[str], PSOParams],
    verbose: bool = False,
) -> Tuple[str, str]:
    """
    Args (all required):
      clauses: parsed problem shared by every run.
      problem: label written to the CSV (usually the file name).
      outdir: output directory for CSVs and curves.
      runs: number of independent runs.
      topology: any accepted topology name; stored in canonical form.
      seed0: base integer seed to derive per-run RNG seeds deterministically.
      param_factory: callable (topology:str) -> PSOParams, producing
                     fully-specified parameters.
    Returns:
      (log_csv_path, summary_csv_path)
    """
    # --- Basic checks  ---
    if not isinstance(outdir, str) or not outdir:
        raise ValueError("outdir must be a non-empty string.")
    if not isinstance(runs, int) or runs <= 0:
        raise ValueError("runs must be a positive int.")
    if not isinstance(seed0, int):
        raise ValueError("seed0 must be an int.")
    topology = canonical_topology(topology)

    os.makedirs(outdir, exist_ok=True)
    curves_dir = os.path.join(outdir, f"curves_{topology}")
    os.makedirs(curves_dir, exist_ok=True)

    log_path = os.path.join(outdir, f"runs_{topology}.csv")
    with open(log_path, "w", newline="") as fh:
        w = csv.writer(fh)
        w.writerow(RUN_COLUMNS)

        for r in range(runs):
            p = param_factory(topology)
            if p.topology is not None and canonical_topology(p.topology) != topology:
                raise ConfigurationError(
                    f"param_factory returned topology {p.topology!r} for {topology!r}"
                )
            rng = np.random.default_rng(run_seed(seed0, topology, r))

            # --- Run PSO ---
            t0 = time.time()
            res = pso_run(clauses, p, rng=rng)
            dt = time.time() - t0

            # --- Persist per-iteration curve ---
            np.save(os.path.join(curves_dir, f"run{r}.npy"), res.best_per_iteration)

            w.writerow([
                problem,
                topology,
                r,
                res.best_fitness,
                res.iterations,
                res.evals_used,
                float(dt),
            ])
            if verbose:
                print(f"[{topology}] run {r + 1}/{runs}: {res.best_fitness:.2f}% in {dt:.2f}s")

    agg_path = os.path.join(outdir, f"summary_{topology}.csv")
    _aggregate(log_path, agg_path)
    return log_path, agg_path


def _aggregate(log_csv: str, out_csv: str):
    import pandas as pd
    df = pd.read_csv(log_csv)
    g = df.groupby(["problem", "topology"], as_index=False)
    summ = g["best_f"].agg(mean="mean", median="median", min="min", max="max", std="std")
    runs = g["run"].count().rename(columns={"run": "runs"})
    out = pd.merge(summ, runs, on=["problem", "topology"])
    out.to_csv(out_csv, index=False)
