from __future__ import annotations
from pathlib import Path
import argparse, os
from typing import List

import pandas as pd          # used by boxplot_from_runs (local)
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from pso_maxsat.clauses import MalformedInputError
from pso_maxsat.config import PSOParams, ConfigurationError, canonical_topology, merge_params
from pso_maxsat.constants import PRESETS, TOPOLOGIES
from pso_maxsat.experiment import run_suite
from pso_maxsat.loader import load_problem
from pso_maxsat.topologies import validate_topology

DEFAULT_OUTDIR = Path.cwd() / "results"


# ---------- Simple boxplot helper  ----------
def boxplot_from_runs(runs_csvs: List[str], outpath: str):
    """Create a compact boxplot of final best fitness per topology."""
    df = pd.concat([pd.read_csv(p) for p in runs_csvs], ignore_index=True)
    order = [t for t in TOPOLOGIES if t in set(df["topology"])]
    data = [df.loc[df["topology"] == t, "best_f"].values for t in order]
    plt.figure()
    plt.boxplot(data, showfliers=False)
    plt.xticks(range(1, len(order) + 1), order, rotation=30, ha="right")
    plt.ylabel("Clauses satisfied (%)")
    plt.title(f"PSO MAXSAT final fitness across runs ({df['problem'].iloc[0]})")
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)
    plt.savefig(outpath, bbox_inches="tight")
    plt.close()


# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="PSO MAXSAT grid runner.")

    ap.add_argument("problem", help="DIMACS-like MAXSAT file")
    ap.add_argument("--outdir", default=str(DEFAULT_OUTDIR))
    ap.add_argument("--runs", type=int, default=10)
    ap.add_argument("--seed", type=int, default=123)
    ap.add_argument("--topologies", nargs="+", default=["all"],
                    help="Topology names or short codes (gl, ri, vn, ra), or 'all'.")
    ap.add_argument("--preset", choices=sorted(PRESETS), default="baseline",
                    help="Parameter profile for swarm size and iteration budget.")

    # Optional manual overrides: use None so they only apply if explicitly set
    ap.add_argument("--iters", type=int, default=None)
    ap.add_argument("--swarm", type=int, default=None)
    ap.add_argument("--legacy-pbest", dest="legacy_pbest", action="store_true",
                    help="Keep the personal-best vector fixed on improvement (reference behaviour).")
    ap.add_argument("--no-boxplots", dest="no_boxplots", action="store_true")
    ap.add_argument("--verbose", action="store_true")
    return ap


# ---------- Parameter profiles ----------
def make_param_factory(args):
    """
    Returns a callable (topo:str) -> PSOParams with all required fields filled.
    The preset supplies swarm size and iteration count; explicit flags win.
    """
    base = PSOParams(**PRESETS[args.preset])

    def factory(topo: str) -> PSOParams:
        return merge_params(
            base,
            topology=topo,
            iters=args.iters,
            swarm_size=args.swarm,
            legacy_pbest=True if args.legacy_pbest else None,
        )

    return factory


def resolve_topologies(names: List[str]) -> List[str]:
    if any(n.lower() == "all" for n in names):
        return list(TOPOLOGIES)
    out = []
    for n in names:
        topo = canonical_topology(n)
        if topo not in out:
            out.append(topo)
    return out


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    param_factory = make_param_factory(args)
    try:
        clauses = load_problem(args.problem)
        topos = resolve_topologies(args.topologies)
        # fail fast on sizes the grid cannot hold
        for topo in topos:
            validate_topology(topo, param_factory(topo).swarm_size)
    except (MalformedInputError, ConfigurationError) as exc:
        ap.error(str(exc))

    runs_csvs = []
    for topo in topos:
        runs_csv, summary_csv = run_suite(
            clauses=clauses,
            problem=Path(args.problem).name,
            outdir=str(outdir),
            runs=args.runs,
            topology=topo,
            seed0=args.seed,
            param_factory=param_factory,
            verbose=args.verbose,
        )
        runs_csvs.append(runs_csv)
        print(f"[{topo}] wrote:", runs_csv, summary_csv)

    if not args.no_boxplots:
        boxplot_from_runs(runs_csvs, str(outdir / "boxplot_topologies.png"))


if __name__ == "__main__":
    main()
