import argparse
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from swarmdriver.algorithm.constants import PRESETS, TOPOLOGIES
from swarmdriver.benchmarks import BENCHMARKS, success_thresholds
from swarmdriver.config import load_config, params_from_preset
from swarmdriver.data.parameters import load_parameters
from swarmdriver.driver.controller import default_modules
from swarmdriver.experiment import run_suite
from swarmdriver.modules.base import (
    concat_lower_bounds,
    concat_upper_bounds,
    parameter_slices,
    total_parameter_count,
)
from swarmdriver.plots import boxplot_from_runs, plot_fitness_history
from swarmdriver.utils import save_manifest


def inspect_parameters(model_path: Path, tunable_gear: bool = False) -> pd.DataFrame:
    """Per-module summary of a parameter file laid out for the default controller."""
    modules = default_modules(tunable_gear=tunable_gear)
    vec = load_parameters(model_path, expected_length=total_parameter_count(modules))
    lower = concat_lower_bounds(modules)
    upper = concat_upper_bounds(modules)

    rows = []
    for name, sl in parameter_slices(modules).items():
        seg = vec[sl]
        rows.append({
            "module": name,
            "count": seg.size,
            "min": float(seg.min()) if seg.size else np.nan,
            "max": float(seg.max()) if seg.size else np.nan,
            "out_of_bounds": int(np.count_nonzero((seg < lower[sl]) | (seg > upper[sl]))),
        })
    return pd.DataFrame(rows)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="swarmdriver")
    parser.add_argument("--log-level", dest="log_level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd", required=True)

    # ---- BENCH ----
    p_bench = sub.add_parser("bench", help="Run the asynchronous swarm on benchmark functions")
    p_bench.add_argument("--preset", choices=sorted(PRESETS), default="QUICK_TEST")
    p_bench.add_argument("--topologies", choices=[*TOPOLOGIES, "all"], default="all")
    p_bench.add_argument("--functions", nargs="+", choices=sorted(BENCHMARKS), default=None)
    p_bench.add_argument("--dims", type=int, nargs="+", default=[2, 5])
    p_bench.add_argument("--runs", type=int, default=10)
    p_bench.add_argument("--seed", type=int, default=123)
    p_bench.add_argument("--run_name", type=str, default=None)
    p_bench.add_argument("--results_root", type=Path, default=Path("results"))
    # Optional overrides: None means "keep the preset value"
    p_bench.add_argument("--particles", type=int, default=None)
    p_bench.add_argument("--phi1", type=float, default=None)
    p_bench.add_argument("--phi2", type=float, default=None)
    p_bench.add_argument("--inertia", type=float, default=None)
    p_bench.add_argument("--decay", type=float, default=None)
    p_bench.add_argument("--max_evaluations", type=int, default=None)
    p_bench.add_argument("--max_iterations", type=int, default=None)
    p_bench.add_argument("--max_stagnation", type=int, default=None)
    p_bench.add_argument("--log_evaluations", action="store_true")
    p_bench.add_argument("--no-boxplots", dest="no_boxplots", action="store_true")

    # ---- INSPECT ----
    p_insp = sub.add_parser("inspect", help="Summarize a controller parameter file per module")
    p_insp.add_argument("--model_path", type=Path, required=True)
    p_insp.add_argument("--tunable_gear", action="store_true")

    # ---- PLOT ----
    p_plot = sub.add_parser("plot", help="Plot a fitness-history CSV written by the run logger")
    p_plot.add_argument("--history", type=Path, required=True)
    p_plot.add_argument("--out", type=Path, default=None)
    p_plot.add_argument("--window", type=int, default=25)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.cmd == "bench":
        cfg = load_config(args)
        params = params_from_preset(
            cfg.preset,
            n_particles=args.particles,
            phi_1=args.phi1,
            phi_2=args.phi2,
            inertia=args.inertia,
            decay=args.decay,
            max_evaluations=args.max_evaluations,
            max_iterations=args.max_iterations,
            max_stagnation=args.max_stagnation,
            seed=cfg.seed,
        )
        topos = list(TOPOLOGIES) if args.topologies == "all" else [args.topologies]
        save_manifest({"run_name": cfg.run_name, "preset": cfg.preset, "topologies": topos,
                       "dims": args.dims, "runs": args.runs, "params": params.as_dict()}, cfg.run_dir)

        for topo in topos:
            runs_csv, summary_csv = run_suite(
                outdir=cfg.run_dir,
                dims=tuple(args.dims),
                runs=args.runs,
                topology=topo,
                seed0=args.seed,
                params=params,
                thresholds=success_thresholds(),
                functions=args.functions,
                log_evaluations=args.log_evaluations,
            )
            if not args.no_boxplots:
                boxplot_from_runs(runs_csv, cfg.reports_dir / f"boxplot_{topo}.png")
            print(f"[OK] [{topo}] wrote: {runs_csv} {summary_csv}")

    elif args.cmd == "inspect":
        table = inspect_parameters(args.model_path, tunable_gear=args.tunable_gear)
        print(table.to_string(index=False))
        print(f"[OK] {int(table['count'].sum())} parameters in {args.model_path}")

    elif args.cmd == "plot":
        out = plot_fitness_history(args.history, args.out, window=args.window)
        print(f"[OK] Plot saved to {out}")

    return 0


if __name__ == "__main__":
    main()
