"""
Offline benchmark harness.

Drives the swarm through the same controller protocol a race uses (install a
particle, report one fitness, move on) but with a benchmark function in
place of a race, and persists results in a reproducible way.
"""

from __future__ import annotations

import json
import logging
import time
import zlib
from pathlib import Path
from typing import Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from swarmdriver.benchmarks import BENCHMARKS, Benchmark, get_benchmark
from swarmdriver.config import SwarmParams
from swarmdriver.driver.controller import Controller
from swarmdriver.logging.run_logger import RunLogger
from swarmdriver.utils import ensure_dirs

logger = logging.getLogger(__name__)

RUN_COLUMNS = ["func", "n", "run", "best_f", "best_x_json", "evals", "iterations",
               "termination", "success", "time_s"]


def run_seed(seed0: int, fname: str, n: int, run: int, topology: str) -> int:
    """Stable per-run seed (independent of PYTHONHASHSEED)."""
    return seed0 + zlib.crc32(f"{fname}|{n}|{run}|{topology}".encode()) % (2**31 - 1)


def optimize(benchmark: Benchmark,
             dim: int,
             params: SwarmParams,
             rng: np.random.Generator,
             run_logger: Optional[RunLogger] = None) -> dict:
    """
    Minimise the benchmark cost over its box with one evaluation per
    controller update.

    Returns a dict with best_f, best_x, evals_used, iterations, termination
    and the best-so-far curve (one entry per evaluation, in cost units).
    """
    block = benchmark.block(dim)
    controller = Controller(modules=[block], params=params, rng=rng, run_logger=run_logger)

    while not controller.finished_learning():
        controller.update(benchmark.fitness(block.get_parameters()))

    swarm = controller.pso
    return {
        "best_f": -swarm.best_fitness,
        "best_x": swarm.best_position,
        "evals_used": swarm.n_evaluations,
        "iterations": swarm.n_iterations,
        "termination": swarm.termination_reason,
        "gbest_curve": -np.asarray(swarm.history, dtype=float),
    }


def run_suite(
    *,
    outdir,
    dims: Iterable[int],
    runs: int,
    topology: str,
    seed0: int,
    params: SwarmParams,
    thresholds: Mapping[str, Optional[float]],
    functions: Optional[Iterable[str]] = None,
    log_evaluations: bool = False,
):
    """
    Args:
      outdir: output directory for CSVs and curves.
      dims: dimensions to test (e.g., [2, 5, 10]).
      runs: independent runs per (function, n).
      topology: neighbourhood topology tag, overriding the one in `params`.
      seed0: base seed; per-run seeds are derived deterministically.
      params: swarm hyperparameters shared by every run.
      thresholds: function name -> success threshold, or None to skip.
      functions: subset of benchmark names (default: all).
      log_evaluations: also write one evaluation CSV per run.
    Returns:
      (runs_csv_path, summary_csv_path)
    """
    dims = list(dims)
    if not dims or not all(isinstance(n, int) and n > 0 for n in dims):
        raise ValueError("dims must be a non-empty iterable of positive ints.")
    if not isinstance(runs, int) or runs <= 0:
        raise ValueError("runs must be a positive int.")
    names = [str(name).lower() for name in functions] if functions is not None else list(BENCHMARKS)
    unknown = [f for f in names if f not in BENCHMARKS]
    if unknown:
        raise ValueError(f"Unknown benchmark(s) {unknown}. Expected any of {sorted(BENCHMARKS)}.")

    params = params.with_overrides(topology=topology)
    outdir = Path(outdir)
    curves_dir = outdir / f"curves_{topology}"
    evals_dir = outdir / f"evaluations_{topology}"
    ensure_dirs(outdir, curves_dir)

    rows = []
    for fname in names:
        benchmark = get_benchmark(fname)
        thr = thresholds.get(fname)

        for n in dims:
            for r in range(runs):
                rng = np.random.default_rng(run_seed(seed0, fname, n, r, topology))
                run_logger = None
                if log_evaluations:
                    run_logger = RunLogger(evals_dir, filename=f"{fname}_n{n}_run{r}.csv",
                                           metadata={"func": fname, "n": n, "run": r})

                t0 = time.time()
                res = optimize(benchmark, n, params, rng, run_logger=run_logger)
                dt = time.time() - t0

                np.save(curves_dir / f"{fname}_n{n}_run{r}.npy", res["gbest_curve"])
                if run_logger is not None:
                    run_logger.flush()

                best_f = float(res["best_f"])
                rows.append({
                    "func": fname,
                    "n": n,
                    "run": r,
                    "best_f": best_f,
                    "best_x_json": json.dumps([float(v) for v in res["best_x"]]),
                    "evals": int(res["evals_used"]),
                    "iterations": int(res["iterations"]),
                    "termination": res["termination"],
                    "success": int(best_f <= thr) if thr is not None else 0,
                    "time_s": float(dt),
                })
                logger.info("%s n=%d run=%d (%s): best_f=%.6g after %d evaluations",
                            fname, n, r, topology, best_f, res["evals_used"])

    log_path = outdir / f"runs_{topology}.csv"
    pd.DataFrame(rows, columns=RUN_COLUMNS).to_csv(log_path, index=False)

    agg_path = outdir / f"summary_{topology}.csv"
    summarize(log_path).to_csv(agg_path, index=False)
    return log_path, agg_path


def summarize(runs_csv) -> pd.DataFrame:
    """Per (func, n) statistics of the final best f and the success rate."""
    df = pd.read_csv(runs_csv)
    g = df.groupby(["func", "n"], as_index=False)
    summ = g["best_f"].agg(mean="mean", median="median", min="min", max="max", std="std")
    sr = g["success"].mean().rename(columns={"success": "success_rate"})
    ev = g["evals"].mean().rename(columns={"evals": "mean_evals"})
    return summ.merge(sr, on=["func", "n"]).merge(ev, on=["func", "n"])
