from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def moving_average(x, w):
    x = np.asarray(x, dtype=float)
    if len(x) < w:
        return x
    return np.convolve(x, np.ones(w) / w, mode="valid")


def boxplot_from_runs(runs_csv, outpath) -> Path:
    """Compact boxplot of final best f per (function, n)."""
    df = pd.read_csv(runs_csv)
    df["combo"] = df["func"] + "_n" + df["n"].astype(str)
    order = sorted(df["combo"].unique())
    data = [df.loc[df["combo"] == c, "best_f"].values for c in order]

    fig, ax = plt.subplots()
    ax.boxplot(data, showfliers=False)
    ax.set_xticks(range(1, len(order) + 1))
    ax.set_xticklabels(order, rotation=30, ha="right")
    ax.set_ylabel("Final best f")
    ax.set_title("Asynchronous PSO: final f across runs")
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(outpath, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_fitness_history(history_csv, outpath=None, window: int = 25) -> Path:
    """
    Plot reported fitness per evaluation with its moving average and the
    best-so-far line, from a CSV written by RunLogger.
    """
    history_csv = Path(history_csv)
    df = pd.read_csv(history_csv)
    if df.empty or "fitness" not in df.columns:
        raise ValueError(f"{history_csv} has no 'fitness' column to plot.")

    x = df["evaluation"].to_numpy() if "evaluation" in df.columns else np.arange(1, len(df) + 1)
    fitness = df["fitness"].to_numpy(dtype=float)

    fig, ax = plt.subplots()
    ax.scatter(x, fitness, s=3.0, alpha=0.3, label="Fitness per evaluation")
    ma = moving_average(fitness, window)
    if len(ma) < len(fitness):
        ax.plot(x[window - 1:], ma, linewidth=2.0, label=f"Moving avg ({window})")
    if "best" in df.columns:
        ax.plot(x, df["best"].to_numpy(dtype=float), linewidth=1.5, label="Best so far")
    ax.set_xlabel("Evaluation")
    ax.set_ylabel("Fitness")
    ax.legend()

    if outpath is None:
        outpath = history_csv.parent / "reports" / f"{history_csv.stem}.png"
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(outpath, bbox_inches="tight", dpi=150)
    plt.close(fig)
    return outpath
